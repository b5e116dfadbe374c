# towerkit

Building blocks for a media library manager, written against plain Python
objects and callables so they can sit on top of any storage, queue or
media-server client.

## Modules

- `towerkit.chooser` – `Release`, `DownloadSearch`, `IndexRequest`,
  `RunicChooser`, `titles_match`, `select_release` and `build_index_request`.
  Releases are sorted into "preferred" and "good" buckets by website or group,
  and the first exact title match is chosen in the order preferred nzbs, good
  nzbs, preferred torrents, good torrents.
- `towerkit.episodes` – `ParsedTitle`, `Episode` and `find_episode`, which finds
  the episode of a series matching parsed season/episode numbers (anime also
  matches on absolute number).
- `towerkit.ctxmutex` – `CtxMutex`, a lock whose `lock(timeout)` gives up after
  a timeout and returns `False`.
- `towerkit.notifier` – `Notifier`, `NotifierLog`, `NotifierNotice`, `Message`
  and `Notice`. Notices go to the `tower.notices` topic, log messages are saved
  and announced on `tower.logs`; failures are logged, not raised.
- `towerkit.plexcache` – `plex_lib_type` and `PlexFileCache`, which pages
  through a Plex client's libraries to map file paths to metadata items and
  folder titles to parent ids.
- `towerkit.plexroutes` – `Pin`, `PlexPin`, `PlexResource`, the conversions
  `plex_pin_to_pin` / `pin_to_plex_pin`, `filter_resources` and `PlexRoutes`
  (sign-in, libraries, search, resources, play, stop, sessions).
- `towerkit.api` – `Response`, `Setting`, `CreateRequest`, `AppConfig`,
  `config_settings`, `want_series` and `want_movie`.
- `towerkit.resources` – an in-memory `Repository` and `ResourceRoutes`, with
  `collection_routes`, `feed_routes`, `library_routes`,
  `library_template_routes` and `library_type_routes`.
- `towerkit.catalog` – `RequestRoutes`, `CombinationRoutes`, `ReleaseRoutes`
  and `MessageRoutes`.

Route handlers return a `Response` carrying `error`, `message`, `result`,
`total` and the HTTP `status`.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from towerkit.chooser import DownloadSearch, Release, select_release
from towerkit.episodes import Episode, ParsedTitle, find_episode
from towerkit.api import AppConfig, Setting, config_settings

search = DownloadSearch(title="show 01x02")
releases = [Release(title="show 01x02", downloader="nzb", group="grp")]
select_release(search, releases, preferred={"grp"})   # the nzb release

episodes = [Episode(id="e1", series_id="s1", season_number=1, episode_number=2)]
find_episode(episodes, "s1", ParsedTitle(season=1, episode=2), "tv")  # episodes[0]

config = AppConfig()
config_settings(config, Setting(name="runic", value=True)).status  # 200
```

## What it does not do

The package has no command, no HTTP server and no database: handlers are
plain methods returning `Response` objects, `Repository` keeps records in
memory only, and Plex, job queues and event buses are supplied by the caller
as objects or callables. It does not search release indexes, download files
or images, or walk and move files on disk.