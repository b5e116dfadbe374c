"""Pick the best release from index search results."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from dataclasses import dataclass, field


@dataclass
class Release:
    """A release as returned by the release index."""

    title: str = ""
    type: str = ""
    downloader: str = ""
    website: str = ""
    group: str = ""
    year: int = 0
    season: int = 0
    episode: int = 0
    resolution: str = ""
    verified: bool = False


@dataclass
class DownloadSearch:
    """The search parameters of a download."""

    type: str = ""
    title: str = ""
    group: str = ""
    website: str = ""
    source: str = ""
    uncensored: bool = False
    bluray: bool = False
    verified: bool = False
    exact: bool = False
    year: int = 0
    season: int = 0
    episode: int = 0
    resolution: int = 0


@dataclass
class IndexRequest:
    """A query for the release index; -1 means the field is not searched on."""

    type: str = ""
    text: str = ""
    group: str = ""
    website: str = ""
    source: str = ""
    uncensored: bool = False
    bluray: bool = False
    verified: bool = False
    exact: bool = False
    year: int = -1
    season: int = -1
    episode: int = -1
    resolution: int = -1


_ORDER = (("nzbs", "preferred"), ("nzbs", "good"), ("tors", "preferred"), ("tors", "good"))


@dataclass
class RunicChooser:
    """Sorts releases into buckets by downloader and group, then chooses one."""

    title: str = ""
    group: str = ""
    exact: bool = False
    preferred: Collection[str] = ()
    groups: Collection[str] = ()
    data: dict[str, dict[str, list[Release]]] = field(
        default_factory=lambda: {
            "nzbs": {"preferred": [], "good": []},
            "tors": {"preferred": [], "good": []},
        }
    )

    def add(self, release: Release) -> None:
        """Place a release in the preferred and/or good bucket of its downloader."""
        key = "nzbs" if release.downloader == "nzb" else "tors"
        website = release.website.lower()
        group = release.group.lower()
        if website in self.preferred or group in self.preferred:
            self.data[key]["preferred"].append(release)
        if website in self.groups or group in self.groups:
            self.data[key]["good"].append(release)

    def choose(self) -> Release | None:
        """First title match: preferred nzbs, good nzbs, preferred torrents, good torrents."""
        for key, bucket in _ORDER:
            found = titles_match(self.title, self.data[key][bucket])
            if found is not None:
                return found
        return None


def titles_match(title: str, releases: Iterable[Release]) -> Release | None:
    """The first release whose title equals the given title exactly."""
    return next((r for r in releases if r.title == title), None)


def select_release(
    search: DownloadSearch,
    releases: Iterable[Release],
    preferred: Collection[str] = (),
    groups: Collection[str] = (),
) -> Release | None:
    """Choose the release to download for a search, or None."""
    chooser = RunicChooser(
        title=search.title,
        group=search.group,
        exact=search.exact,
        preferred=preferred,
        groups=groups,
    )
    for release in releases:
        chooser.add(release)
    return chooser.choose()


def build_index_request(search: DownloadSearch | None, episode: bool = True) -> IndexRequest:
    """Build the index query for an episode search, or a movie search when episode is False."""
    if search is None:
        raise ValueError("search is nil")
    request = IndexRequest(
        type=search.type,
        text=search.title,
        group=search.group,
        source=search.source,
        uncensored=search.uncensored,
        bluray=search.bluray,
        exact=search.exact,
        verified=True,
    )
    if search.year > 0:
        request.year = search.year
    if search.resolution > 0:
        request.resolution = search.resolution
    if episode:
        request.website = search.website
        request.verified = search.verified
        if search.season > 0:
            request.season = search.season
        if search.episode > 0:
            request.episode = search.episode
    return request