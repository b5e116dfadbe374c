"""Find the episode a parsed release title refers to."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass


@dataclass
class ParsedTitle:
    """Season and episode numbers parsed from a release title."""

    season: int = 0
    episode: int = 0


@dataclass
class Episode:
    """An episode of a series."""

    id: str
    series_id: str
    season_number: int = 0
    episode_number: int = 0
    absolute_number: int = 0
    title: str = ""


def _order(episode: Episode) -> tuple[int, int, int]:
    return episode.season_number, episode.episode_number, episode.absolute_number


def find_episode(
    episodes: Iterable[Episode], series_id: str, parsed: ParsedTitle, type_: str
) -> Episode | None:
    """Return the first episode of the series matching the parsed numbers, or None.

    Anime with no season match on absolute number; anime with a season try
    season/episode first and absolute number second; everything else matches
    season/episode only.
    """
    if parsed.season == 0 and parsed.episode == 0:
        return None

    candidates = sorted((e for e in episodes if e.series_id == series_id), key=_order)

    def by_season(e: Episode) -> bool:
        return e.season_number == parsed.season and e.episode_number == parsed.episode

    def by_absolute(e: Episode) -> bool:
        return e.absolute_number == parsed.episode

    checks: list[Callable[[Episode], bool]]
    if type_ == "anime":
        checks = [by_absolute] if parsed.season == 0 else [by_season, by_absolute]
    else:
        checks = [by_season]

    for check in checks:
        found = next((e for e in candidates if check(e)), None)
        if found is not None:
            return found
    return None