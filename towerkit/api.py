"""Response shapes and the config and want route handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

PAGE_SIZE = 25


@dataclass
class Response:
    """A route result: the body fields plus the HTTP status it is sent with."""

    error: bool = False
    message: str = ""
    result: Any = None
    total: int = 0
    status: int = 200


@dataclass
class Setting:
    """A named boolean setting sent to a PATCH route."""

    name: str
    value: bool = False


@dataclass
class CreateRequest:
    """The body of a request to create a medium."""

    id: str = ""
    title: str = ""
    type: str = ""
    kind: str = ""
    description: str = ""
    source: str = ""
    date: str = ""


@dataclass
class AppConfig:
    """Runtime settings that can be changed through the API."""

    process_runic_events: bool = False


class _WantLookup(Protocol):
    def series_wanted(self, series_id: str) -> Any: ...

    def movie_wanted(self, movie_id: str) -> Any: ...


def config_settings(config: AppConfig, setting: Setting) -> Response:
    """Apply a config setting; unknown names give a 400 response."""
    if setting.name == "runic":
        config.process_runic_events = setting.value
        return Response(result=setting)
    return Response(error=True, message="invalid setting: " + setting.name, status=400)


def want_series(want: _WantLookup, series_id: str) -> Response:
    """Report what is wanted for a series."""
    try:
        wanted = want.series_wanted(series_id)
    except Exception as err:
        return Response(error=True, message=str(err), status=500)
    return Response(result=wanted)


def want_movie(want: _WantLookup, movie_id: str) -> Response:
    """Report what is wanted for a movie."""
    try:
        wanted = want.movie_wanted(movie_id)
    except Exception as err:
        return Response(error=True, message=str(err), status=500)
    return Response(result=wanted)