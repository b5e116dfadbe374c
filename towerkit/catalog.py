"""Route handlers for requests, combinations, releases and messages."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any

from towerkit.api import PAGE_SIZE, Response, Setting

CREATE_MEDIA_JOB = "CreateMediaFromRequests"


def _fail(message: str, status: int = 500) -> Response:
    return Response(error=True, message=message, status=status)


def _page(repository: Any, page: int, limit: int) -> tuple[list[Any], int]:
    return repository.list(page, limit), len(repository)


def _stamp(record: Any, name: str) -> float:
    value = getattr(record, name, None)
    if isinstance(value, datetime):
        return value.timestamp()
    return float("-inf")


class RequestRoutes:
    """Handlers for media requests; approving a request schedules media creation.

    ``enqueue(kind)`` schedules a job by name.
    """

    def __init__(self, repository: Any, enqueue: Callable[[str], None]) -> None:
        self.repository = repository
        self.enqueue = enqueue

    def index(self, page: int, limit: int) -> Response:
        """A page of requests with the total count."""
        try:
            records, total = _page(self.repository, page, limit)
        except Exception:
            return _fail("error loading Requests")
        return Response(result=records, total=total)

    def create(self, subject: Any) -> Response:
        """Store a new request."""
        try:
            self.repository.save(subject)
        except Exception:
            return _fail("error saving Requests")
        return Response(result=subject)

    def show(self, record_id: str) -> Response:
        """One request."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            return _fail("not found", 404)
        return Response(result=subject)

    def update(self, record_id: str, subject: Any) -> Response:
        """Copy the status onto the stored request; raises when it is missing."""
        existing = self.repository.get(record_id)
        existing.status = subject.status
        self.repository.save(existing)
        if subject.status == "approved":
            self.enqueue(CREATE_MEDIA_JOB)
        try:
            self.repository.save(subject)
        except Exception:
            return _fail("error saving Requests")
        return Response(result=subject)

    def delete(self, record_id: str) -> Response:
        """Remove a request."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            return _fail("not found", 404)
        try:
            self.repository.delete(subject)
        except Exception:
            return _fail("error deleting Requests")
        return Response(result=subject)


class CombinationRoutes:
    """Handlers for combinations; ``children(name)`` lists a combination's media."""

    def __init__(self, repository: Any, children: Callable[[str], Any]) -> None:
        self.repository = repository
        self.children = children

    def index(self, page: int, limit: int) -> Response:
        """A page of combinations."""
        try:
            records = self.repository.list(page, limit)
        except Exception as err:
            return _fail(str(err))
        return Response(result=records)

    def create(self, subject: Any) -> Response:
        """Store a new combination."""
        try:
            self.repository.save(subject)
        except Exception as err:
            return _fail(str(err))
        return Response(result=subject)

    def show(self, name: str) -> Response:
        """The media belonging to the named combination."""
        try:
            found = self.children(name)
        except Exception:
            return _fail("not found", 404)
        return Response(result=found)

    def update(self, record_id: str, subject: Any) -> Response:
        """Store a changed combination."""
        try:
            self.repository.save(subject)
        except Exception as err:
            return _fail(str(err))
        return Response(result=subject)

    def delete(self, record_id: str) -> Response:
        """Remove a combination."""
        try:
            subject = self.repository.get(record_id)
        except Exception as err:
            return _fail("getting subject failed:" + str(err))
        try:
            self.repository.delete(subject)
        except Exception as err:
            return _fail(str(err))
        return Response(result=subject)


class ReleaseRoutes:
    """Handlers for releases.

    ``cache`` maps keys to cached popular-release lists; ``release_types``
    names the types reported by ``popular``.
    """

    def __init__(
        self,
        repository: Any,
        cache: Mapping[str, Any] | None = None,
        release_types: Iterable[str] = (),
    ) -> None:
        self.repository = repository
        self.cache: Mapping[str, Any] = {} if cache is None else cache
        self.release_types = list(release_types)

    def index(self, page: int, limit: int) -> Response:
        """Releases newest first by publication, then creation time."""
        page = max(page, 1)
        if limit < 1:
            limit = PAGE_SIZE
        skip = (page - 1) * limit
        try:
            records = sorted(
                self.repository.list(1, -1),
                key=lambda r: (_stamp(r, "published_at"), _stamp(r, "created_at")),
                reverse=True,
            )
        except Exception:
            return _fail("error loading Releases")
        return Response(result=records[skip : skip + limit])

    def create(self, subject: Any) -> Response:
        """Store a new release."""
        try:
            self.repository.save(subject)
        except Exception:
            return _fail("error saving Releases")
        return Response(result=subject)

    def show(self, record_id: str) -> Response:
        """One release."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            return _fail("not found", 404)
        return Response(result=subject)

    def settings(self, record_id: str, setting: Setting) -> Response:
        """Set a boolean field of a release."""
        try:
            subject = self.repository.get(record_id)
            if not hasattr(subject, setting.name):
                raise AttributeError(setting.name)
            setattr(subject, setting.name, setting.value)
            self.repository.save(subject)
        except Exception:
            return _fail("not found", 404)
        return Response(result=setting)

    def delete(self, record_id: str) -> Response:
        """Remove a release."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            return _fail("not found", 404)
        try:
            self.repository.delete(subject)
        except Exception:
            return _fail("error deleting Releases")
        return Response(result=subject)

    def popular(self, interval: str) -> Response:
        """Cached popular releases per type; raises LookupError when one is missing."""
        out: dict[str, Any] = {}
        for kind in self.release_types:
            key = f"releases_popular_{interval}_{kind}"
            if key not in self.cache:
                raise LookupError("http.StatusNotFound")
            out[kind] = self.cache[key]
        return Response(result=out)


class MessageRoutes:
    """Handlers for stored log messages."""

    def __init__(self, repository: Any) -> None:
        self.repository = repository

    def index(self, page: int, limit: int) -> Response:
        """A page of messages with the total count."""
        try:
            records, total = _page(self.repository, page, limit)
        except Exception:
            return _fail("error loading Messages")
        return Response(result=records, total=total)

    def create(self, subject: Any) -> Response:
        """Store a new message."""
        try:
            self.repository.save(subject)
        except Exception:
            return _fail("error saving Messages")
        return Response(result=subject)