"""Route handlers for stored resources: collections, feeds and libraries."""

from __future__ import annotations

import secrets
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from towerkit.api import Response, Setting

COLLECTION_UPDATE_JOB = "PlexCollectionUpdate"

Step = tuple[Callable[[Any], None], str]


def _new_id() -> str:
    return secrets.token_hex(12)


class Repository:
    """An in-memory store of records keyed by their ``id`` attribute."""

    def __init__(self, records: Iterable[Any] = ()) -> None:
        self._records: dict[str, Any] = {}
        for record in records:
            self.save(record)

    def save(self, record: Any) -> Any:
        """Store a record, giving it a new id when it has none."""
        if not getattr(record, "id", ""):
            record.id = _new_id()
        self._records[record.id] = record
        return record

    def get(self, record_id: str) -> Any:
        """The record with the given id; raises KeyError when missing."""
        try:
            return self._records[record_id]
        except KeyError:
            raise KeyError(f"not found: {record_id}") from None

    def delete(self, record: Any) -> None:
        """Remove a record; raises KeyError when it is not stored."""
        try:
            del self._records[record.id]
        except (KeyError, AttributeError):
            raise KeyError(f"not found: {getattr(record, 'id', '')}") from None

    def list(self, page: int = 1, limit: int = -1) -> list[Any]:
        """One page of records in insertion order; a limit below 1 returns them all."""
        records = [*self._records.values()]
        if limit < 1:
            return records
        start = (max(page, 1) - 1) * limit
        return records[start : start + limit]

    def __len__(self) -> int:
        return len(self._records)


@dataclass
class ResourceRoutes:
    """CRUD handlers for one kind of resource.

    Each ``on_*`` entry is an (action, error message) pair; the action is
    called with the subject and a failure turns into a 500 response with
    that message.
    """

    name: str
    repository: Any
    not_found_status: int = 404
    missing_delete_status: int | None = None
    on_create: Sequence[Step] = ()
    on_update: Sequence[Step] = ()
    on_settings: Sequence[Step] = ()
    on_delete: Sequence[Step] = ()

    def _fail(self, message: str, status: int = 500) -> Response:
        return Response(error=True, message=message, status=status)

    @staticmethod
    def _run(steps: Sequence[Step], subject: Any) -> Response | None:
        for action, message in steps:
            try:
                action(subject)
            except Exception:
                return Response(error=True, message=message, status=500)
        return None

    def _save(self, subject: Any) -> Response | None:
        try:
            self.repository.save(subject)
        except Exception:
            return self._fail(f"error saving {self.name}")
        return None

    def index(self, page: int, limit: int) -> Response:
        """A page of records."""
        try:
            records = self.repository.list(page, limit)
        except Exception:
            return self._fail(f"error loading {self.name}")
        return Response(result=records)

    def create(self, subject: Any) -> Response:
        """Store a new record."""
        failed = self._save(subject) or self._run(self.on_create, subject)
        return failed or Response(result=subject)

    def show(self, record_id: str) -> Response:
        """One record."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            return self._fail("not found", self.not_found_status)
        return Response(result=subject)

    def update(self, record_id: str, subject: Any) -> Response:
        """Store a changed record."""
        failed = self._save(subject) or self._run(self.on_update, subject)
        return failed or Response(result=subject)

    def settings(self, record_id: str, setting: Setting) -> Response:
        """Apply a setting to a record and store it again."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            return self._fail("not found", self.not_found_status)
        failed = self._run(self.on_settings, subject) or self._save(subject)
        return failed or Response(result=subject)

    def delete(self, record_id: str) -> Response:
        """Remove a record."""
        try:
            subject = self.repository.get(record_id)
        except Exception:
            status = self.missing_delete_status or self.not_found_status
            return self._fail("not found", status)
        failed = self._run(self.on_delete, subject)
        if failed is not None:
            return failed
        try:
            self.repository.delete(subject)
        except Exception:
            return self._fail(f"error deleting {self.name}")
        return Response(result=subject)


def collection_routes(
    repository: Any,
    enqueue: Callable[[str, str], None],
    delete_plex_collection: Callable[[str], None],
) -> ResourceRoutes:
    """Collection handlers.

    ``enqueue(kind, id)`` schedules a job; ``delete_plex_collection(key)``
    removes the collection from the media server.
    """

    def schedule(subject: Any) -> None:
        enqueue(COLLECTION_UPDATE_JOB, subject.id)

    def remove_remote(subject: Any) -> None:
        rating_key = getattr(subject, "rating_key", "")
        if rating_key:
            delete_plex_collection(rating_key)

    job = (schedule, "error enqueueing job")
    return ResourceRoutes(
        name="Collections",
        repository=repository,
        not_found_status=404,
        missing_delete_status=200,
        on_update=(job,),
        on_settings=(job,),
        on_delete=((remove_remote, "error enqueuing job PlexDeleteCollection"),),
    )


def feed_routes(repository: Any) -> ResourceRoutes:
    """Feed handlers."""
    return ResourceRoutes(name="Feeds", repository=repository, not_found_status=404)


def _library_like(name: str, repository: Any, start_destination: Callable[[], None]) -> ResourceRoutes:
    def restart(_: Any) -> None:
        start_destination()

    step = (restart, "error starting destination")
    return ResourceRoutes(
        name=name,
        repository=repository,
        not_found_status=500,
        on_create=(step,),
        on_update=(step,),
    )


def library_routes(repository: Any, start_destination: Callable[[], None]) -> ResourceRoutes:
    """Library handlers; creating or updating restarts the destination builder."""
    return _library_like("Library", repository, start_destination)


def library_template_routes(repository: Any, start_destination: Callable[[], None]) -> ResourceRoutes:
    """Library template handlers; creating or updating restarts the destination builder."""
    return _library_like("LibraryTemplate", repository, start_destination)


def library_type_routes(repository: Any, start_destination: Callable[[], None]) -> ResourceRoutes:
    """Library type handlers; creating or updating restarts the destination builder."""
    return _library_like("LibraryType", repository, start_destination)