"""An index of media server files and library folders, built page by page."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any
from urllib.parse import parse_qs, urlsplit

from towerkit.ctxmutex import CtxMutex

_log = logging.getLogger("towerkit.plexcache")

PAGE_SIZE = 50
BUILD_LOCK_TIMEOUT = 1.0

_BUILD_MUTEX = CtxMutex()

_LIB_TYPES = {"show": "4", "movie": "1"}


def plex_lib_type(kind: str) -> str:
    """The media server's numeric type for a library kind, or "" when unsupported."""
    return _LIB_TYPES.get(kind, "")


def _pages(fetch: Callable[[int, int], tuple[list[Any], int]], total: int) -> Iterator[Any]:
    for start in range(0, total, PAGE_SIZE):
        items, _ = fetch(start, PAGE_SIZE)
        yield from items


def _file_paths(item: Any) -> Iterator[str]:
    for media in getattr(item, "media", None) or ():
        for part in getattr(media, "part", None) or ():
            if part.file:
                yield part.file


def _folder_parent(key: str) -> str:
    query = parse_qs(urlsplit(key).query, keep_blank_values=True)
    values = query.get("parent")
    if not values:
        raise ValueError(f"no parent in folder key: {key}")
    return values[0]


class PlexFileCache:
    """Maps file paths to their metadata items and folder titles to parent ids.

    ``plex`` provides ``get_libraries()``,
    ``get_library_section(key, kind, libtype, start, size)`` and
    ``get_library_section_folder(key, parent, libtype, start, size)``; the
    latter two return ``(items, total)``.
    """

    def __init__(self, plex: Any, mutex: CtxMutex | None = None) -> None:
        self.plex = plex
        self.mutex = _BUILD_MUTEX if mutex is None else mutex
        self.libraries: list[Any] = []
        self.files: dict[str, Any] = {}
        self.parents: dict[str, str] = {}

    def build(self, timeout: float = BUILD_LOCK_TIMEOUT) -> bool:
        """Rebuild files and folders; False when another build holds the lock."""
        if not self.mutex.lock(timeout):
            _log.warning("failed to lock mutex")
            return False
        try:
            self.libraries = list(self.plex.get_libraries())
            self.build_files()
            self.build_folders()
        finally:
            self.mutex.unlock()
        return True

    def _supported(self) -> Iterable[tuple[Any, str]]:
        for lib in self.libraries:
            libtype = plex_lib_type(lib.type)
            if libtype:
                yield lib, libtype

    def build_files(self) -> None:
        """Index every media file of every supported library."""
        files: dict[str, Any] = {}
        for lib, libtype in self._supported():
            _, total = self.plex.get_library_section(lib.key, "all", libtype, 0, 1)

            def fetch(start: int, size: int, key: str = lib.key, t: str = libtype) -> tuple[list[Any], int]:
                return self.plex.get_library_section(key, "all", t, start, size)

            for item in _pages(fetch, total):
                for path in _file_paths(item):
                    files[path] = item
        self.files = files

    def build_folders(self) -> None:
        """Record the parent id of each folder title; the first title seen wins."""
        parents: dict[str, str] = {}
        for lib, libtype in self._supported():
            _, total = self.plex.get_library_section_folder(lib.key, "", libtype, 0, 1)

            def fetch(start: int, size: int, key: str = lib.key, t: str = libtype) -> tuple[list[Any], int]:
                return self.plex.get_library_section_folder(key, "all", t, start, size)

            for item in _pages(fetch, total):
                parents.setdefault(item.title, _folder_parent(item.key))
        self.parents = parents

    def update(self, title: str, section: str, libtype: str) -> None:
        """Re-index the files below the folder with the given title."""
        parent = self.parents.get(title, "")
        kind = plex_lib_type(libtype)
        if not kind:
            raise ValueError(f"unknown library type: {libtype}")
        _, total = self.plex.get_library_section_folder(section, parent, kind, 0, 1)

        def fetch(start: int, size: int) -> tuple[list[Any], int]:
            return self.plex.get_library_section(section, parent, kind, start, size)

        for item in _pages(fetch, total):
            for path in _file_paths(item):
                self.files[path] = item