"""A mutex whose lock attempt can give up after a timeout."""

from __future__ import annotations

import threading


class CtxMutex:
    """Mutual exclusion with a bounded wait; may be released from any thread."""

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def lock(self, timeout: float | None = None) -> bool:
        """Acquire the mutex, waiting at most ``timeout`` seconds (forever if None)."""
        if timeout is None:
            return self._lock.acquire()
        if timeout <= 0:
            return self._lock.acquire(blocking=False)
        return self._lock.acquire(timeout=timeout)

    def unlock(self) -> None:
        """Release the mutex; raises RuntimeError when it is not held."""
        self._lock.release()

    def locked(self) -> bool:
        """Whether the mutex is currently held."""
        return self._lock.locked()

    def __enter__(self) -> CtxMutex:
        self.lock()
        return self

    def __exit__(self, *exc: object) -> None:
        self.unlock()