"""Send notices to the event bus and store log messages."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

_log = logging.getLogger("towerkit.notifier")

NOTICES_TOPIC = "tower.notices"
LOGS_TOPIC = "tower.logs"


def _new_id() -> str:
    return secrets.token_hex(12)


@dataclass
class Message:
    """A stored log message."""

    level: str
    message: str
    facility: str
    created_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=_new_id)


@dataclass
class Notice:
    """A transient notice sent to connected clients."""

    time: str
    level: str
    class_name: str
    message: str
    event: str = "notice"


class Notifier:
    """Publishes notices and log messages.

    ``save`` stores a Message; ``send`` publishes a payload to a topic.
    Failures in either are logged, never raised.
    """

    def __init__(
        self,
        save: Callable[[Message], None],
        send: Callable[[str, Any], None],
    ) -> None:
        self._save = save
        self._send = send
        self.logs = NotifierLog(self)
        self.notices = NotifierNotice(self)

    def notice(self, level: str, title: str, message: str) -> Notice:
        """Send a notice to the notices topic."""
        item = Notice(time=str(datetime.now().astimezone()), level=level, class_name=title, message=message)
        try:
            self._send(NOTICES_TOPIC, item)
        except Exception as err:
            _log.error("sending notice: %s", err)
        return item

    def log(self, level: str, title: str, message: str) -> Message:
        """Store a log message and announce it on the logs topic."""
        item = Message(level=level, message=message, facility=title)
        try:
            self._save(item)
        except Exception as err:
            _log.error("error saving log: %s", err)
        _log.debug("[%s] %s: %s", level, title, message)
        try:
            self._send(LOGS_TOPIC, {"event": "new", "id": item.id, "log": item})
        except Exception as err:
            _log.error("error sending log: %s", err)
        return item

    def notify(self, level: str, title: str, message: str) -> None:
        """Both send a notice and store a log message."""
        self.notice(level, title, message)
        self.log(level, title, message)

    def debug(self, title: str, message: str) -> None:
        self.notify("debug", title, message)

    def info(self, title: str, message: str) -> None:
        self.notify("info", title, message)

    def warn(self, title: str, message: str) -> None:
        self.notify("Warn", title, message)

    def error(self, title: str, message: str) -> None:
        self.notify("error", title, message)

    def success(self, title: str, message: str) -> None:
        self.notify("success", title, message)


def _format(message: str, args: tuple[Any, ...]) -> str:
    return message % args if args else message


class NotifierLog:
    """Log-only helpers; with extra arguments the message is a %-format string."""

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier

    def debug(self, title: str, message: str, *args: Any) -> Message:
        return self._notifier.log("debug", title, _format(message, args))

    def info(self, title: str, message: str, *args: Any) -> Message:
        return self._notifier.log("info", title, _format(message, args))

    def warn(self, title: str, message: str, *args: Any) -> Message:
        level = "warn" if args else "warning"
        return self._notifier.log(level, title, _format(message, args))

    def error(self, title: str, message: str, *args: Any) -> Message:
        return self._notifier.log("error", title, _format(message, args))

    def success(self, title: str, message: str, *args: Any) -> Message:
        return self._notifier.log("success", title, _format(message, args))


class NotifierNotice:
    """Notice-only helpers."""

    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier

    def info(self, title: str, message: str) -> Notice:
        return self._notifier.notice("info", title, message)

    def warn(self, title: str, message: str) -> Notice:
        return self._notifier.notice("warn", title, message)

    def error(self, title: str, message: str) -> Notice:
        return self._notifier.notice("error", title, message)

    def success(self, title: str, message: str) -> Notice:
        return self._notifier.notice("success", title, message)