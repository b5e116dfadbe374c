"""Route handlers for media server sign-in, browsing and playback."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from towerkit.api import Response

_log = logging.getLogger("towerkit.plexroutes")

_INTEGER = re.compile(r"[+-]?[0-9]+")
PIN_TO_USERS_JOB = "PlexPinToUsers"


@dataclass
class Pin:
    """A stored sign-in pin."""

    pin: int = 0
    code: str = ""
    product: str = ""
    identifier: str = ""
    token: str = ""


@dataclass
class PlexPin:
    """A sign-in pin as the media server service describes it."""

    id: int = 0
    code: str = ""
    product: str = ""
    identifier: str = ""
    token: str = ""


@dataclass
class PlexResource:
    """A device or server known to the account."""

    name: str = ""
    provides: str = ""


def plex_pin_to_pin(pin: PlexPin) -> Pin:
    """Convert a service pin to the stored form."""
    return Pin(pin=pin.id, code=pin.code, product=pin.product, identifier=pin.identifier, token=pin.token)


def pin_to_plex_pin(pin: Pin) -> PlexPin:
    """Convert a stored pin to the service form."""
    return PlexPin(id=pin.pin, code=pin.code, product=pin.product, identifier=pin.identifier, token=pin.token)


def filter_resources(resources: Iterable[PlexResource], provides: str = "") -> list[PlexResource]:
    """Resources that provide the given capability ("player" by default), phones excluded."""
    wanted = provides or "player"
    return [r for r in resources if wanted in r.provides.split(",") and r.name != "iPhone"]


class PlexRoutes:
    """Handlers for the media server routes.

    ``plex`` is the media server client; ``save_pin`` stores a Pin;
    ``find_pins(pin)`` returns the stored pins with that number; ``enqueue``
    schedules a job by name.
    """

    def __init__(
        self,
        plex: Any,
        save_pin: Callable[[Pin], None],
        find_pins: Callable[[int], list[Pin]],
        enqueue: Callable[[str], None],
        auth_config: Any = None,
    ) -> None:
        self.plex = plex
        self.save_pin = save_pin
        self.find_pins = find_pins
        self.enqueue = enqueue
        self.auth_config = auth_config

    def index(self) -> Response:
        """Create a pin and redirect to the service's sign-in page."""
        plex_pin = self.plex.create_pin()
        pin = plex_pin_to_pin(plex_pin)
        _log.debug("saving pin %s", pin)
        self.save_pin(pin)
        url = self.plex.get_auth_url(self.auth_config, plex_pin)
        return Response(result=url, status=302)

    def auth(self, pin_id: str) -> Response:
        """Confirm a pin, store its token and schedule the user update."""
        if not _INTEGER.fullmatch(pin_id):
            raise ValueError(f"invalid pin: {pin_id!r}")
        pins = self.find_pins(int(pin_id))
        if len(pins) != 1:
            raise LookupError("pin not found")
        plex_pin = pin_to_plex_pin(pins[0])
        if not self.plex.check_pin(plex_pin):
            raise RuntimeError("something went wrong...")
        pins[0].token = plex_pin.token
        self.save_pin(pins[0])
        self.enqueue(PIN_TO_USERS_JOB)
        return Response(message="Authorization complete!")

    def libraries(self) -> Response:
        """The server's libraries."""
        return Response(result=self.plex.get_libraries())

    def search(self, query: str, section: str, start: int, limit: int) -> Response:
        """Search a library section."""
        items, total = self.plex.search(query, section, {}, start, limit)
        return Response(result=items, total=total)

    def resources(self, provides: str = "") -> Response:
        """The account's resources that provide the given capability."""
        return Response(result=filter_resources(self.plex.get_resources(), provides))

    def play(self, rating_key: str, player: str) -> Response:
        """Start playing an item on a player."""
        self.plex.play(rating_key, player)
        return Response()

    def stop(self, session: str) -> Response:
        """Stop a playback session."""
        self.plex.stop(session)
        return Response()

    def sessions(self) -> Response:
        """The current playback sessions."""
        return Response(result=self.plex.get_sessions())