import pytest

from towerkit.plexroutes import (
    PIN_TO_USERS_JOB,
    Pin,
    PlexPin,
    PlexResource,
    PlexRoutes,
    filter_resources,
    pin_to_plex_pin,
    plex_pin_to_pin,
)


class FakePlex:
    def __init__(self, check_ok=True):
        self.check_ok = check_ok
        self.played = []
        self.stopped = []

    def create_pin(self):
        return PlexPin(id=42, code="abcd", product="tower", identifier="client-1")

    def get_auth_url(self, config, pin):
        return f"https://auth.example.com/?code={pin.code}"

    def check_pin(self, pin):
        if self.check_ok:
            pin.token = "token"
        return self.check_ok

    def search(self, query, section, filters, start, limit):
        return [query, section], 7

    def get_resources(self):
        return [
            PlexResource(name="TV", provides="client,player"),
            PlexResource(name="iPhone", provides="player"),
            PlexResource(name="Server", provides="server"),
        ]

    def get_libraries(self):
        return ["movies"]

    def get_sessions(self):
        return ["s1"]

    def play(self, key, player):
        self.played.append((key, player))

    def stop(self, session):
        self.stopped.append(session)


def _routes(plex, pins=None):
    store = list(pins or [])
    saved, jobs = [], []

    def find(number):
        return [p for p in store if p.pin == number]

    routes = PlexRoutes(plex, saved.append, find, jobs.append)
    return routes, saved, jobs


def test_pin_round_trip():
    pin = PlexPin(id=3, code="c", product="p", identifier="i", token="token")
    assert pin_to_plex_pin(plex_pin_to_pin(pin)) == pin
    assert plex_pin_to_pin(pin).pin == 3


def test_filter_resources_defaults_to_player_without_iphone():
    names = [r.name for r in filter_resources(FakePlex().get_resources())]
    assert names == ["TV"]
    assert [r.name for r in filter_resources(FakePlex().get_resources(), "server")] == ["Server"]


def test_index_saves_pin_and_redirects():
    routes, saved, _ = _routes(FakePlex())
    response = routes.index()
    assert response.status == 302
    assert response.result.endswith("code=abcd")
    assert saved[0].pin == 42


def test_auth_stores_token_and_enqueues():
    pin = Pin(pin=42, code="abcd")
    routes, saved, jobs = _routes(FakePlex(), [pin])
    response = routes.auth("42")
    assert response.message == "Authorization complete!"
    assert saved == [pin]
    assert pin.token == "token"
    assert jobs == [PIN_TO_USERS_JOB]


def test_auth_errors():
    routes, _, _ = _routes(FakePlex(), [Pin(pin=42)])
    with pytest.raises(ValueError):
        routes.auth("abc")
    with pytest.raises(LookupError):
        routes.auth("43")
    failing, _, jobs = _routes(FakePlex(check_ok=False), [Pin(pin=42)])
    with pytest.raises(RuntimeError):
        failing.auth("42")
    assert jobs == []


def test_search_and_listing_routes():
    plex = FakePlex()
    routes, _, _ = _routes(plex)
    found = routes.search("query", "2", 0, 10)
    assert found.result == ["query", "2"]
    assert found.total == 7
    assert routes.libraries().result == ["movies"]
    assert routes.sessions().result == ["s1"]
    assert [r.name for r in routes.resources("").result] == ["TV"]


def test_play_and_stop_forward_to_client():
    plex = FakePlex()
    routes, _, _ = _routes(plex)
    assert routes.play("k", "p").error is False
    routes.stop("s")
    assert plex.played == [("k", "p")]
    assert plex.stopped == ["s"]