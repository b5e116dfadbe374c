from dataclasses import dataclass

import pytest

from towerkit.api import Setting
from towerkit.resources import (
    COLLECTION_UPDATE_JOB,
    Repository,
    collection_routes,
    feed_routes,
    library_routes,
    library_template_routes,
    library_type_routes,
)


@dataclass
class Record:
    name: str = ""
    id: str = ""
    rating_key: str = ""


class BrokenRepository(Repository):
    def save(self, record):
        raise RuntimeError("boom")

    def list(self, page=1, limit=-1):
        raise RuntimeError("boom")


def _fail():
    raise RuntimeError("boom")


def test_repository_save_assigns_id_and_get_returns_it():
    repo = Repository()
    record = repo.save(Record(name="a"))
    assert record.id
    assert repo.get(record.id) is record


def test_repository_keeps_given_id():
    repo = Repository([Record(name="a", id="abc")])
    assert repo.get("abc").name == "a"


def test_repository_get_missing_raises():
    with pytest.raises(KeyError):
        Repository().get("missing")


def test_repository_delete():
    repo = Repository()
    record = repo.save(Record(name="a"))
    repo.delete(record)
    assert len(repo) == 0
    with pytest.raises(KeyError):
        repo.delete(record)


def test_repository_list_pages():
    records = [Record(name=str(n)) for n in range(5)]
    repo = Repository(records)
    assert repo.list(1, 2) == records[:2]
    assert repo.list(3, 2) == records[4:]
    assert repo.list(1, -1) == records


def test_feed_create_show_delete_round_trip():
    routes = feed_routes(Repository())
    created = routes.create(Record(name="feed"))
    assert created.error is False
    shown = routes.show(created.result.id)
    assert shown.result is created.result
    deleted = routes.delete(created.result.id)
    assert deleted.status == 200
    assert routes.show(created.result.id).status == 404


def test_feed_show_missing_is_404():
    response = feed_routes(Repository()).show("missing")
    assert (response.error, response.message, response.status) == (True, "not found", 404)


def test_feed_save_failure():
    routes = feed_routes(BrokenRepository())
    response = routes.create(Record())
    assert response.status == 500
    assert response.message == "error saving Feeds"


def test_feed_index_failure():
    response = feed_routes(BrokenRepository()).index(1, 10)
    assert response.message == "error loading Feeds"
    assert response.status == 500


def test_feed_index_lists_records():
    records = [Record(name="a"), Record(name="b")]
    response = feed_routes(Repository(records)).index(1, 25)
    assert response.result == records


def test_collection_update_enqueues_job():
    jobs = []
    routes = collection_routes(Repository(), lambda kind, rid: jobs.append((kind, rid)), lambda key: None)
    response = routes.update("x", Record(name="c"))
    assert response.error is False
    assert jobs == [(COLLECTION_UPDATE_JOB, response.result.id)]


def test_collection_update_enqueue_failure():
    routes = collection_routes(Repository(), lambda kind, rid: _fail(), lambda key: None)
    response = routes.update("x", Record(name="c"))
    assert response.status == 500
    assert response.message == "error enqueueing job"


def test_collection_settings_enqueues_and_returns_subject():
    jobs = []
    repo = Repository()
    record = repo.save(Record(name="c"))
    routes = collection_routes(repo, lambda kind, rid: jobs.append(rid), lambda key: None)
    response = routes.settings(record.id, Setting(name="x", value=True))
    assert response.result is record
    assert jobs == [record.id]


def test_collection_delete_missing_is_error_with_200():
    routes = collection_routes(Repository(), lambda kind, rid: None, lambda key: None)
    response = routes.delete("missing")
    assert (response.error, response.status, response.message) == (True, 200, "not found")


def test_collection_delete_removes_remote_collection():
    removed = []
    repo = Repository()
    record = repo.save(Record(name="c", rating_key="42"))
    routes = collection_routes(repo, lambda kind, rid: None, removed.append)
    response = routes.delete(record.id)
    assert response.error is False
    assert removed == ["42"]
    assert len(repo) == 0


def test_collection_delete_skips_remote_without_rating_key():
    removed = []
    repo = Repository()
    record = repo.save(Record(name="c"))
    collection_routes(repo, lambda kind, rid: None, removed.append).delete(record.id)
    assert removed == []


def test_collection_delete_remote_failure_keeps_record():
    repo = Repository()
    record = repo.save(Record(name="c", rating_key="42"))
    routes = collection_routes(repo, lambda kind, rid: None, lambda key: _fail())
    response = routes.delete(record.id)
    assert response.message == "error enqueuing job PlexDeleteCollection"
    assert repo.get(record.id) is record


@pytest.mark.parametrize(
    "factory, name",
    [
        (library_routes, "Library"),
        (library_template_routes, "LibraryTemplate"),
        (library_type_routes, "LibraryType"),
    ],
)
def test_library_like_create_starts_destination(factory, name):
    calls = []
    routes = factory(Repository(), lambda: calls.append(1))
    routes.create(Record(name="l"))
    routes.update("x", Record(name="m"))
    assert len(calls) == 2
    assert routes.name == name


@pytest.mark.parametrize("factory", [library_routes, library_template_routes, library_type_routes])
def test_library_like_start_failure(factory):
    response = factory(Repository(), _fail).create(Record())
    assert response.status == 500
    assert response.message == "error starting destination"


@pytest.mark.parametrize("factory", [library_routes, library_template_routes, library_type_routes])
def test_library_like_missing_is_500(factory):
    routes = factory(Repository(), lambda: None)
    assert routes.show("missing").status == 500
    assert routes.delete("missing").status == 500
    assert routes.settings("missing", Setting(name="x")).status == 500


def test_library_save_failure_message():
    response = library_routes(BrokenRepository(), lambda: None).create(Record())
    assert response.message == "error saving Library"