import asyncio

import pytest

from portfolio.activity.loader import EVENTS_ERROR, PROJECTS_ERROR, ActivityLoader
from portfolio.cache import EVENTS_KEY, PROJECTS_KEY, LocalStore
from portfolio.projects import ProjectCache

from conftest import make_repo

PUSH = {
    "type": "PushEvent",
    "repo": {"name": "BastianAsmussen/site"},
    "created_at": "2025-10-09T08:00:00Z",
    "payload": {"size": 2},
}


@pytest.fixture
def loader(gh, clock, tmp_path):
    projects = ProjectCache(ttl=3600, clock=clock, username="BastianAsmussen")
    return ActivityLoader(LocalStore(tmp_path / "store.json"), ttl=300, clock=clock,
                          projects=projects, username="BastianAsmussen")


def test_events_loaded_and_shaped(gh, loader):
    gh.events = [PUSH]
    result = asyncio.run(loader.load_events())
    assert result.status == "ok"
    assert result.items[0]["text"] == "Pushed 2 commits to BastianAsmussen/site"
    assert result.items[0]["commits"] == 2


def test_events_served_from_store_within_ttl(gh, clock, loader):
    gh.events = [PUSH]
    asyncio.run(loader.load_events())
    clock.advance(299)
    asyncio.run(loader.load_events())
    assert gh.count("/events/public") == 1
    clock.advance(1)
    asyncio.run(loader.load_events())
    assert gh.count("/events/public") == 2


def test_empty_events_is_empty_state_not_error(gh, loader):
    gh.events = []
    result = asyncio.run(loader.load_events())
    assert result.status == "empty"
    assert result.error is None


def test_event_failure_is_error_and_not_cached(gh, loader):
    gh.status = 500
    result = asyncio.run(loader.load_events())
    assert result.status == "error"
    assert result.error == EVENTS_ERROR
    assert loader.store.get(EVENTS_KEY) is None

    # retry click
    gh.status = 200
    gh.events = [PUSH]
    assert asyncio.run(loader.load_events(force=True)).status == "ok"


def test_projects_via_proxy_and_cached_locally(gh, clock, loader):
    gh.repos = [make_repo("alpha"), make_repo("fork", fork=True)]
    result = asyncio.run(loader.load_projects())
    assert result.status == "ok"
    assert [p["name"] for p in result.items] == ["alpha"]
    assert loader.store.get(PROJECTS_KEY)["timestamp"] == clock.now
    asyncio.run(loader.load_projects())
    assert gh.count("/repos") == 1


def test_projects_empty_and_error_states(gh, loader):
    gh.repos = [make_repo("only-fork", fork=True)]
    assert asyncio.run(loader.load_projects()).status == "empty"

    loader.clear()
    loader.projects.clear()
    gh.network_error = True
    result = asyncio.run(loader.load_projects())
    assert result.status == "error"
    assert result.error == PROJECTS_ERROR


@pytest.mark.parametrize("created_at", ["2025-10-09T08:00:00", "garbage"])
def test_odd_timestamps_still_render(gh, loader, created_at):
    gh.events = [dict(PUSH, created_at=created_at)]
    result = asyncio.run(loader.load_events())
    assert result.status == "ok"
    assert result.items[0]["text"] == "Pushed 2 commits to BastianAsmussen/site"


def test_malformed_events_are_error_and_dropped_from_store(gh, loader):
    gh.events = ["not an event"]
    result = asyncio.run(loader.load_events())
    assert result.status == "error"
    assert result.error == EVENTS_ERROR
    assert loader.store.get(EVENTS_KEY) is None

    gh.events = [PUSH]
    assert asyncio.run(loader.load_events(force=True)).status == "ok"


def test_force_projects_bypasses_fresh_local_entry(gh, clock, loader):
    gh.repos = [make_repo("alpha")]
    asyncio.run(loader.load_projects())
    loader.projects.clear()
    gh.repos = [make_repo("beta")]

    assert [p["name"] for p in asyncio.run(loader.load_projects()).items] == ["alpha"]
    result = asyncio.run(loader.load_projects(force=True))
    assert [p["name"] for p in result.items] == ["beta"]
    assert gh.count("/repos") == 2
    assert loader.store.get(PROJECTS_KEY)["value"][0]["name"] == "beta"
