"""Activity and project loader behind the page sections.

Each data kind is memoized in the local store for a few minutes. A failed
fetch is never stored, so the next request (the retry button) goes upstream
again.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

from portfolio.activity.events import group_events, shape_events
from portfolio.cache import EVENTS_KEY, PROJECTS_KEY, LocalStore, cached_value, store_value
from portfolio.collectors import github
from portfolio.collectors.github import GitHubFetchError
from portfolio.config import CLIENT_CACHE_TTL_SECONDS, GITHUB_USERNAME
from portfolio.projects import ProjectCache, project_cache

log = logging.getLogger(__name__)

EVENTS_ERROR = "Failed to load recent activity"
PROJECTS_ERROR = "Failed to load projects"


@dataclass
class LoadResult:
    status: str  # "ok" | "empty" | "error"
    items: list[Any] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def from_items(cls, items: list) -> "LoadResult":
        return cls("ok", items) if items else cls("empty")


class ActivityLoader:
    def __init__(self, store: LocalStore, ttl: float = CLIENT_CACHE_TTL_SECONDS,
                 clock: Callable[[], float] = time.time, projects: ProjectCache = project_cache,
                 username: str = GITHUB_USERNAME):
        self.store = store
        self.ttl = ttl
        self.clock = clock
        self.projects = projects
        self.username = username

    async def _fetch_events(self) -> list[dict]:
        async with github.make_client() as client:
            return await github.fetch_user_events(client, self.username)

    async def raw_events(self, force: bool = False) -> list[dict]:
        """Raw events from the local store, or upstream when stale. Raises GitHubFetchError."""
        if not force:
            cached = cached_value(self.store, EVENTS_KEY, self.ttl, self.clock())
            if cached is not None:
                return cached
        events = await self._fetch_events()
        store_value(self.store, EVENTS_KEY, events, self.clock())
        return events

    async def load_events(self, force: bool = False) -> LoadResult:
        try:
            events = await self.raw_events(force)
        except GitHubFetchError as e:
            log.warning(f"Activity load failed: {e}")
            return LoadResult("error", error=EVENTS_ERROR)
        now = datetime.fromtimestamp(self.clock(), tz=timezone.utc)
        try:
            shaped = group_events(shape_events(events, now))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            # Malformed upstream payload; drop it so the retry goes upstream
            log.warning(f"Activity payload unusable: {type(e).__name__}: {e}")
            self.store.remove(EVENTS_KEY)
            return LoadResult("error", error=EVENTS_ERROR)
        return LoadResult.from_items(shaped)

    async def load_projects(self, force: bool = False) -> LoadResult:
        if not force:
            cached = cached_value(self.store, PROJECTS_KEY, self.ttl, self.clock())
            if cached is not None:
                return LoadResult.from_items(cached)
        try:
            projects = await self.projects.get()
        except GitHubFetchError as e:
            log.warning(f"Projects load failed: {e}")
            return LoadResult("error", error=PROJECTS_ERROR)
        store_value(self.store, PROJECTS_KEY, projects, self.clock())
        return LoadResult.from_items(projects)

    def clear(self) -> None:
        self.store.remove(EVENTS_KEY)
        self.store.remove(PROJECTS_KEY)
