"""Cached proxy for the author's public repositories.

GitHub is asked at most once per TTL window; in between, the last computed
project list is served as-is.
"""

import logging
import time
from typing import Callable

from portfolio.cache import CacheEntry
from portfolio.collectors import github
from portfolio.config import GITHUB_USERNAME, PROJECTS_CACHE_TTL_SECONDS

log = logging.getLogger(__name__)


class ProjectCache:
    def __init__(self, ttl: float = PROJECTS_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.time,
                 username: str = GITHUB_USERNAME):
        self.ttl = ttl
        self.clock = clock
        self.username = username
        self.entry: CacheEntry | None = None

    async def get(self, force: bool = False) -> list[dict]:
        now = self.clock()
        if not force and self.entry is not None and self.entry.is_fresh(self.ttl, now):
            log.debug("Projects cache hit")
            return self.entry.value

        # Raises GitHubFetchError; the previous entry stays as it was
        async with github.make_client() as client:
            repos = await github.fetch_user_repos(client, self.username)

        projects = github.parse_projects(repos)
        self.entry = CacheEntry(projects, self.clock())
        log.info(f"Projects refreshed: {len(projects)} public of {len(repos)} repos for {self.username}")
        return projects

    def clear(self) -> None:
        self.entry = None


project_cache = ProjectCache()
