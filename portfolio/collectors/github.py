"""GitHub REST client for the portfolio: user repositories and public events.

Single GET per call, no retry. Anything other than a 2xx (or a transport
error) becomes a GitHubFetchError; callers decide what to show.
"""

import logging
from typing import Any

import httpx

from portfolio.config import EVENTS_PER_PAGE, GITHUB_API, GITHUB_TOKEN, REPOS_PER_PAGE

log = logging.getLogger(__name__)


class GitHubFetchError(Exception):
    """Upstream GitHub request failed (non-2xx or network error)."""

    def __init__(self, url: str, status: int | None = None):
        self.url = url
        self.status = status
        super().__init__(f"GitHub fetch failed ({status or 'network'}): {url}")


def _headers() -> dict:
    h = {"Accept": "application/vnd.github.v3+json"}
    if GITHUB_TOKEN:
        h["Authorization"] = f"token {GITHUB_TOKEN}"
    return h


def make_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=20, headers=_headers())


async def _gh_get(client: httpx.AsyncClient, url: str, params: dict | None = None) -> Any:
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as e:
        log.warning(f"GitHub request failed: {type(e).__name__}: {e}")
        raise GitHubFetchError(url) from e
    if not resp.is_success:
        remaining = resp.headers.get("X-RateLimit-Remaining", "?")
        log.warning(f"GitHub {resp.status_code} for {url} ({remaining} requests remaining)")
        raise GitHubFetchError(url, resp.status_code)
    try:
        return resp.json()
    except ValueError as e:
        log.warning(f"GitHub returned invalid JSON for {url}")
        raise GitHubFetchError(url, resp.status_code) from e


def _as_list(data: Any, url: str) -> list[dict]:
    if not isinstance(data, list):
        log.warning(f"GitHub returned {type(data).__name__} instead of a list for {url}")
        raise GitHubFetchError(url, 200)
    return data


async def fetch_user_repos(client: httpx.AsyncClient, username: str) -> list[dict]:
    """All repositories owned by `username`, most recently updated first."""
    url = f"{GITHUB_API}/users/{username}/repos"
    data = await _gh_get(client, url, {
        "per_page": REPOS_PER_PAGE,
        "sort": "updated",
    })
    return _as_list(data, url)


async def fetch_user_events(client: httpx.AsyncClient, username: str) -> list[dict]:
    """Most recent public activity events, one fixed-size page."""
    url = f"{GITHUB_API}/users/{username}/events/public"
    data = await _gh_get(client, url, {
        "per_page": EVENTS_PER_PAGE,
    })
    return _as_list(data, url)


def parse_projects(repos: list[dict]) -> list[dict]:
    """Drop forks and private repos, keep the fields the site shows."""
    return [
        {
            "name": r.get("name", ""),
            "description": r.get("description") or "",
            "url": r.get("html_url", ""),
            "stars": r.get("stargazers_count", 0),
            "language": r.get("language"),
            "topics": r.get("topics") or [],
            "updatedAt": r.get("updated_at", ""),
        }
        for r in repos
        if not r.get("fork") and not r.get("private")
    ]
