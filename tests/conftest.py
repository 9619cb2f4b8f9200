"""Shared fixtures: a fake GitHub API behind httpx.MockTransport and a manual clock."""

import httpx
import pytest

from portfolio.collectors import github


class FakeGitHub:
    def __init__(self):
        self.repos: list[dict] = []
        self.events: list[dict] = []
        self.status = 200
        self.network_error = False
        self.calls: list[str] = []
        self.requests: list[httpx.Request] = []
        self.body = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request.url.path)
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status != 200:
            return httpx.Response(self.status, json={"message": "API rate limit exceeded"})
        if self.body is not None:
            return httpx.Response(200, json=self.body)
        if request.url.path.endswith("/events/public"):
            return httpx.Response(200, json=self.events)
        if request.url.path.endswith("/repos"):
            return httpx.Response(200, json=self.repos)
        return httpx.Response(404, json={"message": "Not Found"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), headers=github._headers())

    def count(self, suffix: str) -> int:
        return sum(1 for c in self.calls if c.endswith(suffix))


class FakeClock:
    def __init__(self, start: float = 1_760_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_repo(name: str, **overrides) -> dict:
    repo = {
        "name": name,
        "full_name": f"BastianAsmussen/{name}",
        "description": f"{name} description",
        "html_url": f"https://github.com/BastianAsmussen/{name}",
        "stargazers_count": 3,
        "language": "Rust",
        "topics": ["cli"],
        "updated_at": "2026-10-01T12:00:00Z",
        "fork": False,
        "private": False,
    }
    repo.update(overrides)
    return repo


@pytest.fixture
def gh(monkeypatch):
    fake = FakeGitHub()
    monkeypatch.setattr(github, "make_client", fake.client)
    return fake


@pytest.fixture
def clock():
    return FakeClock()
