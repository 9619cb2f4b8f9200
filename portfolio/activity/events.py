"""Turn raw GitHub events into display text, links and relative times."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable

log = logging.getLogger(__name__)

GITHUB = "https://github.com"

TIME_UNITS = [
    ("year", 31536000),
    ("month", 2592000),
    ("week", 604800),
    ("day", 86400),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def _repo_name(event: dict) -> str:
    return (event.get("repo") or {}).get("name", "")


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def _push(repo: str, payload: dict) -> dict:
    commits = payload.get("size") or len(payload.get("commits") or []) or 1
    return {"text": f"Pushed {_plural(commits, 'commit')} to {repo}", "url": f"{GITHUB}/{repo}/commits"}


def _create(repo: str, payload: dict) -> dict:
    ref_type = payload.get("ref_type") or "repository"
    ref = payload.get("ref")
    if ref_type == "repository":
        text = f"Created repository {repo}"
    elif ref:
        text = f"Created {ref_type} {ref} in {repo}"
    else:
        text = f"Created {ref_type} in {repo}"
    return {"text": text, "url": f"{GITHUB}/{repo}"}


def _issue(repo: str, payload: dict) -> dict:
    issue = payload.get("issue") or {}
    action = (payload.get("action") or "updated").capitalize()
    return {
        "text": f"{action} issue #{issue.get('number', '?')} in {repo}",
        "url": issue.get("html_url") or f"{GITHUB}/{repo}/issues",
    }


def _pull_request(repo: str, payload: dict) -> dict:
    pr = payload.get("pull_request") or {}
    action = (payload.get("action") or "updated").capitalize()
    number = payload.get("number") or pr.get("number", "?")
    return {
        "text": f"{action} pull request #{number} in {repo}",
        "url": pr.get("html_url") or f"{GITHUB}/{repo}/pulls",
    }


FORMATTERS: dict[str, Callable[[str, dict], dict]] = {
    "PushEvent": _push,
    "CreateEvent": _create,
    "IssuesEvent": _issue,
    "PullRequestEvent": _pull_request,
}


def format_event(event: dict) -> dict:
    """Human-readable {"text", "url"} for one event."""
    repo = _repo_name(event)
    event_type = event.get("type", "Event")
    formatter = FORMATTERS.get(event_type)
    if formatter is None:
        return {"text": f"{event_type} in {repo}", "url": f"{GITHUB}/{repo}"}
    return formatter(repo, event.get("payload") or {})


def _parse_ts(ts: Any) -> datetime:
    if isinstance(ts, datetime):
        return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)
    parsed = datetime.fromisoformat(str(ts).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def time_ago(timestamp: Any, now: datetime | None = None) -> str:
    """'3 days ago' style relative time, largest whole unit first."""
    now = now or datetime.now(timezone.utc)
    seconds = int((now - _parse_ts(timestamp)).total_seconds())
    if seconds < 1:
        return "just now"
    for unit, size in TIME_UNITS:
        count = seconds // size
        if count >= 1:
            return f"{_plural(count, unit)} ago"
    return "just now"


def _relative(timestamp: Any, now: datetime) -> str:
    if not timestamp:
        return ""
    try:
        return time_ago(timestamp, now)
    except ValueError:
        log.warning(f"Unparseable event timestamp: {timestamp!r}")
        return ""


def shape_events(events: list[dict], now: datetime | None = None) -> list[dict]:
    now = now or datetime.now(timezone.utc)
    shaped = []
    for e in events:
        fmt = format_event(e)
        shaped.append({
            "type": e.get("type", ""),
            "repo": _repo_name(e),
            "text": fmt["text"],
            "url": fmt["url"],
            "timestamp": e.get("created_at", ""),
            "time_ago": _relative(e.get("created_at"), now),
            "payload": e.get("payload") or {},
        })
    return shaped


def group_events(shaped: list[dict]) -> list[dict]:
    """Collapse runs of pushes to the same repo into a single entry.

    Input is newest first, so the first event of a run keeps its timestamp.
    """
    grouped: list[dict] = []
    for e in shaped:
        commits = 0
        if e["type"] == "PushEvent":
            payload = e.get("payload") or {}
            commits = payload.get("size") or len(payload.get("commits") or []) or 1
        prev = grouped[-1] if grouped else None
        if commits and prev and prev["type"] == "PushEvent" and prev["repo"] == e["repo"]:
            prev["commits"] += commits
            prev["text"] = f"Pushed {_plural(prev['commits'], 'commit')} to {prev['repo']}"
            continue
        grouped.append({
            "repo": e["repo"],
            "commits": commits,
            "url": e["url"],
            "timestamp": e["timestamp"],
            "time_ago": e["time_ago"],
            "text": e["text"],
            "type": e["type"],
        })
    return grouped
