"""Timed cache entries and the JSON-file key-value store.

The store plays the part of browser local storage: a flat mapping of fixed
keys to `{"value": ..., "timestamp": ...}` entries, written to one JSON file.
Storage is best effort; unreadable files read as empty and failed writes are
logged and dropped.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

EVENTS_KEY = "github_events"
PROJECTS_KEY = "github_projects"


@dataclass
class CacheEntry:
    value: Any
    timestamp: float

    def is_fresh(self, ttl: float, now: float) -> bool:
        return now - self.timestamp < ttl


class LocalStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            log.warning(f"Local store unreadable, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data))
        except OSError as e:
            log.warning(f"Local store write failed ({self.path.name}): {e}")

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def cached_value(store: LocalStore, key: str, ttl: float, now: float) -> Any:
    """Value stored under `key` if still fresh, else None."""
    raw = store.get(key)
    if not isinstance(raw, dict) or "timestamp" not in raw:
        return None
    entry = CacheEntry(raw.get("value"), raw["timestamp"])
    if not entry.is_fresh(ttl, now):
        return None
    return entry.value


def store_value(store: LocalStore, key: str, value: Any, now: float) -> None:
    store.set(key, {"value": value, "timestamp": now})
