"""In-memory TTL cache owned by a single build run."""
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

# Seconds each resource stays fresh
RESOURCE_TTLS: Dict[str, float] = {
    "classes": 60,
    "schedule": 60,
    "instructors": 600,
    "group_classes": 600,
    "services": 600,
}

DEFAULT_TTL = 300.0


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


def cache_key(resource: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Deterministic key for a resource and its query parameters."""
    items = sorted((str(k), str(v)) for k, v in (params or {}).items())
    return f"{resource}|{json.dumps(items, separators=(',', ':'))}"


class TTLCache:
    """Expiring memoization map with injectable clock and TTL policy.

    Expired entries are evicted lazily when looked up; nothing runs in the
    background.
    """

    def __init__(
        self,
        ttls: Optional[Mapping[str, float]] = None,
        default_ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttls = dict(RESOURCE_TTLS if ttls is None else ttls)
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def ttl_for(self, resource: str) -> float:
        return self.ttls.get(resource, self.default_ttl)

    def get(self, resource: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Return the cached value, or None when missing or expired."""
        key = cache_key(resource, params)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    def set(
        self, resource: str, params: Optional[Mapping[str, Any]], value: Any
    ) -> None:
        self._entries[cache_key(resource, params)] = CacheEntry(
            value=value, expires_at=self._clock() + self.ttl_for(resource)
        )

    def clear(self) -> None:
        self._entries.clear()
