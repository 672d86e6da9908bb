from __future__ import annotations

import copy
import time
from typing import Any, Callable, Dict, Optional

from models.records import CacheEntry


class SensorCache:
    """Process-lifetime cache of upstream sensor documents keyed by sensor id."""

    def __init__(
        self,
        ttl_seconds: float = 1800.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._items.get(key)
        if entry is None:
            return None
        if self._clock() - entry.fetched_at < self.ttl_seconds:
            return copy.deepcopy(entry.payload)
        del self._items[key]
        return None

    def put(self, key: str, payload: Dict[str, Any]) -> None:
        self._items[key] = CacheEntry(payload=copy.deepcopy(payload), fetched_at=self._clock())

    def sweep(self, now: Optional[float] = None) -> int:
        """Remove entries older than the TTL. Returns the number removed."""
        current = self._clock() if now is None else now
        expired = [
            key
            for key, entry in self._items.items()
            if current - entry.fetched_at > self.ttl_seconds
        ]
        for key in expired:
            del self._items[key]
        return len(expired)

