"""Fixed-window request limiting keyed by client identity."""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional

from models.records import RateLimitEntry

logger = logging.getLogger(__name__)


class RateLimitExceeded(Exception):
    """Raised when a client has used up its requests for the current window."""

    def __init__(self, client_id: str) -> None:
        super().__init__("Rate limit exceeded. Please try again later.")
        self.client_id = client_id


class RateLimiter:
    """Allows ``max_requests`` per client in each ``window_seconds`` window.

    A window opens on the first request after the previous one elapsed; a
    brand new client and an expired client are re-armed the same way.
    """

    def __init__(
        self,
        window_seconds: float = 300.0,
        max_requests: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, client_id: str) -> Optional[RateLimitEntry]:
        return self._entries.get(client_id)

    def allow(self, client_id: str) -> bool:
        now = self._clock()
        entry = self._entries.get(client_id)

        if entry is None or now - entry.window_start > self.window_seconds:
            self._entries[client_id] = RateLimitEntry(count=1, window_start=now)
            return True

        if entry.count < self.max_requests:
            entry.count += 1
            return True

        logger.info("Rejected request over rate limit", extra={"client_id": client_id})
        return False

    def check(self, client_id: str) -> None:
        """Like :meth:`allow` but raises :class:`RateLimitExceeded` on denial."""
        if not self.allow(client_id):
            raise RateLimitExceeded(client_id)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop clients whose window has elapsed. Returns the number removed."""
        current = self._clock() if now is None else now
        expired = [
            client_id
            for client_id, entry in self._entries.items()
            if current - entry.window_start > self.window_seconds
        ]
        for client_id in expired:
            del self._entries[client_id]
        return len(expired)
