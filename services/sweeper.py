"""Scheduled cleanup of expired rate-limit and cache entries."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Mapping, Optional, Protocol

logger = logging.getLogger(__name__)


class Sweepable(Protocol):
    def sweep(self, now: Optional[float] = None) -> int: ...


class PeriodicSweeper:
    """Runs ``sweep()`` on every target each ``interval_seconds``.

    Tests call :meth:`run_once` directly; the application starts the loop
    from its lifespan with :meth:`start` and stops it with :meth:`stop`.
    """

    def __init__(self, targets: Mapping[str, Sweepable], interval_seconds: float = 300.0) -> None:
        self.targets = dict(targets)
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def run_once(self, now: Optional[float] = None) -> Dict[str, int]:
        removed = {name: target.sweep(now) for name, target in self.targets.items()}
        for name, count in removed.items():
            if count:
                logger.debug("Swept expired entries from %s", name, extra={"removed": count})
        return removed

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                self.run_once()
            except Exception:
                logger.exception("Scheduled sweep failed")
