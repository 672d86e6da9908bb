"""Rate limited, cached access to upstream sensor data."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import ValidationError

from datastore.sensor_cache import SensorCache
from models.records import SensorReading
from services.aqi import build_reading
from services.rate_limiter import RateLimiter
from services.sweeper import PeriodicSweeper
from services.upstream import PurpleAirClient, UpstreamError
from settings import get_settings

logger = logging.getLogger(__name__)


class SensorProxyService:
    """Owns the rate-limit table, the sensor cache and the upstream client."""

    def __init__(
        self,
        rate_limiter: RateLimiter,
        cache: SensorCache,
        upstream: PurpleAirClient,
        sweep_interval: float = 300.0,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.cache = cache
        self.upstream = upstream
        self.sweeper = PeriodicSweeper(
            {"rate_limits": rate_limiter, "cache": cache},
            interval_seconds=sweep_interval,
        )

    async def fetch_sensor(self, client_id: str, sensor_id: int) -> Dict[str, Any]:
        """Return the provider's document for ``sensor_id``.

        Raises ``RateLimitExceeded`` before touching the cache when the caller
        is over its limit, and ``UpstreamError`` when a cache miss cannot be
        filled.
        """
        self.rate_limiter.check(client_id)

        key = str(sensor_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Serving sensor from cache", extra={"sensor_id": key, "cache": "hit"})
            return cached

        logger.info("Fetching sensor from provider", extra={"sensor_id": key, "cache": "miss"})
        payload = await self.upstream.fetch_sensor(key)
        self.sweep()
        self.cache.put(key, payload)
        return payload

    async def fetch_reading(self, client_id: str, sensor_id: int) -> SensorReading:
        payload = await self.fetch_sensor(client_id, sensor_id)
        try:
            return build_reading(sensor_id, payload)
        except ValidationError as exc:
            logger.warning(
                "Sensor document is missing reading fields",
                extra={"sensor_id": sensor_id, "reason": f"{exc.error_count()} validation errors"},
            )
            raise UpstreamError(str(sensor_id), "incomplete sensor document") from exc

    def sweep(self, now: Optional[float] = None) -> Dict[str, int]:
        return self.sweeper.run_once(now)

    def start(self) -> None:
        self.sweeper.start()

    async def shutdown(self) -> None:
        """Stop the sweep task and release the upstream connection pool."""
        await self.sweeper.stop()
        await self.upstream.aclose()


@lru_cache
def build_default_proxy() -> SensorProxyService:
    """Factory that wires the proxy from environment settings."""
    settings = get_settings()
    rate_limiter = RateLimiter(
        window_seconds=settings.rate_limit_window,
        max_requests=settings.rate_limit_max_requests,
    )
    upstream = PurpleAirClient(api_key=settings.api_key, base_url=settings.upstream_base_url)
    return SensorProxyService(
        rate_limiter=rate_limiter,
        cache=SensorCache(ttl_seconds=settings.cache_ttl),
        upstream=upstream,
        sweep_interval=settings.sweep_interval,
    )
