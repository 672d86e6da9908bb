"""HTTP client for the PurpleAir sensor API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.purpleair.com"


class UpstreamError(Exception):
    """Raised when sensor data could not be fetched from the provider."""

    def __init__(self, sensor_id: str, reason: str) -> None:
        super().__init__("Failed to fetch sensor data")
        self.sensor_id = sensor_id
        self.reason = reason


class PurpleAirClient:

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        # No timeout: a stalled provider stalls the request that is waiting on it.
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"X-API-Key": api_key},
            timeout=None,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_sensor(self, sensor_id: str) -> Dict[str, Any]:
        try:
            response = await self._client.get(f"/v1/sensors/{sensor_id}")
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.warning(
                "Sensor provider returned an error status",
                extra={"sensor_id": sensor_id, "status_code": status_code},
            )
            raise UpstreamError(sensor_id, f"status {status_code}") from exc
        except httpx.HTTPError as exc:
            logger.exception("Sensor provider request failed", extra={"sensor_id": sensor_id})
            raise UpstreamError(sensor_id, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            logger.warning(
                "Sensor provider returned invalid JSON",
                extra={"sensor_id": sensor_id, "reason": str(exc)},
            )
            raise UpstreamError(sensor_id, "invalid JSON body") from exc

        if not isinstance(payload, dict):
            raise UpstreamError(sensor_id, "unexpected payload type")
        return payload
