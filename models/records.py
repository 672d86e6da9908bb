"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(slots=True)
class RateLimitEntry:
    """Request count for one client within the current window."""

    count: int
    window_start: float


@dataclass(slots=True)
class CacheEntry:
    """Last upstream payload fetched for a sensor."""

    payload: Dict[str, Any]
    fetched_at: float


@dataclass(slots=True)
class SensorReading:
    """A converted reading ready for display."""

    sensor_id: int
    pm25: float
    aqi: int
    category: str
    color: str
    temperature: float
    humidity: float
