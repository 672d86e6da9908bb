"""PM2.5 to air quality index conversion."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

from app.schemas import SensorPayload
from models.records import SensorReading


@dataclass(frozen=True)
class AqiCategory:
    label: str
    color: str


# (concentration low, concentration high, index low, index high) in µg/m³.
PM25_BREAKPOINTS = (
    (0.0, 12.0, 0, 50),
    (12.1, 35.4, 51, 100),
    (35.5, 55.4, 101, 150),
    (55.5, 150.4, 151, 200),
)

AQI_CATEGORIES = (
    (50, AqiCategory("Good", "green")),
    (100, AqiCategory("Moderate", "yellow")),
    (150, AqiCategory("Unhealthy for Sensitive Groups", "orange")),
    (200, AqiCategory("Unhealthy", "red")),
)
VERY_UNHEALTHY = AqiCategory("Very Unhealthy", "purple")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_aqi(concentration: float) -> int:
    """Convert a PM2.5 concentration to an index by linear interpolation.

    Bands are selected by ascending ``concentration <= upper`` checks, so a
    value in a gap between bands (e.g. 12.05) falls into the next band. Values
    above the last breakpoint are extrapolated along the final band's slope.
    Raises ``ValueError`` for NaN or infinite input.
    """
    if not math.isfinite(concentration):
        raise ValueError(f"Concentration must be a finite number, got {concentration!r}.")
    for c_low, c_high, i_low, i_high in PM25_BREAKPOINTS:
        if concentration <= c_high:
            break
    slope = (i_high - i_low) / (c_high - c_low)
    return _round_half_up(slope * (concentration - c_low) + i_low)


def aqi_category(index: int) -> AqiCategory:
    for upper, category in AQI_CATEGORIES:
        if index <= upper:
            return category
    return VERY_UNHEALTHY


def build_reading(sensor_id: int, payload: Mapping[str, Any]) -> SensorReading:
    """Validate an upstream sensor document and derive its reading.

    Raises ``pydantic.ValidationError`` when the document lacks the sensor
    stats, temperature or humidity.
    """
    sensor = SensorPayload.model_validate(payload).sensor
    pm25 = sensor.stats.pm25_10minute
    index = calculate_aqi(pm25)
    category = aqi_category(index)
    return SensorReading(
        sensor_id=sensor_id,
        pm25=pm25,
        aqi=index,
        category=category.label,
        color=category.color,
        temperature=sensor.temperature,
        humidity=sensor.humidity,
    )
