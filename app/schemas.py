"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SensorStats(BaseModel):
    """Rolling averages reported by the sensor."""

    model_config = ConfigDict(populate_by_name=True, extra="allow", allow_inf_nan=False)

    pm25_10minute: float = Field(..., alias="pm2.5_10minute")


class SensorDetail(BaseModel):
    model_config = ConfigDict(extra="allow", allow_inf_nan=False)

    stats: SensorStats
    temperature: float
    humidity: float


class SensorPayload(BaseModel):
    """Subset of the upstream sensor document needed to compute a reading."""

    model_config = ConfigDict(extra="allow")

    sensor: SensorDetail


class SensorReadingResponse(BaseModel):
    """Reading with the air quality index already applied."""

    sensor_id: int
    pm25: float = Field(..., description="10 minute PM2.5 average in µg/m³.")
    aqi: int
    category: str
    color: str
    temperature: float = Field(..., description="Degrees Fahrenheit.")
    humidity: float = Field(..., description="Relative humidity percentage.")


class ErrorResponse(BaseModel):
    error: str
