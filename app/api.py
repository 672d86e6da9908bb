"""HTTP route definitions for the service."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from fastapi import APIRouter, Depends, Path, Request, status

from app.schemas import ErrorResponse, SensorReadingResponse
from services.proxy import SensorProxyService, build_default_proxy

router = APIRouter()

_ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse, "description": "Rate limit exceeded."},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Upstream fetch failed."},
}


def get_proxy() -> SensorProxyService:
    return build_default_proxy()


def client_identity(request: Request) -> str:
    """Identify the caller by forwarded address, falling back to ``unknown``."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.headers.get("x-real-ip") or "unknown"


@router.get(
    "/api/purple-air/{sensor_id}",
    responses=_ERROR_RESPONSES,
    summary="Fetch the provider's document for a sensor.",
)
async def get_sensor(
    sensor_id: int = Path(..., gt=0, description="Numeric PurpleAir sensor index."),
    client_id: str = Depends(client_identity),
    proxy: SensorProxyService = Depends(get_proxy),
) -> Dict[str, Any]:
    return await proxy.fetch_sensor(client_id, sensor_id)


@router.get(
    "/api/purple-air/{sensor_id}/reading",
    response_model=SensorReadingResponse,
    responses=_ERROR_RESPONSES,
    summary="Fetch a sensor reading with its air quality index.",
)
async def get_sensor_reading(
    sensor_id: int = Path(..., gt=0, description="Numeric PurpleAir sensor index."),
    client_id: str = Depends(client_identity),
    proxy: SensorProxyService = Depends(get_proxy),
) -> SensorReadingResponse:
    reading = await proxy.fetch_reading(client_id, sensor_id)
    return SensorReadingResponse(**asdict(reading))


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
