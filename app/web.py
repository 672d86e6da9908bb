from __future__ import annotations

from pathlib import Path as FilePath
from typing import Optional

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.api import client_identity, get_proxy
from models.records import SensorReading
from services.proxy import SensorProxyService
from services.rate_limiter import RateLimitExceeded
from services.upstream import UpstreamError


templates = Jinja2Templates(directory=str(FilePath(__file__).resolve().parent / "templates"))

# Seconds between page refreshes; independent of the server-side cache TTL.
REFRESH_SECONDS = 60


router = APIRouter(include_in_schema=False)


@router.get("/ui/sensors/{sensor_id}", name="ui_sensor", response_class=HTMLResponse)
async def ui_sensor(
    request: Request,
    sensor_id: int = Path(..., gt=0),
    client_id: str = Depends(client_identity),
    proxy: SensorProxyService = Depends(get_proxy),
) -> HTMLResponse:
    reading: Optional[SensorReading] = None
    error: Optional[str] = None
    try:
        reading = await proxy.fetch_reading(client_id, sensor_id)
    except (RateLimitExceeded, UpstreamError) as exc:
        error = str(exc)

    return templates.TemplateResponse(
        request,
        "ui/sensor.html",
        {
            "sensor_id": sensor_id,
            "reading": reading,
            "error": error,
            "refresh_seconds": REFRESH_SECONDS,
        },
    )
