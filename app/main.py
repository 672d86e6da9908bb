from __future__ import annotations
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import router
from app.web import router as web_router
from logging_config import configure_logging
from services.proxy import build_default_proxy
from services.rate_limiter import RateLimitExceeded
from services.upstream import UpstreamError


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    proxy = build_default_proxy()
    proxy.start()
    try:
        yield
    finally:
        await proxy.shutdown()
        build_default_proxy.cache_clear()


async def _rate_limited(_request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_429_TOO_MANY_REQUESTS, content={"error": str(exc)})


async def _upstream_failed(_request: Request, exc: UpstreamError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="PurpleAir Proxy",
        description="Rate limited, cached proxy for PurpleAir sensors with AQI conversion.",
        version="0.1.0",
        lifespan=lifespan,
    )
    static_dir = Path(__file__).resolve().parent.parent / "static"
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.add_exception_handler(RateLimitExceeded, _rate_limited)
    app.add_exception_handler(UpstreamError, _upstream_failed)
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
