from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_API_KEY_ENV = "PURPLE_AIR_API_KEY"
_BASE_URL_ENV = "PURPLE_AIR_BASE_URL"
_WINDOW_ENV = "RATE_LIMIT_WINDOW_SECONDS"
_MAX_REQUESTS_ENV = "RATE_LIMIT_MAX_REQUESTS"
_CACHE_TTL_ENV = "CACHE_TTL_SECONDS"
_SWEEP_INTERVAL_ENV = "SWEEP_INTERVAL_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_key: str
    upstream_base_url: str
    rate_limit_window: float
    rate_limit_max_requests: int
    cache_ttl: float
    sweep_interval: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_key=(os.getenv(_API_KEY_ENV) or "").strip(),
        upstream_base_url=_read_str_env(_BASE_URL_ENV, "https://api.purpleair.com").rstrip("/"),
        rate_limit_window=_read_positive_float(_WINDOW_ENV, 300.0),
        rate_limit_max_requests=_read_positive_int(_MAX_REQUESTS_ENV, 10),
        cache_ttl=_read_positive_float(_CACHE_TTL_ENV, 1800.0),
        sweep_interval=_read_positive_float(_SWEEP_INTERVAL_ENV, 300.0),
        log_level=_read_log_level("INFO"),
    )
