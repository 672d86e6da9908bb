from __future__ import annotations

from typing import Any, Dict, Iterable

import typer

_CATEGORY_COLORS = {
    "green": typer.colors.GREEN,
    "yellow": typer.colors.YELLOW,
    "orange": typer.colors.BRIGHT_RED,
    "red": typer.colors.RED,
    "purple": typer.colors.MAGENTA,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _one_decimal(value: Any) -> str:
    if isinstance(value, (int, float)):
        return f"{value:.1f}"
    return "n/a"


def render_reading(payload: Dict[str, Any]) -> None:
    echo_heading(f"Air Quality Monitor (sensor {payload.get('sensor_id')})")
    color = _CATEGORY_COLORS.get(payload.get("color", ""))
    typer.secho(f"AQI {payload.get('aqi')}: {payload.get('category')}", fg=color, bold=True)
    echo_key_values(
        [
            ("PM2.5", f"{_one_decimal(payload.get('pm25'))} µg/m³"),
            ("Temperature", f"{_one_decimal(payload.get('temperature'))}°F"),
            ("Humidity", f"{_one_decimal(payload.get('humidity'))}%"),
        ]
    )
