from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import echo_key_values, render_reading
from services.aqi import aqi_category, calculate_aqi


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for reading air quality through the PurpleAir proxy service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Proxy base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP response.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, request_timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("reading")
def reading_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., min=1, help="Numeric PurpleAir sensor index."),
) -> None:
    """Fetch a sensor and show its air quality index."""
    state = _get_state(ctx)
    render_reading(state.client.get_reading(sensor_id))


@app.command("watch")
def watch_command(
    ctx: typer.Context,
    sensor_id: int = typer.Argument(..., min=1, help="Numeric PurpleAir sensor index."),
    interval: Optional[float] = typer.Option(
        None,
        "--interval",
        help="Seconds between refreshes (defaults to CLI_POLL_INTERVAL env or 60).",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        min=1,
        help="Stop after this many readings instead of running until interrupted.",
    ),
) -> None:
    """Re-fetch a sensor reading on a fixed interval."""
    state = _get_state(ctx)
    poll_interval = interval if interval is not None else state.config.poll_interval
    shown = 0
    while True:
        render_reading(state.client.get_reading(sensor_id))
        shown += 1
        if count is not None and shown >= count:
            return
        typer.echo()
        time.sleep(poll_interval)


@app.command("aqi")
def aqi_command(
    concentration: float = typer.Argument(..., help="PM2.5 concentration in µg/m³."),
) -> None:
    """Convert a PM2.5 concentration locally without contacting the service."""
    if not math.isfinite(concentration):
        raise typer.BadParameter("must be a finite number.", param_hint="CONCENTRATION")
    index = calculate_aqi(concentration)
    category = aqi_category(index)
    echo_key_values(
        [
            ("aqi", index),
            ("category", category.label),
            ("color", category.color),
        ]
    )
