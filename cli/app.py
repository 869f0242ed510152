from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_hourly_average


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for querying the traffic stats service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("hourly-average")
def hourly_average_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="Measuring station identifier."),
    sensors: bool = typer.Option(
        True,
        "--sensors/--no-sensors",
        help="Also print the per-sensor hourly series.",
    ),
) -> None:
    """Show hourly traffic-count and speed averages for the last month."""
    state = _get_state(ctx)
    payload = state.client.get_hourly_average(station_id)
    render_hourly_average(payload, show_sensors=sensors)
