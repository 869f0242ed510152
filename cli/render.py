from __future__ import annotations

from typing import Any, Dict, Iterable

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_hourly_average(payload: Dict[str, Any], show_sensors: bool = True) -> None:
    echo_heading("Hourly Averages")
    period = payload.get("period") or {}
    echo_key_values(
        [
            ("station_id", payload.get("stationId")),
            ("period", f"{period.get('start')} .. {period.get('end')}"),
        ]
    )

    typer.echo()
    typer.echo(f"{'hour':>4}  {'traffic':>8}  {'speed':>6}")
    for entry in payload.get("hourlyAverages") or []:
        typer.echo(
            f"{entry.get('hour'):>4}  {entry.get('trafficCount'):>8}  {entry.get('avgSpeed'):>6}"
        )

    if not show_sensors:
        return

    sensors = payload.get("sensorData") or []
    typer.echo()
    echo_heading("Sensors")
    if not sensors:
        typer.echo("No sensor series available.")
        return
    for sensor in sensors:
        values = " ".join(str(point.get("value")) for point in sensor.get("hourlyData") or [])
        typer.echo(f"  - {sensor.get('name')} [{sensor.get('unit')}]: {values}")
