"""Typer CLI entrypoint."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer

from lightsense.core.errors import LightsenseError
from lightsense.core.model import LightAction
from lightsense.core.sequencer import frames_for
from lightsense.core.service import BridgeService

app = typer.Typer(help="BLE light control and advertising sensor capture")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="Path to a bridge.yaml override"),
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING or ERROR"),
) -> None:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"Unknown log level '{log_level}'", param_hint="--log-level")
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    ctx.obj = {"config": config}


def _build_service(ctx: typer.Context) -> BridgeService:
    service = BridgeService(config_path=ctx.obj["config"])
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("light")
def light(
    ctx: typer.Context,
    action: LightAction = typer.Argument(..., help="on or off"),
) -> None:
    """Switch the light on or off."""
    try:
        service = _build_service(ctx)
        asyncio.run(service.perform_light_action(action))
        typer.echo(f"Light {action.value}: OK")
    except LightsenseError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("sensor")
def sensor(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the reading as JSON"),
) -> None:
    """Capture one sensor reading from advertisements."""
    try:
        service = _build_service(ctx)
        reading = asyncio.run(service.capture_sensor_reading())
    except LightsenseError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if reading is None:
        typer.echo("No reading captured", err=True)
        raise typer.Exit(code=1)
    if as_json:
        typer.echo(json.dumps(reading.as_dict()))
        return
    typer.echo(
        f"Temperature: {reading.temperature:.1f}°C Humidity: {reading.humidity}% "
        f"Battery: {reading.battery}%"
    )


@app.command("monitor")
def monitor(
    ctx: typer.Context,
    cycles: int | None = typer.Option(None, "--cycles", min=1, help="Stop after N captures"),
) -> None:
    """Capture readings periodically until interrupted."""
    try:
        service = _build_service(ctx)
        asyncio.run(service.run_sensor_monitor(cycles))
    except LightsenseError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    latest = service.latest_reading()
    if latest is not None:
        typer.echo(json.dumps(latest.as_dict()))


@app.command("devices")
def list_devices(
    ctx: typer.Context,
    scan_window: float | None = typer.Option(None, "--scan-window", help="Seconds to scan"),
) -> None:
    """List discoverable BLE peripherals and whether they match the light keywords."""
    try:
        service = _build_service(ctx)
        devices = asyncio.run(service.list_devices(scan_window))
    except LightsenseError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if not devices:
        typer.echo("No BLE devices found")
        return
    for device in devices:
        marker = "light" if device.light_match else "-"
        typer.echo(f"{device.address} {device.name or '<unnamed>'} -> {marker}")


@app.command("frames")
def frames(action: LightAction = typer.Argument(..., help="on or off")) -> None:
    """Print the command frames for a sequence without touching the radio."""
    for index, packet in enumerate(frames_for(action)):
        typer.echo(f"{index}: {packet.hex()}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
