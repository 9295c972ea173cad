from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_assessment, render_result, render_stations


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the fire risk monitoring service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to FRI_API_BASE_URL env or http://localhost:8000).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between status checks when waiting for completion.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Maximum seconds to wait when polling for results.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        base_url=base_url,
        poll_interval=poll_interval,
        poll_timeout=timeout,
    )
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("score")
def score_command(
    ctx: typer.Context,
    station_id: str = typer.Argument(..., help="Station identifier."),
    longitude: float = typer.Option(..., "--lon", help="Station longitude in decimal degrees."),
    latitude: float = typer.Option(..., "--lat", help="Station latitude in decimal degrees."),
    name: Optional[str] = typer.Option(None, "--name", help="Display name."),
    temperature: Optional[float] = typer.Option(None, "--temperature", "-t", help="Temperature in °C."),
    humidity: Optional[float] = typer.Option(None, "--humidity", help="Relative humidity in %."),
    soil_moisture: Optional[float] = typer.Option(None, "--soil-moisture", help="Soil moisture in %."),
    wind_speed: Optional[float] = typer.Option(None, "--wind-speed", help="Wind speed in km/h."),
    wind_direction: Optional[float] = typer.Option(None, "--wind-direction", help="Wind bearing in degrees."),
    smoke: Optional[float] = typer.Option(None, "--smoke", help="Smoke index in [0, 1]."),
    co: Optional[float] = typer.Option(None, "--co", help="CO concentration in ppm."),
) -> None:
    """Score one reading and print its alert classification."""
    state = _get_state(ctx)
    reading: Dict[str, Any] = {
        "station_id": station_id,
        "name": name,
        "longitude": longitude,
        "latitude": latitude,
        "temperature": temperature,
        "humidity": humidity,
        "soil_moisture": soil_moisture,
        "wind_speed": wind_speed,
        "wind_direction": wind_direction,
        "smoke": smoke,
        "co": co,
    }
    payload = state.client.score_reading({key: value for key, value in reading.items() if value is not None})
    render_assessment(payload)


@app.command("stations")
def stations_command(ctx: typer.Context) -> None:
    """Show the alert level of every configured monitoring station."""
    state = _get_state(ctx)
    render_stations(state.client.get_stations())


@app.command("upload")
def upload_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Path to CSV file."),
    wait: bool = typer.Option(
        False,
        "--wait/--no-wait",
        help="Wait for the assessment to finish and display the result.",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Override poll interval while waiting.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Override timeout while waiting.",
    ),
) -> None:
    """Upload a CSV batch of readings for asynchronous assessment."""
    state = _get_state(ctx)
    typer.echo(f"Uploading {file} to {state.config.base_url} ...")
    batch_id = state.client.upload_batch(file)
    typer.secho(f"Upload accepted. batch_id={batch_id}", fg=typer.colors.GREEN)

    if not wait:
        return

    interval = poll_interval if poll_interval is not None else state.config.poll_interval
    poll_timeout = timeout if timeout is not None else state.config.poll_timeout
    typer.echo(f"Waiting for assessment (interval={interval}s, timeout={poll_timeout}s)...")
    result = state.client.poll_result(batch_id, interval=interval, timeout=poll_timeout)
    typer.echo()
    render_result(result)


@app.command("result")
def result_command(
    ctx: typer.Context,
    batch_id: str = typer.Argument(..., help="Identifier returned from the upload command."),
) -> None:
    """Fetch processing status and assessments for a batch."""
    state = _get_state(ctx)
    render_result(state.client.get_result(batch_id))
