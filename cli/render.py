from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import typer

SEVERITY_ORDER = ("EXTREME", "HIGH", "MEDIUM", "LOW")
SEVERITY_COLORS = {
    "EXTREME": typer.colors.RED,
    "HIGH": typer.colors.BRIGHT_YELLOW,
    "MEDIUM": typer.colors.YELLOW,
    "LOW": typer.colors.GREEN,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def format_percent(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"{value * 100:.1f}%"


def render_assessment(payload: Dict[str, Any]) -> None:
    score = payload.get("score") or {}
    alert = payload.get("alert") or {}
    severity = alert.get("severity")
    echo_heading(f"{payload.get('name')} ({payload.get('station_id')})")
    typer.secho(
        f"FRI: {format_percent(score.get('composite'))} -> {severity} / {alert.get('action')}",
        fg=SEVERITY_COLORS.get(severity),
    )
    echo_key_values(
        (name, score.get(name))
        for name in ("temperature", "humidity", "soil", "wind", "smoke", "co")
    )


def render_summary(summary: Optional[Dict[str, Any]]) -> None:
    echo_heading("Summary")
    if not summary:
        typer.echo("No summary available.")
        return
    echo_key_values(
        [
            ("station_count", summary.get("station_count")),
            ("min_fri", format_percent(summary.get("min_fri"))),
            ("max_fri", format_percent(summary.get("max_fri"))),
            ("mean_fri", format_percent(summary.get("mean_fri"))),
        ]
    )
    counts = summary.get("per_severity_count") or {}
    typer.echo("per_severity_count:")
    for severity in SEVERITY_ORDER:
        typer.echo(f"  - {severity}: {counts.get(severity, 0)}")


def render_station_rows(assessments: Iterable[Dict[str, Any]]) -> None:
    for item in assessments:
        alert = item.get("alert") or {}
        severity = alert.get("severity")
        composite = (item.get("score") or {}).get("composite")
        typer.secho(
            f"  - {item.get('station_id')} {item.get('name')}: "
            f"{format_percent(composite)} {severity} ({alert.get('action')})",
            fg=SEVERITY_COLORS.get(severity),
        )


def render_stations(payload: Dict[str, Any]) -> None:
    echo_heading("Stations")
    render_station_rows(payload.get("assessments") or [])
    typer.echo()
    render_summary(payload.get("summary"))


def render_result(payload: Dict[str, Any]) -> None:
    echo_heading("Batch Result")
    echo_key_values(
        [
            ("batch_id", payload.get("batch_id")),
            ("status", payload.get("status")),
            ("uploaded_at", payload.get("uploaded_at")),
            ("processed_at", payload.get("processed_at")),
            ("processing_ms", payload.get("processing_ms")),
        ]
    )

    assessments = payload.get("assessments") or []
    if assessments:
        typer.echo()
        echo_heading("Stations")
        render_station_rows(assessments)

    typer.echo()
    render_summary(payload.get("summary"))

    errors = payload.get("errors") or []
    typer.echo()
    echo_heading("Errors")
    if errors:
        for error in errors:
            typer.echo(
                f"  - row {error.get('row_number')}: {error.get('reason')}"
            )
    else:
        typer.echo("No errors recorded.")
