from __future__ import annotations

from typing import Any, Dict, Iterable, List

import typer

_STATUS_COLORS = {
    "Optimal": typer.colors.GREEN,
    "Warning": typer.colors.YELLOW,
    "Critical": typer.colors.RED,
}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_sensors(payload: Dict[str, Any]) -> None:
    echo_heading("Sensors")
    typer.echo(f"captured_at: {payload.get('captured_at')}")
    for channel in payload.get("channels") or []:
        marker = "ok" if channel.get("optimal") else "out of range"
        typer.echo(
            f"  - {channel.get('name')}: {channel.get('value'):.1f} {channel.get('unit')} "
            f"(optimal {channel.get('optimal_min')}-{channel.get('optimal_max')}, {marker})"
        )


def render_entries(entries: List[Dict[str, Any]]) -> None:
    echo_heading("Waste Log")
    if not entries:
        typer.echo("No entries recorded.")
        return
    for entry in entries:
        line = f"  - {entry.get('logged_at')} {entry.get('category')}: {entry.get('weight_kg')} kg"
        if entry.get("notes"):
            line += f" ({entry['notes']})"
        typer.echo(line)


def render_summary(payload: Dict[str, Any]) -> None:
    echo_heading("Waste Summary")
    echo_key_values(
        [
            ("entry_count", payload.get("entry_count")),
            ("total_weight_kg", payload.get("total_weight_kg")),
        ]
    )
    per_category = payload.get("per_category_weight") or {}
    if per_category:
        typer.echo("per_category_weight:")
        for category, weight in per_category.items():
            typer.echo(f"  - {category}: {weight}")


def render_analysis(payload: Dict[str, Any]) -> None:
    echo_heading("Advisory Analysis")
    echo_key_values(
        [
            ("generation", payload.get("generation")),
            ("in_progress", payload.get("in_progress")),
            ("updated_at", payload.get("updated_at")),
        ]
    )
    result = payload.get("result")
    typer.echo()
    if not result:
        typer.echo("No analysis available yet.")
        return

    status = result.get("status")
    typer.secho(f"status: {status}", fg=_STATUS_COLORS.get(status))
    if payload.get("used_fallback"):
        typer.secho("(advisory service unavailable, showing fallback)", fg=typer.colors.YELLOW)
    echo_key_values(
        [
            ("summary", result.get("summary")),
            ("climate_note", result.get("climateNote")),
            ("estimated_completion", result.get("estimatedCompletion")),
        ]
    )
    typer.echo()
    echo_heading("Action Items")
    for index, item in enumerate(result.get("actionItems") or [], start=1):
        typer.echo(f"  {index}. {item}")
