from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_analysis, render_entries, render_sensors, render_summary
from models.records import WasteCategory


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the compost monitor service.",
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
        help="Compost monitor API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    poll_interval: Optional[float] = typer.Option(
        None,
        "--poll-interval",
        help="Seconds between status checks when waiting for an analysis.",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Maximum seconds to wait for an analysis.",
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


@app.command("sensors")
def sensors_command(ctx: typer.Context) -> None:
    """Show the current sensor snapshot."""
    state = _get_state(ctx)
    render_sensors(state.client.get_sensors())


@app.command("log-waste")
def log_waste_command(
    ctx: typer.Context,
    category: WasteCategory = typer.Argument(..., help="Kind of organic waste."),
    weight: float = typer.Argument(..., help="Estimated weight in kilograms."),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Free-text notes."),
) -> None:
    """Record an organic waste entry."""
    state = _get_state(ctx)
    payload = state.client.log_waste(category.value, weight, notes=notes)
    entry = payload.get("entry") or {}
    typer.secho(
        f"{payload.get('message', 'Waste entry recorded.')} id={entry.get('id')}",
        fg=typer.colors.GREEN,
    )


@app.command("entries")
def entries_command(ctx: typer.Context) -> None:
    """List logged waste, newest first."""
    state = _get_state(ctx)
    render_entries(state.client.list_entries())


@app.command("summary")
def summary_command(ctx: typer.Context) -> None:
    """Show the waste distribution by category."""
    state = _get_state(ctx)
    render_summary(state.client.get_summary())


@app.command("analysis")
def analysis_command(ctx: typer.Context) -> None:
    """Show the latest advisory analysis."""
    state = _get_state(ctx)
    render_analysis(state.client.get_analysis())


@app.command("analyze")
def analyze_command(
    ctx: typer.Context,
    climate_label: Optional[str] = typer.Option(
        None,
        "--climate",
        "-c",
        help="Outside weather description (defaults to CLI_CLIMATE_LABEL env or the server's label).",
    ),
    wait: bool = typer.Option(
        False,
        "--wait/--no-wait",
        help="Wait for the analysis to finish and display it.",
    ),
) -> None:
    """Request a fresh advisory analysis."""
    state = _get_state(ctx)
    label = climate_label or state.config.climate_label
    before = state.client.get_analysis().get("generation", 0)
    accepted = state.client.request_analysis(label)
    typer.secho(
        f"Analysis requested. climate_label={accepted.get('climate_label')}",
        fg=typer.colors.GREEN,
    )

    if not wait:
        return

    interval = state.config.poll_interval
    poll_timeout = state.config.poll_timeout
    typer.echo(f"Waiting for analysis (interval={interval}s, timeout={poll_timeout}s)...")
    result = state.client.wait_for_analysis(before, interval=interval, timeout=poll_timeout)
    typer.echo()
    render_analysis(result)
