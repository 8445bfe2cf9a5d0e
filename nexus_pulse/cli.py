"""
Command-line interface for NexusPulse.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from nexus_pulse.config import (
    get_default_repository,
    is_verbose_enabled,
    set_request_timeout,
    set_verbose,
    set_verify_ssl,
)
from nexus_pulse.core import (
    STATE_THRESHOLDS,
    RawMetrics,
    VitalityReport,
    compute_vitality,
    validate_raw_metrics,
)
from nexus_pulse.dashboard import (
    DashboardData,
    build_timeline,
    fetch_dashboard_data,
)
from nexus_pulse.formatting import relative_time
from nexus_pulse.http_client import close_async_http_client
from nexus_pulse.repository import RepositoryReference, parse_repository
from nexus_pulse.signals import Signal, build_metric_cards
from nexus_pulse.states import STATE_CONFIGS, VitalityState
from nexus_pulse.trend import Trend

# --- Typer App ---
app = typer.Typer(help="Score the vitality of a GitHub repository.")
console = Console()

TREND_ARROWS = {
    Trend.RISING: "↑",
    Trend.FALLING: "↓",
    Trend.FLAT: "→",
}

SIGNAL_MARKS = {
    Signal.UP: "[green]▲ up[/green]",
    Signal.FLAT: "[dim]▬ flat[/dim]",
    Signal.DOWN: "[red]▼ down[/red]",
}

TIMELINE_ICONS = {
    "commit": "●",
    "pr": "⇄",
    "issue": "○",
}

# --- Helper Functions ---


def report_to_dict(report: VitalityReport) -> dict[str, Any]:
    """Convert a report into JSON-serializable primitives."""
    payload = report._asdict()
    payload["state"] = report.state.value
    payload["trend"] = report.trend.value
    payload["breakdown"] = report.breakdown._asdict()
    state_config = report.state_config._asdict()
    state_config["mascot_animation"] = report.state_config.mascot_animation.value
    payload["state_config"] = state_config
    return payload


def dashboard_to_dict(data: DashboardData) -> dict[str, Any]:
    """Convert dashboard data into JSON-serializable primitives."""
    return {
        "repository": data.repository._asdict(),
        "metrics": data.metrics._asdict(),
        "recent_commits": [commit._asdict() for commit in data.recent_commits],
        "recent_pull_requests": [pr._asdict() for pr in data.recent_pull_requests],
        "recent_issues": [issue._asdict() for issue in data.recent_issues],
        "fetched_at": data.fetched_at,
        "is_mock_data": data.is_mock_data,
        "fallback_reason": data.fallback_reason,
    }


def display_report(report: VitalityReport, metrics: RawMetrics):
    """Display the vitality panel and score breakdown."""
    config = report.state_config
    glow = config.glow_color

    summary = (
        f"[bold {glow}]{config.emoji} {config.label}[/bold {glow}]\n"
        f"[dim]{config.description}[/dim]\n\n"
        f"Vitality score: [bold]{report.score:.1f}[/bold]  "
        f"([{glow}]{report.normalized_score:.0f}%[/{glow}] of healthy ceiling)\n"
        f"Health index:   [bold]{report.health_percentage}%[/bold]\n"
        f"Trend:          {TREND_ARROWS[report.trend]} {report.trend.value}"
    )
    console.print(Panel(summary, title="Vitality", border_style=glow))

    breakdown_table = Table(title="Score Breakdown", show_header=True)
    breakdown_table.add_column("Signal", style="cyan", no_wrap=True)
    breakdown_table.add_column("Count", justify="right")
    breakdown_table.add_column("Weight", justify="right")
    breakdown_table.add_column("Contribution", justify="right")

    breakdown = report.breakdown
    breakdown_table.add_row(
        "Commits",
        str(metrics.commits),
        "×0.5",
        f"[green]+{breakdown.commit_contribution:.1f}[/green]",
    )
    breakdown_table.add_row(
        "PRs merged",
        str(metrics.prs_merged),
        "×0.3",
        f"[green]+{breakdown.pr_contribution:.1f}[/green]",
    )
    breakdown_table.add_row(
        "Stale issues",
        str(metrics.stale_issues),
        "×0.2",
        f"[red]-{breakdown.stale_penalty:.1f}[/red]",
    )
    console.print(breakdown_table)


def display_metrics(metrics: RawMetrics, report: VitalityReport):
    """Display the metric grid with a direction signal per row."""
    table = Table(title="Repository Metrics", show_header=True)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", justify="right", style="magenta")
    table.add_column("Trend", justify="center", no_wrap=True)
    table.add_column("Note", justify="left", style="dim")

    for card in build_metric_cards(metrics, report):
        table.add_row(card.label, card.value, SIGNAL_MARKS[card.signal], card.note)
    table.add_row(
        "Last Commit",
        relative_time(metrics.last_commit_date),
        "",
        metrics.last_commit_date,
    )
    console.print(table)


def display_timeline(data: DashboardData):
    """Display the merged activity timeline."""
    table = Table(title="Activity Timeline", show_header=True)
    table.add_column("", no_wrap=True)
    table.add_column("When", style="dim", no_wrap=True)
    table.add_column("Event", justify="left")
    table.add_column("Author", style="cyan")

    for event in build_timeline(data):
        when = relative_time(event.timestamp) if event.timestamp else "-"
        title = event.title
        if event.is_stale:
            title += " [yellow](stale)[/yellow]"
        table.add_row(TIMELINE_ICONS[event.kind], when, title, event.author or "")
    console.print(table)


def describe_score_ranges() -> dict[VitalityState, str]:
    """Human-readable score range for each state."""
    lower_bounds: list[tuple[float | None, VitalityState]] = [
        (None, VitalityState.DORMANT),
        *STATE_THRESHOLDS,
    ]
    ranges = {}
    for index, (lower, state) in enumerate(lower_bounds):
        upper = (
            lower_bounds[index + 1][0] if index + 1 < len(lower_bounds) else None
        )
        if lower is None:
            ranges[state] = f"< {upper}"
        elif upper is None:
            ranges[state] = f"≥ {lower}"
        else:
            ranges[state] = f"{lower} – {upper}"
    return ranges


async def _fetch_and_close(
    target: RepositoryReference, use_mock: bool = False
) -> DashboardData:
    try:
        return await fetch_dashboard_data(target, use_mock=use_mock)
    finally:
        await close_async_http_client()


# --- Commands ---


@app.command()
def check(
    repository: str | None = typer.Argument(
        None,
        help="Repository to analyze ('owner/repo' or a GitHub URL). Defaults to GITHUB_OWNER/GITHUB_REPO.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Print the dashboard data and vitality report as JSON.",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Show the activity timeline and diagnostic messages. If not specified, uses config file default.",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Disable SSL certificate verification for HTTPS requests.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Upstream request timeout in seconds.",
    ),
    mock: bool = typer.Option(
        False,
        "--mock",
        help="Use placeholder data even if GITHUB_TOKEN is set.",
    ),
):
    """Fetch a repository's activity and display its vitality."""
    set_verify_ssl(not insecure)
    set_verbose(verbose)
    set_request_timeout(timeout)

    try:
        if repository:
            target = parse_repository(repository)
        else:
            owner, repo = get_default_repository()
            target = RepositoryReference(owner=owner, repo=repo)
        # Reads the config file, so a malformed one fails here
        show_timeline = is_verbose_enabled()
        data = asyncio.run(_fetch_and_close(target, use_mock=mock))
    except ValueError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    report = compute_vitality(data.metrics)

    if output_json:
        payload = {
            "dashboard": dashboard_to_dict(data),
            "report": report_to_dict(report),
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    console.print(f"\n📦 [bold cyan]{data.repository.name}[/bold cyan]")
    console.print(f"   {data.repository.description}")
    if data.is_mock_data:
        console.print(f"   [yellow]Mock data ({data.fallback_reason})[/yellow]")
    fetched = datetime.fromisoformat(data.fetched_at).astimezone(timezone.utc)
    console.print(f"   [dim]Fetched {fetched:%Y-%m-%d %H:%M} UTC[/dim]\n")

    display_report(report, data.metrics)
    display_metrics(data.metrics, report)
    if show_timeline:
        display_timeline(data)


@app.command()
def score(
    commits: int = typer.Option(..., "--commits", help="Commits in the last 30 days."),
    prs_merged: int = typer.Option(
        ..., "--prs-merged", help="Pull requests merged in the last 30 days."
    ),
    stale_issues: int = typer.Option(
        0, "--stale-issues", help="Open issues inactive for more than 30 days."
    ),
    total_issues: int = typer.Option(0, "--total-issues", help="All open issues."),
    stars: int = typer.Option(0, "--stars", help="Stargazer count."),
    forks: int = typer.Option(0, "--forks", help="Fork count."),
    contributors: int = typer.Option(0, "--contributors", help="Contributor count."),
    last_commit_date: str | None = typer.Option(
        None,
        "--last-commit-date",
        help="ISO-8601 timestamp of the latest commit (defaults to now).",
    ),
    output_json: bool = typer.Option(
        False, "--json", help="Print the vitality report as JSON."
    ),
):
    """Score raw metrics without contacting GitHub."""
    metrics = RawMetrics(
        commits=commits,
        prs_merged=prs_merged,
        stale_issues=stale_issues,
        total_issues=total_issues,
        total_stars=stars,
        total_forks=forks,
        contributors=contributors,
        last_commit_date=last_commit_date
        or datetime.now(timezone.utc).isoformat(),
    )
    try:
        validate_raw_metrics(metrics)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    report = compute_vitality(metrics)
    if output_json:
        typer.echo(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False))
        return

    display_report(report, metrics)


@app.command()
def states():
    """List the vitality states and their score ranges."""
    ranges = describe_score_ranges()
    table = Table(title="Vitality States", show_header=True)
    table.add_column("State", no_wrap=True)
    table.add_column("Score", justify="center")
    table.add_column("Animation", justify="center")
    table.add_column("Particles", justify="right")
    table.add_column("Description", justify="left")

    for state, config in STATE_CONFIGS.items():
        table.add_row(
            f"[{config.glow_color}]{config.emoji} {config.label}[/{config.glow_color}]",
            ranges[state],
            config.mascot_animation.value,
            str(config.particle_count),
            config.description,
        )
    console.print(table)


if __name__ == "__main__":
    app()
