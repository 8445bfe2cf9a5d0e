"""
Dashboard assembly: fetch repository activity, fall back to placeholder
data when GitHub is unavailable, and score the result.
"""

from datetime import datetime, timezone
from typing import NamedTuple

import httpx
from rich.console import Console
from rich.markup import escape

from nexus_pulse.config import MOCK_TOKEN, get_github_token, is_verbose_enabled
from nexus_pulse.core import RawMetrics, VitalityReport, compute_vitality
from nexus_pulse.formatting import parse_timestamp
from nexus_pulse.mock_data import build_mock_dashboard
from nexus_pulse.repository import RepositoryReference
from nexus_pulse.vcs import get_vcs_provider
from nexus_pulse.vcs.base import (
    CommitActivity,
    IssueActivity,
    PullRequestActivity,
    RepositorySummary,
    VCSRepositoryData,
)

# Diagnostics go to stderr so JSON output on stdout stays parseable
console = Console(stderr=True)

# Items of each kind shown in the activity timeline
TIMELINE_LIMITS = {
    "commit": 8,
    "pr": 5,
    "issue": 5,
}


class DashboardData(NamedTuple):
    """Everything a renderer needs for one repository."""

    repository: RepositorySummary
    metrics: RawMetrics
    recent_commits: list[CommitActivity]
    recent_pull_requests: list[PullRequestActivity]
    recent_issues: list[IssueActivity]
    fetched_at: str
    is_mock_data: bool
    fallback_reason: str | None = None


class TimelineEvent(NamedTuple):
    """A single entry in the merged activity timeline."""

    kind: str  # "commit", "pr" or "issue"
    title: str
    author: str | None
    timestamp: str
    url: str
    is_stale: bool = False


def _from_vcs_data(
    data: VCSRepositoryData,
    is_mock_data: bool,
    fallback_reason: str | None = None,
) -> DashboardData:
    return DashboardData(
        repository=data.repository,
        metrics=data.metrics,
        recent_commits=data.recent_commits,
        recent_pull_requests=data.recent_pull_requests,
        recent_issues=data.recent_issues,
        fetched_at=datetime.now(timezone.utc).isoformat(),
        is_mock_data=is_mock_data,
        fallback_reason=fallback_reason,
    )


async def fetch_dashboard_data(
    target: RepositoryReference,
    token: str | None = None,
    platform: str = "github",
    use_mock: bool = False,
) -> DashboardData:
    """
    Fetch dashboard data for a repository.

    Uses placeholder data when no token is configured. Any upstream failure
    (HTTP error, timeout, malformed payload) is reported as a warning and
    also falls back to placeholder data.

    Args:
        target: Repository to fetch
        token: GitHub token (defaults to GITHUB_TOKEN)
        platform: VCS platform name
        use_mock: Skip the upstream fetch and return placeholder data

    Returns:
        DashboardData; is_mock_data tells whether live data was used.
    """
    if use_mock:
        return _from_vcs_data(
            build_mock_dashboard(target),
            is_mock_data=True,
            fallback_reason="placeholder data requested",
        )

    if token is None:
        token = get_github_token()
    if not token or token == MOCK_TOKEN:
        if is_verbose_enabled():
            console.print(
                "[dim]No GITHUB_TOKEN configured, using placeholder data.[/dim]"
            )
        return _from_vcs_data(
            build_mock_dashboard(target),
            is_mock_data=True,
            fallback_reason="GITHUB_TOKEN is not configured",
        )

    try:
        provider = get_vcs_provider(platform, token=token)
        if is_verbose_enabled():
            console.print(f"[dim]Fetching {target.full_name} from {platform}...[/dim]")
        vcs_data = await provider.get_repository_data(target.owner, target.repo)
    except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
        console.print(
            f"[yellow]Warning: fetch for {target.full_name} failed, "
            f"falling back to placeholder data: {escape(str(e))}[/yellow]"
        )
        return _from_vcs_data(
            build_mock_dashboard(target),
            is_mock_data=True,
            fallback_reason=str(e) or type(e).__name__,
        )

    return _from_vcs_data(vcs_data, is_mock_data=False)


def build_timeline(data: DashboardData) -> list[TimelineEvent]:
    """
    Merge recent commits, merged PRs and issues into one feed.

    Returns:
        Events sorted newest first. PRs are dated by merge time and issues
        by last update.
    """
    events = [
        TimelineEvent(
            kind="commit",
            title=commit.message,
            author=commit.author,
            timestamp=commit.date,
            url=commit.url,
        )
        for commit in data.recent_commits[: TIMELINE_LIMITS["commit"]]
    ]
    events.extend(
        TimelineEvent(
            kind="pr",
            title=f"#{pr.number} {pr.title}",
            author=pr.author,
            timestamp=pr.merged_at or "",
            url=pr.url,
        )
        for pr in data.recent_pull_requests[: TIMELINE_LIMITS["pr"]]
    )
    events.extend(
        TimelineEvent(
            kind="issue",
            title=f"#{issue.number} {issue.title}",
            author=None,
            timestamp=issue.updated_at,
            url=issue.url,
            is_stale=issue.is_stale,
        )
        for issue in data.recent_issues[: TIMELINE_LIMITS["issue"]]
    )

    def sort_key(event: TimelineEvent) -> datetime:
        if not event.timestamp:
            return datetime.min.replace(tzinfo=timezone.utc)
        return parse_timestamp(event.timestamp)

    return sorted(events, key=sort_key, reverse=True)


async def analyze_repository(
    target: RepositoryReference, token: str | None = None
) -> tuple[DashboardData, VitalityReport]:
    """Fetch a repository's activity and compute its vitality report."""
    data = await fetch_dashboard_data(target, token=token)
    return data, compute_vitality(data.metrics)
