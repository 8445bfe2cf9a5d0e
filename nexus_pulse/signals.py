"""
Per-metric direction signals shown next to each value in the metric grid.
"""

from enum import Enum
from typing import NamedTuple

from nexus_pulse.core import RawMetrics, VitalityReport
from nexus_pulse.formatting import format_metric_value
from nexus_pulse.trend import Trend


class Signal(str, Enum):
    """Direction shown beside a metric."""

    UP = "up"
    FLAT = "flat"
    DOWN = "down"


class MetricCard(NamedTuple):
    """One row of the metric grid."""

    key: str
    label: str
    value: str
    note: str
    signal: Signal


COMMIT_UP_ABOVE = 20
COMMIT_FLAT_ABOVE = 5
PR_UP_ABOVE = 10
CONTRIBUTOR_UP_ABOVE = 10
STALE_SHARE_DOWN_ABOVE = 0.5
HEALTH_UP_ABOVE = 70
HEALTH_DOWN_BELOW = 40

_TREND_SIGNALS = {
    Trend.RISING: Signal.UP,
    Trend.FLAT: Signal.FLAT,
    Trend.FALLING: Signal.DOWN,
}


def commit_signal(commits: int) -> Signal:
    if commits > COMMIT_UP_ABOVE:
        return Signal.UP
    if commits > COMMIT_FLAT_ABOVE:
        return Signal.FLAT
    return Signal.DOWN


def pr_signal(prs_merged: int) -> Signal:
    return Signal.UP if prs_merged > PR_UP_ABOVE else Signal.FLAT


def issue_signal(stale_issues: int, total_issues: int) -> Signal:
    """Down once more than half of the open issues have gone stale."""
    if stale_issues > total_issues * STALE_SHARE_DOWN_ABOVE:
        return Signal.DOWN
    return Signal.FLAT


def contributor_signal(contributors: int) -> Signal:
    return Signal.UP if contributors > CONTRIBUTOR_UP_ABOVE else Signal.FLAT


def health_signal(health_percentage: float) -> Signal:
    if health_percentage > HEALTH_UP_ABOVE:
        return Signal.UP
    if health_percentage < HEALTH_DOWN_BELOW:
        return Signal.DOWN
    return Signal.FLAT


def trend_signal(trend: Trend) -> Signal:
    return _TREND_SIGNALS[trend]


def build_metric_cards(metrics: RawMetrics, report: VitalityReport) -> list[MetricCard]:
    """
    Build the metric grid rows in display order.

    Stars and forks have no momentum of their own, so they are always
    shown up and flat respectively.
    """
    return [
        MetricCard(
            "stars",
            "Total Stars",
            format_metric_value(metrics.total_stars),
            "GitHub stargazers",
            Signal.UP,
        ),
        MetricCard(
            "commits",
            "Commits (30d)",
            str(metrics.commits),
            "Last 30 days",
            commit_signal(metrics.commits),
        ),
        MetricCard(
            "prs",
            "PRs Merged",
            str(metrics.prs_merged),
            "Last 30 days",
            pr_signal(metrics.prs_merged),
        ),
        MetricCard(
            "forks",
            "Total Forks",
            format_metric_value(metrics.total_forks),
            "Ecosystem reach",
            Signal.FLAT,
        ),
        MetricCard(
            "issues",
            "Open Issues",
            str(metrics.total_issues),
            f"{metrics.stale_issues} stale (>30d)",
            issue_signal(metrics.stale_issues, metrics.total_issues),
        ),
        MetricCard(
            "contributors",
            "Contributors",
            str(metrics.contributors),
            "Active authors",
            contributor_signal(metrics.contributors),
        ),
        MetricCard(
            "vitality",
            "Vitality Score",
            f"{report.normalized_score:.0f}%",
            report.state_config.label,
            trend_signal(report.trend),
        ),
        MetricCard(
            "health",
            "Health Index",
            f"{report.health_percentage}%",
            "Adjusted for stale debt",
            health_signal(report.health_percentage),
        ),
    ]
