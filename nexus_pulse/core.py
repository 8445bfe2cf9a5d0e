"""
Core vitality scoring for NexusPulse.

Vitality formula:
    V = (Commits x 0.5) + (PRs merged x 0.3) - (Stale issues x 0.2)

State thresholds are calibrated for a healthy open-source repository.
"""

import math
from datetime import datetime
from typing import NamedTuple

from nexus_pulse.states import STATE_CONFIGS, StateConfig, VitalityState
from nexus_pulse.trend import Trend, infer_trend

# --- Constants ---

COMMIT_WEIGHT = 0.5
PR_MERGED_WEIGHT = 0.3
STALE_ISSUE_WEIGHT = 0.2

# A score of 120 is treated as the maximum expected healthy activity
MAX_EXPECTED_SCORE = 120

# Stale issue debt can reduce displayed health by at most 50%
MAX_STALE_DISCOUNT = 0.5

# Lower bounds (inclusive) for each state, checked in ascending order
STATE_THRESHOLDS: tuple[tuple[float, VitalityState], ...] = (
    (0, VitalityState.RECOVERING),
    (25, VitalityState.STABLE),
    (60, VitalityState.THRIVING),
    (90, VitalityState.SUPERNOVA),
)

# --- Data Structures ---


class RawMetrics(NamedTuple):
    """Raw activity counts for a repository over a trailing 30-day window."""

    commits: int
    prs_merged: int
    stale_issues: int
    total_issues: int
    total_stars: int
    total_forks: int
    contributors: int
    last_commit_date: str  # ISO-8601 timestamp


class Breakdown(NamedTuple):
    """The three weighted terms that make up the vitality score."""

    commit_contribution: float
    pr_contribution: float
    stale_penalty: float


class VitalityReport(NamedTuple):
    """The derived vitality report for a repository."""

    score: float  # Raw weighted score, can be negative
    normalized_score: float  # 0-100 for display
    state: VitalityState
    breakdown: Breakdown
    state_config: StateConfig
    trend: Trend
    health_percentage: int  # 0-100 for the progress arc


# --- Helper Functions ---


def _clamp(value: float, lower: float = 0, upper: float = 100) -> float:
    return max(lower, min(upper, value))


def _round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going towards positive infinity."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def resolve_state(score: float) -> VitalityState:
    """
    Classify a raw score into a vitality state.

    Ranges are left-inclusive and cover the whole real line:
    score < 0 is dormant, [0, 25) recovering, [25, 60) stable,
    [60, 90) thriving and 90 or above supernova.
    """
    state = VitalityState.DORMANT
    for lower_bound, candidate in STATE_THRESHOLDS:
        if score < lower_bound:
            break
        state = candidate
    return state


def validate_raw_metrics(metrics: RawMetrics) -> None:
    """
    Check that metrics satisfy the ingest contract.

    compute_vitality() does not call this; it is meant for boundaries that
    accept metrics from outside (CLI input, third-party payloads).

    Raises:
        ValueError: Listing every violated constraint.
    """
    problems = []
    count_fields = (
        "commits",
        "prs_merged",
        "stale_issues",
        "total_issues",
        "total_stars",
        "total_forks",
        "contributors",
    )
    for field in count_fields:
        value = getattr(metrics, field)
        if isinstance(value, bool) or not isinstance(value, int):
            problems.append(f"{field} must be an integer, got {value!r}")
        elif value < 0:
            problems.append(f"{field} must be non-negative, got {value}")

    if (
        isinstance(metrics.stale_issues, int)
        and isinstance(metrics.total_issues, int)
        and metrics.stale_issues > metrics.total_issues
    ):
        problems.append(
            f"stale_issues ({metrics.stale_issues}) cannot exceed "
            f"total_issues ({metrics.total_issues})"
        )

    try:
        datetime.fromisoformat(str(metrics.last_commit_date))
    except ValueError:
        problems.append(
            f"last_commit_date is not an ISO-8601 timestamp: {metrics.last_commit_date!r}"
        )

    if problems:
        raise ValueError("Invalid metrics: " + "; ".join(problems))


# --- Core Formula ---


def compute_vitality(metrics: RawMetrics) -> VitalityReport:
    """
    Compute the vitality report for a set of raw metrics.

    This is a pure function: it performs no validation, I/O or mutation,
    and returns an identical report for identical input.

    Args:
        metrics: Raw activity counts for the repository

    Returns:
        VitalityReport with score, state, breakdown, trend and health
    """
    commit_contribution = metrics.commits * COMMIT_WEIGHT
    pr_contribution = metrics.prs_merged * PR_MERGED_WEIGHT
    stale_penalty = metrics.stale_issues * STALE_ISSUE_WEIGHT

    score = commit_contribution + pr_contribution - stale_penalty
    normalized_score = _clamp(score / MAX_EXPECTED_SCORE * 100)

    state = resolve_state(score)

    # Guard against repositories with no open issues
    stale_ratio = (
        metrics.stale_issues / metrics.total_issues if metrics.total_issues > 0 else 0
    )
    health_percentage = _clamp(
        normalized_score * (1 - stale_ratio * MAX_STALE_DISCOUNT)
    )

    # Momentum terms carry the same weights as the score contributions
    trend = infer_trend(
        metrics.commits * COMMIT_WEIGHT, metrics.prs_merged * PR_MERGED_WEIGHT
    )

    return VitalityReport(
        score=_round_half_up(score, 1),
        normalized_score=_round_half_up(normalized_score, 1),
        state=state,
        breakdown=Breakdown(
            commit_contribution=_round_half_up(commit_contribution, 1),
            pr_contribution=_round_half_up(pr_contribution, 1),
            stale_penalty=_round_half_up(stale_penalty, 1),
        ),
        state_config=STATE_CONFIGS[state],
        trend=trend,
        health_percentage=int(_round_half_up(health_percentage)),
    )
