"""
Momentum trend inference.

The trend is a coarse heuristic: it compares weighted commit activity
against weighted pull request closures. It is not a time-series forecast.
"""

from enum import Enum

# Minimum lead one momentum needs over the other to count as a trend
TREND_MARGIN = 10


class Trend(str, Enum):
    """Direction of repository momentum."""

    RISING = "rising"
    FALLING = "falling"
    FLAT = "flat"


def infer_trend(commit_momentum: float, closure_momentum: float) -> Trend:
    """
    Compare commit momentum against PR closure momentum.

    Args:
        commit_momentum: Weighted commit count (commits * 0.5)
        closure_momentum: Weighted merged PR count (prs_merged * 0.3)

    Returns:
        Trend.RISING if commits lead by more than TREND_MARGIN,
        Trend.FALLING if closures lead by more than TREND_MARGIN,
        Trend.FLAT otherwise.
    """
    if commit_momentum > closure_momentum + TREND_MARGIN:
        return Trend.RISING
    if closure_momentum > commit_momentum + TREND_MARGIN:
        return Trend.FALLING
    return Trend.FLAT
