"""Display formatting helpers for metric values and timestamps."""

import math
from datetime import datetime, timezone


def format_metric_value(value: int) -> str:
    """
    Format a count with a K/M suffix for display.

    Examples:
        1_500_000 -> "1.5M", 2_300 -> "2.3K", 999 -> "999"
    """
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def parse_timestamp(iso_date: str) -> datetime:
    """Parse an ISO-8601 timestamp, assuming UTC when no offset is given."""
    parsed = datetime.fromisoformat(iso_date)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def relative_time(iso_date: str, now: datetime | None = None) -> str:
    """
    Convert an ISO-8601 timestamp into a coarse relative age.

    Args:
        iso_date: Timestamp to describe
        now: Reference time (defaults to the current UTC time)

    Returns:
        "just now", "{m}m ago", "{h}h ago", "{d}d ago", or a short
        month/day string such as "Jan 5" for anything a week or older.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    moment = parse_timestamp(iso_date)
    seconds = (now - moment).total_seconds()
    minutes = math.floor(seconds / 60)
    hours = math.floor(seconds / 3600)
    days = math.floor(seconds / 86400)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    moment = moment.astimezone(timezone.utc)
    return f"{moment.strftime('%b')} {moment.day}"
