"""
Time-related utilities for the application.

All timestamps are handled as timezone-aware UTC datetimes. EC2 reports
image creation dates as ISO-8601 strings with a trailing ``Z``.
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC. Returns None for empty or
    unparsable input.

    Example:
        >>> parse_iso_timestamp("2024-01-15T10:42:31.000Z")
        datetime.datetime(2024, 1, 15, 10, 42, 31, tzinfo=datetime.timezone.utc)
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = f"{text[:-1]}+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


def days_ago(days: int, *, now: datetime | None = None) -> datetime:
    """Return the instant ``days`` days before ``now`` (defaults to current UTC time)."""
    reference = now or utc_now()
    return reference - timedelta(days=days)
