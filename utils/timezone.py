"""UTC-everywhere time handling. Token expiry and lifecycle timestamps depend on it."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere. Tests patch it per module
    to move the clock.
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot convert naive datetime to UTC. Datetime must be timezone-aware."
        )
    return dt.astimezone(timezone.utc)


def to_timestamp(dt: datetime) -> int:
    """Whole seconds since the epoch, as carried in token claims."""
    return int(to_utc(dt).timestamp())
