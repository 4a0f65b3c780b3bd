"""
UTC DateTime Utilities.

All timestamps are handled as timezone-aware UTC datetimes. When a timestamp
is written to storage it goes through format_utc(), and parse_utc() reads it
back, so the text written is exactly the text read.
"""

from datetime import datetime, timezone

# ISO 8601, always microsecond precision and an explicit +00:00 offset
CANONICAL_TIMESPEC = "microseconds"


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Example:
        created_at = utc_now()  # 2026-10-17 08:30:00.123456+00:00
    """
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC timezone-aware datetime.

    - If naive: assumes UTC and adds timezone
    - If aware: converts to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_utc(dt: datetime) -> str:
    """
    Format a datetime in the canonical storage form.

    Returns format: "2026-10-17T08:30:00.123456+00:00"
    """
    return to_utc(dt).isoformat(timespec=CANONICAL_TIMESPEC)


def parse_utc(iso_string: str) -> datetime:
    """
    Parse an ISO 8601 datetime string to timezone-aware UTC datetime.

    Handles:
    - "2026-10-17T08:30:00.123456+00:00"
    - "2026-10-17T08:30:00Z"
    - "2026-10-17T08:30:00" (assumes UTC)

    Raises:
        ValueError: the string is not an ISO 8601 datetime
    """
    cleaned = iso_string.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(cleaned))
