"""Time formatting and parsing utilities.

Provides functions for handling ISO timestamps and compact durations
suitable for a one-line status display.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(iso_str: str) -> datetime:
    """Parse an ISO 8601 / RFC 3339 timestamp string to datetime.

    Handles a trailing Z and fractional seconds of any precision.
    Naive timestamps are assumed to be UTC.

    Args:
        iso_str: Timestamp string (e.g., "2024-01-15T10:30:00.123456Z").

    Returns:
        Timezone-aware datetime object.

    Raises:
        ValueError: If the string is not a valid timestamp.
    """
    iso_str = iso_str.strip().replace("Z", "+00:00").replace("z", "+00:00")
    if "." in iso_str:
        # fromisoformat before 3.11 only accepts 3 or 6 fractional digits
        head, frac = iso_str.split(".", 1)
        digits = frac
        offset = ""
        for sep in ("+", "-"):
            if sep in frac:
                digits, offset = frac.split(sep, 1)
                offset = sep + offset
                break
        iso_str = f"{head}.{digits[:6].ljust(6, '0')}{offset}"
    parsed = datetime.fromisoformat(iso_str)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_duration_compact(delta: timedelta) -> str:
    """Format a duration as '2h15m' or '45m', rounded down to minutes.

    Negative durations format as '0m'.
    """
    total_seconds = max(0, int(delta.total_seconds()))
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h{minutes}m"
    return f"{minutes}m"


def format_reset_compact(reset_at: str, now: datetime | None = None) -> str:
    """Format the time remaining until a reset timestamp.

    Args:
        reset_at: ISO 8601 timestamp string.
        now: Reference time. Defaults to the current time.

    Returns:
        Compact duration like '2h15m' or '45m', '0m' once the reset has
        passed, or '' when reset_at is empty or unparseable.
    """
    if not reset_at:
        return ""
    try:
        reset_dt = parse_timestamp(reset_at)
    except ValueError:
        return ""
    if now is None:
        now = utcnow()
    return format_duration_compact(reset_dt - now)


def format_age(delta: timedelta) -> str:
    """Format the age of cached data, rounded to the nearest minute.

    Returns:
        Strings like '6m', '1h5m', or '0m'.
    """
    total_minutes = max(0, int((delta.total_seconds() + 30) // 60))
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h{minutes}m"
    return f"{minutes}m"


def format_elapsed_ms(duration_ms: float) -> str:
    """Format a session duration given in milliseconds.

    Returns:
        '2h15m', '12m', or '<1m' for durations under a minute.
    """
    total_seconds = max(0, int(duration_ms // 1000))
    if total_seconds < 60:
        return "<1m"
    return format_duration_compact(timedelta(seconds=total_seconds))


def format_clock(dt: datetime) -> str:
    """Format a timestamp as local wall-clock time 'HH:MM'."""
    return dt.astimezone().strftime("%H:%M")


__all__ = [
    "utcnow",
    "parse_timestamp",
    "format_duration_compact",
    "format_reset_compact",
    "format_age",
    "format_elapsed_ms",
    "format_clock",
]
