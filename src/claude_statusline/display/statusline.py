"""Status line assembly.

Output format: 'Opus 4.5 | 5h: 45% (2h15m) | 7d: 12% | Ctx: 38% | $1.23 | 12m | @14:30'
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from claude_statusline.api.models import UsageSnapshot
from claude_statusline.api.usage import UsageResult
from claude_statusline.display.colors import colorize, get_usage_color
from claude_statusline.display.session import SessionInput, context_percentage
from claude_statusline.utils.time import format_clock, format_elapsed_ms, format_reset_compact

SEPARATOR = " | "
FALLBACK_TEXT = "Claude Statusline"
MODEL_NAME_MAX = 12

SHORT_MODEL_NAMES = {
    "Claude Opus 4.5": "Opus 4.5",
    "Claude Sonnet 4.5": "Sonnet 4.5",
    "Claude Sonnet 4": "Sonnet 4",
    "Claude Haiku 4.5": "Haiku 4.5",
}


def shorten_model_name(name: str) -> str:
    """Shorten a model display name.

    Known names lose their "Claude " prefix; anything else is truncated.
    """
    return SHORT_MODEL_NAMES.get(name, name[:MODEL_NAME_MAX])


def _pct(value: float, color: bool) -> str:
    text = f"{value:.0f}%"
    return colorize(text, get_usage_color(value), color)


def usage_segments(
    usage: Optional[UsageSnapshot],
    now: Optional[datetime] = None,
    color: bool = False,
) -> list[str]:
    """Format the rate-limit windows of a snapshot.

    The Opus window is shown only when it has been used.
    """
    if usage is None:
        return []

    parts = []
    if usage.five_hour is not None:
        remaining = format_reset_compact(usage.five_hour.resets_at, now=now)
        part = f"5h: {_pct(usage.five_hour.utilization, color)}"
        if remaining:
            part += f" ({remaining})"
        parts.append(part)

    if usage.seven_day is not None:
        parts.append(f"7d: {_pct(usage.seven_day.utilization, color)}")

    if usage.seven_day_opus is not None and usage.seven_day_opus.utilization > 0:
        parts.append(f"Opus: {_pct(usage.seven_day_opus.utilization, color)}")

    return parts


def session_segments(session: Optional[SessionInput], color: bool = False) -> list[str]:
    """Format context, cost and duration of the current session."""
    if session is None:
        return []

    parts = []
    ctx = context_percentage(session)
    if ctx > 0:
        parts.append(f"Ctx: {_pct(ctx, color)}")
    if session.total_cost_usd > 0:
        parts.append(f"${session.total_cost_usd:.2f}")
    if session.total_duration_ms > 0:
        parts.append(format_elapsed_ms(session.total_duration_ms))
    return parts


def format_statusline(
    session: Optional[SessionInput],
    result: UsageResult,
    now: Optional[datetime] = None,
    color: bool = False,
) -> str:
    """Build the status line.

    Args:
        session: Parsed session input, or None.
        result: Usage lookup result.
        now: Reference time for reset countdowns.
        color: Whether to emit ANSI color codes.

    Returns:
        One line without a trailing newline.
    """
    parts = []
    if session is not None and session.model_name:
        parts.append(shorten_model_name(session.model_name))

    parts.extend(usage_segments(result.usage, now=now, color=color))
    parts.extend(session_segments(session, color=color))

    if result.fetched_at is not None:
        parts.append(f"@{format_clock(result.fetched_at)}")

    if not parts:
        if result.error is not None:
            return f"⚠ {result.error.message}"
        return FALLBACK_TEXT

    return SEPARATOR.join(parts)


__all__ = [
    "SEPARATOR",
    "FALLBACK_TEXT",
    "shorten_model_name",
    "usage_segments",
    "session_segments",
    "format_statusline",
]
