"""Utility functions.

Modules:
    time: Time formatting and parsing utilities
"""

from claude_statusline.utils.time import (
    format_age,
    format_clock,
    format_duration_compact,
    format_elapsed_ms,
    format_reset_compact,
    parse_timestamp,
    utcnow,
)

__all__ = [
    "utcnow",
    "parse_timestamp",
    "format_duration_compact",
    "format_reset_compact",
    "format_age",
    "format_elapsed_ms",
    "format_clock",
]
