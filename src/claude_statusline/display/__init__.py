"""Display components for the status line.

Modules:
    session: Session input parsing
    colors: ANSI color handling
    statusline: Line assembly
"""

from claude_statusline.display.colors import Colors, colorize, get_usage_color
from claude_statusline.display.session import (
    SessionInput,
    context_percentage,
    parse_session,
    read_session,
)
from claude_statusline.display.statusline import format_statusline, shorten_model_name

__all__ = [
    "Colors",
    "colorize",
    "get_usage_color",
    "SessionInput",
    "context_percentage",
    "parse_session",
    "read_session",
    "format_statusline",
    "shorten_model_name",
]
