"""Terminal color handling for the status line.

Claude Code renders ANSI escape sequences in status line output, but the
command's stdout is a pipe, so color is opt-in rather than auto-detected.
"""

import os


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    DIM = "\033[2m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    RED = "\033[91m"
    CYAN = "\033[96m"


def color_disabled_by_env() -> bool:
    """Check the NO_COLOR convention (any non-empty value disables color)."""
    return bool(os.environ.get("NO_COLOR"))


def get_usage_color(percentage: float) -> str:
    """Get the appropriate color code for a usage percentage.

    Args:
        percentage: Usage percentage (0-100).

    Returns:
        ANSI color code string.
    """
    if percentage >= 80:
        return Colors.RED
    elif percentage >= 50:
        return Colors.YELLOW
    return Colors.GREEN


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """Wrap text in a color code when enabled."""
    if not enabled:
        return text
    return f"{color}{text}{Colors.RESET}"


__all__ = ["Colors", "color_disabled_by_env", "get_usage_color", "colorize"]
