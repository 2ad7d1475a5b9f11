"""Claude Statusline - one-line session summary for Claude Code.

This package renders the Claude Code status line: model, subscription usage
limits (fetched from the OAuth usage API and cached), context window usage,
cost and duration.
"""

from claude_statusline._version import __version__
from claude_statusline.api.usage import UsageProvider, UsageResult, get_usage
from claude_statusline.cli import create_parser, main

__all__ = [
    "__version__",
    "UsageProvider",
    "UsageResult",
    "get_usage",
    "create_parser",
    "main",
]
