"""Command-line interface for claude-statusline.

This module provides the main entry point and argument parsing. Claude Code
runs the command on every status line refresh with the session JSON on
stdin and displays the first line printed.
"""

from __future__ import annotations

import argparse
import json
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from claude_statusline._version import __version__
from claude_statusline.api.usage import UsageProvider, UsageResult, warn_stderr
from claude_statusline.config.debuglog import DebugLog
from claude_statusline.config.settings import Settings, load_settings
from claude_statusline.display.colors import color_disabled_by_env
from claude_statusline.display.session import read_session
from claude_statusline.display.statusline import format_statusline
from claude_statusline.errors import SessionInputError, format_error_for_user

DEBUG_LOG_FILENAME = "statusline-debug.log"
DEFAULT_DEBUG_LOG = "default"


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="claude-statusline",
        description="Claude Code status line with subscription usage limits",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  claude-statusline                 Read session JSON from stdin, print one line
  claude-statusline --color         Color percentages by usage level
  claude-statusline --json          Output the usage lookup result as JSON
  claude-statusline --no-cache      Refresh usage even if the cache is fresh
  claude-statusline --debug-log     Log fetch decisions to <config dir>/statusline-debug.log
  claude-statusline --show-debug 20 Show the last 20 debug log entries

Claude Code settings.json:
  "statusLine": {"type": "command", "command": "claude-statusline"}
""",
    )

    parser.add_argument(
        "--config-dir",
        metavar="PATH",
        help="Claude configuration directory (default: $CLAUDE_CONFIG_DIR or ~/.claude)",
    )
    parser.add_argument(
        "--cache-ttl",
        type=int,
        metavar="SECONDS",
        help="Usage cache freshness window in seconds (default: 300)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        help="Usage API request timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Ignore a fresh cache and fetch usage; stale data is still used on failure",
    )
    parser.add_argument("--color", action="store_true", help="Emit ANSI color codes")
    parser.add_argument(
        "--json", "-j", action="store_true", help="Output the usage result as JSON"
    )
    parser.add_argument(
        "--debug-log",
        nargs="?",
        const=DEFAULT_DEBUG_LOG,
        metavar="PATH",
        help=f"Append debug events to PATH (default: <config dir>/{DEBUG_LOG_FILENAME})",
    )
    parser.add_argument(
        "--show-debug",
        type=int,
        nargs="?",
        const=20,
        metavar="N",
        help="Show the last N debug log entries (default: 20)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print error details and suggestions to stderr",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="Show version and system information",
    )
    return parser


def print_version() -> None:
    """Print version and system information."""
    print(f"claude-statusline {__version__}")
    print(f"Python {platform.python_version()} on {platform.system()} {platform.machine()}")


def resolve_debug_log_path(arg: Optional[str], settings: Settings) -> Optional[Path]:
    """Resolve the --debug-log argument to a path.

    Without the flag the environment setting is used.
    """
    if arg is None:
        return settings.debug_log
    if arg != DEFAULT_DEBUG_LOG:
        return Path(arg)
    base = settings.config_dir or Path(tempfile.gettempdir())
    return base / DEBUG_LOG_FILENAME


def result_to_json(result: UsageResult) -> str:
    """Serialize a usage result for --json output."""
    return json.dumps(
        {
            "usage": result.usage.to_dict() if result.usage is not None else None,
            "fetched_at": result.fetched_at.isoformat() if result.fetched_at else None,
            "stale": result.stale,
            "error": result.error.message if result.error is not None else None,
        },
        indent=2,
    )


def show_debug_entries(log: DebugLog, limit: int) -> None:
    """Print recent debug log entries, newest first."""
    entries = log.read_entries(limit=limit)
    if not entries:
        print(f"No debug log entries at {log.log_path}")
        return
    for entry in reversed(entries):
        timestamp = entry.get("timestamp", "")[:19]
        status = "ok" if entry.get("success", True) else "FAIL"
        print(f"{timestamp}  {status:<4}  {entry.get('event', 'unknown'):<20} {entry.get('message', '')}")


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for claude-statusline.

    Always prints exactly one line and exits 0 for usage failures, so the
    host UI keeps rendering; invalid arguments exit through argparse.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        print_version()
        return

    settings = load_settings(
        config_dir=Path(args.config_dir).expanduser() if args.config_dir else None,
        cache_ttl=args.cache_ttl,
        timeout=args.timeout,
    )
    debug_log = DebugLog(resolve_debug_log_path(args.debug_log, settings))

    if args.show_debug is not None:
        if debug_log.log_path is None:
            debug_log = DebugLog(resolve_debug_log_path(DEFAULT_DEBUG_LOG, settings))
        show_debug_entries(debug_log, args.show_debug)
        return

    try:
        session = read_session(sys.stdin)
    except SessionInputError as e:
        warn_stderr(f"failed to read Claude Code input: {e.message}")
        session = None

    provider = UsageProvider(settings, debug_log=debug_log, use_cache=not args.no_cache)
    result = provider.get_usage()

    if args.json:
        print(result_to_json(result))
        return

    color = args.color and not color_disabled_by_env()
    print(format_statusline(session, result, color=color))

    if result.error is not None and args.verbose:
        print(format_error_for_user(result.error, verbose=True), file=sys.stderr)


__all__ = [
    "create_parser",
    "print_version",
    "resolve_debug_log_path",
    "result_to_json",
    "main",
]
