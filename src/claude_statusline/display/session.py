"""Session input from the Claude Code host.

Claude Code pipes a JSON document describing the current session to the
status line command on stdin.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import IO, Any, Optional

from claude_statusline.errors import SessionInputError


@dataclass(frozen=True)
class SessionInput:
    """Fields of the session document used on the status line."""

    model_name: str = ""
    context_used_percentage: float = 0.0
    context_window_size: int = 0
    current_usage_tokens: Optional[int] = None
    total_cost_usd: float = 0.0
    total_duration_ms: float = 0.0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionInput:
        model = _section(data, "model")
        context = _section(data, "context_window")
        cost = _section(data, "cost")

        current = context.get("current_usage")
        tokens = None
        if isinstance(current, dict):
            tokens = (
                _number(current.get("input_tokens"))
                + _number(current.get("cache_creation_input_tokens"))
                + _number(current.get("cache_read_input_tokens"))
            )

        return cls(
            model_name=str(model.get("display_name") or ""),
            context_used_percentage=float(_number(context.get("used_percentage"))),
            context_window_size=int(_number(context.get("context_window_size"))),
            current_usage_tokens=int(tokens) if tokens is not None else None,
            total_cost_usd=float(_number(cost.get("total_cost_usd"))),
            total_duration_ms=float(_number(cost.get("total_duration_ms"))),
        )


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def parse_session(raw: str) -> Optional[SessionInput]:
    """Parse a session document.

    Returns:
        SessionInput, or None for blank input.

    Raises:
        SessionInputError: If the input is not a JSON object.
    """
    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise SessionInputError(f"failed to parse Claude Code input JSON: {e}") from e
    if not isinstance(data, dict):
        raise SessionInputError("Claude Code input must be a JSON object")
    return SessionInput.from_dict(data)


def read_session(stream: IO[str]) -> Optional[SessionInput]:
    """Read the session document from a stream such as stdin.

    Returns None when the stream is an interactive terminal or empty.
    """
    if hasattr(stream, "isatty") and stream.isatty():
        return None
    try:
        raw = stream.read()
    except OSError as e:
        raise SessionInputError(f"failed to read stdin: {e}") from e
    return parse_session(raw)


def context_percentage(session: Optional[SessionInput]) -> float:
    """Context window usage as a 0-100 percentage.

    used_percentage is preferred. Values above 1.0 are taken as already
    being percentages; values up to 1.0 are treated as fractions. Without
    it, the percentage is computed from the current token counts.
    """
    if session is None:
        return 0.0

    used = session.context_used_percentage
    if used > 0:
        if used > 1.0:
            return used
        return used * 100

    if session.current_usage_tokens is not None and session.context_window_size > 0:
        return session.current_usage_tokens / session.context_window_size * 100

    return 0.0


__all__ = ["SessionInput", "parse_session", "read_session", "context_percentage"]
