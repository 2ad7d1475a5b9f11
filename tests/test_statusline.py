"""Tests for status line assembly and session input parsing."""

import io
import json
from datetime import datetime, timedelta, timezone

import pytest

from claude_statusline.api.models import UsageLimit, UsageSnapshot
from claude_statusline.api.usage import UsageResult
from claude_statusline.display.colors import Colors, colorize, get_usage_color
from claude_statusline.display.session import (
    SessionInput,
    context_percentage,
    parse_session,
    read_session,
)
from claude_statusline.display.statusline import (
    FALLBACK_TEXT,
    format_statusline,
    shorten_model_name,
    usage_segments,
)
from claude_statusline.errors import CredentialsUnreadableError, SessionInputError


class TestShortenModelName:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Claude Opus 4.5", "Opus 4.5"),
            ("Claude Sonnet 4.5", "Sonnet 4.5"),
            ("Claude Sonnet 4", "Sonnet 4"),
            ("Claude Haiku 4.5", "Haiku 4.5"),
            ("Opus", "Opus"),
            ("Some Very Long Model Name", "Some Very Lo"),
            ("Claude 3.5 Sonnet", "Claude 3.5 S"),
            ("Claude Opus 4.1", "Claude Opus "),
        ],
    )
    def test_shortening(self, name, expected):
        assert shorten_model_name(name) == expected


class TestParseSession:
    def test_full_document(self, session_full):
        session = parse_session(json.dumps(session_full))

        assert session.model_name == "Claude Opus 4.5"
        assert session.context_window_size == 200000
        assert session.current_usage_tokens == 76000
        assert session.total_cost_usd == pytest.approx(1.234)
        assert session.total_duration_ms == 720000

    def test_blank_input(self):
        assert parse_session("") is None
        assert parse_session("  \n") is None

    def test_invalid_json(self):
        with pytest.raises(SessionInputError) as exc_info:
            parse_session("{oops")

        assert "failed to parse Claude Code input JSON" in str(exc_info.value)

    def test_non_object(self):
        with pytest.raises(SessionInputError):
            parse_session("[1, 2]")

    def test_deeply_nested(self):
        with pytest.raises(SessionInputError):
            parse_session("[" * 200000)

    def test_missing_sections(self):
        session = parse_session("{}")

        assert session == SessionInput()
        assert session.current_usage_tokens is None

    def test_wrong_types_ignored(self):
        session = parse_session(
            json.dumps({"model": "opus", "context_window": {"used_percentage": "half"}})
        )

        assert session.model_name == ""
        assert session.context_used_percentage == 0.0

    def test_read_from_stream(self, session_full):
        session = read_session(io.StringIO(json.dumps(session_full)))
        assert session.model_name == "Claude Opus 4.5"

    def test_tty_is_not_read(self):
        class TTY(io.StringIO):
            def isatty(self):
                return True

        assert read_session(TTY('{"model": {}}')) is None


class TestContextPercentage:
    def test_none_session(self):
        assert context_percentage(None) == 0.0

    def test_percentage_value(self):
        assert context_percentage(SessionInput(context_used_percentage=42.0)) == 42.0

    def test_fraction_value(self):
        assert context_percentage(SessionInput(context_used_percentage=0.42)) == pytest.approx(42.0)

    def test_exactly_one_is_a_fraction(self):
        assert context_percentage(SessionInput(context_used_percentage=1.0)) == 100.0

    def test_computed_from_tokens(self, session_full):
        session = parse_session(json.dumps(session_full))
        assert context_percentage(session) == pytest.approx(38.0)

    def test_no_window_size(self):
        session = SessionInput(current_usage_tokens=5000, context_window_size=0)
        assert context_percentage(session) == 0.0


class TestUsageSegments:
    def test_all_windows(self, snapshot_high, fixed_now):
        parts = usage_segments(snapshot_high, now=fixed_now)

        assert parts == ["5h: 85% (40m)", "7d: 68%", "Opus: 41%"]

    def test_reset_countdown(self, snapshot_normal, fixed_now):
        parts = usage_segments(snapshot_normal, now=fixed_now)

        assert parts[0] == "5h: 34% (2h15m)"
        assert parts[1] == "7d: 12%"

    def test_opus_hidden_when_unused(self, fixed_now):
        usage = UsageSnapshot(
            five_hour=UsageLimit(10.0, ""),
            seven_day_opus=UsageLimit(0.0, ""),
        )

        assert usage_segments(usage, now=fixed_now) == ["5h: 10%"]

    def test_reset_in_past(self, fixed_now):
        usage = UsageSnapshot(five_hour=UsageLimit(99.0, "2024-12-19T14:00:00Z"))

        assert usage_segments(usage, now=fixed_now) == ["5h: 99% (0m)"]

    def test_unparseable_reset(self, fixed_now):
        usage = UsageSnapshot(five_hour=UsageLimit(3.0, "soon"))

        assert usage_segments(usage, now=fixed_now) == ["5h: 3%"]

    def test_no_usage(self):
        assert usage_segments(None) == []


class TestFormatStatusline:
    def test_full_line(self, session_full, snapshot_normal, fixed_now):
        session = parse_session(json.dumps(session_full))
        fetched_at = fixed_now - timedelta(minutes=2)
        result = UsageResult(snapshot_normal, fetched_at)

        line = format_statusline(session, result, now=fixed_now)

        clock = fetched_at.astimezone().strftime("%H:%M")
        assert line == f"Opus 4.5 | 5h: 34% (2h15m) | 7d: 12% | Ctx: 38% | $1.23 | 12m | @{clock}"

    def test_session_only(self, session_full):
        session = parse_session(json.dumps(session_full))

        line = format_statusline(session, UsageResult(None, None))

        assert line == "Opus 4.5 | Ctx: 38% | $1.23 | 12m"

    def test_error_shown_when_nothing_else(self):
        error = CredentialsUnreadableError("cannot read credentials: /x/.credentials.json")

        line = format_statusline(None, UsageResult(None, None, error))

        assert line == "⚠ cannot read credentials: /x/.credentials.json"

    def test_error_hidden_when_session_present(self, session_full):
        session = parse_session(json.dumps(session_full))
        error = CredentialsUnreadableError("cannot read credentials")

        line = format_statusline(session, UsageResult(None, None, error))

        assert "cannot read credentials" not in line
        assert line.startswith("Opus 4.5")

    def test_fallback_text(self):
        assert format_statusline(None, UsageResult(None, None)) == FALLBACK_TEXT

    def test_zero_values_omitted(self):
        session = SessionInput(model_name="Claude Haiku 4.5")

        assert format_statusline(session, UsageResult(None, None)) == "Haiku 4.5"

    def test_color_codes(self, snapshot_high, fixed_now):
        line = format_statusline(None, UsageResult(snapshot_high, None), now=fixed_now, color=True)

        assert f"{Colors.RED}85%{Colors.RESET}" in line
        assert f"{Colors.YELLOW}68%{Colors.RESET}" in line
        assert f"{Colors.GREEN}41%{Colors.RESET}" in line

    def test_no_color_by_default(self, snapshot_high, fixed_now):
        line = format_statusline(None, UsageResult(snapshot_high, None), now=fixed_now)

        assert "\033[" not in line


class TestColors:
    def test_thresholds(self):
        assert get_usage_color(0) == Colors.GREEN
        assert get_usage_color(49.9) == Colors.GREEN
        assert get_usage_color(50) == Colors.YELLOW
        assert get_usage_color(80) == Colors.RED

    def test_colorize_disabled(self):
        assert colorize("x", Colors.RED, enabled=False) == "x"
