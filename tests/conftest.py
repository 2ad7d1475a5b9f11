"""
Pytest fixtures for claude-statusline tests.

Test imports use the src/claude_statusline/ package via --import-mode=importlib
(see pyproject.toml).
"""

import io
import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import patch

import pytest

from claude_statusline.api.models import UsageSnapshot
from claude_statusline.config.settings import Settings


# ═══════════════════════════════════════════════════════════════════════════════
# Path Constants
# ═══════════════════════════════════════════════════════════════════════════════

PROJECT_ROOT = Path(__file__).parent.parent
SRC_DIR = PROJECT_ROOT / "src"

# Load fixtures data
FIXTURES_DIR = Path(__file__).parent / "fixtures"
with open(FIXTURES_DIR / "api_responses.json") as f:
    FIXTURES = json.load(f)


# ═══════════════════════════════════════════════════════════════════════════════
# API Response Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def usage_normal():
    """Normal usage response (34.2% session, 12.3% weekly, no Opus)."""
    return json.loads(json.dumps(FIXTURES["usage_normal"]))


@pytest.fixture
def usage_high():
    """High usage response (85.2% session, 67.8% weekly, 41% Opus)."""
    return json.loads(json.dumps(FIXTURES["usage_high"]))


@pytest.fixture
def usage_with_extras():
    """Response with windows the status line does not display."""
    return json.loads(json.dumps(FIXTURES["usage_with_extras"]))


@pytest.fixture
def snapshot_normal(usage_normal):
    return UsageSnapshot.from_dict(usage_normal)


@pytest.fixture
def snapshot_high(usage_high):
    return UsageSnapshot.from_dict(usage_high)


# ═══════════════════════════════════════════════════════════════════════════════
# Credentials Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def credentials_valid():
    """Valid credentials with access token."""
    return json.loads(json.dumps(FIXTURES["credentials_valid"]))


@pytest.fixture
def credentials_missing_token():
    """Credentials without access token."""
    return json.loads(json.dumps(FIXTURES["credentials_missing_token"]))


# ═══════════════════════════════════════════════════════════════════════════════
# Session Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def session_full():
    """Session document with model, context usage, cost and duration."""
    return json.loads(json.dumps(FIXTURES["session_full"]))


# ═══════════════════════════════════════════════════════════════════════════════
# Temporary File Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def config_dir(tmp_path):
    """Empty Claude configuration directory."""
    path = tmp_path / ".claude"
    path.mkdir()
    return path


@pytest.fixture
def tmp_credentials_file(config_dir, credentials_valid):
    """Create credentials file in the config directory."""
    creds_file = config_dir / ".credentials.json"
    creds_file.write_text(json.dumps(credentials_valid))
    return creds_file


@pytest.fixture
def settings(config_dir):
    """Settings pointing at the temporary config directory."""
    return Settings(config_dir=config_dir)


@pytest.fixture
def write_cache(config_dir):
    """Write a cache record with a given fetch time, bypassing save_cache."""

    def _write(usage: dict, fetched_at: datetime) -> Path:
        cache_file = config_dir / ".statusline-cache.json"
        cache_file.write_text(
            json.dumps({"fetched_at": fetched_at.isoformat(), "usage": usage}),
            encoding="utf-8",
        )
        return cache_file

    return _write


# ═══════════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


class FakeResponse:
    """Minimal stand-in for the object returned by urlopen."""

    def __init__(self, body: bytes = b"", status: int = 200):
        self.status = status
        self._buffer = io.BytesIO(body)
        self.bytes_read = 0
        self.closed = False

    def read(self, n: int = -1) -> bytes:
        data = self._buffer.read(n)
        self.bytes_read += len(data)
        return data

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.closed = True
        return False


@pytest.fixture
def make_response():
    """Factory for fake urlopen responses."""
    return FakeResponse


@pytest.fixture
def mock_urlopen():
    """Mock urlopen for API testing."""
    with patch("claude_statusline.api.client.urlopen") as mock:
        yield mock


# ═══════════════════════════════════════════════════════════════════════════════
# Time Fixtures
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fixed_now():
    """Fixed datetime for reproducible tests."""
    return datetime(2024, 12, 19, 14, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(fixed_now):
    """Clock returning fixed_now, advanceable via clock.advance(seconds)."""

    class _Clock:
        def __init__(self):
            self.now = fixed_now

        def __call__(self):
            return self.now

        def advance(self, seconds: float) -> None:
            self.now = self.now + timedelta(seconds=seconds)

    return _Clock()
