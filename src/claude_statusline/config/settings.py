"""Runtime settings for claude-statusline.

Settings are resolved once per invocation from the environment and CLI
flags, then passed explicitly to the usage orchestrator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

# Environment variables
CONFIG_DIR_ENV = "CLAUDE_CONFIG_DIR"
CACHE_TTL_ENV = "CLAUDE_STATUSLINE_CACHE_TTL"
TIMEOUT_ENV = "CLAUDE_STATUSLINE_TIMEOUT"
DEBUG_LOG_ENV = "CLAUDE_STATUSLINE_DEBUG_LOG"

# Defaults
DEFAULT_CACHE_TTL = 300  # seconds
DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_MAX_RESPONSE_BYTES = 1 << 20
API_URL = "https://api.anthropic.com/api/oauth/usage"


@dataclass(frozen=True)
class Settings:
    """Resolved settings for one invocation.

    Attributes:
        config_dir: Claude configuration directory, or None if unresolvable.
        cache_ttl: Freshness window for the usage cache, in seconds.
        endpoint: Usage API URL.
        timeout: End-to-end budget for the usage request, in seconds.
        max_response_bytes: Cap on the response body read.
        debug_log: Path of the debug log, or None when disabled.
    """

    config_dir: Optional[Path]
    cache_ttl: int = DEFAULT_CACHE_TTL
    endpoint: str = API_URL
    timeout: float = DEFAULT_TIMEOUT
    max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES
    debug_log: Optional[Path] = None

    def with_overrides(self, **overrides) -> Settings:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def resolve_config_dir(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Resolve the Claude configuration directory.

    Args:
        env: Environment mapping. Defaults to os.environ.

    Returns:
        CLAUDE_CONFIG_DIR when set and non-empty, else ~/.claude,
        or None if the home directory cannot be determined.
    """
    if env is None:
        env = os.environ

    override = env.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    try:
        return Path.home() / ".claude"
    except (KeyError, RuntimeError):
        # No HOME and no passwd entry
        return None


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default  # Keep default if invalid
    return parsed if parsed >= 0 else default


def _float_from_env(env: Mapping[str, str], name: str, default: float) -> float:
    value = env.get(name)
    if not value:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def load_settings(env: Optional[Mapping[str, str]] = None, **overrides) -> Settings:
    """Build settings from the environment, then apply explicit overrides.

    Args:
        env: Environment mapping. Defaults to os.environ.
        **overrides: Settings fields taking precedence over the environment.
            None values are ignored.

    Returns:
        Resolved Settings.
    """
    if env is None:
        env = os.environ

    debug_log = env.get(DEBUG_LOG_ENV)

    settings = Settings(
        config_dir=resolve_config_dir(env),
        cache_ttl=_int_from_env(env, CACHE_TTL_ENV, DEFAULT_CACHE_TTL),
        timeout=_float_from_env(env, TIMEOUT_ENV, DEFAULT_TIMEOUT),
        debug_log=Path(debug_log) if debug_log else None,
    )
    return settings.with_overrides(**overrides)


__all__ = [
    "CONFIG_DIR_ENV",
    "CACHE_TTL_ENV",
    "TIMEOUT_ENV",
    "DEBUG_LOG_ENV",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_MAX_RESPONSE_BYTES",
    "API_URL",
    "Settings",
    "resolve_config_dir",
    "load_settings",
]
