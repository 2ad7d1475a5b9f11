"""Credential lookup for the usage API.

Reads the Claude Code OAuth access token from the credentials file in the
configuration directory. The token is read fresh on every call and never
stored.
"""

from __future__ import annotations

import json
from pathlib import Path

from claude_statusline.errors import (
    ConfigDirUnresolvableError,
    CredentialsEmptyError,
    CredentialsUnparseableError,
    CredentialsUnreadableError,
)

CREDENTIALS_FILENAME = ".credentials.json"


def get_credentials_path(config_dir: Path) -> Path:
    """Get the path to the credentials file inside a config directory."""
    return config_dir / CREDENTIALS_FILENAME


def locate_token(config_dir: Path | None) -> str:
    """Get the OAuth access token from the credentials file.

    Args:
        config_dir: Claude configuration directory, or None if it could
            not be resolved.

    Returns:
        The access token string.

    Raises:
        ConfigDirUnresolvableError: If config_dir is None.
        CredentialsUnreadableError: If the file is missing or unreadable.
        CredentialsUnparseableError: If the file is not valid JSON.
        CredentialsEmptyError: If no access token is present.
    """
    if config_dir is None:
        raise ConfigDirUnresolvableError(
            "cannot find claude directory: set CLAUDE_CONFIG_DIR "
            "or ensure home directory is accessible"
        )

    creds_path = get_credentials_path(config_dir)
    try:
        raw = creds_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CredentialsUnreadableError(
            f"cannot read credentials: {creds_path}", details=str(e)
        ) from e

    try:
        creds = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise CredentialsUnparseableError(
            f"cannot parse credentials: {creds_path}", details=str(e)
        ) from e

    oauth = creds.get("claudeAiOauth") if isinstance(creds, dict) else None
    token = oauth.get("accessToken") if isinstance(oauth, dict) else None
    if not token or not isinstance(token, str):
        raise CredentialsEmptyError("no OAuth token found")

    return token


__all__ = ["CREDENTIALS_FILENAME", "get_credentials_path", "locate_token"]
