"""Configuration management.

Modules:
    settings: Settings resolution from environment and CLI flags
    credentials: OAuth token lookup
    security: Token masking for logs
    debuglog: Optional JSON-lines debug log
"""

from claude_statusline.config.credentials import (
    CREDENTIALS_FILENAME,
    get_credentials_path,
    locate_token,
)
from claude_statusline.config.debuglog import NULL_LOG, DebugEvent, DebugLog
from claude_statusline.config.security import mask_token, sanitize_details
from claude_statusline.config.settings import (
    API_URL,
    DEFAULT_CACHE_TTL,
    DEFAULT_TIMEOUT,
    Settings,
    load_settings,
    resolve_config_dir,
)

__all__ = [
    # Settings
    "API_URL",
    "DEFAULT_CACHE_TTL",
    "DEFAULT_TIMEOUT",
    "Settings",
    "load_settings",
    "resolve_config_dir",
    # Credentials
    "CREDENTIALS_FILENAME",
    "get_credentials_path",
    "locate_token",
    # Logging
    "DebugEvent",
    "DebugLog",
    "NULL_LOG",
    "mask_token",
    "sanitize_details",
]
