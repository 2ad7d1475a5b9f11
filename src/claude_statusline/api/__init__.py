"""Usage API client and caching.

Modules:
    models: Usage snapshot and cache record types
    client: Usage API client
    cache: Atomic usage cache
    usage: Cache-first usage lookup with stale fallback
"""

from claude_statusline.api.cache import (
    CACHE_FILENAME,
    get_cache_path,
    load_cache,
    save_cache,
)
from claude_statusline.api.client import (
    API_BETA_HEADER,
    USER_AGENT,
    fetch_usage,
)
from claude_statusline.api.models import CacheRecord, UsageLimit, UsageSnapshot
from claude_statusline.api.usage import UsageProvider, UsageResult, get_usage

__all__ = [
    # Models
    "UsageLimit",
    "UsageSnapshot",
    "CacheRecord",
    # Cache
    "CACHE_FILENAME",
    "get_cache_path",
    "load_cache",
    "save_cache",
    # Client
    "API_BETA_HEADER",
    "USER_AGENT",
    "fetch_usage",
    # Orchestrator
    "UsageProvider",
    "UsageResult",
    "get_usage",
]
