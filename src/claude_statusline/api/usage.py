"""Usage retrieval with cache and stale fallback.

Decision procedure for one invocation:

1. A cache record younger than the freshness window is returned as is.
2. Otherwise the OAuth token is read and the usage API is called.
3. If either step fails and any cache record exists, the stale record is
   returned with a warning. Without a cache the error is returned.
4. A fresh snapshot is written through to the cache. A failed write only
   produces a warning.
"""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, NamedTuple, Optional

from claude_statusline.api.cache import get_cache_path, load_cache, save_cache
from claude_statusline.api.client import fetch_usage
from claude_statusline.api.models import CacheRecord, UsageSnapshot
from claude_statusline.config.credentials import locate_token
from claude_statusline.config.debuglog import DebugEvent, DebugLog
from claude_statusline.config.settings import Settings, load_settings
from claude_statusline.errors import (
    CacheError,
    CacheNotFoundError,
    CacheWriteError,
    StatuslineError,
)
from claude_statusline.utils.time import format_age, utcnow


class UsageResult(NamedTuple):
    """Outcome of a usage lookup.

    Attributes:
        usage: Snapshot to display, or None when nothing is available.
        fetched_at: When the snapshot was fetched, or None.
        error: The failure when no snapshot is available, else None.
        stale: True when an expired cache record is being served.
    """

    usage: Optional[UsageSnapshot]
    fetched_at: Optional[datetime]
    error: Optional[StatuslineError] = None
    stale: bool = False


def warn_stderr(message: str) -> None:
    """Print a non-fatal warning to stderr."""
    print(f"warning: {message}", file=sys.stderr)


class UsageProvider:
    """Resolve usage data for the status line.

    Args:
        settings: Resolved settings (config dir, TTL, endpoint, timeout).
        fetcher: Callable performing the API request. Receives the token
            plus endpoint, timeout, max_bytes and debug_log keywords.
        token_locator: Callable returning the OAuth token for a config dir.
        clock: Returns the current time as an aware datetime.
        warn: Receives non-fatal warning messages.
        debug_log: Optional debug logger.
        use_cache: If False, skip the freshness check. Stale fallback
            still applies.
    """

    def __init__(
        self,
        settings: Settings,
        fetcher: Callable[..., UsageSnapshot] = fetch_usage,
        token_locator: Callable[[Optional[Path]], str] = locate_token,
        clock: Callable[[], datetime] = utcnow,
        warn: Callable[[str], None] = warn_stderr,
        debug_log: Optional[DebugLog] = None,
        use_cache: bool = True,
    ):
        self.settings = settings
        self.fetcher = fetcher
        self.token_locator = token_locator
        self.clock = clock
        self.warn = warn
        self.debug_log = debug_log or DebugLog(settings.debug_log)
        self.use_cache = use_cache

    @property
    def cache_path(self) -> Path:
        return get_cache_path(self.settings.config_dir)

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(seconds=self.settings.cache_ttl)

    def _load_cached(self) -> Optional[CacheRecord]:
        """Load the cache record, treating any read failure as no cache."""
        try:
            return load_cache(self.cache_path)
        except CacheNotFoundError:
            self.debug_log.log(DebugEvent.CACHE_MISS, "No cache file")
            return None
        except CacheError as e:
            self.debug_log.log(
                DebugEvent.CACHE_MISS,
                "Cache unusable",
                details={"error": e.message},
                success=False,
            )
            return None

    def _fallback(
        self,
        cached: Optional[CacheRecord],
        error: StatuslineError,
        source: str,
        now: datetime,
    ) -> UsageResult:
        if cached is None:
            return UsageResult(None, None, error)

        age = format_age(cached.age(now))
        self.warn(f"using cached data from {age} ago ({source} error: {error.message})")
        self.debug_log.log(
            DebugEvent.FALLBACK,
            "Serving stale cache",
            details={"age": age, "source": source, "error": error.message},
            success=False,
        )
        return UsageResult(cached.usage, cached.fetched_at, None, stale=True)

    def get_usage(self) -> UsageResult:
        """Return the usage data to display.

        Never raises for credential, network, API or cache failures; they
        are reported through the result or as warnings.
        """
        now = self.clock()
        cached = self._load_cached()

        if cached is not None and self.use_cache and cached.is_fresh(now, self.cache_ttl):
            self.debug_log.log(
                DebugEvent.CACHE_HIT,
                "Using fresh cache",
                details={"age_seconds": int(cached.age(now).total_seconds())},
            )
            return UsageResult(cached.usage, cached.fetched_at)

        if cached is not None:
            self.debug_log.log(DebugEvent.CACHE_STALE, "Cache expired, refreshing")

        try:
            token = self.token_locator(self.settings.config_dir)
        except StatuslineError as e:
            self.debug_log.log(
                DebugEvent.CREDENTIAL_READ,
                "Token lookup failed",
                details={"error": e.message},
                success=False,
            )
            return self._fallback(cached, e, "token", now)

        self.debug_log.log(DebugEvent.CREDENTIAL_READ, "Token loaded")

        try:
            usage = self.fetcher(
                token,
                endpoint=self.settings.endpoint,
                timeout=self.settings.timeout,
                max_bytes=self.settings.max_response_bytes,
                debug_log=self.debug_log,
            )
        except StatuslineError as e:
            return self._fallback(cached, e, "API", self.clock())

        fetched_at = self.clock()
        try:
            save_cache(self.cache_path, usage, now=fetched_at)
            self.debug_log.log(
                DebugEvent.CACHE_WRITE,
                "Cache updated",
                details={"path": str(self.cache_path)},
            )
        except CacheWriteError as e:
            self.warn(f"failed to save cache: {e.message}")
            self.debug_log.log(
                DebugEvent.CACHE_WRITE_FAILED,
                "Cache write failed",
                details={"stage": e.stage, "error": e.message},
                success=False,
            )

        return UsageResult(usage, fetched_at)


def get_usage(settings: Optional[Settings] = None) -> UsageResult:
    """Resolve usage with default collaborators.

    Args:
        settings: Settings to use. Defaults to load_settings().
    """
    return UsageProvider(settings or load_settings()).get_usage()


__all__ = ["UsageResult", "UsageProvider", "warn_stderr", "get_usage"]
