"""Debug logging for the usage fetch path.

Writes one JSON object per line with rotation. A logger without a path is
a no-op, so callers can always log unconditionally.
"""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from pathlib import Path

from claude_statusline.config.security import sanitize_details

DEBUG_MAX_SIZE_MB = 5
DEBUG_MAX_FILES = 3


class DebugEvent:
    """Debug event type constants."""

    CACHE_HIT = "cache.hit"
    CACHE_MISS = "cache.miss"
    CACHE_STALE = "cache.stale"
    CACHE_WRITE = "cache.write"
    CACHE_WRITE_FAILED = "cache.write.failed"

    CREDENTIAL_READ = "credential.read"

    API_REQUEST = "api.request"
    API_SUCCESS = "api.success"
    API_ERROR = "api.error"

    FALLBACK = "usage.fallback"


class DebugLog:
    """JSON-lines debug logger.

    Args:
        log_path: File to append to. None disables logging.
    """

    def __init__(self, log_path: Path | None = None):
        self.log_path = log_path

    @property
    def enabled(self) -> bool:
        return self.log_path is not None

    def _rotate(self) -> None:
        """Rotate the log if it exceeds the size limit."""
        if self.log_path is None or not self.log_path.exists():
            return

        try:
            size_mb = self.log_path.stat().st_size / (1024 * 1024)
            if size_mb < DEBUG_MAX_SIZE_MB:
                return

            for i in range(DEBUG_MAX_FILES - 1, 0, -1):
                old_path = self.log_path.with_suffix(f".log.{i}")
                new_path = self.log_path.with_suffix(f".log.{i + 1}")
                if old_path.exists():
                    if i + 1 >= DEBUG_MAX_FILES:
                        old_path.unlink()
                    else:
                        old_path.rename(new_path)

            self.log_path.rename(self.log_path.with_suffix(".log.1"))
        except OSError:
            pass  # Best effort rotation

    def log(
        self,
        event_type: str,
        message: str,
        details: dict | None = None,
        success: bool = True,
    ) -> None:
        """Append a debug event.

        Args:
            event_type: Type of event (use DebugEvent constants).
            message: Human-readable description of the event.
            details: Optional structured data; sensitive keys are masked.
            success: Whether the operation was successful.
        """
        if self.log_path is None:
            return

        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event_type,
            "message": message,
            "success": success,
            "pid": os.getpid(),
        }
        if details:
            record["details"] = sanitize_details(details)

        self._rotate()

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record) + "\n")
            os.chmod(self.log_path, 0o600)
        except OSError:
            pass  # Best effort logging

    def read_entries(self, limit: int | None = None) -> list[dict]:
        """Read logged entries, oldest first.

        Args:
            limit: Return only the last N entries.

        Returns:
            Parsed entries; corrupt lines are skipped.
        """
        if self.log_path is None or not self.log_path.exists():
            return []

        entries = []
        try:
            with open(self.log_path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        entries.append(json.loads(line))
                    except json.JSONDecodeError:
                        continue
        except OSError:
            return []

        if limit is not None:
            entries = entries[-limit:]
        return entries


NULL_LOG = DebugLog(None)


__all__ = [
    "DEBUG_MAX_SIZE_MB",
    "DEBUG_MAX_FILES",
    "DebugEvent",
    "DebugLog",
    "NULL_LOG",
]
