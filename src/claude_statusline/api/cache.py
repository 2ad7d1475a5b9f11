"""Usage cache with atomic writes.

The cache holds the last successfully fetched usage snapshot and the time
it was fetched. Writes go to a temporary file in the cache directory that
is renamed over the cache path, so readers see either the previous record
or the new one and never a partial file.
"""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime
from pathlib import Path

from claude_statusline.api.models import CacheRecord, UsageSnapshot
from claude_statusline.errors import (
    CacheNotFoundError,
    CacheUnparseableError,
    CacheUnreadableError,
    CacheWriteError,
    DecodeError,
)
from claude_statusline.utils.time import utcnow

# Cache file locations
CACHE_FILENAME = ".statusline-cache.json"
FALLBACK_CACHE_FILENAME = "claude-statusline-cache.json"
TEMP_PREFIX = ".statusline-cache-"
TEMP_SUFFIX = ".tmp"


def get_cache_path(config_dir: Path | None) -> Path:
    """Get the cache file path.

    Args:
        config_dir: Claude configuration directory, or None.

    Returns:
        Path inside config_dir, or in the system temp directory when
        config_dir is None.
    """
    if config_dir is None:
        return Path(tempfile.gettempdir()) / FALLBACK_CACHE_FILENAME
    return config_dir / CACHE_FILENAME


def load_cache(path: Path) -> CacheRecord:
    """Load the cached usage record regardless of its age.

    Args:
        path: Cache file path.

    Returns:
        The cached record.

    Raises:
        CacheNotFoundError: If no cache file exists.
        CacheUnreadableError: If the file cannot be read.
        CacheUnparseableError: If the content is not a valid record.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise CacheNotFoundError(f"no cache at {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise CacheUnreadableError(f"cannot read cache: {path}", details=str(e)) from e

    try:
        return CacheRecord.from_dict(json.loads(raw))
    except (ValueError, RecursionError) as e:
        raise CacheUnparseableError(f"cannot parse cache: {path}", details=str(e)) from e
    except DecodeError as e:
        raise CacheUnparseableError(f"invalid cache record: {e.message}") from e


def _discard(temp_path: Path) -> None:
    try:
        temp_path.unlink()
    except OSError:
        pass  # Best effort cleanup


def save_cache(path: Path, usage: UsageSnapshot, now: datetime | None = None) -> CacheRecord:
    """Atomically replace the cache with a new record.

    On failure, including an interrupt, the temporary file is removed and
    any existing cache file is left as it was.

    Args:
        path: Cache file path. Its directory must already exist.
        usage: Snapshot to persist.
        now: Fetch time to record. Defaults to the current time.

    Returns:
        The record that was written.

    Raises:
        CacheWriteError: With stage set to the step that failed.
    """
    record = CacheRecord(fetched_at=now or utcnow(), usage=usage)
    try:
        payload = json.dumps(record.to_dict(), indent=2).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise CacheWriteError("serialize", f"failed to serialize cache: {e}") from e

    try:
        fd, temp_name = tempfile.mkstemp(
            prefix=TEMP_PREFIX, suffix=TEMP_SUFFIX, dir=str(path.parent)
        )
    except OSError as e:
        raise CacheWriteError("create", f"failed to create temp file: {e}") from e

    temp_path = Path(temp_name)
    published = False
    try:
        try:
            f = os.fdopen(fd, "wb")
        except OSError as e:
            os.close(fd)
            raise CacheWriteError("write", f"failed to open temp file: {e}") from e

        try:
            with f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise CacheWriteError("write", f"failed to write temp file: {e}") from e

        try:
            os.chmod(temp_path, 0o600)
        except OSError as e:
            raise CacheWriteError("chmod", f"failed to set permissions: {e}") from e

        try:
            os.replace(temp_path, path)
        except OSError as e:
            raise CacheWriteError("rename", f"failed to rename cache file: {e}") from e
        published = True
    finally:
        if not published:
            _discard(temp_path)

    return record


__all__ = [
    "CACHE_FILENAME",
    "FALLBACK_CACHE_FILENAME",
    "get_cache_path",
    "load_cache",
    "save_cache",
]
