"""Usage data types.

Typed views over the usage API payload and the on-disk cache record.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from claude_statusline.errors import DecodeError
from claude_statusline.utils.time import parse_timestamp

# Usage windows reported by the API, in display order
USAGE_WINDOWS = ("five_hour", "seven_day", "seven_day_opus")


@dataclass(frozen=True)
class UsageLimit:
    """One rate-limit window.

    Attributes:
        utilization: Percentage used, on a 0-100 scale.
        resets_at: ISO 8601 reset time, or '' when not reported.
    """

    utilization: float
    resets_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UsageLimit:
        if not isinstance(data, dict):
            raise DecodeError(f"usage window must be an object, got {type(data).__name__}")
        utilization = data.get("utilization", 0)
        if utilization is None:
            utilization = 0
        if isinstance(utilization, bool) or not isinstance(utilization, (int, float)):
            raise DecodeError("usage window utilization must be a number")
        resets_at = data.get("resets_at") or ""
        if not isinstance(resets_at, str):
            raise DecodeError("usage window resets_at must be a string")
        return cls(utilization=float(utilization), resets_at=resets_at)

    def to_dict(self) -> dict[str, Any]:
        return {"utilization": self.utilization, "resets_at": self.resets_at}


@dataclass(frozen=True)
class UsageSnapshot:
    """Usage limits at one point in time. Missing windows are None."""

    five_hour: Optional[UsageLimit] = None
    seven_day: Optional[UsageLimit] = None
    seven_day_opus: Optional[UsageLimit] = None

    @classmethod
    def from_dict(cls, data: Any) -> UsageSnapshot:
        """Build a snapshot from a decoded usage response.

        Unknown keys are ignored and null windows become None.

        Raises:
            DecodeError: If the payload is not a usage object.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"usage response must be an object, got {type(data).__name__}")
        windows = {}
        for name in USAGE_WINDOWS:
            value = data.get(name)
            windows[name] = UsageLimit.from_dict(value) if value is not None else None
        return cls(**windows)

    def to_dict(self) -> dict[str, Any]:
        return {
            name: (limit.to_dict() if limit is not None else None)
            for name, limit in (
                ("five_hour", self.five_hour),
                ("seven_day", self.seven_day),
                ("seven_day_opus", self.seven_day_opus),
            )
        }


@dataclass(frozen=True)
class CacheRecord:
    """The persisted result of the last successful fetch."""

    fetched_at: datetime
    usage: UsageSnapshot

    def age(self, now: datetime) -> timedelta:
        """Time since the fetch; never negative."""
        return max(now - self.fetched_at, timedelta(0))

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        return self.age(now) < ttl

    @classmethod
    def from_dict(cls, data: Any) -> CacheRecord:
        """Rebuild a record from its JSON form.

        Raises:
            DecodeError: If fetched_at or usage is missing or invalid.
        """
        if not isinstance(data, dict):
            raise DecodeError("cache record must be an object")
        fetched_at = data.get("fetched_at")
        if not isinstance(fetched_at, str) or not fetched_at:
            raise DecodeError("cache record has no fetched_at")
        try:
            fetched_dt = parse_timestamp(fetched_at)
        except ValueError as e:
            raise DecodeError(f"cache record has invalid fetched_at: {fetched_at}") from e
        if data.get("usage") is None:
            raise DecodeError("cache record has no usage")
        return cls(fetched_at=fetched_dt, usage=UsageSnapshot.from_dict(data["usage"]))

    def to_dict(self) -> dict[str, Any]:
        return {
            "fetched_at": self.fetched_at.isoformat(),
            "usage": self.usage.to_dict(),
        }


__all__ = ["USAGE_WINDOWS", "UsageLimit", "UsageSnapshot", "CacheRecord"]
