"""
In-memory TTL cache for carbon-intensity samples.

Owned by a CarbonIntensityResolver instance (not a process-wide singleton), so
independent resolvers and tests never share state.

Behavior:
- An entry is fresh iff now - inserted_at < ttl.
- A read of a stale entry is a miss; the stale entry is evicted at that point.
- Writes are last-writer-wins.
- All access goes through a lock so the map is safe under threads as well as
  under a single event loop.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from domain.intensity import CacheEntry, CarbonIntensitySample, RegionKey
from domain.time import utc_now

DEFAULT_TTL = timedelta(minutes=5)


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache contents at a point in time."""

    total: int
    valid: int
    expired: int
    ttl_seconds: float

    @property
    def ttl_minutes(self) -> float:
        return self.ttl_seconds / 60

    def to_dict(self) -> Dict[str, float]:
        return {
            "total": self.total,
            "valid": self.valid,
            "expired": self.expired,
            "ttl_seconds": self.ttl_seconds,
            "ttl_minutes": self.ttl_minutes,
        }


class IntensityCache:
    """TTL map from RegionKey to CacheEntry."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if ttl <= timedelta(0):
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[RegionKey, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        return self._clock()

    def get(self, key: RegionKey) -> Optional[CarbonIntensitySample]:
        """Return the cached sample if fresh, else None (evicting a stale entry)."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_fresh(now, self._ttl):
                return entry.sample
            del self._entries[key]
            return None

    def put(self, key: RegionKey, sample: CarbonIntensitySample) -> CacheEntry:
        """Insert or overwrite the entry for key, stamped with the current time."""
        entry = CacheEntry(sample=sample, inserted_at=self._clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        """Count fresh and stale entries without evicting anything."""
        now = self._clock()
        with self._lock:
            entries = list(self._entries.values())

        valid = sum(1 for entry in entries if entry.is_fresh(now, self._ttl))
        return CacheStats(
            total=len(entries),
            valid=valid,
            expired=len(entries) - valid,
            ttl_seconds=self._ttl.total_seconds(),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["CacheStats", "DEFAULT_TTL", "IntensityCache"]
