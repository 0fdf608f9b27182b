"""
Domain: carbon-intensity readings and cache entries.

A CarbonIntensitySample is a point-in-time reading of grid carbon intensity
for one region, expressed in gCO2/kWh. Samples come from either the live
provider or the static fallback tables; the source field says which.

A CacheEntry pairs a sample with the instant it was cached. Entries are
considered stale once their age reaches the TTL; a stale entry is a miss,
never a result.

This module contains only pure value objects: no I/O, no frameworks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .time import require_utc_timestamp

# Either a 2-letter ISO country code ("US") or a named static region
# ("global-average", "renewable"). Used purely as a lookup key.
RegionKey = str


class IntensitySource(str, Enum):
    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class CarbonIntensitySample:
    """
    Immutable reading of grid carbon intensity.

    intensity is in gCO2/kWh, finite and always > 0. fossil_fuel_pct and
    renewable_pct are only known for live readings.
    """

    region_key: RegionKey
    intensity: float
    source: IntensitySource
    observed_at: datetime
    region: str = "global-average"  # normalized named region for the key
    fossil_fuel_pct: Optional[float] = None
    renewable_pct: Optional[float] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("observed_at", self.observed_at)
        if not self.region_key:
            raise ValueError("region_key must be non-empty")
        if not math.isfinite(self.intensity) or self.intensity <= 0:
            raise ValueError("intensity must be a finite number > 0")
        for name in ("fossil_fuel_pct", "renewable_pct"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be finite")

    @property
    def is_live(self) -> bool:
        return self.source is IntensitySource.LIVE

    @property
    def intensity_kg_per_kwh(self) -> float:
        """Intensity converted from gCO2/kWh to kgCO2/kWh."""

        return self.intensity / 1000


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A cached sample and the UTC instant it was inserted."""

    sample: CarbonIntensitySample
    inserted_at: datetime

    def __post_init__(self) -> None:
        require_utc_timestamp("inserted_at", self.inserted_at)

    def age(self, now: datetime) -> timedelta:
        require_utc_timestamp("now", now)
        return now - self.inserted_at

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        """Fresh iff now - inserted_at < ttl."""

        return self.age(now) < ttl
