"""
Tests for `services/intensity_cache.py`.

Covers:
- Reads within TTL are hits; reads at or past TTL are misses and evict.
- Writes overwrite (last writer wins).
- stats() counts fresh/expired entries without evicting.
- clear() empties the cache.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from domain.intensity import CarbonIntensitySample, IntensitySource
from services.intensity_cache import IntensityCache


def _sample(clock, key: str = "US", intensity: float = 386.0) -> CarbonIntensitySample:
    return CarbonIntensitySample(
        region_key=key,
        intensity=intensity,
        source=IntensitySource.LIVE,
        observed_at=clock(),
        region="united-states",
    )


def test_get_returns_sample_within_ttl(clock) -> None:
    cache = IntensityCache(ttl=timedelta(minutes=5), clock=clock)
    sample = _sample(clock)
    cache.put("US", sample)

    clock.advance(minutes=4, seconds=59)

    assert cache.get("US") is sample


def test_get_past_ttl_is_miss_and_evicts(clock) -> None:
    """Verify a stale entry is never returned and is removed on read."""

    cache = IntensityCache(ttl=timedelta(minutes=5), clock=clock)
    cache.put("US", _sample(clock))

    clock.advance(minutes=5)

    assert cache.get("US") is None
    assert len(cache) == 0


def test_get_unknown_key_is_miss(clock) -> None:
    cache = IntensityCache(clock=clock)

    assert cache.get("DE") is None


def test_put_overwrites_existing_entry(clock) -> None:
    cache = IntensityCache(clock=clock)
    cache.put("US", _sample(clock, intensity=100.0))
    cache.put("US", _sample(clock, intensity=200.0))

    assert cache.get("US").intensity == 200.0
    assert len(cache) == 1


def test_stats_counts_without_evicting(clock) -> None:
    cache = IntensityCache(ttl=timedelta(minutes=5), clock=clock)
    cache.put("US", _sample(clock, "US"))
    clock.advance(minutes=3)
    cache.put("DE", _sample(clock, "DE"))
    clock.advance(minutes=3)

    stats = cache.stats()

    assert stats.total == 2
    assert stats.valid == 1
    assert stats.expired == 1
    assert stats.ttl_seconds == 300
    assert stats.ttl_minutes == 5
    assert len(cache) == 2


def test_stats_to_dict(clock) -> None:
    cache = IntensityCache(ttl=timedelta(seconds=90), clock=clock)

    assert cache.stats().to_dict() == {
        "total": 0,
        "valid": 0,
        "expired": 0,
        "ttl_seconds": 90.0,
        "ttl_minutes": 1.5,
    }


def test_clear_empties_cache(clock) -> None:
    cache = IntensityCache(clock=clock)
    cache.put("US", _sample(clock, "US"))
    cache.put("DE", _sample(clock, "DE"))

    cache.clear()

    assert len(cache) == 0
    assert cache.get("US") is None


def test_ttl_must_be_positive(clock) -> None:
    with pytest.raises(ValueError):
        IntensityCache(ttl=timedelta(0), clock=clock)
