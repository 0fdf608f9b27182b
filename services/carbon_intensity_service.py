"""
Carbon intensity service.

Maps a region key (ISO country code) to a current carbon-intensity sample,
preferring live provider data and always returning a usable value.

Resolution order for resolve(region_key):
1. Fresh cache entry -> returned as-is, no network call
2. Live provider (only when an API key is configured), bounded by a timeout
3. Static fallback table (country -> named region -> average gCO2/kWh)

Both live and fallback samples are cached, so a failing provider is asked at
most once per region per TTL window.

Provider failures never escape this module: the live fetch yields a
ProviderFetchResult, and a failed result is turned into a fallback sample.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List, Optional, Sequence

import httpx

from domain.errors import ProviderError
from domain.intensity import CarbonIntensitySample, IntensitySource, RegionKey
from repositories.client import ProviderSettings, create_http_client, load_provider_settings
from repositories.co2signal_client import fetch_latest
from repositories.static_factors import (
    GLOBAL_AVERAGE,
    get_fallback_intensity,
    map_country_code_to_region,
)
from services.intensity_cache import CacheStats, IntensityCache

logger = logging.getLogger(__name__)

_COUNTRY_CODE_RE = re.compile(r"^[A-Z]{2}$")


@dataclass(frozen=True, slots=True)
class ProviderFetchResult:
    """
    Outcome of one live lookup.

    success: True if the provider returned a usable reading
    sample: The live sample (None on failure)
    error: What went wrong (None on success)
    """
    success: bool
    sample: Optional[CarbonIntensitySample]
    error: Optional[ProviderError]


def normalize_region_key(region_key: Optional[str]) -> RegionKey:
    """Upper-case, trimmed cache key. Blank keys map to the global bucket."""

    key = (region_key or "").strip().upper()
    return key or GLOBAL_AVERAGE.upper()


class CarbonIntensityResolver:
    """
    Resolves carbon intensity per region with caching and fallback.

    Each instance owns its own cache. When no http_client is supplied the
    resolver creates one lazily and closes it in aclose().
    """

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        cache: Optional[IntensityCache] = None,
    ) -> None:
        self._settings = settings if settings is not None else load_provider_settings()
        self._cache = cache if cache is not None else IntensityCache(
            ttl=timedelta(seconds=self._settings.cache_ttl_seconds)
        )
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def settings(self) -> ProviderSettings:
        return self._settings

    @property
    def live_enabled(self) -> bool:
        return self._settings.live_enabled

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = create_http_client(self._settings)
        return self._http_client

    async def aclose(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def resolve(self, region_key: RegionKey) -> CarbonIntensitySample:
        """
        Return a carbon-intensity sample for region_key. Never raises.

        Args:
            region_key: ISO 3166-1 alpha-2 country code (case-insensitive).
                Anything else resolves to the global-average fallback.

        Returns:
            CarbonIntensitySample with source LIVE or FALLBACK
        """
        key = normalize_region_key(region_key)

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(
                f"Using cached carbon intensity for {key}: {cached.intensity} gCO2/kWh",
                extra={"region_key": key, "source": cached.source.value},
            )
            return cached

        if not self.live_enabled:
            logger.info(
                f"No CO2Signal API key configured, using fallback data for {key}",
                extra={"region_key": key},
            )
        elif not _COUNTRY_CODE_RE.match(key):
            logger.debug(
                f"Region key {key!r} is not a country code, skipping live lookup",
                extra={"region_key": key},
            )
        else:
            result = await self._fetch_live(key)
            if result.success and result.sample is not None:
                self._cache.put(key, result.sample)
                logger.info(
                    f"Real-time carbon intensity for {key}: {result.sample.intensity} gCO2/kWh",
                    extra={"region_key": key, "source": IntensitySource.LIVE.value},
                )
                return result.sample

            error = result.error
            logger.warning(
                f"Error fetching carbon intensity for {key}: {error}",
                extra={
                    "region_key": key,
                    "error_code": error.code if error else None,
                },
            )

        sample = self.fallback_sample(key)
        self._cache.put(key, sample)
        logger.info(
            f"Using fallback data for {key}: {sample.intensity} gCO2/kWh",
            extra={"region_key": key, "region": sample.region},
        )
        return sample

    async def resolve_many(self, region_keys: Sequence[RegionKey]) -> List[CarbonIntensitySample]:
        """
        Resolve several regions concurrently.

        Keys are independent; results come back in input order regardless of
        completion order.
        """
        return list(await asyncio.gather(*(self.resolve(key) for key in region_keys)))

    def fallback_sample(self, region_key: RegionKey) -> CarbonIntensitySample:
        """Static fallback sample for a region key. Pure lookup, no caching."""
        key = normalize_region_key(region_key)
        region, intensity = get_fallback_intensity(key)
        return CarbonIntensitySample(
            region_key=key,
            intensity=intensity,
            source=IntensitySource.FALLBACK,
            observed_at=self._cache.now(),
            region=region,
            fossil_fuel_pct=None,
            renewable_pct=None,
        )

    async def _fetch_live(self, key: RegionKey) -> ProviderFetchResult:
        """
        One bounded call to the provider, expressed as a result value.

        The whole call (connect, read, parse) is limited to the configured
        timeout.
        """
        try:
            payload = await asyncio.wait_for(
                fetch_latest(self._client(), key),
                timeout=self._settings.timeout_seconds,
            )
            sample = CarbonIntensitySample(
                region_key=key,
                intensity=payload.carbon_intensity,
                source=IntensitySource.LIVE,
                observed_at=self._cache.now(),
                region=map_country_code_to_region(key),
                fossil_fuel_pct=payload.fossil_fuel_pct,
                renewable_pct=payload.renewable_pct,
            )
            return ProviderFetchResult(success=True, sample=sample, error=None)

        except ProviderError as e:
            return ProviderFetchResult(success=False, sample=None, error=e)

        except asyncio.TimeoutError:
            return ProviderFetchResult(
                success=False,
                sample=None,
                error=ProviderError(
                    "timeout",
                    f"No response for {key} within {self._settings.timeout_seconds}s",
                ),
            )

        except Exception as e:
            return ProviderFetchResult(
                success=False,
                sample=None,
                error=ProviderError("unexpected", f"{type(e).__name__}: {e}"),
            )

    def clear_cache(self) -> None:
        self._cache.clear()
        logger.info("Carbon intensity cache cleared")

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def describe(self) -> Dict[str, object]:
        """Feature summary for health checks."""
        return {
            "real_time_data": self.live_enabled,
            "caching": True,
            "fallback_data": True,
            "timeout_seconds": self._settings.timeout_seconds,
        }


__all__ = [
    "CarbonIntensityResolver",
    "ProviderFetchResult",
    "normalize_region_key",
]
