"""
Impact calculation service.

Turns (tokens, model, region) into an ImpactResult:

    energy_kwh = tokens * energy_per_token(model)
    co2_kg     = energy_kwh * co2_factor_kg_per_kwh(region)

The CO2 factor comes from exactly one of two paths:
- static table: region is static-only (global-average, renewable) OR live
  data was not requested
- resolver: every other region; the sample's gCO2/kWh is divided by 1000

Equivalences are derived from the unrounded co2_kg; rounding is display-only.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from domain.impact import (
    DEFAULT_MODEL,
    DEFAULT_REGION,
    Equivalences,
    ImpactRequest,
    ImpactResult,
    Provenance,
    validate_token_count,
)
from domain.time import utc_now
from repositories.static_factors import (
    ENERGY_PER_TOKEN_KWH,
    EQUIVALENCE_FACTORS,
    MODEL_DISPLAY_NAMES,
    STATIC_ONLY_REGIONS,
    STATIC_REGION_DISPLAY_NAMES,
    get_all_static_regions,
    get_energy_per_token,
    get_live_region_catalog,
    get_static_co2_factor,
)
from services.carbon_intensity_service import CarbonIntensityResolver

logger = logging.getLogger(__name__)

STATIC_SOURCE = "static"


def calculate_equivalences(co2_kg: float) -> Equivalences:
    """
    Convert kg CO2 to everyday comparisons.

    Each metric is co2_kg / constant. Count-like metrics (phone charges,
    lightbulb hours) are rounded to whole numbers, the rest to 2 decimals.
    """
    values: Dict[str, Any] = {}
    for factor in EQUIVALENCE_FACTORS:
        raw = max(co2_kg, 0.0) / factor.kg_co2_per_unit
        values[factor.name] = round(raw) if factor.decimals is None else round(raw, factor.decimals)
    return Equivalences(**values)


def is_static_only_region(region: str) -> bool:
    return region.strip().lower() in STATIC_ONLY_REGIONS


class ImpactCalculator:
    """
    Computes ImpactResults, consulting a CarbonIntensityResolver for live data.

    Stateless apart from the resolver's cache.
    """

    def __init__(
        self,
        resolver: CarbonIntensityResolver,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._resolver = resolver
        self._clock = clock

    @property
    def resolver(self) -> CarbonIntensityResolver:
        return self._resolver

    async def compute(
        self,
        tokens: Any,
        model: Optional[str] = DEFAULT_MODEL,
        region: Optional[str] = DEFAULT_REGION,
        use_live_data: bool = True,
    ) -> ImpactResult:
        """
        Calculate environmental impact for a token count.

        Args:
            tokens: Positive integer token count
            model: Model key (unknown models use the default energy constant)
            region: Country code or named static region
            use_live_data: Whether to consult the live resolver

        Returns:
            ImpactResult

        Raises:
            ValidationError: If tokens is missing, non-numeric or <= 0
        """
        token_count = validate_token_count(tokens)
        model_name = model or DEFAULT_MODEL
        region_key = region or DEFAULT_REGION

        energy_per_token = get_energy_per_token(model_name)
        energy_kwh = token_count * energy_per_token

        co2_factor, provenance = await self._resolve_factor(region_key, use_live_data)
        co2_kg = energy_kwh * co2_factor

        return ImpactResult(
            tokens=token_count,
            model=model_name,
            region=region_key,
            energy_kwh=energy_kwh,
            co2_kg=co2_kg,
            co2_factor_kg_per_kwh=co2_factor,
            equivalences=calculate_equivalences(co2_kg),
            provenance=provenance,
        )

    async def compute_request(self, request: ImpactRequest) -> ImpactResult:
        return await self.compute(
            request.tokens, request.model, request.region, request.use_live_data
        )

    async def compute_many(self, requests: Sequence[ImpactRequest]) -> List[ImpactResult]:
        """
        Compute several requests concurrently, preserving input order.

        Requests are validated when ImpactRequest is constructed, so a bad
        entry fails the batch before any lookup runs.
        """
        return list(await asyncio.gather(*(self.compute_request(r) for r in requests)))

    async def _resolve_factor(self, region: str, use_live_data: bool) -> Tuple[float, Provenance]:
        if is_static_only_region(region) or not use_live_data:
            logger.debug(
                f"Using static CO2 factor for {region}",
                extra={"region": region, "use_live_data": use_live_data},
            )
            return get_static_co2_factor(region), Provenance(
                used_live_data=False,
                source=STATIC_SOURCE,
                observed_at=self._clock(),
            )

        sample = await self._resolver.resolve(region)
        return sample.intensity_kg_per_kwh, Provenance(
            used_live_data=sample.is_live,
            source=sample.source.value,
            observed_at=sample.observed_at,
            fossil_fuel_pct=sample.fossil_fuel_pct,
            renewable_pct=sample.renewable_pct,
        )


# ============================================================================
# Catalog
# ============================================================================

def available_models() -> List[str]:
    return list(ENERGY_PER_TOKEN_KWH.keys())


def model_info() -> Dict[str, str]:
    return dict(MODEL_DISPLAY_NAMES)


def region_info() -> Dict[str, str]:
    return dict(STATIC_REGION_DISPLAY_NAMES)


def live_region_catalog() -> Dict[str, Dict[str, str]]:
    return get_live_region_catalog()


def available_regions() -> List[str]:
    """Live-data named regions followed by static regions, without duplicates."""
    regions = list(get_live_region_catalog().keys()) + get_all_static_regions()
    return list(dict.fromkeys(regions))


__all__ = [
    "ImpactCalculator",
    "STATIC_SOURCE",
    "available_models",
    "available_regions",
    "calculate_equivalences",
    "is_static_only_region",
    "live_region_catalog",
    "model_info",
    "region_info",
]
