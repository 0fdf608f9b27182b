"""
Carbon Intensity API Endpoints.

Endpoints for real-time (or fallback) grid carbon intensity, plus cache
inspection for operators.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api import __version__
from api.dependencies import get_resolver
from api.models import (
    CacheStatsResponse,
    CarbonHealthResponse,
    CarbonIntensityResponse,
    ErrorResponse,
    IntensityBatchRequest,
    IntensityBatchResponse,
    MessageResponse,
    RegionCatalogResponse,
)
from services.carbon_intensity_service import CarbonIntensityResolver
from services.impact_service import live_region_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/carbon")

MAX_BATCH_SIZE = 50
HEALTH_CHECK_COUNTRY = "US"


def _is_country_code(code: str) -> bool:
    return isinstance(code, str) and len(code.strip()) == 2 and code.strip().isalpha()


@router.get(
    "/regions",
    response_model=RegionCatalogResponse,
    summary="List Carbon Intensity Regions",
)
def list_carbon_regions():
    """Named regions with their display names and ISO country codes."""
    regions = live_region_catalog()
    return RegionCatalogResponse(regions=regions, count=len(regions))


@router.get(
    "/intensity/{country_code}",
    response_model=CarbonIntensityResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Get Carbon Intensity",
    description="Current carbon intensity (gCO2/kWh) for a 2-letter ISO country code."
)
async def get_carbon_intensity(
    country_code: str,
    resolver: CarbonIntensityResolver = Depends(get_resolver),
):
    """
    Get carbon intensity for one country.

    Uses real-time data when a provider key is configured and the provider
    responds; otherwise returns the static average (`source: "fallback"`).
    Results are cached for 5 minutes.

    **Example usage:**
    - `GET /api/v1/carbon/intensity/DE`
    """
    if not _is_country_code(country_code):
        raise HTTPException(
            status_code=400,
            detail="Invalid country code. Must be a 2-letter ISO country code (e.g., US, DE, FR)"
        )

    try:
        sample = await resolver.resolve(country_code)
        return CarbonIntensityResponse.from_sample(sample)

    except Exception as e:
        logger.exception(f"Error fetching carbon intensity for {country_code}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch carbon intensity data: {str(e)}"
        )


@router.post(
    "/intensity/batch",
    response_model=IntensityBatchResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Get Carbon Intensity (Batch)",
    description="Carbon intensity for up to 50 countries, fetched concurrently."
)
async def get_carbon_intensity_batch(
    request: IntensityBatchRequest,
    resolver: CarbonIntensityResolver = Depends(get_resolver),
):
    """
    Get carbon intensity for several countries.

    **Example request:**
    ```json
    {"country_codes": ["US", "DE", "FR"]}
    ```
    """
    codes: List[str] = request.country_codes

    if not codes:
        raise HTTPException(
            status_code=400,
            detail="country_codes must be a non-empty array of 2-letter ISO country codes"
        )

    if len(codes) > MAX_BATCH_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Maximum {MAX_BATCH_SIZE} country codes allowed per request"
        )

    invalid_codes = [code for code in codes if not _is_country_code(code)]
    if invalid_codes:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid country codes: {', '.join(invalid_codes)}. Must be 2-letter ISO codes."
        )

    try:
        samples = await resolver.resolve_many(codes)
        return IntensityBatchResponse(
            results=[CarbonIntensityResponse.from_sample(sample) for sample in samples],
            count=len(samples),
            requested=len(codes)
        )

    except Exception as e:
        logger.exception("Error fetching batch carbon intensity")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to fetch batch carbon intensity data: {str(e)}"
        )


@router.get(
    "/cache/stats",
    response_model=CacheStatsResponse,
    summary="Carbon Intensity Cache Statistics",
)
def get_cache_stats(resolver: CarbonIntensityResolver = Depends(get_resolver)):
    """Total, fresh and expired cache entries. Does not evict anything."""
    return CacheStatsResponse.from_stats(resolver.cache_stats())


@router.delete(
    "/cache",
    response_model=MessageResponse,
    summary="Clear Carbon Intensity Cache",
)
def clear_cache(resolver: CarbonIntensityResolver = Depends(get_resolver)):
    resolver.clear_cache()
    return MessageResponse(success=True, message="Carbon intensity cache cleared successfully")


@router.get(
    "/health",
    response_model=CarbonHealthResponse,
    summary="Carbon Intensity Health Check",
)
async def carbon_health(resolver: CarbonIntensityResolver = Depends(get_resolver)):
    """
    Resolve a known country and report the data source and cache state.

    A fallback source is still healthy: it means the live provider is not
    configured or not reachable.
    """
    try:
        sample = await resolver.resolve(HEALTH_CHECK_COUNTRY)

        return CarbonHealthResponse(
            status="healthy",
            service="carbon-intensity",
            version=__version__,
            features=resolver.describe(),
            cache=CacheStatsResponse.from_stats(resolver.cache_stats()),
            test_result=CarbonIntensityResponse.from_sample(sample)
        )

    except Exception as e:
        logger.exception("Carbon intensity health check failed")
        raise HTTPException(
            status_code=500,
            detail=f"Carbon intensity service health check failed: {str(e)}"
        )
