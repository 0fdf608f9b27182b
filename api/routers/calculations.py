"""
Calculation API Endpoints.

Endpoints for estimating the energy and CO2 impact of AI token usage, and for
listing the supported models and regions.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from api import __version__
from api.dependencies import get_calculator
from api.models import (
    BatchCalculateRequest,
    BatchCalculateResponse,
    CalculateRequest,
    ErrorResponse,
    ImpactResponse,
    ModelsResponse,
    RegionsResponse,
    StatsResponse,
)
from domain.errors import ValidationError
from domain.impact import ImpactRequest
from services.impact_service import (
    ImpactCalculator,
    available_models,
    available_regions,
    model_info,
    region_info,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_impact_request(entry: CalculateRequest) -> ImpactRequest:
    return ImpactRequest(
        tokens=entry.tokens,
        model=entry.model,
        region=entry.region,
        use_live_data=entry.use_live_data,
    )


@router.post(
    "/calculate",
    response_model=ImpactResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Calculate Environmental Impact",
    description="Estimate energy use, CO2 emissions and everyday equivalences for a token count."
)
async def calculate_impact(
    request: CalculateRequest,
    calculator: ImpactCalculator = Depends(get_calculator),
):
    """
    Calculate the environmental impact of a token count.

    **How it works:**
    1. Validates the token count (must be a positive integer)
    2. Looks up energy per token for the model (unknown models use the average)
    3. Resolves the CO2 factor for the region, using real-time grid data when
       requested and available, otherwise static averages
    4. Returns totals, equivalences and where the CO2 factor came from

    `global-average` and `renewable` always use static factors.

    **Example request:**
    ```json
    {
      "tokens": 1000,
      "model": "gpt4",
      "region": "US",
      "use_live_data": false
    }
    ```
    """
    try:
        result = await calculator.compute_request(_to_impact_request(request))
        return ImpactResponse.from_result(result)

    except (HTTPException, ValidationError):
        raise
    except Exception as e:
        logger.exception("Calculation failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to calculate impact: {str(e)}"
        )


@router.post(
    "/calculate/batch",
    response_model=BatchCalculateResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Calculate Environmental Impact (Batch)",
    description="Calculate up to 50 entries in one request. Any invalid entry rejects the whole batch."
)
async def calculate_impact_batch(
    request: BatchCalculateRequest,
    calculator: ImpactCalculator = Depends(get_calculator),
):
    """
    Calculate several entries concurrently.

    Results are returned in the same order as the entries.
    """
    try:
        impact_requests = [_to_impact_request(entry) for entry in request.entries]
        results = await calculator.compute_many(impact_requests)

        return BatchCalculateResponse(
            results=[ImpactResponse.from_result(result) for result in results],
            count=len(results)
        )

    except (HTTPException, ValidationError):
        raise
    except Exception as e:
        logger.exception("Batch calculation failed")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to calculate batch: {str(e)}"
        )


@router.get(
    "/models",
    response_model=ModelsResponse,
    summary="List Models",
)
def list_models():
    """Supported model keys and their display names."""
    return ModelsResponse(models=available_models(), display_names=model_info())


@router.get(
    "/regions",
    response_model=RegionsResponse,
    summary="List Regions",
)
def list_regions():
    """All region keys (live-data regions and static regions) and static display names."""
    return RegionsResponse(regions=available_regions(), display_names=region_info())


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Calculator Statistics",
)
def get_stats():
    return StatsResponse(
        supported_models=len(available_models()),
        supported_regions=len(available_regions()),
        last_updated=datetime.now(timezone.utc),
        version=__version__
    )
