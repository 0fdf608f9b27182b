"""
Service dependencies for API endpoints.

The resolver and calculator are created once per application (see
api.main.lifespan) and stored on app.state. Endpoints receive them through
these functions, so tests can swap in their own instances via
app.dependency_overrides.
"""

from fastapi import Request

from services.carbon_intensity_service import CarbonIntensityResolver
from services.impact_service import ImpactCalculator


def get_resolver(request: Request) -> CarbonIntensityResolver:
    return request.app.state.resolver


def get_calculator(request: Request) -> ImpactCalculator:
    return request.app.state.calculator
