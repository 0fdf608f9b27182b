"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from domain.impact import ImpactResult
from domain.intensity import CarbonIntensitySample
from services.intensity_cache import CacheStats


# ============================================================================
# Calculation Models
# ============================================================================

class CalculateRequest(BaseModel):
    """Request to calculate environmental impact."""
    # Left untyped so the token rule is enforced (and reported) in one place.
    tokens: Any = Field(
        None,
        description="Number of tokens used (positive integer)"
    )
    model: str = Field("default", description="Model key, e.g. 'gpt4'")
    region: str = Field(
        "global-average",
        description="Country code (e.g. 'US') or static region (e.g. 'renewable')"
    )
    use_live_data: bool = Field(True, description="Use real-time carbon intensity when available")

    class Config:
        json_schema_extra = {
            "example": {
                "tokens": 1000,
                "model": "gpt4",
                "region": "DE",
                "use_live_data": True
            }
        }


class EquivalencesResponse(BaseModel):
    """Everyday comparisons for the computed CO2."""
    car_miles: float
    flight_miles: float
    beef_burgers: float
    smartphone_charges: int
    household_electricity_days: float
    tree_years: float
    laptop_hours: float
    lightbulb_hours: int


class ProvenanceResponse(BaseModel):
    """Where the carbon factor came from."""
    used_live_data: bool
    source: str  # "live", "fallback" or "static"
    observed_at: datetime
    fossil_fuel_pct: Optional[float] = None
    renewable_pct: Optional[float] = None


class ImpactResponse(BaseModel):
    """Computed environmental impact."""
    tokens: int
    model: str
    region: str
    energy_kwh: float
    co2_kg: float
    co2_factor_kg_per_kwh: float
    equivalences: EquivalencesResponse
    provenance: ProvenanceResponse

    @classmethod
    def from_result(cls, result: ImpactResult) -> "ImpactResponse":
        eq = result.equivalences
        prov = result.provenance
        return cls(
            tokens=result.tokens,
            model=result.model,
            region=result.region,
            energy_kwh=result.energy_kwh,
            co2_kg=result.co2_kg,
            co2_factor_kg_per_kwh=result.co2_factor_kg_per_kwh,
            equivalences=EquivalencesResponse(
                car_miles=eq.car_miles,
                flight_miles=eq.flight_miles,
                beef_burgers=eq.beef_burgers,
                smartphone_charges=eq.smartphone_charges,
                household_electricity_days=eq.household_electricity_days,
                tree_years=eq.tree_years,
                laptop_hours=eq.laptop_hours,
                lightbulb_hours=eq.lightbulb_hours,
            ),
            provenance=ProvenanceResponse(
                used_live_data=prov.used_live_data,
                source=prov.source,
                observed_at=prov.observed_at,
                fossil_fuel_pct=prov.fossil_fuel_pct,
                renewable_pct=prov.renewable_pct,
            ),
        )

    class Config:
        json_schema_extra = {
            "example": {
                "tokens": 1000,
                "model": "default",
                "region": "global-average",
                "energy_kwh": 0.006,
                "co2_kg": 0.00285,
                "co2_factor_kg_per_kwh": 0.475,
                "equivalences": {
                    "car_miles": 0.01,
                    "flight_miles": 0.01,
                    "beef_burgers": 0.0,
                    "smartphone_charges": 28,
                    "household_electricity_days": 0.0,
                    "tree_years": 0.0,
                    "laptop_hours": 0.06,
                    "lightbulb_hours": 7
                },
                "provenance": {
                    "used_live_data": False,
                    "source": "static",
                    "observed_at": "2025-01-01T12:00:00Z",
                    "fossil_fuel_pct": None,
                    "renewable_pct": None
                }
            }
        }


class BatchCalculateRequest(BaseModel):
    """Request to calculate several entries at once."""
    entries: List[CalculateRequest] = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Calculation entries (1-50)"
    )


class BatchCalculateResponse(BaseModel):
    results: List[ImpactResponse]
    count: int


class ModelsResponse(BaseModel):
    models: List[str]
    display_names: Dict[str, str]


class RegionsResponse(BaseModel):
    regions: List[str]
    display_names: Dict[str, str]


class StatsResponse(BaseModel):
    supported_models: int
    supported_regions: int
    last_updated: datetime
    version: str


# ============================================================================
# Carbon Intensity Models
# ============================================================================

class CarbonIntensityResponse(BaseModel):
    """A single carbon-intensity reading."""
    country_code: str
    carbon_intensity: float  # gCO2/kWh
    source: str  # "live" or "fallback"
    region: str
    fossil_fuel_pct: Optional[float] = None
    renewable_pct: Optional[float] = None
    observed_at: datetime

    @classmethod
    def from_sample(cls, sample: CarbonIntensitySample) -> "CarbonIntensityResponse":
        return cls(
            country_code=sample.region_key,
            carbon_intensity=sample.intensity,
            source=sample.source.value,
            region=sample.region,
            fossil_fuel_pct=sample.fossil_fuel_pct,
            renewable_pct=sample.renewable_pct,
            observed_at=sample.observed_at,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "country_code": "DE",
                "carbon_intensity": 338.0,
                "source": "fallback",
                "region": "germany",
                "fossil_fuel_pct": None,
                "renewable_pct": None,
                "observed_at": "2025-01-01T12:00:00Z"
            }
        }


class IntensityBatchRequest(BaseModel):
    """Request carbon intensity for several countries."""
    country_codes: List[str] = Field(
        ...,
        description="2-letter ISO country codes (1-50)"
    )

    class Config:
        json_schema_extra = {
            "example": {"country_codes": ["US", "DE", "FR"]}
        }


class IntensityBatchResponse(BaseModel):
    results: List[CarbonIntensityResponse]
    count: int
    requested: int


class RegionCatalogResponse(BaseModel):
    regions: Dict[str, Dict[str, str]]
    count: int


class CacheStatsResponse(BaseModel):
    total: int
    valid: int
    expired: int
    ttl_seconds: float
    ttl_minutes: float

    @classmethod
    def from_stats(cls, stats: CacheStats) -> "CacheStatsResponse":
        return cls(**stats.to_dict())


class CarbonHealthResponse(BaseModel):
    status: str
    service: str
    version: str
    features: Dict[str, Any]
    cache: CacheStatsResponse
    test_result: CarbonIntensityResponse


class MessageResponse(BaseModel):
    success: bool
    message: str


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid request",
                "detail": "Token count must be a positive number",
                "status_code": 400
            }
        }
