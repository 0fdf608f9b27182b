"""
Domain: environmental impact results.

Contract excerpts implemented here:
- tokens > 0 always (validated before any computation).
- energy_kwh = tokens * energy_per_token_for_model
- co2_kg = energy_kwh * co2_factor_kg_per_kwh, with co2_factor_kg_per_kwh > 0
- Every equivalence is co2_kg divided by a fixed constant; all are >= 0.
  Rounding is for display only and never feeds back into co2_kg.
- Provenance reports whether live data was actually used, which may differ
  from whether it was requested.

This module contains only pure domain entities/value objects.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .errors import ValidationError
from .intensity import RegionKey
from .time import require_utc_timestamp

TOKEN_COUNT_ERROR = "Token count must be a positive number"

# Token counts above this lose integer precision once converted to float.
MAX_TOKEN_COUNT = 10**15
TOKEN_COUNT_LIMIT_ERROR = f"Token count must not exceed {MAX_TOKEN_COUNT}"

DEFAULT_MODEL = "default"
DEFAULT_REGION = "global-average"


def validate_token_count(tokens: Any) -> int:
    """
    Coerce and validate a token count.

    Accepts ints, integral floats and digit strings. Rejects booleans,
    non-numeric values, fractional values, anything <= 0 and anything above
    MAX_TOKEN_COUNT.
    """

    if tokens is None or isinstance(tokens, bool):
        raise ValidationError(TOKEN_COUNT_ERROR)

    if isinstance(tokens, int):
        value = tokens
    elif isinstance(tokens, float):
        if not tokens.is_integer():
            raise ValidationError(TOKEN_COUNT_ERROR)
        value = int(tokens)
    elif isinstance(tokens, str):
        try:
            value = int(tokens.strip())
        except ValueError:
            raise ValidationError(TOKEN_COUNT_ERROR) from None
    else:
        raise ValidationError(TOKEN_COUNT_ERROR)

    if value <= 0:
        raise ValidationError(TOKEN_COUNT_ERROR)
    if value > MAX_TOKEN_COUNT:
        raise ValidationError(TOKEN_COUNT_LIMIT_ERROR)
    return value


@dataclass(frozen=True, slots=True)
class ImpactRequest:
    """Typed inbound request for a single calculation."""

    tokens: int
    model: str = DEFAULT_MODEL
    region: RegionKey = DEFAULT_REGION
    use_live_data: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", validate_token_count(self.tokens))
        if not self.model:
            object.__setattr__(self, "model", DEFAULT_MODEL)
        if not self.region:
            object.__setattr__(self, "region", DEFAULT_REGION)


@dataclass(frozen=True, slots=True)
class Equivalences:
    """Real-world comparisons for an amount of CO2, rounded for display."""

    car_miles: float
    flight_miles: float
    beef_burgers: float
    smartphone_charges: int
    household_electricity_days: float
    tree_years: float
    laptop_hours: float
    lightbulb_hours: int


@dataclass(frozen=True, slots=True)
class Provenance:
    """
    Where the carbon factor came from.

    source is "live" or "fallback" when the resolver was consulted and
    "static" when the calculator's static region table was used directly.
    """

    used_live_data: bool
    source: str
    observed_at: datetime
    fossil_fuel_pct: Optional[float] = None
    renewable_pct: Optional[float] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("observed_at", self.observed_at)


@dataclass(frozen=True, slots=True)
class ImpactResult:
    """
    Computed impact of one calculation request.

    Created fresh per request and never mutated.
    """

    tokens: int
    model: str
    region: RegionKey
    energy_kwh: float
    co2_kg: float
    co2_factor_kg_per_kwh: float
    equivalences: Equivalences
    provenance: Provenance

    def __post_init__(self) -> None:
        if self.tokens <= 0:
            raise ValueError("tokens must be > 0")
        if self.co2_factor_kg_per_kwh <= 0:
            raise ValueError("co2_factor_kg_per_kwh must be > 0")

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict form for persistence or serialization by collaborators."""

        data = asdict(self)
        data["provenance"]["observed_at"] = self.provenance.observed_at.isoformat()
        return data
