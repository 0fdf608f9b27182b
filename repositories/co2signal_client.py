"""
CO2Signal repository (live carbon-intensity data).

This module provides *only* the outbound call to the provider and the parsing
of its response. It does not cache and does not fall back; every failure is
raised as ProviderError for the caller to handle.

Request:
    GET {api_base}/latest?countryCode=<CC>
    header auth-token: <key>

Expected body:
    {"data": {"carbonIntensity": 386.2,
              "fossilFuelPercentage": 58.1,
              "renewablePercentage": 22.4}}
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from domain.errors import ProviderError

_LATEST_PATH: str = "/latest"

# No real grid comes close; larger readings are provider errors.
MAX_INTENSITY_G_PER_KWH: float = 10_000.0


@dataclass(frozen=True, slots=True)
class LatestIntensityPayload:
    """Parsed provider reading. carbon_intensity is in gCO2/kWh."""

    country_code: str
    carbon_intensity: float
    fossil_fuel_pct: Optional[float]
    renewable_pct: Optional[float]


def _optional_pct(data: Mapping[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (int, float)):
        return None
    try:
        pct = float(value)
    except OverflowError:
        return None
    return pct if math.isfinite(pct) else None


def parse_latest_response(country_code: str, body: Any) -> LatestIntensityPayload:
    """
    Validate and parse a provider response body.

    Raises:
        ProviderError: code "malformed" if the body is not the expected shape
            or the intensity is missing, non-finite, non-positive or above
            MAX_INTENSITY_G_PER_KWH
    """
    if not isinstance(body, Mapping):
        raise ProviderError("malformed", "Response body is not a JSON object")

    data = body.get("data")
    if not isinstance(data, Mapping):
        raise ProviderError("malformed", "Response body has no 'data' object")

    intensity = data.get("carbonIntensity")
    if isinstance(intensity, bool) or not isinstance(intensity, (int, float)):
        raise ProviderError("malformed", f"Invalid carbonIntensity: {intensity!r}")
    try:
        value = float(intensity)
    except OverflowError:
        value = math.inf
    if not math.isfinite(value):
        raise ProviderError("malformed", f"Non-finite carbonIntensity: {intensity!r}")
    if value <= 0:
        raise ProviderError("malformed", f"Non-positive carbonIntensity: {intensity!r}")
    if value > MAX_INTENSITY_G_PER_KWH:
        raise ProviderError("malformed", f"Implausible carbonIntensity: {intensity!r}")

    return LatestIntensityPayload(
        country_code=country_code,
        carbon_intensity=value,
        fossil_fuel_pct=_optional_pct(data, "fossilFuelPercentage"),
        renewable_pct=_optional_pct(data, "renewablePercentage"),
    )


async def fetch_latest(http_client: httpx.AsyncClient, country_code: str) -> LatestIntensityPayload:
    """
    Fetch the latest carbon intensity for a country from the provider.

    Args:
        http_client: Client created by repositories.client.create_http_client
        country_code: ISO 3166-1 alpha-2 code (case-insensitive)

    Returns:
        LatestIntensityPayload

    Raises:
        ProviderError: On timeout, network failure, non-2xx status or
            malformed payload
    """
    code = country_code.strip().upper()

    try:
        response = await http_client.get(_LATEST_PATH, params={"countryCode": code})
    except httpx.TimeoutException as e:
        raise ProviderError("timeout", f"Request for {code} timed out: {e}") from e
    except httpx.HTTPError as e:
        raise ProviderError("network", f"Request for {code} failed: {e}") from e

    if not response.is_success:
        raise ProviderError(
            "http_status",
            f"Provider returned HTTP {response.status_code} for {code}",
        )

    try:
        body = response.json()
    except ValueError as e:
        raise ProviderError("malformed", f"Response for {code} is not valid JSON") from e

    return parse_latest_response(code, body)


__all__ = [
    "LatestIntensityPayload",
    "fetch_latest",
    "parse_latest_response",
]
