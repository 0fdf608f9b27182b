"""
Tests for `repositories/co2signal_client.py`.

Covers:
- Successful responses are parsed into LatestIntensityPayload.
- Timeouts, network errors, non-2xx statuses and malformed bodies all raise
  ProviderError with a matching code.
"""

from __future__ import annotations

import httpx
import pytest

from domain.errors import ProviderError
from repositories.client import ProviderSettings, create_http_client
from repositories.co2signal_client import fetch_latest, parse_latest_response

SETTINGS = ProviderSettings(api_key="test-key", api_base="https://provider.test/v1")


def _client(handler) -> httpx.AsyncClient:
    return create_http_client(SETTINGS, transport=httpx.MockTransport(handler))


def test_parse_latest_response_reads_fields() -> None:
    payload = parse_latest_response(
        "DE",
        {"data": {"carbonIntensity": 338, "fossilFuelPercentage": 40.5, "renewablePercentage": 51}},
    )

    assert payload.country_code == "DE"
    assert payload.carbon_intensity == 338.0
    assert payload.fossil_fuel_pct == 40.5
    assert payload.renewable_pct == 51.0


def test_parse_latest_response_optional_percentages() -> None:
    payload = parse_latest_response("DE", {"data": {"carbonIntensity": 338.2}})

    assert payload.fossil_fuel_pct is None
    assert payload.renewable_pct is None


def test_parse_latest_response_drops_non_finite_percentages() -> None:
    payload = parse_latest_response(
        "DE",
        {"data": {"carbonIntensity": 338.2, "fossilFuelPercentage": float("nan"), "renewablePercentage": float("inf")}},
    )

    assert payload.carbon_intensity == 338.2
    assert payload.fossil_fuel_pct is None
    assert payload.renewable_pct is None


@pytest.mark.parametrize(
    "body",
    [
        None,
        [],
        "text",
        {},
        {"data": None},
        {"data": {}},
        {"data": {"carbonIntensity": None}},
        {"data": {"carbonIntensity": "386"}},
        {"data": {"carbonIntensity": True}},
        {"data": {"carbonIntensity": 0}},
        {"data": {"carbonIntensity": -12.0}},
        {"data": {"carbonIntensity": float("nan")}},
        {"data": {"carbonIntensity": float("inf")}},
        {"data": {"carbonIntensity": float("-inf")}},
        {"data": {"carbonIntensity": 10**400}},
        {"data": {"carbonIntensity": 1e300}},
    ],
)
def test_parse_latest_response_rejects_malformed(body) -> None:
    with pytest.raises(ProviderError) as exc_info:
        parse_latest_response("US", body)

    assert exc_info.value.code == "malformed"


@pytest.mark.anyio
async def test_fetch_latest_sends_country_code_upper_case() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"carbonIntensity": 120.0}})

    client = _client(handler)
    try:
        payload = await fetch_latest(client, " fr ")
    finally:
        await client.aclose()

    assert payload.country_code == "FR"
    assert payload.carbon_intensity == 120.0
    assert seen[0].url.path == "/v1/latest"
    assert seen[0].url.params["countryCode"] == "FR"
    assert seen[0].headers["auth-token"] == "test-key"


@pytest.mark.anyio
@pytest.mark.parametrize(
    "handler, code",
    [
        (lambda request: httpx.Response(500, json={"error": "boom"}), "http_status"),
        (lambda request: httpx.Response(401, json={"message": "bad token"}), "http_status"),
        (lambda request: httpx.Response(200, content=b"<html>not json</html>"), "malformed"),
        (lambda request: httpx.Response(200, json={"status": "ok"}), "malformed"),
        (lambda request: httpx.Response(200, content=b'{"data": {"carbonIntensity": NaN}}'), "malformed"),
        (lambda request: httpx.Response(200, content=b'{"data": {"carbonIntensity": Infinity}}'), "malformed"),
    ],
)
async def test_fetch_latest_response_failures(handler, code: str) -> None:
    client = _client(handler)
    try:
        with pytest.raises(ProviderError) as exc_info:
            await fetch_latest(client, "US")
    finally:
        await client.aclose()

    assert exc_info.value.code == code


@pytest.mark.anyio
async def test_fetch_latest_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client = _client(handler)
    try:
        with pytest.raises(ProviderError) as exc_info:
            await fetch_latest(client, "US")
    finally:
        await client.aclose()

    assert exc_info.value.code == "timeout"


@pytest.mark.anyio
async def test_fetch_latest_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    try:
        with pytest.raises(ProviderError) as exc_info:
            await fetch_latest(client, "US")
    finally:
        await client.aclose()

    assert exc_info.value.code == "network"
