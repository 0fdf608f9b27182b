"""
Tests for the HTTP API (`api/main.py` and `api/routers`).

The app's resolver and calculator are replaced through
app.dependency_overrides so no request leaves the process.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_calculator, get_resolver
from api.main import app
from services.impact_service import ImpactCalculator


@pytest.fixture
def resolver(make_resolver, live_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["countryCode"] == "IN":
            return httpx.Response(503)
        return httpx.Response(
            200,
            json={"data": {"carbonIntensity": 386.0, "fossilFuelPercentage": 58.1, "renewablePercentage": 22.4}},
        )

    return make_resolver(live_settings, handler)


@pytest.fixture
def client(resolver, clock):
    calculator = ImpactCalculator(resolver, clock=clock)
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_calculator] = lambda: calculator
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Calculations
# ============================================================================

def test_calculate_static_default(client: TestClient, recorded_requests) -> None:
    response = client.post("/api/v1/calculate", json={"tokens": 1000})

    assert response.status_code == 200
    body = response.json()
    assert body["tokens"] == 1000
    assert body["model"] == "default"
    assert body["region"] == "global-average"
    assert body["energy_kwh"] == pytest.approx(0.006)
    assert body["co2_kg"] == pytest.approx(0.00285)
    assert body["provenance"]["source"] == "static"
    assert body["provenance"]["used_live_data"] is False
    assert body["equivalences"]["lightbulb_hours"] == 7
    assert recorded_requests == []


def test_calculate_live_region(client: TestClient) -> None:
    response = client.post(
        "/api/v1/calculate",
        json={"tokens": "2000", "model": "gpt4", "region": "de", "use_live_data": True},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["tokens"] == 2000
    assert body["co2_factor_kg_per_kwh"] == pytest.approx(0.386)
    assert body["provenance"]["used_live_data"] is True
    assert body["provenance"]["renewable_pct"] == 22.4


@pytest.mark.parametrize("tokens", [0, -1, "abc", None, 2.5])
def test_calculate_rejects_bad_tokens(client: TestClient, tokens) -> None:
    response = client.post("/api/v1/calculate", json={"tokens": tokens})

    assert response.status_code == 400
    assert response.json() == {
        "error": "Invalid request",
        "detail": "Token count must be a positive number",
        "status_code": 400,
    }


def test_calculate_batch_preserves_order(client: TestClient) -> None:
    response = client.post(
        "/api/v1/calculate/batch",
        json={
            "entries": [
                {"tokens": 10, "region": "renewable"},
                {"tokens": 20, "region": "US", "use_live_data": False},
                {"tokens": 30, "region": "IN"},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert [r["tokens"] for r in body["results"]] == [10, 20, 30]
    assert [r["provenance"]["source"] for r in body["results"]] == ["static", "static", "fallback"]


def test_calculate_batch_rejects_whole_batch_on_bad_entry(client: TestClient) -> None:
    response = client.post(
        "/api/v1/calculate/batch",
        json={"entries": [{"tokens": 10}, {"tokens": -3}]},
    )

    assert response.status_code == 400


def test_calculate_batch_limits(client: TestClient) -> None:
    assert client.post("/api/v1/calculate/batch", json={"entries": []}).status_code == 422
    too_many = {"entries": [{"tokens": 1}] * 51}
    assert client.post("/api/v1/calculate/batch", json=too_many).status_code == 422


def test_models_and_regions(client: TestClient) -> None:
    models = client.get("/api/v1/models").json()
    regions = client.get("/api/v1/regions").json()

    assert "gpt4" in models["models"]
    assert models["display_names"]["claude"] == "Claude (Anthropic)"
    assert "renewable" in regions["regions"]
    assert "france" in regions["regions"]
    assert regions["display_names"]["iowa-usa"] == "Iowa, USA (High Carbon)"


def test_stats(client: TestClient) -> None:
    body = client.get("/api/v1/stats").json()

    assert body["supported_models"] == 5
    assert body["supported_regions"] > 100


# ============================================================================
# Carbon intensity
# ============================================================================

def test_intensity_for_country(client: TestClient) -> None:
    response = client.get("/api/v1/carbon/intensity/us")

    assert response.status_code == 200
    body = response.json()
    assert body["country_code"] == "US"
    assert body["carbon_intensity"] == 386.0
    assert body["source"] == "live"
    assert body["region"] == "united-states"


def test_intensity_falls_back_on_provider_error(client: TestClient) -> None:
    body = client.get("/api/v1/carbon/intensity/IN").json()

    assert body["source"] == "fallback"
    assert body["carbon_intensity"] == 708.0


@pytest.mark.parametrize("code", ["USA", "1A", "x"])
def test_intensity_rejects_invalid_country_code(client: TestClient, code: str) -> None:
    assert client.get(f"/api/v1/carbon/intensity/{code}").status_code == 400


def test_intensity_batch(client: TestClient) -> None:
    response = client.post("/api/v1/carbon/intensity/batch", json={"country_codes": ["FR", "IN", "US"]})

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["requested"] == 3
    assert [r["country_code"] for r in body["results"]] == ["FR", "IN", "US"]


@pytest.mark.parametrize(
    "codes",
    [[], ["US", "USA"], ["US"] * 51],
)
def test_intensity_batch_rejects_invalid_input(client: TestClient, codes) -> None:
    response = client.post("/api/v1/carbon/intensity/batch", json={"country_codes": codes})

    assert response.status_code == 400


def test_cache_stats_and_clear(client: TestClient, recorded_requests) -> None:
    client.get("/api/v1/carbon/intensity/US")
    client.get("/api/v1/carbon/intensity/US")

    stats = client.get("/api/v1/carbon/cache/stats").json()
    assert stats["total"] == 1
    assert stats["valid"] == 1
    assert stats["ttl_minutes"] == 5
    assert len(recorded_requests) == 1

    response = client.delete("/api/v1/carbon/cache")
    assert response.json()["success"] is True
    assert client.get("/api/v1/carbon/cache/stats").json()["total"] == 0


def test_carbon_regions(client: TestClient) -> None:
    body = client.get("/api/v1/carbon/regions").json()

    assert body["regions"]["global-average"]["code"] == "GLOBAL"
    assert body["count"] == len(body["regions"])


def test_carbon_health(client: TestClient) -> None:
    body = client.get("/api/v1/carbon/health").json()

    assert body["status"] == "healthy"
    assert body["features"]["real_time_data"] is True
    assert body["test_result"]["country_code"] == "US"
    assert body["cache"]["total"] == 1


def test_root_and_health(client: TestClient) -> None:
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["docs"] == "/docs"
