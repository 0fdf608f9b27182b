"""
Pytest configuration and shared fixtures.

Adds the project root to the Python path so tests can import domain,
repositories, services and api. Provides a controllable clock and helpers for
building a resolver against a fake provider (httpx.MockTransport).
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator, List

import anyio
import httpx
import pytest

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from repositories.client import ProviderSettings, create_http_client  # noqa: E402
from services.carbon_intensity_service import CarbonIntensityResolver  # noqa: E402
from services.intensity_cache import IntensityCache  # noqa: E402

TEST_API_BASE = "https://provider.test/v1"


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


def provider_body(intensity=386.0, fossil=58.1, renewable=22.4) -> dict:
    return {
        "countryCode": "US",
        "data": {
            "carbonIntensity": intensity,
            "fossilFuelPercentage": fossil,
            "renewablePercentage": renewable,
        },
        "units": {"carbonIntensity": "gCO2eq/kWh"},
    }


@pytest.fixture
def anyio_backend():
    """Backend for async tests."""
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def live_settings() -> ProviderSettings:
    return ProviderSettings(
        api_key="test-key",
        api_base=TEST_API_BASE,
        timeout_seconds=10.0,
        cache_ttl_seconds=300.0,
    )


@pytest.fixture
def offline_settings() -> ProviderSettings:
    return ProviderSettings(api_key=None, api_base=TEST_API_BASE)


@pytest.fixture
def recorded_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_resolver(clock, recorded_requests) -> Iterator[Callable[..., CarbonIntensityResolver]]:
    """
    Factory for resolvers backed by a fake provider.

    handler receives the httpx.Request and returns an httpx.Response (or
    raises). Every request is recorded in recorded_requests. The HTTP clients
    created here are closed at teardown.
    """

    clients: List[httpx.AsyncClient] = []

    def _make(settings: ProviderSettings, handler=None) -> CarbonIntensityResolver:
        def _default_handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=provider_body())

        inner = handler or _default_handler

        async def _recording_handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            result = inner(request)
            if hasattr(result, "__await__"):
                result = await result
            return result

        http_client = create_http_client(settings, transport=httpx.MockTransport(_recording_handler))
        clients.append(http_client)
        cache = IntensityCache(ttl=timedelta(seconds=settings.cache_ttl_seconds), clock=clock)
        return CarbonIntensityResolver(settings=settings, http_client=http_client, cache=cache)

    yield _make

    for http_client in clients:
        anyio.run(http_client.aclose)
