"""
Provider configuration and HTTP client setup.

This module contains *only* configuration loading and construction of the
async HTTP client used to talk to the live carbon-intensity provider
(CO2Signal / Electricity Maps). Nothing here performs a request.

Environment variables (all optional):
- CO2SIGNAL_API_KEY: API token; when missing or blank the live path is skipped
- CO2SIGNAL_API_BASE: Provider base URL (default: https://api.co2signal.com/v1)
- CO2SIGNAL_TIMEOUT_SECONDS: Per-request timeout (default: 10)
- CARBON_INTENSITY_CACHE_TTL_SECONDS: Resolver cache TTL (default: 300)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import httpx
from dotenv import load_dotenv

from domain.errors import ConfigurationError

# Load environment variables from the .env file at the project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_API_BASE = "https://api.co2signal.com/v1"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_CACHE_TTL_SECONDS = 300.0


@dataclass(frozen=True, slots=True)
class ProviderSettings:
    """Resolved settings for the live carbon-intensity provider."""

    api_key: Optional[str] = None
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    cache_ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS

    @property
    def live_enabled(self) -> bool:
        """Live lookups run only when a non-blank API key is configured."""
        return bool(self.api_key and self.api_key.strip())


def _read_positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {raw!r}")
    return value


def load_provider_settings(env: Optional[Mapping[str, str]] = None) -> ProviderSettings:
    """
    Build ProviderSettings from the environment.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Raises:
        ConfigurationError: If a numeric setting is malformed or not positive
    """
    source = os.environ if env is None else env

    api_key = (source.get("CO2SIGNAL_API_KEY") or "").strip() or None
    api_base = (source.get("CO2SIGNAL_API_BASE") or "").strip() or DEFAULT_API_BASE

    return ProviderSettings(
        api_key=api_key,
        api_base=api_base.rstrip("/"),
        timeout_seconds=_read_positive_float(
            source, "CO2SIGNAL_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
        ),
        cache_ttl_seconds=_read_positive_float(
            source, "CARBON_INTENSITY_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS
        ),
    )


def create_http_client(
    settings: ProviderSettings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create the async HTTP client for the provider.

    The auth-token header is attached only when an API key is configured.
    A custom transport may be supplied (e.g. httpx.MockTransport in tests).
    """
    headers = {"Accept": "application/json"}
    if settings.live_enabled:
        headers["auth-token"] = settings.api_key  # type: ignore[assignment]

    return httpx.AsyncClient(
        base_url=settings.api_base,
        headers=headers,
        timeout=settings.timeout_seconds,
        transport=transport,
    )


__all__ = [
    "ProviderSettings",
    "create_http_client",
    "load_provider_settings",
]
