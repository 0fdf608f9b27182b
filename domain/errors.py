"""
Domain: error taxonomy for impact estimation.

Only ValidationError crosses the service boundary. ProviderError is raised by
the live data client and absorbed by the resolver; ConfigurationError signals
broken settings or static tables and is raised at load time.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when user input violates a precondition (e.g. token count <= 0)."""
    pass


class ProviderError(Exception):
    """
    Failure contacting or parsing the live carbon-intensity provider.

    code is one of: "timeout", "http_status", "network", "malformed",
    "unexpected".
    """

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigurationError(RuntimeError):
    """Raised when settings or static lookup tables are invalid."""
    pass
