"""Exception hierarchy shared across SeerEngine components."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

__all__ = [
    "ConfigError",
    "ProviderError",
    "SeerEngineError",
    "UnsupportedBodyError",
]


class SeerEngineError(RuntimeError):
    """Base class for errors raised by SeerEngine."""


class ProviderError(SeerEngineError):
    """Structured error raised when a longitude provider cannot satisfy a request."""

    def __init__(
        self,
        message: str,
        *,
        provider_id: str | None = None,
        error_code: str | None = None,
        retriable: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.provider_id = provider_id
        self.error_code = error_code
        self.retriable = retriable
        self.context = dict(context or {})


class UnsupportedBodyError(ProviderError, KeyError):
    """Raised when a provider is asked for a body it does not model."""

    def __init__(self, body: str, *, provider_id: str | None = None) -> None:
        super().__init__(
            f"body '{body}' is not supported by provider '{provider_id}'",
            provider_id=provider_id,
            error_code="unsupported_body",
            context={"body": body},
        )
        self.body = body

    def __str__(self) -> str:
        return self.args[0]


class ConfigError(SeerEngineError, ValueError):
    """Raised when a settings file cannot be parsed into a valid configuration."""
