"""Domain exceptions for AI email generation.

Each exception carries a stable `error_code` for log filtering. The
classifier and content generators absorb these into canned fallbacks; the
streaming endpoint maps them to a 500 before the stream opens or to an
``error`` event once it has.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AIGenerationError(Exception):
    """Base class for AI generation domain errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class ProviderError(AIGenerationError):
    def __init__(self, message: str = "Text generation provider call failed") -> None:
        super().__init__(message=message, error_code="provider_error")


class EmptyResponseError(AIGenerationError):
    def __init__(self, message: str = "Provider returned an empty response") -> None:
        super().__init__(message=message, error_code="empty_response")


class StreamTimeoutError(AIGenerationError):
    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            message=f"No fragment received within {timeout_seconds:g}s",
            error_code="stream_timeout",
        )
