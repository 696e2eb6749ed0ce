"""Service interfaces for AI email generation.

These protocols let the classifier, content generators and orchestrator
depend on an abstract text generator, so tests can substitute scripted
fakes without touching the provider SDK.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Protocol


class FragmentStream(Protocol):
    """An open, incremental text response from the provider."""

    def __aiter__(self) -> AsyncIterator[str]: ...

    async def __anext__(self) -> str: ...

    async def aclose(self) -> None:
        """Release the underlying provider stream."""
        ...


class TextGeneratorProtocol(Protocol):
    """Opaque text-generation service: prompt in, text or fragments out."""

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        """Return the complete response text."""
        ...

    async def open_stream(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> FragmentStream:
        """Start a streaming response and return it once the provider accepts."""
        ...
