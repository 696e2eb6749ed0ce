"""pydantic-ai backed text generation adapter.

The adapter offers the two calls the rest of the service needs: a complete
response (`generate`) and an incremental one (`open_stream`). Provider
failures are wrapped in `ProviderError`.

Streaming runs in a background task that owns the provider's stream context
from entry to exit and hands fragments over through a bounded queue. This
keeps context entry and exit on the same task even though the HTTP response
body may be iterated from another one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.settings import ModelSettings

from services.ai.exceptions import EmptyResponseError, ProviderError
from services.ai.model_factory import get_text_model


logger = logging.getLogger(__name__)

FRAGMENT_QUEUE_SIZE = 64

_END_OF_STREAM = object()


def _model_settings(
    temperature: float | None, max_output_tokens: int | None
) -> ModelSettings:
    settings: ModelSettings = {}
    if temperature is not None:
        settings["temperature"] = temperature
    if max_output_tokens is not None:
        settings["max_tokens"] = max_output_tokens
    return settings


class QueuedFragmentStream:
    """Async iterator over fragments pushed by a producer task."""

    def __init__(self, producer: asyncio.Task[None], queue: asyncio.Queue[Any]) -> None:
        self._producer = producer
        self._queue = queue
        self._finished = False

    def __aiter__(self) -> QueuedFragmentStream:
        return self

    async def __anext__(self) -> str:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END_OF_STREAM:
            self._finished = True
            raise StopAsyncIteration
        if isinstance(item, BaseException):
            self._finished = True
            raise ProviderError(f"Streaming generation failed: {item}") from item
        return item

    async def aclose(self) -> None:
        """Stop the producer; safe to call more than once."""
        self._finished = True
        if not self._producer.done():
            self._producer.cancel()
        await asyncio.gather(self._producer, return_exceptions=True)


class PydanticAITextGenerator:
    """Text generation through a plain-text pydantic-ai agent."""

    def __init__(self, model: Model | str | None = None) -> None:
        self._model = model
        self._agent: Agent[None, str] | None = None

    def _get_agent(self) -> Agent[None, str]:
        """Create the agent on first use so importing needs no API key."""
        if self._agent is None:
            model = self._model if self._model is not None else get_text_model()
            self._agent = Agent(model, output_type=str)
        return self._agent

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        try:
            result = await self._get_agent().run(
                prompt, model_settings=_model_settings(temperature, max_output_tokens)
            )
        except Exception as exc:
            raise ProviderError(f"Generation request failed: {exc}") from exc

        text = (result.output or "").strip()
        if not text:
            raise EmptyResponseError()
        return text

    async def open_stream(
        self,
        prompt: str,
        *,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> QueuedFragmentStream:
        """Start streaming and wait until the provider has accepted the request.

        Raises:
            ProviderError: If the provider rejects the request before any
                fragment is produced.
        """
        loop = asyncio.get_running_loop()
        opened: asyncio.Future[None] = loop.create_future()
        queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=FRAGMENT_QUEUE_SIZE)
        producer = asyncio.create_task(
            self._produce(
                prompt, _model_settings(temperature, max_output_tokens), opened, queue
            )
        )
        try:
            await opened
        except BaseException:
            producer.cancel()
            await asyncio.gather(producer, return_exceptions=True)
            raise
        return QueuedFragmentStream(producer, queue)

    async def _produce(
        self,
        prompt: str,
        settings: ModelSettings,
        opened: asyncio.Future[None],
        queue: asyncio.Queue[Any],
    ) -> None:
        try:
            async with self._get_agent().run_stream(
                prompt, model_settings=settings
            ) as result:
                opened.set_result(None)
                async for delta in result.stream_text(delta=True, debounce_by=None):
                    if delta:
                        await queue.put(delta)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if not opened.done():
                opened.set_exception(
                    ProviderError(f"Could not start streaming generation: {exc}")
                )
                return
            logger.warning("Provider stream failed mid-response: %s", exc)
            await queue.put(exc)
            return

        if not opened.done():
            opened.set_result(None)
        await queue.put(_END_OF_STREAM)
