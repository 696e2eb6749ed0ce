"""Email generation orchestrator.

Runs one generation cycle: classify the request, then either produce a
complete draft or stream the draft as SSE events. Streaming is split in two
steps so the API layer can still answer with a plain JSON error while
nothing has been sent: `start_stream` classifies and opens the provider
stream, and `GenerationStream.events` yields the events afterwards.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator

from core.config import get_settings
from schemas.ai import AssistantKind, GenerationRequest, SSEEvent
from services.ai.classifier import classify
from services.ai.content_generators import generate_complete, generation_options
from services.ai.exceptions import StreamTimeoutError
from services.ai.extraction import FieldExtractor
from services.ai.generation import PydanticAITextGenerator
from services.ai.interfaces import FragmentStream, TextGeneratorProtocol
from services.ai.models import Classified, Generated
from services.ai.prompts import build_streaming_prompt


logger = logging.getLogger(__name__)

STREAM_FAILED_MESSAGE = "Failed to generate email content"
STREAM_TIMEOUT_MESSAGE = "Email generation timed out"


class GenerationStream:
    """An opened generation cycle whose events have not been consumed yet."""

    def __init__(
        self,
        classified: Classified,
        upstream: FragmentStream,
        generator: TextGeneratorProtocol,
        timeout_seconds: float,
    ) -> None:
        self.classified = classified
        self._upstream = upstream
        self._generator = generator
        self._timeout = timeout_seconds

    async def events(self) -> AsyncGenerator[SSEEvent, None]:
        """Yield the cycle's events; the last one is ``complete`` or ``error``.

        The provider stream is closed when the generator finishes or is
        closed early (client disconnect).
        """
        extractor = FieldExtractor()
        try:
            yield SSEEvent.assistant_type(self.classified.kind)
            while True:
                try:
                    fragment = await asyncio.wait_for(
                        anext(self._upstream), timeout=self._timeout
                    )
                except StopAsyncIteration:
                    break
                for event in extractor.feed(fragment):
                    yield event

            for event in extractor.parse_buffer():
                yield event
            for event in await self._fallback_events(extractor):
                yield event
            yield SSEEvent.complete()
        except TimeoutError:
            logger.warning("Generation stream stalled: %s", StreamTimeoutError(self._timeout))
            yield SSEEvent.error(STREAM_TIMEOUT_MESSAGE)
        except Exception:
            logger.exception("Generation stream failed mid-response")
            yield SSEEvent.error(STREAM_FAILED_MESSAGE)
        finally:
            await self._upstream.aclose()

    async def _fallback_events(self, extractor: FieldExtractor) -> list[SSEEvent]:
        missing = extractor.missing_fields
        if not missing:
            return []

        request = self.classified.request
        logger.info(
            "Stream left %s unset, using non-streaming generation", ", ".join(missing)
        )
        try:
            draft = await generate_complete(
                self.classified.kind,
                request.prompt or "",
                request.recipient_info,
                self._generator,
            )
        except Exception:
            logger.exception("Fallback generation failed")
            return []

        events: list[SSEEvent] = []
        if "subject" in missing and draft.subject:
            events.append(SSEEvent.subject(draft.subject))
        if "body" in missing and draft.body:
            events.append(SSEEvent.body(draft.body))
        return events


class EmailGenerationOrchestrator:
    """Classify-then-generate flow over a text generator."""

    def __init__(
        self,
        generator: TextGeneratorProtocol | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._generator = generator or PydanticAITextGenerator()
        self._timeout = (
            timeout_seconds
            if timeout_seconds is not None
            else get_settings().STREAM_FRAGMENT_TIMEOUT_SECONDS
        )

    async def classify(self, request: GenerationRequest) -> Classified:
        """Classify the request; a stalled classifier counts as follow-up."""
        try:
            kind = await asyncio.wait_for(
                classify(request.prompt or "", self._generator), timeout=self._timeout
            )
        except TimeoutError:
            logger.warning(
                "Classification timed out after %.1fs, defaulting to followup",
                self._timeout,
            )
            kind = AssistantKind.FOLLOWUP
        return Classified(request=request, kind=kind)

    async def generate_email(self, request: GenerationRequest) -> Generated:
        classified = await self.classify(request)
        draft = await generate_complete(
            classified.kind,
            request.prompt or "",
            request.recipient_info,
            self._generator,
        )
        return Generated(request=request, kind=classified.kind, draft=draft)

    async def start_stream(self, request: GenerationRequest) -> GenerationStream:
        """Classify and open the provider stream.

        Raises:
            ProviderError: If the provider refuses the streaming request.
            TimeoutError: If opening the stream takes longer than the
                per-fragment timeout.
        """
        classified = await self.classify(request)
        prompt = build_streaming_prompt(
            classified.kind, request.prompt or "", request.recipient_info
        )
        upstream = await asyncio.wait_for(
            self._generator.open_stream(prompt, **generation_options(classified.kind)),
            timeout=self._timeout,
        )
        logger.info("Opened %s generation stream", classified.kind.value)
        return GenerationStream(classified, upstream, self._generator, self._timeout)
