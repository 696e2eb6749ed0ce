"""AI email generation endpoints."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing
from typing import Annotated

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse, StreamingResponse

from dependencies.ai import Orchestrator
from schemas.ai import GeneratedEmailResponse, GenerationRequest
from schemas.api import ErrorMessage
from services.ai.orchestrator import STREAM_FAILED_MESSAGE, GenerationStream


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

PROMPT_REQUIRED_MESSAGE = "Prompt is required"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

GenerationBody = Annotated[GenerationRequest | None, Body()]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorMessage(error=message).model_dump()
    )


async def _sse_records(stream: GenerationStream) -> AsyncGenerator[str, None]:
    async with aclosing(stream.events()) as events:
        async for event in events:
            yield event.to_sse()


@router.post(
    "/generate-email",
    response_model=None,
    responses={
        200: {"content": {"text/event-stream": {}}},
        400: {"model": ErrorMessage},
        500: {"model": ErrorMessage},
    },
)
async def generate_email(
    orchestrator: Orchestrator, payload: GenerationBody = None
) -> StreamingResponse | JSONResponse:
    """Stream a generated email as Server-Sent Events.

    Events, in order: ``assistant_type``, any number of ``subject`` / ``body``
    updates, then ``complete`` (or ``error``). Each is one
    ``data: {"type": ..., "data": ...}`` record.
    """
    if payload is None or not payload.has_prompt():
        return _error(status.HTTP_400_BAD_REQUEST, PROMPT_REQUIRED_MESSAGE)

    try:
        stream = await orchestrator.start_stream(payload)
    except Exception:
        logger.exception("Could not start email generation stream")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, STREAM_FAILED_MESSAGE)

    logger.info(
        "Streaming %s email, prompt_len=%d",
        stream.classified.kind.value,
        len(payload.prompt or ""),
    )
    return StreamingResponse(
        _sse_records(stream), media_type="text/event-stream", headers=SSE_HEADERS
    )


@router.post(
    "/generate-email-simple",
    response_model=GeneratedEmailResponse,
    responses={400: {"model": ErrorMessage}, 500: {"model": ErrorMessage}},
)
async def generate_email_simple(
    orchestrator: Orchestrator, payload: GenerationBody = None
) -> GeneratedEmailResponse | JSONResponse:
    """Generate a whole email in one response."""
    if payload is None or not payload.has_prompt():
        return _error(status.HTTP_400_BAD_REQUEST, PROMPT_REQUIRED_MESSAGE)

    try:
        generated = await orchestrator.generate_email(payload)
    except Exception:
        logger.exception("Email generation failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, STREAM_FAILED_MESSAGE)

    return GeneratedEmailResponse(
        assistant_type=generated.kind,
        subject=generated.draft.subject,
        body=generated.draft.body,
    )
