"""Consume the streaming generation endpoint with httpx."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from client.sse import SSEDecoder
from schemas.ai import SSEEvent


logger = logging.getLogger(__name__)

GENERATE_EMAIL_PATH = "/ai/generate-email"


class StreamGenerationError(Exception):
    """Raised into ``on_error`` when generation fails or the server reports an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _ignore(*_args: Any) -> None:
    return None


@dataclass
class StreamCallbacks:
    """Receivers for the events of one generation stream."""

    on_assistant_type: Callable[[str], None] = _ignore
    on_subject: Callable[[str], None] = _ignore
    on_body: Callable[[str], None] = _ignore
    on_complete: Callable[[], None] = _ignore
    on_error: Callable[[Exception], None] = _ignore


def _dispatch(event: SSEEvent, callbacks: StreamCallbacks) -> None:
    if event.type == "assistant_type":
        callbacks.on_assistant_type(event.data or "")
    elif event.type == "subject":
        callbacks.on_subject(event.data or "")
    elif event.type == "body":
        callbacks.on_body(event.data or "")


def _deliver_json(payload: dict[str, Any], callbacks: StreamCallbacks) -> None:
    assistant_type = payload.get("assistantType") or payload.get("assistant_type")
    if assistant_type:
        callbacks.on_assistant_type(assistant_type)
    if payload.get("subject"):
        callbacks.on_subject(payload["subject"])
    if payload.get("body"):
        callbacks.on_body(payload["body"])


async def _read_events(
    response: httpx.Response, callbacks: StreamCallbacks
) -> SSEEvent | None:
    """Dispatch events until the first terminal one, which is returned."""
    decoder = SSEDecoder()
    async for chunk in response.aiter_bytes():
        for event in decoder.feed(chunk):
            if event.is_terminal:
                return event
            _dispatch(event, callbacks)
    for event in decoder.flush():
        if event.is_terminal:
            return event
        _dispatch(event, callbacks)
    return None


async def stream_ai_generation(
    client: httpx.AsyncClient,
    prompt: str,
    recipient_info: str | None = None,
    callbacks: StreamCallbacks | None = None,
    *,
    path: str = GENERATE_EMAIL_PATH,
) -> None:
    """Request a generated email and feed its events to ``callbacks``.

    Exactly one of ``on_complete`` / ``on_error`` is called. Reading stops at
    the first ``complete`` or ``error`` event; a body that ends without one
    counts as complete. Failures, including a non-2xx status, are reported
    through ``on_error`` instead of raised. An exception raised by
    ``on_complete`` or ``on_error`` itself propagates.
    """
    callbacks = callbacks or StreamCallbacks()
    body: dict[str, str] = {"prompt": prompt}
    if recipient_info:
        body["recipientInfo"] = recipient_info

    terminal: SSEEvent | None = None
    try:
        async with client.stream(
            "POST", path, json=body, headers={"Accept": "text/event-stream"}
        ) as response:
            if response.is_error:
                await response.aread()
                logger.error(
                    "Generation request failed with HTTP %d", response.status_code
                )
                raise StreamGenerationError(
                    f"Failed to generate email: {response.status_code} "
                    f"{response.reason_phrase}",
                    status_code=response.status_code,
                )

            content_type = response.headers.get("content-type", "")
            if "text/event-stream" in content_type:
                terminal = await _read_events(response, callbacks)
            else:
                logger.warning("Response is not an event stream, reading it as JSON")
                await response.aread()
                _deliver_json(response.json(), callbacks)
    except Exception as exc:
        logger.error("Streaming generation failed: %s", exc)
        callbacks.on_error(exc)
        return

    if terminal is not None and terminal.type == "error":
        callbacks.on_error(StreamGenerationError(terminal.data or "Generation failed"))
    else:
        callbacks.on_complete()
