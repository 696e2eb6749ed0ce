"""Incremental decoder for the generation endpoint's SSE records.

Network reads can split a record, a line, or a multi-byte UTF-8 character
anywhere. `SSEDecoder` keeps a carry-over buffer of the unfinished line and an
incremental UTF-8 decoder, and only parses complete lines.
"""

from __future__ import annotations

import codecs
import json
import logging

from pydantic import ValidationError

from schemas.ai import SSEEvent


logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class SSEDecoder:
    """Turns raw response chunks into `SSEEvent` objects."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes | str) -> list[SSEEvent]:
        """Decode ``chunk`` and return the events completed by it."""
        text = chunk if isinstance(chunk, str) else self._decoder.decode(chunk)
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        return self._parse_lines(lines)

    def flush(self) -> list[SSEEvent]:
        """Parse whatever is left once the response body has ended."""
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer, ""
        return self._parse_lines([remainder])

    def _parse_lines(self, lines: list[str]) -> list[SSEEvent]:
        events: list[SSEEvent] = []
        for raw_line in lines:
            line = raw_line.strip()
            if not line or line.startswith(":"):
                continue
            if not line.startswith(DATA_PREFIX):
                continue
            event = self._parse_data(line[len(DATA_PREFIX) :].lstrip())
            if event is not None:
                events.append(event)
        return events

    @staticmethod
    def _parse_data(payload: str) -> SSEEvent | None:
        if payload == DONE_SENTINEL:
            return SSEEvent.complete()
        try:
            record = json.loads(payload)
        except json.JSONDecodeError:
            logger.warning("Skipping SSE record with invalid JSON (%d chars)", len(payload))
            return None
        if isinstance(record, dict) and record.get("type") == "complete":
            return SSEEvent.complete()
        try:
            return SSEEvent.model_validate(record)
        except ValidationError as exc:
            logger.warning("Skipping unrecognised SSE record: %s", exc.errors()[0]["msg"])
            return None
