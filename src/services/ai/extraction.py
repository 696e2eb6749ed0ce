"""Incremental extraction of ``subject`` / ``body`` from a streamed JSON draft.

The model is asked to answer with a JSON object, which arrives as arbitrary
text fragments. `FieldExtractor` scans each character once, keeping
string/escape state and the key state of every open object, and reports a
``subject`` or ``body`` key as soon as its string value closes, at any
nesting level. When the top-level object closes the whole object is parsed
again and its values are offered a second time; this pass is authoritative.

A value is emitted only when it differs from the last value emitted for that
field. Nothing is emitted for an empty value before the field's first
emission.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from schemas.ai import SSEEvent


logger = logging.getLogger(__name__)

EXTRACTED_FIELDS: tuple[str, ...] = ("subject", "body")

_JSON_FENCE_OPEN = "```json"
_FENCE = "```"


@dataclass(slots=True)
class ExtractionState:
    """Buffer and emission bookkeeping of one generation cycle."""

    raw_buffer: str = ""
    last_subject: str = ""
    last_body: str = ""
    subject_emitted: bool = False
    body_emitted: bool = False


def strip_code_fence(text: str) -> str:
    """Trim ``text`` and drop a leading ```json and trailing ``` fence."""
    cleaned = text.strip()
    if cleaned.startswith(_JSON_FENCE_OPEN):
        cleaned = cleaned[len(_JSON_FENCE_OPEN) :].lstrip()
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)].rstrip()
    return cleaned


@dataclass(slots=True)
class _Frame:
    """Key bookkeeping of one open object or array."""

    is_object: bool
    expect_key: bool = True
    current_key: str | None = None


class FieldExtractor:
    """Turns streamed text fragments into deduplicated field events."""

    def __init__(self) -> None:
        self.state = ExtractionState()
        self._pos = 0
        self._frames: list[_Frame] = []
        self._in_string = False
        self._escape = False
        self._string_start = 0
        self._object_start = 0

    @property
    def missing_fields(self) -> list[str]:
        """Fields that have not been emitted yet, in wire order."""
        return [
            field
            for field in EXTRACTED_FIELDS
            if not getattr(self.state, f"{field}_emitted")
        ]

    def feed(self, fragment: str) -> list[SSEEvent]:
        """Append ``fragment`` and return the events it makes available."""
        if not fragment:
            return []
        self.state.raw_buffer += fragment
        return self._scan()

    def parse_buffer(self) -> list[SSEEvent]:
        """Parse the whole buffer as one JSON object, ignoring failures.

        Running it again on an unchanged buffer emits nothing new.
        """
        cleaned = strip_code_fence(self.state.raw_buffer)
        if not (cleaned.startswith("{") and cleaned.endswith("}")):
            return []
        return self._offer_object(cleaned)

    def _scan(self) -> list[SSEEvent]:
        events: list[SSEEvent] = []
        buf = self.state.raw_buffer
        frames = self._frames
        for i in range(self._pos, len(buf)):
            ch = buf[i]
            if self._in_string:
                if self._escape:
                    self._escape = False
                elif ch == "\\":
                    self._escape = True
                elif ch == '"':
                    self._in_string = False
                    events.extend(self._string_closed(buf[self._string_start : i + 1]))
                continue

            if not frames:
                # Prose or fences around the object are skipped.
                if ch == "{":
                    frames.append(_Frame(is_object=True))
                    self._object_start = i
                continue

            frame = frames[-1]
            if ch == '"':
                self._in_string = True
                self._string_start = i
            elif ch in "{[":
                frames.append(_Frame(is_object=ch == "{"))
            elif ch in "}]":
                frames.pop()
                if frames:
                    # A nested container was the value of the enclosing key.
                    frames[-1].current_key = None
                else:
                    events.extend(self._offer_object(buf[self._object_start : i + 1]))
            elif frame.is_object and ch == ":":
                frame.expect_key = False
            elif frame.is_object and ch == ",":
                frame.expect_key = True
                frame.current_key = None
        self._pos = len(buf)
        return events

    def _string_closed(self, literal: str) -> list[SSEEvent]:
        frame = self._frames[-1]
        try:
            value = json.loads(literal)
        except json.JSONDecodeError:
            logger.debug("Skipping undecodable string literal of length %d", len(literal))
            frame.current_key = None
            return []

        if not frame.is_object:
            return []
        if frame.expect_key:
            frame.current_key = value
            return []

        key, frame.current_key = frame.current_key, None
        if key in EXTRACTED_FIELDS:
            return self._offer(key, value)
        return []

    def _offer_object(self, text: str) -> list[SSEEvent]:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            return []
        if not isinstance(payload, dict):
            return []

        events: list[SSEEvent] = []
        for field in EXTRACTED_FIELDS:
            value = payload.get(field)
            if isinstance(value, str):
                events.extend(self._offer(field, value))
        return events

    def _offer(self, field: str, value: str) -> list[SSEEvent]:
        if value == getattr(self.state, f"last_{field}"):
            return []
        setattr(self.state, f"last_{field}", value)
        setattr(self.state, f"{field}_emitted", True)
        if field == "subject":
            return [SSEEvent.subject(value)]
        return [SSEEvent.body(value)]
