"""Compose-form state driven by a generation stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from client.ai_stream import StreamCallbacks, stream_ai_generation


logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("to", "subject", "body")


@dataclass
class ComposeFormState:
    """Fields of an email being composed, plus generation status."""

    to: str = ""
    cc: str = ""
    bcc: str = ""
    subject: str = ""
    body: str = ""
    assistant_type: str = ""
    is_generating: bool = False
    error: str | None = None

    def begin_generation(self) -> None:
        """Clear the generated fields before a new stream starts."""
        self.subject = ""
        self.body = ""
        self.error = None
        self.is_generating = True

    def callbacks(self) -> StreamCallbacks:
        return StreamCallbacks(
            on_assistant_type=self._set_assistant_type,
            on_subject=self._set_subject,
            on_body=self._set_body,
            on_complete=self._finish,
            on_error=self._fail,
        )

    async def generate(
        self,
        client: httpx.AsyncClient,
        prompt: str,
        recipient_info: str | None = None,
    ) -> None:
        self.begin_generation()
        await stream_ai_generation(client, prompt, recipient_info, self.callbacks())

    def missing_required_fields(self) -> list[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name).strip()]

    def to_payload(self) -> dict[str, str]:
        """Body for ``POST /emails``."""
        return {
            "to": self.to,
            "cc": self.cc,
            "bcc": self.bcc,
            "subject": self.subject,
            "body": self.body,
        }

    def _set_assistant_type(self, kind: str) -> None:
        self.assistant_type = kind

    def _set_subject(self, subject: str) -> None:
        self.subject = subject

    def _set_body(self, body: str) -> None:
        self.body = body

    def _finish(self) -> None:
        self.is_generating = False

    def _fail(self, exc: Exception) -> None:
        self.is_generating = False
        self.error = str(exc)
        logger.warning("Generation failed: %s", exc)
