"""AI email generation schemas.

This module defines the request/response models of the generation endpoints
and the SSE event envelope shared by the server encoder and the client
decoder, so both sides agree on one wire format.
"""

from enum import StrEnum
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AssistantKind(StrEnum):
    """Which assistant writes the email; fixed once classification is done."""

    SALES = "sales"
    FOLLOWUP = "followup"


class EmailDraft(BaseModel):
    """Generated subject and body."""

    subject: str = ""
    body: str = ""

    model_config = ConfigDict(frozen=True)


class GenerationRequest(BaseModel):
    """Body of both generation endpoints.

    ``prompt`` is optional at the schema level so a missing or empty prompt is
    reported as the API's own 400 body rather than a framework validation
    error. A whitespace-only prompt is accepted.
    """

    prompt: str | None = Field(default=None, description="What the email is about")
    recipient_info: str | None = Field(
        default=None,
        alias="recipientInfo",
        description="Optional context about the recipient",
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def has_prompt(self) -> bool:
        return bool(self.prompt)


class GeneratedEmailResponse(BaseModel):
    """Non-streaming generation result."""

    assistant_type: AssistantKind = Field(..., alias="assistantType")
    subject: str
    body: str

    model_config = ConfigDict(populate_by_name=True)


SSEEventType = Literal["assistant_type", "subject", "body", "complete", "error"]

TERMINAL_EVENT_TYPES: frozenset[str] = frozenset({"complete", "error"})


class SSEEvent(BaseModel):
    """One Server-Sent Event of the generation stream.

    Wire form is ``{"type": ..., "data": ...}``; ``data`` is omitted only for
    ``complete``. ``complete`` and ``error`` end the stream.
    """

    type: SSEEventType
    data: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="after")
    def _data_matches_type(self) -> Self:
        if self.type == "complete":
            if self.data is not None:
                raise ValueError("complete events carry no data")
        elif self.data is None:
            raise ValueError(f"{self.type} events require data")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENT_TYPES

    def to_sse(self) -> str:
        """Render the ``data: <json>\\n\\n`` record."""
        return f"data: {self.model_dump_json(exclude_none=True)}\n\n"

    @classmethod
    def assistant_type(cls, kind: AssistantKind) -> "SSEEvent":
        return cls(type="assistant_type", data=kind.value)

    @classmethod
    def subject(cls, text: str) -> "SSEEvent":
        return cls(type="subject", data=text)

    @classmethod
    def body(cls, text: str) -> "SSEEvent":
        return cls(type="body", data=text)

    @classmethod
    def complete(cls) -> "SSEEvent":
        return cls(type="complete")

    @classmethod
    def error(cls, message: str) -> "SSEEvent":
        return cls(type="error", data=message)
