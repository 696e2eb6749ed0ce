"""Schemas for stored emails."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


REQUIRED_EMAIL_FIELDS: tuple[str, ...] = ("to", "subject", "body")


class EmailWrite(BaseModel):
    """Request body for creating or updating an email.

    All fields are optional at the schema level; required-field checks for
    creation happen in the route so the API can answer with its own 400 body.
    """

    to: Annotated[str | None, Field(description="Comma-separated recipients")] = None
    cc: Annotated[str | None, Field(description="Carbon-copy recipients")] = None
    bcc: Annotated[str | None, Field(description="Blind carbon-copy recipients")] = (
        None
    )
    subject: Annotated[str | None, Field(description="Subject line")] = None
    body: Annotated[str | None, Field(description="Plain-text body")] = None

    model_config = ConfigDict(extra="ignore")

    def missing_required_fields(self) -> list[str]:
        """Names of required fields that are absent or blank."""
        return [
            name
            for name in REQUIRED_EMAIL_FIELDS
            if not (getattr(self, name) or "").strip()
        ]


class EmailOut(BaseModel):
    """Stored email as returned by the API."""

    id: UUID
    to: str
    cc: str | None = None
    bcc: str | None = None
    subject: str
    body: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EmailEnvelope(BaseModel):
    """Single-email response body: ``{"email": {...}}``."""

    email: EmailOut


class EmailListEnvelope(BaseModel):
    """Email list response body: ``{"emails": [...]}``."""

    emails: list[EmailOut]
