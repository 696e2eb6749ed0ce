"""Stored email model."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Email(Base):
    """An email saved from the compose form.

    Recipient fields hold the raw comma-separated address strings exactly as
    entered; no address parsing happens at this layer.
    """

    __tablename__ = "emails"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    to: Mapped[str] = mapped_column(String(1024), nullable=False)
    cc: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    bcc: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    subject: Mapped[str] = mapped_column(String(998), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self) -> str:
        return f"<Email(id={self.id})>"
