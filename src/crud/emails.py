"""CRUD operations for stored emails."""

from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import EmailNotFoundError, MissingEmailFieldsError
from models.emails import Email
from schemas.emails import EmailWrite


class EmailCRUD:
    """Read-modify-write access to the ``emails`` table."""

    async def list_all(self, db: AsyncSession) -> list[Email]:
        """Return all emails, newest first."""
        result = await db.execute(select(Email).order_by(Email.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, email_id: UUID) -> Email | None:
        result = await db.execute(select(Email).where(Email.id == email_id))
        return result.scalars().first()

    async def get_or_raise(self, db: AsyncSession, email_id: UUID) -> Email:
        email = await self.get(db, email_id)
        if email is None:
            raise EmailNotFoundError(email_id)
        return email

    async def create(self, db: AsyncSession, data: EmailWrite) -> Email:
        """Insert a new email.

        Raises:
            MissingEmailFieldsError: If ``to``, ``subject`` or ``body`` is blank.
        """
        missing = data.missing_required_fields()
        if missing:
            raise MissingEmailFieldsError(missing)

        email = Email(
            to=data.to,
            cc=data.cc,
            bcc=data.bcc,
            subject=data.subject,
            body=data.body,
        )
        db.add(email)
        await db.commit()
        await db.refresh(email)
        return email

    async def update(self, db: AsyncSession, email_id: UUID, data: EmailWrite) -> Email:
        """Apply the fields present in ``data``; absent fields are left as-is."""
        email = await self.get_or_raise(db, email_id)

        changes: dict[str, Any] = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            # Required columns cannot be cleared through an update
            if value is None and field in {"to", "subject", "body"}:
                continue
            setattr(email, field, value)

        await db.commit()
        await db.refresh(email)
        return email

    async def delete(self, db: AsyncSession, email_id: UUID) -> None:
        email = await self.get_or_raise(db, email_id)
        await db.delete(email)
        await db.commit()


# Singleton instance to use across the application
email_crud = EmailCRUD()
