"""API endpoints for stored emails."""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import EmailNotFoundError, MissingEmailFieldsError
from crud.emails import email_crud
from dependencies.db import DbSession
from schemas.api import ErrorMessage
from schemas.emails import EmailEnvelope, EmailListEnvelope, EmailOut, EmailWrite


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emails", tags=["emails"])

NOT_FOUND_MESSAGE = "Email not found"

EmailBody = Annotated[EmailWrite | None, Body()]

_NOT_FOUND_RESPONSE = {404: {"model": ErrorMessage, "description": NOT_FOUND_MESSAGE}}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=ErrorMessage(error=message).model_dump()
    )


def _parse_email_id(raw: str) -> UUID | None:
    """Ids that are not UUIDs cannot name a stored email."""
    try:
        return UUID(raw)
    except ValueError:
        return None


@router.get(
    "",
    response_model=EmailListEnvelope,
    responses={500: {"model": ErrorMessage}},
)
async def list_emails(db: DbSession) -> EmailListEnvelope | JSONResponse:
    """Return all stored emails, newest first."""
    try:
        emails = await email_crud.list_all(db)
    except SQLAlchemyError:
        logger.exception("Failed to fetch emails")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch emails")
    return EmailListEnvelope(emails=[EmailOut.model_validate(e) for e in emails])


@router.get("/{email_id}", response_model=EmailEnvelope, responses=_NOT_FOUND_RESPONSE)
async def get_email(email_id: str, db: DbSession) -> EmailEnvelope | JSONResponse:
    parsed_id = _parse_email_id(email_id)
    if parsed_id is None:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    try:
        email = await email_crud.get_or_raise(db, parsed_id)
    except EmailNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    except SQLAlchemyError:
        logger.exception("Failed to fetch email")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch email")
    return EmailEnvelope(email=EmailOut.model_validate(email))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=EmailEnvelope,
    responses={400: {"model": ErrorMessage}, 500: {"model": ErrorMessage}},
)
async def create_email(
    db: DbSession, payload: EmailBody = None
) -> EmailEnvelope | JSONResponse:
    """Store a new email; ``to``, ``subject`` and ``body`` are required."""
    try:
        email = await email_crud.create(db, payload or EmailWrite())
    except MissingEmailFieldsError:
        # The message always names every required field
        return _error(
            status.HTTP_400_BAD_REQUEST, "Missing required fields: to, subject, body"
        )
    except SQLAlchemyError:
        logger.exception("Failed to create email")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create email")

    logger.info("Created email %s", email.id)
    return EmailEnvelope(email=EmailOut.model_validate(email))


@router.put("/{email_id}", response_model=EmailEnvelope, responses=_NOT_FOUND_RESPONSE)
async def update_email(
    email_id: str, db: DbSession, payload: EmailBody = None
) -> EmailEnvelope | JSONResponse:
    """Update the fields present in the body; absent fields stay unchanged."""
    parsed_id = _parse_email_id(email_id)
    if parsed_id is None:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    try:
        email = await email_crud.update(db, parsed_id, payload or EmailWrite())
    except EmailNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    except SQLAlchemyError:
        logger.exception("Failed to update email")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update email")
    return EmailEnvelope(email=EmailOut.model_validate(email))


@router.delete(
    "/{email_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_NOT_FOUND_RESPONSE,
)
async def delete_email(email_id: str, db: DbSession) -> Response:
    parsed_id = _parse_email_id(email_id)
    if parsed_id is None:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    try:
        await email_crud.delete(db, parsed_id)
    except EmailNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)
    except SQLAlchemyError:
        logger.exception("Failed to delete email")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete email")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
