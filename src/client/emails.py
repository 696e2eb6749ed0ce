"""Async client for the ``/emails`` endpoints."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

import httpx

from schemas.emails import EmailEnvelope, EmailListEnvelope, EmailOut


class EmailsApiError(Exception):
    """Non-2xx response; ``message`` is the server's ``error`` text when present."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _raise_for_error(response: httpx.Response) -> None:
    if not response.is_error:
        return
    message = response.reason_phrase or "Request failed"
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        message = payload["error"]
    raise EmailsApiError(response.status_code, message)


class EmailsApiClient:
    """Thin wrapper over an ``httpx.AsyncClient`` pointed at the API."""

    def __init__(self, client: httpx.AsyncClient, base_path: str = "/emails") -> None:
        self._client = client
        self._base_path = base_path.rstrip("/")

    def _item_path(self, email_id: UUID | str) -> str:
        return f"{self._base_path}/{email_id}"

    async def list_emails(self) -> list[EmailOut]:
        response = await self._client.get(self._base_path)
        _raise_for_error(response)
        return EmailListEnvelope.model_validate(response.json()).emails

    async def get_email(self, email_id: UUID | str) -> EmailOut:
        response = await self._client.get(self._item_path(email_id))
        _raise_for_error(response)
        return EmailEnvelope.model_validate(response.json()).email

    async def create_email(self, payload: Mapping[str, Any]) -> EmailOut:
        response = await self._client.post(self._base_path, json=dict(payload))
        _raise_for_error(response)
        return EmailEnvelope.model_validate(response.json()).email

    async def update_email(
        self, email_id: UUID | str, changes: Mapping[str, Any]
    ) -> EmailOut:
        """Send only ``changes``; the server keeps every other field."""
        response = await self._client.put(self._item_path(email_id), json=dict(changes))
        _raise_for_error(response)
        return EmailEnvelope.model_validate(response.json()).email

    async def delete_email(self, email_id: UUID | str) -> None:
        response = await self._client.delete(self._item_path(email_id))
        _raise_for_error(response)
