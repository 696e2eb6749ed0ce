"""Tests for the /emails CRUD endpoints."""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError


NEW_EMAIL = {
    "to": "grace@example.com",
    "cc": "team@example.com",
    "subject": "Launch plan",
    "body": "Draft attached.",
}


async def _create(client: AsyncClient, **overrides) -> dict:
    resp = await client.post("/emails", json={**NEW_EMAIL, **overrides})
    assert resp.status_code == status.HTTP_201_CREATED
    return resp.json()["email"]


@pytest.mark.asyncio
async def test_create_returns_201_with_envelope(async_client: AsyncClient):
    email = await _create(async_client)

    assert uuid.UUID(email["id"])
    assert email["to"] == "grace@example.com"
    assert email["cc"] == "team@example.com"
    assert email["bcc"] is None
    assert email["created_at"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"to": "a@example.com", "subject": "s"},
        {"to": "", "subject": "s", "body": "b"},
        {"to": "a@example.com", "subject": "   ", "body": "b"},
    ],
)
async def test_create_missing_fields_returns_400(async_client: AsyncClient, body: dict):
    resp = await async_client.post("/emails", json=body)

    assert resp.status_code == status.HTTP_400_BAD_REQUEST
    assert resp.json() == {"error": "Missing required fields: to, subject, body"}


@pytest.mark.asyncio
async def test_list_returns_newest_first(async_client: AsyncClient):
    first = await _create(async_client, subject="first")
    second = await _create(async_client, subject="second")

    resp = await async_client.get("/emails")

    assert resp.status_code == status.HTTP_200_OK
    ids = [e["id"] for e in resp.json()["emails"]]
    assert set(ids) == {first["id"], second["id"]}
    assert ids[0] == second["id"]


@pytest.mark.asyncio
async def test_get_by_id(async_client: AsyncClient):
    email = await _create(async_client)

    resp = await async_client.get(f"/emails/{email['id']}")

    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["email"]["subject"] == "Launch plan"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["get", "put", "delete"])
@pytest.mark.parametrize("email_id", [str(uuid.uuid4()), "not-a-uuid"])
async def test_unknown_or_malformed_id_returns_404(
    async_client: AsyncClient, method: str, email_id: str
):
    kwargs = {"json": {"subject": "x"}} if method == "put" else {}

    resp = await getattr(async_client, method)(f"/emails/{email_id}", **kwargs)

    assert resp.status_code == status.HTTP_404_NOT_FOUND
    assert resp.json() == {"error": "Email not found"}


@pytest.mark.asyncio
async def test_put_updates_only_supplied_fields(async_client: AsyncClient):
    email = await _create(async_client)

    resp = await async_client.put(
        f"/emails/{email['id']}", json={"subject": "Launch plan v2", "bcc": "boss@example.com"}
    )

    assert resp.status_code == status.HTTP_200_OK
    updated = resp.json()["email"]
    assert updated["subject"] == "Launch plan v2"
    assert updated["bcc"] == "boss@example.com"
    assert updated["body"] == "Draft attached."
    assert updated["to"] == "grace@example.com"


@pytest.mark.asyncio
async def test_put_cannot_clear_required_fields(async_client: AsyncClient):
    email = await _create(async_client)

    resp = await async_client.put(f"/emails/{email['id']}", json={"to": None, "cc": None})

    updated = resp.json()["email"]
    assert updated["to"] == "grace@example.com"
    assert updated["cc"] is None


@pytest.mark.asyncio
async def test_delete_returns_204_and_removes(async_client: AsyncClient):
    email = await _create(async_client)

    resp = await async_client.delete(f"/emails/{email['id']}")
    assert resp.status_code == status.HTTP_204_NO_CONTENT
    assert resp.content == b""

    resp = await async_client.get(f"/emails/{email['id']}")
    assert resp.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_list_database_failure_returns_500(async_client: AsyncClient):
    failure = OperationalError("SELECT", {}, Exception("database is locked"))
    with patch(
        "api.emails.email_crud.list_all", new=AsyncMock(side_effect=failure)
    ):
        resp = await async_client.get("/emails")

    assert resp.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert resp.json() == {"error": "Failed to fetch emails"}
