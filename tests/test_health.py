import pytest
from fastapi import status
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_ping_returns_pong(async_client: AsyncClient):
    resp = await async_client.get("/ping")

    assert resp.status_code == status.HTTP_200_OK
    assert resp.text == "pong\n"
    assert resp.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_health_returns_envelope(async_client: AsyncClient):
    resp = await async_client.get("/health")

    assert resp.status_code == status.HTTP_200_OK
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["status"] == "healthy"


@pytest.mark.asyncio
async def test_responses_carry_correlation_id(async_client: AsyncClient):
    resp = await async_client.get("/ping", headers={"X-Correlation-ID": "abc-123"})
    assert resp.headers["x-correlation-id"] == "abc-123"

    generated = await async_client.get("/ping")
    assert generated.headers["x-correlation-id"]


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(async_client: AsyncClient):
    resp = await async_client.get("/nope", headers={"X-Correlation-ID": "cid-1"})

    assert resp.status_code == status.HTTP_404_NOT_FOUND
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["correlation_id"] == "cid-1"
