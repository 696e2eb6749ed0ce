"""Unit tests for the global exception handler."""

import json
import uuid

import pytest
from fastapi import HTTPException, Request

from core.error_handler import global_exception_handler, set_correlation_id
from core.exceptions import EmailNotFoundError, MissingEmailFieldsError


def _request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": []})


@pytest.fixture(autouse=True)
def _fixed_correlation_id():
    set_correlation_id("cid-test")
    yield
    set_correlation_id(None)


@pytest.mark.asyncio
async def test_missing_email_maps_to_404():
    resp = await global_exception_handler(_request(), EmailNotFoundError(uuid.uuid4()))
    body = json.loads(resp.body)

    assert resp.status_code == 404
    assert body["error"]["type"] == "domain_error"
    assert body["error"]["correlation_id"] == "cid-test"


@pytest.mark.asyncio
async def test_missing_fields_maps_to_400():
    resp = await global_exception_handler(
        _request(), MissingEmailFieldsError(["to", "body"])
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_http_exception_keeps_status():
    resp = await global_exception_handler(
        _request(), HTTPException(status_code=405, detail="Method Not Allowed")
    )
    body = json.loads(resp.body)

    assert resp.status_code == 405
    assert body["error"]["type"] == "http_error"


@pytest.mark.asyncio
async def test_unhandled_exception_is_500_with_traceback_outside_production():
    resp = await global_exception_handler(_request(), ValueError("boom"))
    body = json.loads(resp.body)

    assert resp.status_code == 500
    assert body["error"]["type"] == "internal_server_error"
    assert body["error"]["exception_type"] == "ValueError"
    assert "boom" in body["error"]["traceback"]


def test_missing_fields_message_lists_fields():
    assert str(MissingEmailFieldsError(["to", "subject"])) == (
        "Missing required fields: to, subject"
    )
