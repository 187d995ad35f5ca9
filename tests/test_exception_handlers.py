from __future__ import annotations

import json

import pytest
from fastapi import HTTPException
from starlette.requests import Request

from app.shared.exceptions import (
    NotFoundException,
    PersistenceException,
    ValidationException,
    app_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)


def _make_request() -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/v1/schedule",
        "headers": [],
        "client": ("127.0.0.1", 12345),
    }
    return Request(scope)


@pytest.mark.asyncio
async def test_validation_error_is_rendered_with_message() -> None:
    response = await app_exception_handler(
        _make_request(),
        ValidationException("End time must be after start time"),
    )

    assert response.status_code == 400
    assert json.loads(response.body) == {
        "error": {"code": "validation_error", "message": "End time must be after start time"},
    }


@pytest.mark.asyncio
async def test_persistence_error_maps_to_503() -> None:
    response = await app_exception_handler(
        _make_request(),
        PersistenceException("Storage is temporarily unavailable"),
    )

    assert response.status_code == 503
    assert json.loads(response.body)["error"]["code"] == "persistence_error"


@pytest.mark.asyncio
async def test_not_found_maps_to_404() -> None:
    response = await app_exception_handler(_make_request(), NotFoundException("Time slot not found"))

    assert response.status_code == 404
    assert json.loads(response.body)["error"]["message"] == "Time slot not found"


@pytest.mark.asyncio
async def test_http_exception_keeps_headers() -> None:
    response = await http_exception_handler(
        _make_request(),
        HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"}),
    )

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert json.loads(response.body)["error"]["code"] == "http_error"


@pytest.mark.asyncio
async def test_unhandled_exception_hides_details() -> None:
    response = await unhandled_exception_handler(_make_request(), RuntimeError("boom"))

    assert response.status_code == 500
    assert json.loads(response.body)["error"]["message"] == "Internal server error"
