"""Unit tests for hookrelay.api.errors exceptions and handlers."""

from __future__ import annotations

from http import HTTPStatus
from unittest import mock

import falcon
import pytest

from hookrelay.api.errors import (
    AuthError,
    DownstreamError,
    MethodError,
    ParseError,
    PayloadTooLargeError,
    RelayRequestError,
    TransportError,
    handle_relay_error,
    handle_unexpected_error,
)


@pytest.mark.parametrize(
    ("error", "status", "body"),
    [
        (
            MethodError.for_method("GET"),
            HTTPStatus.METHOD_NOT_ALLOWED,
            "Method Not Allowed",
        ),
        (AuthError.missing_secret(), HTTPStatus.UNAUTHORIZED, "Unauthorized"),
        (AuthError.bad_secret(), HTTPStatus.UNAUTHORIZED, "Unauthorized"),
        (
            PayloadTooLargeError.over_limit(10),
            HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
            "Payload Too Large",
        ),
        (ParseError("bad json"), HTTPStatus.INTERNAL_SERVER_ERROR, "Error"),
        (DownstreamError(), HTTPStatus.BAD_GATEWAY, "GitHub dispatch failed"),
        (TransportError.unreachable(), HTTPStatus.INTERNAL_SERVER_ERROR, "Error"),
    ],
)
def test_error_taxonomy(
    error: RelayRequestError, status: HTTPStatus, body: str
) -> None:
    """Each request error carries its status and plain-text body."""
    assert error.status is status
    assert error.body == body


def test_detail_defaults_to_body() -> None:
    """Errors built without detail fall back to their body text."""
    assert DownstreamError().detail == "GitHub dispatch failed"
    assert str(PayloadTooLargeError.over_limit(10)) == "Body exceeds 10 bytes"


@pytest.mark.asyncio
async def test_handle_relay_error_writes_plain_text() -> None:
    """The relay handler writes status and body, never the detail."""
    resp = mock.MagicMock()

    await handle_relay_error(mock.MagicMock(), resp, ParseError("secret detail"), {})

    assert resp.status is HTTPStatus.INTERNAL_SERVER_ERROR
    assert resp.content_type == falcon.MEDIA_TEXT
    assert resp.text == "Error"


@pytest.mark.asyncio
async def test_handle_unexpected_error_is_generic_500() -> None:
    """Unexpected exceptions become a plain 500."""
    resp = mock.MagicMock()

    await handle_unexpected_error(mock.MagicMock(), resp, KeyError("boom"), {})

    assert resp.status is HTTPStatus.INTERNAL_SERVER_ERROR
    assert resp.text == "Error"
