"""Request-level exceptions and Falcon error handlers for the relay.

Every rejection raised inside the relay resource is a
:class:`RelayRequestError` subclass carrying its own HTTP status and a
short plain-text body.  The handlers registered here turn them into
responses, so the resource never writes an error response itself.

Usage
-----
Register error handlers on the Falcon app::

    from hookrelay.api.errors import (
        RelayRequestError,
        handle_relay_error,
        handle_unexpected_error,
    )

    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(RelayRequestError, handle_relay_error)

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from hookrelay.logging import get_logger, log_exception, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

__all__ = [
    "AuthError",
    "DownstreamError",
    "MethodError",
    "ParseError",
    "PayloadTooLargeError",
    "RelayRequestError",
    "TransportError",
    "handle_relay_error",
    "handle_unexpected_error",
]

logger = get_logger(__name__)

_SERVER_ERROR_BODY = "Error"


class RelayRequestError(Exception):
    """Base class for errors that end a single relay request.

    Attributes
    ----------
    status
        HTTP status returned to the caller.
    body
        Plain-text response body.
    detail
        Diagnostic text for the server log; never sent to the caller.

    """

    status: typ.ClassVar[HTTPStatus] = HTTPStatus.INTERNAL_SERVER_ERROR
    body: typ.ClassVar[str] = _SERVER_ERROR_BODY

    def __init__(self, detail: str | None = None) -> None:
        """Initialise with an optional log-only diagnostic."""
        self.detail = detail or self.body
        super().__init__(self.detail)


class MethodError(RelayRequestError):
    """Raised for any verb other than POST."""

    status = HTTPStatus.METHOD_NOT_ALLOWED
    body = "Method Not Allowed"

    @classmethod
    def for_method(cls, method: str) -> MethodError:
        """Return an error naming the rejected verb."""
        return cls(f"Method {method} not allowed")


class AuthError(RelayRequestError):
    """Raised when the shared secret is missing or wrong."""

    status = HTTPStatus.UNAUTHORIZED
    body = "Unauthorized"

    @classmethod
    def missing_secret(cls) -> AuthError:
        """Return an error for a request without the secret header."""
        return cls("Missing relay secret header")

    @classmethod
    def bad_secret(cls) -> AuthError:
        """Return an error for a request whose secret does not match."""
        return cls("Relay secret mismatch")


class PayloadTooLargeError(RelayRequestError):
    """Raised when the body exceeds the configured size limit."""

    status = HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    body = "Payload Too Large"

    @classmethod
    def over_limit(cls, limit: int) -> PayloadTooLargeError:
        """Return an error naming the byte limit that was exceeded."""
        return cls(f"Body exceeds {limit} bytes")


class ParseError(RelayRequestError):
    """Raised when the body cannot be decoded as a notification."""


class DownstreamError(RelayRequestError):
    """Raised when GitHub answered the dispatch with a failure status."""

    status = HTTPStatus.BAD_GATEWAY
    body = "GitHub dispatch failed"


class TransportError(RelayRequestError):
    """Raised when the dispatch request never got a response."""

    @classmethod
    def unreachable(cls) -> TransportError:
        """Return an error for an unreachable downstream API."""
        return cls("GitHub API unreachable")


def _write_text(resp: Response, status: HTTPStatus, body: str) -> None:
    resp.status = status
    resp.content_type = falcon.MEDIA_TEXT
    resp.text = body


async def handle_relay_error(
    _req: Request,
    resp: Response,
    ex: RelayRequestError,
    _params: dict[str, typ.Any],
) -> None:
    """Map a :class:`RelayRequestError` to its plain-text response.

    Parameters
    ----------
    _req
        Falcon request (unused).
    resp
        Falcon response whose status and body are set.
    ex
        The rejection raised by the relay resource.
    _params
        URI template parameters (unused).

    """
    log_warning(logger, "Rejected with %d: %s", ex.status.value, ex.detail)
    _write_text(resp, ex.status, ex.body)


async def handle_unexpected_error(
    _req: Request,
    resp: Response,
    ex: Exception,
    _params: dict[str, typ.Any],
) -> None:
    """Log an unhandled exception and answer with a generic 500."""
    log_exception(logger, "Unhandled error while relaying webhook", ex)
    _write_text(resp, HTTPStatus.INTERNAL_SERVER_ERROR, _SERVER_ERROR_BODY)
