"""Falcon sink that turns CMS webhooks into GitHub dispatch events.

The sink is mounted on every path.  A request moves through the stages
below and leaves at the first one that rejects it:

1. method check (POST only)
2. ``X-Relay-Secret`` check, before any of the body is read
3. bounded body read
4. JSON parse into a :class:`~hookrelay.models.Notification`
5. duplicate check against the :class:`~hookrelay.dedup.DedupTracker`
6. one GitHub dispatch attempt

Rejections are raised as :mod:`hookrelay.api.errors` exceptions and
rendered by the handlers registered on the app.

Usage
-----
Mount the sink on the Falcon app::

    from hookrelay.api.relay.resources import RelayResource

    app.add_sink(RelayResource(...), prefix="/")

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

import falcon

from hookrelay.api.errors import (
    AuthError,
    DownstreamError,
    MethodError,
    ParseError,
    PayloadTooLargeError,
    TransportError,
)
from hookrelay.auth import SECRET_HEADER
from hookrelay.config import DEFAULT_MAX_BODY_BYTES
from hookrelay.github.client import DispatchOutcome
from hookrelay.logging import get_logger, log_debug, log_info
from hookrelay.models import (
    DEFAULT_EVENT_TYPE,
    NotificationDecodeError,
    build_dispatch_payload,
    parse_notification,
)

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookrelay.auth import Authenticator
    from hookrelay.dedup import DedupTracker
    from hookrelay.github.client import RepositoryDispatcher

__all__ = ["RelayResource"]

logger = get_logger(__name__)


class RelayResource:
    """Relay webhook notifications to GitHub ``repository_dispatch``.

    Parameters
    ----------
    authenticator
        Shared-secret check applied before the body is read.
    tracker
        Process-wide duplicate tracker.
    dispatcher
        Client that delivers the dispatch payload.
    event_type
        ``event_type`` tag attached to every dispatch.
    max_body_bytes
        Largest body the relay will buffer.

    """

    def __init__(
        self,
        *,
        authenticator: Authenticator,
        tracker: DedupTracker,
        dispatcher: RepositoryDispatcher,
        event_type: str = DEFAULT_EVENT_TYPE,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ) -> None:
        """Store the collaborators used for each request."""
        self._authenticator = authenticator
        self._tracker = tracker
        self._dispatcher = dispatcher
        self._event_type = event_type
        self._max_body_bytes = max_body_bytes

    def _authorize(self, req: Request) -> None:
        presented = req.get_header(SECRET_HEADER)
        if presented is None:
            raise AuthError.missing_secret()
        if not self._authenticator.is_authorized(presented):
            raise AuthError.bad_secret()

    async def _read_body(self, req: Request) -> bytes:
        """Accumulate the request body, refusing anything over the limit."""
        declared = req.content_length
        if declared is not None and declared > self._max_body_bytes:
            raise PayloadTooLargeError.over_limit(self._max_body_bytes)

        buffer = bytearray()
        async for chunk in req.stream:
            buffer.extend(chunk)
            if len(buffer) > self._max_body_bytes:
                raise PayloadTooLargeError.over_limit(self._max_body_bytes)
        return bytes(buffer)

    async def __call__(self, req: Request, resp: Response, **_kwargs: object) -> None:
        """Handle a webhook delivered to any path."""
        if req.method != "POST":
            raise MethodError.for_method(req.method)
        self._authorize(req)

        body = await self._read_body(req)
        try:
            notification = parse_notification(body)
        except NotificationDecodeError as exc:
            raise ParseError(str(exc)) from exc
        log_debug(
            logger,
            "Parsed notification entity=%s action=%s uid=%s",
            notification.entity_key,
            notification.action,
            notification.model_uid,
        )

        # No await between the lookup and the write inside should_suppress.
        if self._tracker.should_suppress(notification.entity_key):
            log_info(
                logger, "Duplicate webhook for %s (ignoring)", notification.entity_key
            )
        else:
            payload = build_dispatch_payload(notification, event_type=self._event_type)
            outcome = await self._dispatcher.dispatch(payload)
            if outcome is DispatchOutcome.DOWNSTREAM_ERROR:
                raise DownstreamError
            if outcome is DispatchOutcome.TRANSPORT_ERROR:
                raise TransportError.unreachable()

        resp.status = HTTPStatus.OK
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = "ok"
