"""Middleware for the relay's Falcon ASGI app.

``RequestLogMiddleware`` writes one line when a request arrives and one
when its response is ready, so a webhook's fate can be followed in the
service journal.  ``DispatcherShutdown`` closes the GitHub client when
the ASGI server sends the lifespan shutdown event.

Usage
-----
Register the middleware when creating the Falcon app::

    from hookrelay.api.middleware import DispatcherShutdown, RequestLogMiddleware

    app = falcon.asgi.App(
        middleware=[RequestLogMiddleware(), DispatcherShutdown(dispatcher)]
    )

"""

from __future__ import annotations

import time
import typing as typ

from hookrelay.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookrelay.github.client import RepositoryDispatcher

__all__ = ["DispatcherShutdown", "RequestLogMiddleware"]

logger = get_logger(__name__)


class DispatcherShutdown:
    """Falcon lifespan middleware that closes the dispatcher on shutdown."""

    def __init__(self, dispatcher: RepositoryDispatcher) -> None:
        """Store the dispatcher to close."""
        self._dispatcher = dispatcher

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Close the dispatcher's HTTP resources."""
        await self._dispatcher.aclose()
        log_info(logger, "GitHub client closed")


class RequestLogMiddleware:
    """Falcon middleware that logs the request line and final status."""

    async def process_request(self, req: Request, _resp: Response) -> None:
        """Log the method and path and start the request timer."""
        req.context.started_at = time.monotonic()
        log_info(logger, "%s %s", req.method, req.relative_uri)

    async def process_response(
        self,
        req: Request,
        resp: Response,
        _resource: object,
        req_succeeded: bool,  # noqa: FBT001 - Falcon middleware signature requires positional bool
    ) -> None:
        """Log the response status and elapsed time.

        Parameters
        ----------
        req
            Falcon request carrying the start time in its context.
        resp
            Falcon response whose status is logged.
        _resource
            The matched Falcon resource (unused).
        req_succeeded
            ``False`` when an exception escaped the responder; the status
            is then the one chosen by the error handler.

        """
        started_at: float | None = getattr(req.context, "started_at", None)
        elapsed_ms = 0.0
        if started_at is not None:
            elapsed_ms = (time.monotonic() - started_at) * 1000
        log_info(
            logger,
            "%s %s -> %s (%.1f ms%s)",
            req.method,
            req.path,
            resp.status,
            elapsed_ms,
            "" if req_succeeded else ", handled error",
        )
