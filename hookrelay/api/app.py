"""Application factory for the relay's Falcon ASGI application.

This module provides ``create_app()`` which wires the relay sink, the
probe routes, request logging, and the error handlers together.

Usage
-----
Build the app from explicit collaborators::

    from hookrelay.api.app import AppDependencies, create_app

    deps = AppDependencies(
        authenticator=Authenticator(secret),
        tracker=DedupTracker(),
        dispatcher=dispatch_client,
    )
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from hookrelay.api.errors import (
    RelayRequestError,
    handle_relay_error,
    handle_unexpected_error,
)
from hookrelay.api.health.resources import ProbeResource
from hookrelay.api.middleware import DispatcherShutdown, RequestLogMiddleware
from hookrelay.api.relay.resources import RelayResource
from hookrelay.config import DEFAULT_MAX_BODY_BYTES
from hookrelay.models import DEFAULT_EVENT_TYPE

if typ.TYPE_CHECKING:
    from hookrelay.auth import Authenticator
    from hookrelay.dedup import DedupTracker
    from hookrelay.github.client import RepositoryDispatcher

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Collaborators shared by every request the app serves.

    Attributes
    ----------
    authenticator
        Shared-secret check for inbound webhooks.
    tracker
        Process-wide duplicate tracker.
    dispatcher
        Client that delivers ``repository_dispatch`` events.
    event_type
        ``event_type`` tag attached to every dispatch.
    max_body_bytes
        Largest inbound body the relay will buffer.

    """

    authenticator: Authenticator
    tracker: DedupTracker
    dispatcher: RepositoryDispatcher
    event_type: str = DEFAULT_EVENT_TYPE
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES


def create_app(dependencies: AppDependencies) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    ``/health`` and ``/ready`` answer GET probes; every other request,
    including a POST to a probe path, is handled by the relay.

    Parameters
    ----------
    dependencies
        Relay collaborators.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    middleware: list[object] = [
        RequestLogMiddleware(),
        DispatcherShutdown(dependencies.dispatcher),
    ]
    app = falcon.asgi.App(middleware=middleware)  # type: ignore[no-matching-overload]  # Falcon stubs

    relay = RelayResource(
        authenticator=dependencies.authenticator,
        tracker=dependencies.tracker,
        dispatcher=dependencies.dispatcher,
        event_type=dependencies.event_type,
        max_body_bytes=dependencies.max_body_bytes,
    )
    app.add_route("/health", ProbeResource("ok", relay))
    app.add_route("/ready", ProbeResource("ready", relay))
    app.add_sink(relay, prefix="/")

    # Error handlers
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(RelayRequestError, handle_relay_error)

    return app
