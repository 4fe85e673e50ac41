"""Liveness and readiness probe resources.

The relay holds no external connections at rest, so both probes only
confirm that the event loop is answering.  They are exact routes and
therefore win over the relay sink mounted on ``/``; any method other
than GET is handed back to the relay, so a webhook posted to a probe
path is still relayed.

Usage
-----
Register probe endpoints on the Falcon app::

    from hookrelay.api.health.resources import ProbeResource

    app.add_route("/health", ProbeResource("ok", relay))
    app.add_route("/ready", ProbeResource("ready", relay))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from hookrelay.api.relay.resources import RelayResource

__all__ = ["ProbeResource"]


class ProbeResource:
    """Probe answering GET with ``{"status": <status>}`` and HTTP 200."""

    def __init__(self, status: str, relay: RelayResource) -> None:
        """Store the probe status and the relay that handles other methods."""
        self._body = {"status": status}
        self._relay = relay

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET requests to the probe path."""
        resp.media = self._body
        resp.status = HTTPStatus.OK

    async def _relay_request(self, req: Request, resp: Response) -> None:
        await self._relay(req, resp)

    on_post = _relay_request
    on_put = _relay_request
    on_patch = _relay_request
    on_delete = _relay_request
    on_head = _relay_request
    on_options = _relay_request
