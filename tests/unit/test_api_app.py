"""Unit tests for hookrelay.api.app application factory.

Usage
-----
Run with pytest::

    pytest tests/unit/test_api_app.py

"""

from __future__ import annotations

import falcon.asgi
import falcon.testing
import pytest

from hookrelay.api.app import AppDependencies, create_app
from hookrelay.api.factory import build_dependencies
from hookrelay.auth import SECRET_HEADER, Authenticator
from hookrelay.config import RelayConfig
from hookrelay.dedup import WindowPolicy
from hookrelay.github.client import GitHubDispatchClient
from tests.helpers import RELAY_SECRET, RecordingDispatcher, webhook_body


class TestCreateApp:
    """Tests for create_app()."""

    def test_returns_falcon_app(self, relay_deps: AppDependencies) -> None:
        """create_app() returns a Falcon ASGI App."""
        app = create_app(relay_deps)
        assert isinstance(app, falcon.asgi.App), "expected Falcon ASGI App"

    @pytest.mark.parametrize(
        ("path", "status"), [("/health", "ok"), ("/ready", "ready")]
    )
    def test_probe_routes(
        self, client: falcon.testing.TestClient, path: str, status: str
    ) -> None:
        """Probe routes answer GET with a JSON status."""
        result = client.simulate_get(path)
        assert result.status == falcon.HTTP_200, f"expected HTTP 200 from {path}"
        assert result.json == {"status": status}, f"wrong {path} body"

    @pytest.mark.parametrize("path", ["/health", "/ready"])
    def test_post_to_probe_path_is_relayed(
        self,
        client: falcon.testing.TestClient,
        dispatcher: RecordingDispatcher,
        path: str,
    ) -> None:
        """An authorised webhook posted to a probe path is dispatched once."""
        result = client.simulate_post(
            path, body=webhook_body(), headers={SECRET_HEADER: RELAY_SECRET}
        )
        assert result.status == falcon.HTTP_200, "expected HTTP 200"
        assert result.text == "ok", "expected the relay's plain-text body"
        assert len(dispatcher.payloads) == 1, "expected exactly one dispatch"

    @pytest.mark.parametrize("method", ["PUT", "DELETE", "OPTIONS"])
    def test_other_methods_on_probe_path_are_plain_405(
        self,
        client: falcon.testing.TestClient,
        dispatcher: RecordingDispatcher,
        method: str,
    ) -> None:
        """Non-GET, non-POST methods on a probe path get the relay's 405."""
        result = client.simulate_request(method, "/health")
        assert result.status == falcon.HTTP_405, "expected HTTP 405"
        assert result.text == "Method Not Allowed", "expected plain-text body"
        assert dispatcher.payloads == []

    def test_unknown_path_reaches_relay(
        self, client: falcon.testing.TestClient
    ) -> None:
        """Paths other than the probes are handled by the relay sink."""
        result = client.simulate_post("/nowhere/in/particular")
        assert result.status == falcon.HTTP_401, "expected the relay's 401"


class TestBuildDependencies:
    """Tests for build_dependencies()."""

    def test_wires_config_into_collaborators(
        self, relay_env: pytest.MonkeyPatch
    ) -> None:
        """Config values reach the tracker, authenticator, and client."""
        relay_env.setenv("RELAY_DEDUP_WINDOW_MS", "1500")
        relay_env.setenv("RELAY_DEDUP_POLICY", "sliding")
        relay_env.setenv("RELAY_EVENT_TYPE", "cms-changed")
        relay_env.setenv("RELAY_MAX_BODY_BYTES", "4096")

        deps = build_dependencies(RelayConfig.from_env())

        assert isinstance(deps.authenticator, Authenticator)
        assert deps.authenticator.is_authorized(RELAY_SECRET)
        assert deps.tracker.window_ms == 1500
        assert deps.tracker.policy is WindowPolicy.SLIDING
        assert isinstance(deps.dispatcher, GitHubDispatchClient)
        assert deps.dispatcher.config.repository == "OliAjonjoli/redcudi.org-astro"
        assert deps.event_type == "cms-changed"
        assert deps.max_body_bytes == 4096
