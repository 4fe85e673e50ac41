"""Shared fixtures for unit and feature tests."""

from __future__ import annotations

import falcon.testing
import pytest

from hookrelay.api.app import AppDependencies, create_app
from hookrelay.auth import Authenticator
from hookrelay.dedup import DedupTracker
from tests.helpers import RELAY_SECRET, FakeClock, RecordingDispatcher


@pytest.fixture
def clock() -> FakeClock:
    """Provide a fake millisecond clock starting at zero."""
    return FakeClock()


@pytest.fixture
def tracker(clock: FakeClock) -> DedupTracker:
    """Provide a dedup tracker driven by the fake clock."""
    return DedupTracker(clock=clock)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    """Provide a dispatcher double that always succeeds."""
    return RecordingDispatcher()


@pytest.fixture
def relay_deps(
    tracker: DedupTracker, dispatcher: RecordingDispatcher
) -> AppDependencies:
    """Build app dependencies around the test doubles."""
    return AppDependencies(
        authenticator=Authenticator(RELAY_SECRET),
        tracker=tracker,
        dispatcher=dispatcher,
        max_body_bytes=1024,
    )


@pytest.fixture
def client(relay_deps: AppDependencies) -> falcon.testing.TestClient:
    """Build a test client for the relay app."""
    return falcon.testing.TestClient(create_app(relay_deps))


@pytest.fixture
def relay_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Set the required credentials and clear optional overrides."""
    for name in (
        "PORT",
        "RELAY_HOST",
        "RELAY_LOG_LEVEL",
        "RELAY_GITHUB_REPO",
        "RELAY_GITHUB_API_URL",
        "RELAY_EVENT_TYPE",
        "RELAY_USER_AGENT",
        "RELAY_GITHUB_TIMEOUT_S",
        "RELAY_DEDUP_WINDOW_MS",
        "RELAY_DEDUP_POLICY",
        "RELAY_MAX_BODY_BYTES",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RELAY_SECRET", RELAY_SECRET)
    monkeypatch.setenv("GH_PAT", "ghp_test_token")
    return monkeypatch
