"""Shared test utilities."""

from __future__ import annotations

import json
import typing as typ

from hookrelay.github.client import DispatchOutcome

if typ.TYPE_CHECKING:
    from hookrelay.models import DispatchPayload

RELAY_SECRET = "relay-test-secret"


class FakeClock:
    """Millisecond clock advanced explicitly by tests."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, delta_ms: float) -> None:
        """Move the clock forward by ``delta_ms``."""
        self.now_ms += delta_ms

    def set(self, now_ms: float) -> None:
        """Jump the clock to an absolute reading."""
        self.now_ms = now_ms


class RecordingDispatcher:
    """Dispatcher double that records payloads and returns a fixed outcome."""

    def __init__(self, outcome: DispatchOutcome = DispatchOutcome.SUCCESS) -> None:
        self.outcome = outcome
        self.payloads: list[DispatchPayload] = []
        self.closed = False

    async def dispatch(self, payload: DispatchPayload) -> DispatchOutcome:
        self.payloads.append(payload)
        return self.outcome

    async def aclose(self) -> None:
        self.closed = True


def webhook_body(
    entity: str | None = "article",
    *,
    action: str | None = "publish",
    uid: str | None = "api::article.article",
) -> str:
    """Build a CMS webhook body; ``None`` omits the field."""
    model: dict[str, str] = {}
    if entity is not None:
        model["singularName"] = entity
    if uid is not None:
        model["uid"] = uid
    event: dict[str, object] = {"model": model}
    if action is not None:
        event["action"] = action
    return json.dumps({"event": event})
