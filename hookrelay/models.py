"""Inbound notification and outbound dispatch payload structures.

The CMS posts a body of the form::

    {"event": {"action": "publish",
               "model": {"singularName": "article", "uid": "api::article.article"}}}

Missing, empty, or non-string fields fall back to ``"unknown"``.
"""

from __future__ import annotations

import typing as typ

import msgspec

__all__ = [
    "DEFAULT_EVENT_TYPE",
    "UNKNOWN",
    "ClientPayload",
    "DispatchPayload",
    "Notification",
    "NotificationDecodeError",
    "build_dispatch_payload",
    "parse_notification",
]

UNKNOWN = "unknown"
DEFAULT_EVENT_TYPE = "strapi-content-published"

# Body preview length for error messages
_PREVIEW_LIMIT = 100


class NotificationDecodeError(ValueError):
    """Raised when a webhook body cannot be read as a notification."""

    @classmethod
    def invalid_json(cls, body: bytes) -> NotificationDecodeError:
        """Return an error carrying a truncated preview of ``body``."""
        text = body.decode("utf-8", errors="replace")
        if len(text) > _PREVIEW_LIMIT:
            text = text[:_PREVIEW_LIMIT] + "..."
        return cls(f"Webhook body is not valid JSON: {text}")

    @classmethod
    def null_document(cls) -> NotificationDecodeError:
        """Return an error for a body that decodes to JSON ``null``."""
        return cls("Webhook body is JSON null")


class Notification(msgspec.Struct, frozen=True, kw_only=True):
    """A content change reported by the CMS.

    Attributes
    ----------
    entity_key
        Singular name of the content type that changed; also the dedup key.
    action
        Lifecycle action reported by the CMS.
    model_uid
        Fully qualified model identifier.

    """

    entity_key: str = UNKNOWN
    action: str = UNKNOWN
    model_uid: str = UNKNOWN


class ClientPayload(msgspec.Struct, frozen=True, kw_only=True):
    """The ``client_payload`` object GitHub hands to the workflow."""

    entity: str
    action: str
    uid: str


class DispatchPayload(msgspec.Struct, frozen=True, kw_only=True):
    """Body of a ``repository_dispatch`` request."""

    event_type: str
    client_payload: ClientPayload

    def encode(self) -> bytes:
        """Serialise the payload as JSON."""
        return msgspec.json.encode(self)


def _text_or_unknown(value: object) -> str:
    if isinstance(value, str) and value:
        return value
    return UNKNOWN


def _get_nested(data: dict[str, object], *keys: str) -> object:
    """Traverse nested dict path, returning None for missing keys."""
    current: object = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = typ.cast("dict[str, object]", current).get(key)
    return current


def parse_notification(body: bytes) -> Notification:
    """Decode a webhook body into a :class:`Notification`.

    An empty body, and any top level other than an object or ``null``,
    is treated as an empty object, so it yields a notification whose
    fields are all ``"unknown"``.

    Raises
    ------
    NotificationDecodeError
        If the body is not valid JSON or its top level is ``null``.

    """
    if not body:
        return Notification()
    try:
        document = msgspec.json.decode(body)
    except msgspec.DecodeError as exc:
        raise NotificationDecodeError.invalid_json(body) from exc
    if document is None:
        raise NotificationDecodeError.null_document()
    # Arrays and scalars carry no event, so every field falls back.
    if not isinstance(document, dict):
        document = {}
    data = typ.cast("dict[str, object]", document)
    singular_name = _get_nested(data, "event", "model", "singularName")
    return Notification(
        entity_key=_text_or_unknown(singular_name),
        action=_text_or_unknown(_get_nested(data, "event", "action")),
        model_uid=_text_or_unknown(_get_nested(data, "event", "model", "uid")),
    )


def build_dispatch_payload(
    notification: Notification,
    *,
    event_type: str = DEFAULT_EVENT_TYPE,
) -> DispatchPayload:
    """Derive the outbound payload for ``notification``."""
    return DispatchPayload(
        event_type=event_type,
        client_payload=ClientPayload(
            entity=notification.entity_key,
            action=notification.action,
            uid=notification.model_uid,
        ),
    )
