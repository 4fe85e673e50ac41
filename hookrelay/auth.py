"""Shared-secret check for inbound webhook requests."""

from __future__ import annotations

import hmac

__all__ = ["SECRET_HEADER", "Authenticator"]

SECRET_HEADER = "X-Relay-Secret"


class Authenticator:
    """Validate the ``X-Relay-Secret`` header against the configured secret.

    The comparison is exact: no trimming, no case folding.  It runs through
    :func:`hmac.compare_digest` so the time taken does not depend on how
    much of the secret a caller guessed correctly.

    Falcon hands ASGI header values over decoded as latin-1, so the
    presented value is turned back into its wire bytes before it is
    compared with the UTF-8 encoding of the configured secret.
    """

    def __init__(self, secret: str) -> None:
        """Store the expected secret."""
        if not secret:
            msg = "relay secret must be non-empty"
            raise ValueError(msg)
        self._expected = secret.encode("utf-8")

    def is_authorized(self, presented: str | None) -> bool:
        """Return ``True`` when ``presented`` equals the configured secret."""
        if presented is None:
            return False
        try:
            raw = presented.encode("latin-1")
        except UnicodeEncodeError:
            # Not a value Falcon could have decoded from header bytes.
            return False
        return hmac.compare_digest(raw, self._expected)
