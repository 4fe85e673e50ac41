"""Process configuration for the webhook relay.

All settings are read once at startup by :meth:`RelayConfig.from_env`.
The two credentials are mandatory; the runtime refuses to start without
them.  Every other setting has a default.

Usage
-----
>>> import os
>>> os.environ["RELAY_SECRET"] = "s3cret"
>>> os.environ["GH_PAT"] = "ghp_example"
>>> config = RelayConfig.from_env()
>>> config.port
4000

"""

from __future__ import annotations

import dataclasses as dc
import os

from hookrelay.dedup import DEFAULT_WINDOW_MS, WindowPolicy
from hookrelay.models import DEFAULT_EVENT_TYPE

_DEFAULT_HOST = "0.0.0.0"  # noqa: S104 - bind all interfaces behind the reverse proxy
_DEFAULT_PORT = 4000
_DEFAULT_REPOSITORY = "OliAjonjoli/redcudi.org-astro"
_DEFAULT_API_URL = "https://api.github.com"
_DEFAULT_USER_AGENT = "redcudi-relay"
_DEFAULT_TIMEOUT_S = 10.0
DEFAULT_MAX_BODY_BYTES = 1024 * 1024

# TCP port number range limits
_MIN_PORT = 1
_MAX_PORT = 65535


class RelayConfigError(Exception):
    """Raised when the relay configuration is missing or invalid.

    This is the only error that stops the process; it is raised before
    the server binds its port.
    """

    @classmethod
    def missing_secret(cls, env_var: str) -> RelayConfigError:
        """Return an error for an unset or blank credential variable."""
        return cls(f"{env_var} is required")

    @classmethod
    def invalid_value(
        cls, env_var: str, value: str, constraint: str
    ) -> RelayConfigError:
        """Return an error for an optional variable that failed validation."""
        return cls(f"Invalid {env_var} {value!r}: {constraint}")


def _required(env_var: str) -> str:
    value = os.environ.get(env_var, "")
    if not value.strip():
        raise RelayConfigError.missing_secret(env_var)
    return value


def _optional(env_var: str, default: str) -> str:
    raw = os.environ.get(env_var, "")
    return raw.strip() or default


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError as exc:
        raise RelayConfigError.invalid_value(
            "PORT", raw, f"must be an integer {_MIN_PORT}-{_MAX_PORT}"
        ) from exc
    if not _MIN_PORT <= port <= _MAX_PORT:
        raise RelayConfigError.invalid_value(
            "PORT", raw, f"outside valid range {_MIN_PORT}-{_MAX_PORT}"
        )
    return port


def _parse_positive_int(env_var: str, default: int) -> int:
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RelayConfigError.invalid_value(
            env_var, raw, "must be a positive integer"
        ) from exc
    if value < 1:
        raise RelayConfigError.invalid_value(env_var, raw, "must be positive")
    return value


def _parse_positive_float(env_var: str, default: float) -> float:
    raw = os.environ.get(env_var, "")
    if not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RelayConfigError.invalid_value(
            env_var, raw, "must be a positive number"
        ) from exc
    if value <= 0:
        raise RelayConfigError.invalid_value(env_var, raw, "must be positive")
    return value


def _parse_repository(raw: str) -> str:
    owner, sep, name = raw.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise RelayConfigError.invalid_value(
            "RELAY_GITHUB_REPO", raw, "expected 'owner/name'"
        )
    return raw


def _parse_policy(raw: str) -> WindowPolicy:
    try:
        return WindowPolicy(raw.lower())
    except ValueError as exc:
        options = ", ".join(policy.value for policy in WindowPolicy)
        raise RelayConfigError.invalid_value(
            "RELAY_DEDUP_POLICY", raw, f"expected one of {options}"
        ) from exc


@dc.dataclass(frozen=True, slots=True)
class RelayConfig:
    """Immutable relay settings.

    Attributes
    ----------
    relay_secret
        Shared secret inbound callers send in ``X-Relay-Secret``.
    github_token
        Access token used as the bearer credential for GitHub.
    host, port
        Listen address for the ASGI server.
    github_repository
        ``owner/name`` of the repository that receives dispatch events.
    github_api_url
        Base URL of the GitHub REST API.
    event_type
        ``event_type`` tag sent with every dispatch.
    user_agent
        Client label sent as ``User-Agent``.
    github_timeout_s
        Timeout applied to the outbound call.
    dedup_window_ms
        Duplicate suppression window in milliseconds.
    dedup_policy
        Whether duplicates renew the window (see :class:`WindowPolicy`).
    max_body_bytes
        Largest inbound body the relay will buffer.

    """

    relay_secret: str = dc.field(repr=False)
    github_token: str = dc.field(repr=False)
    host: str = _DEFAULT_HOST
    port: int = _DEFAULT_PORT
    github_repository: str = _DEFAULT_REPOSITORY
    github_api_url: str = _DEFAULT_API_URL
    event_type: str = DEFAULT_EVENT_TYPE
    user_agent: str = _DEFAULT_USER_AGENT
    github_timeout_s: float = _DEFAULT_TIMEOUT_S
    dedup_window_ms: int = DEFAULT_WINDOW_MS
    dedup_policy: WindowPolicy = WindowPolicy.ANCHORED
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @classmethod
    def from_env(cls) -> RelayConfig:
        """Build configuration from environment variables.

        Reads ``RELAY_SECRET`` and ``GH_PAT`` (both required), ``PORT``,
        and the optional ``RELAY_*`` overrides.

        Raises
        ------
        RelayConfigError
            If a credential is missing or an optional value is invalid.

        """
        relay_secret = _required("RELAY_SECRET")
        github_token = _required("GH_PAT")

        return cls(
            relay_secret=relay_secret,
            github_token=github_token,
            host=_optional("RELAY_HOST", _DEFAULT_HOST),
            port=_parse_port(_optional("PORT", str(_DEFAULT_PORT))),
            github_repository=_parse_repository(
                _optional("RELAY_GITHUB_REPO", _DEFAULT_REPOSITORY)
            ),
            github_api_url=_optional("RELAY_GITHUB_API_URL", _DEFAULT_API_URL),
            event_type=_optional("RELAY_EVENT_TYPE", DEFAULT_EVENT_TYPE),
            user_agent=_optional("RELAY_USER_AGENT", _DEFAULT_USER_AGENT),
            github_timeout_s=_parse_positive_float(
                "RELAY_GITHUB_TIMEOUT_S", _DEFAULT_TIMEOUT_S
            ),
            dedup_window_ms=_parse_positive_int(
                "RELAY_DEDUP_WINDOW_MS", DEFAULT_WINDOW_MS
            ),
            dedup_policy=_parse_policy(
                _optional("RELAY_DEDUP_POLICY", WindowPolicy.ANCHORED.value)
            ),
            max_body_bytes=_parse_positive_int(
                "RELAY_MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES
            ),
        )


__all__ = ["DEFAULT_MAX_BODY_BYTES", "RelayConfig", "RelayConfigError"]
