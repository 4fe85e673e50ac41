"""Relay runtime entrypoint.

This module provides the ASGI application factory used by Granian and the
``main()`` function behind the ``hookrelay`` console script.  ``main()``
loads and validates the configuration before the server binds its port,
so a missing credential stops the process with exit status 1 without
accepting a single connection.

Configuration is driven by environment variables:

- ``RELAY_SECRET``: Shared secret expected in ``X-Relay-Secret`` (required)
- ``GH_PAT``: GitHub token used for ``repository_dispatch`` (required)
- ``PORT``: Listen port (default ``4000``)
- ``RELAY_HOST``: Bind address (default ``0.0.0.0``)
- ``RELAY_LOG_LEVEL``: Log level (default ``INFO``)

See :class:`hookrelay.config.RelayConfig` for the optional ``RELAY_*``
overrides.

Run the service directly with ``python -m hookrelay.runtime``.
"""

from __future__ import annotations

import os
import typing as typ

from hookrelay.api import build_dependencies
from hookrelay.api import create_app as _create_api_app
from hookrelay.config import RelayConfig, RelayConfigError
from hookrelay.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["create_app", "load_config", "main"]

logger = get_logger(__name__)


def load_config() -> RelayConfig:
    """Load the relay configuration or exit the process.

    Raises
    ------
    SystemExit
        With status 1 when a credential is missing or a value is invalid.

    """
    try:
        return RelayConfig.from_env()
    except RelayConfigError as exc:
        # Use error() not exception() - configuration failures need no traceback
        log_error(logger, "Relay configuration invalid: %s", exc)
        raise SystemExit(1) from exc


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from the environment.

    Returns
    -------
    falcon.asgi.App
        Relay application with its own dedup tracker and GitHub client.

    """
    config = load_config()
    return _create_api_app(build_dependencies(config))


def main() -> None:
    """Start the relay server using Granian.

    Runs a single worker: the dedup tracker lives in process memory, and
    a second worker would keep its own, independent window.
    """
    from granian import Granian
    from granian.constants import Interfaces

    # Logging comes first so a configuration failure is reported.
    log_level_str = os.environ.get("RELAY_LOG_LEVEL", "INFO")
    normalized_level, invalid_level = configure_logging(log_level_str)
    if invalid_level:
        log_warning(
            logger,
            "Invalid RELAY_LOG_LEVEL %r, falling back to %s",
            log_level_str,
            normalized_level,
        )

    config = load_config()

    log_info(
        logger,
        "Relay listening on %s:%d for %s (dedup %d ms, %s)",
        config.host,
        config.port,
        config.github_repository,
        config.dedup_window_ms,
        config.dedup_policy.value,
    )

    server = Granian(
        "hookrelay.runtime:create_app",
        address=config.host,
        port=config.port,
        interface=Interfaces.ASGI,
        workers=1,
        factory=True,
    )
    server.serve()


if __name__ == "__main__":
    main()
