"""Factory for building relay dependencies from configuration.

Usage
-----
Build the app's collaborators from the environment::

    from hookrelay.api.factory import build_dependencies
    from hookrelay.config import RelayConfig

    deps = build_dependencies(RelayConfig.from_env())

"""

from __future__ import annotations

import typing as typ

from hookrelay.api.app import AppDependencies
from hookrelay.auth import Authenticator
from hookrelay.dedup import DedupTracker
from hookrelay.github.client import GitHubDispatchClient, GitHubDispatchConfig

if typ.TYPE_CHECKING:
    import httpx

    from hookrelay.config import RelayConfig

__all__ = ["build_dependencies"]


def build_dependencies(
    config: RelayConfig,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> AppDependencies:
    """Assemble the authenticator, tracker, and GitHub client for ``config``.

    Parameters
    ----------
    config
        Validated relay configuration.
    http_client
        Optional ``httpx.AsyncClient`` handed to the GitHub client; tests
        pass one backed by ``httpx.MockTransport``.

    Returns
    -------
    AppDependencies
        Collaborators ready for :func:`hookrelay.api.app.create_app`.

    """
    dispatcher = GitHubDispatchClient(
        GitHubDispatchConfig.from_relay_config(config),
        http_client=http_client,
    )
    return AppDependencies(
        authenticator=Authenticator(config.relay_secret),
        tracker=DedupTracker(config.dedup_window_ms, policy=config.dedup_policy),
        dispatcher=dispatcher,
        event_type=config.event_type,
        max_body_bytes=config.max_body_bytes,
    )
