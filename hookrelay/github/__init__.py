"""GitHub integration for the webhook relay."""

from .client import (
    DispatchOutcome,
    GitHubDispatchClient,
    GitHubDispatchConfig,
    RepositoryDispatcher,
)
from .errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubDispatchError,
    GitHubTransportError,
)

__all__ = [
    "DispatchOutcome",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubDispatchClient",
    "GitHubDispatchConfig",
    "GitHubDispatchError",
    "GitHubTransportError",
    "RepositoryDispatcher",
]
