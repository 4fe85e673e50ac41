"""GitHub ``repository_dispatch`` client."""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

import httpx

from hookrelay.logging import get_logger, log_error, log_info

from .errors import GitHubAPIError, GitHubConfigError, GitHubTransportError

if typ.TYPE_CHECKING:
    from hookrelay.config import RelayConfig
    from hookrelay.models import DispatchPayload

__all__ = [
    "DispatchOutcome",
    "GitHubDispatchClient",
    "GitHubDispatchConfig",
    "RepositoryDispatcher",
]

logger = get_logger(__name__)

_ACCEPT = "application/vnd.github+json"
_CONTENT_TYPE = "application/json"


class DispatchOutcome(enum.Enum):
    """Relay-level result of a single dispatch attempt."""

    SUCCESS = "success"
    DOWNSTREAM_ERROR = "downstream_error"
    TRANSPORT_ERROR = "transport_error"


class RepositoryDispatcher(typ.Protocol):
    """Anything that can deliver a dispatch payload downstream."""

    async def dispatch(self, payload: DispatchPayload) -> DispatchOutcome:
        """Send ``payload`` once and report the outcome."""
        ...

    async def aclose(self) -> None:
        """Release any transport resources."""
        ...


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubDispatchConfig:
    """Configuration for the GitHub dispatch client."""

    token: str = dataclasses.field(repr=False)
    repository: str
    api_url: str = "https://api.github.com"
    timeout_s: float = 10.0
    user_agent: str = "redcudi-relay"

    @classmethod
    def from_relay_config(cls, config: RelayConfig) -> GitHubDispatchConfig:
        """Select the GitHub settings out of the relay configuration."""
        return cls(
            token=config.github_token,
            repository=config.github_repository,
            api_url=config.github_api_url,
            timeout_s=config.github_timeout_s,
            user_agent=config.user_agent,
        )

    @property
    def dispatch_url(self) -> str:
        """Return the ``dispatches`` endpoint for the configured repository."""
        return f"{self.api_url.rstrip('/')}/repos/{self.repository}/dispatches"


class GitHubDispatchClient:
    """Send ``repository_dispatch`` events to a single GitHub repository.

    Each call makes exactly one attempt.  Re-delivery after a failure is
    the CMS's job, so nothing here retries.

    Parameters
    ----------
    config
        Token, repository, and transport settings.
    http_client
        Optional ``httpx.AsyncClient`` for testing. If not provided, the
        instance creates and owns its own client.

    """

    def __init__(
        self,
        config: GitHubDispatchConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()
        owner, _, name = config.repository.partition("/")
        if not owner or not name:
            raise GitHubConfigError.invalid_repository(config.repository)

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)

    @property
    def config(self) -> GitHubDispatchConfig:
        """Read-only access to the client configuration."""
        return self._config

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.token}",
            "Accept": _ACCEPT,
            "Content-Type": _CONTENT_TYPE,
            "User-Agent": self._config.user_agent,
        }

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def send(self, payload: DispatchPayload) -> None:
        """POST ``payload`` to the dispatches endpoint.

        Raises
        ------
        GitHubTransportError
            If the request timed out or never reached GitHub.
        GitHubAPIError
            If GitHub answered with a non-2xx status.

        """
        try:
            response = await self._client.post(
                self._config.dispatch_url,
                content=payload.encode(),
                headers=self._headers(),
            )
        except httpx.TimeoutException as exc:
            raise GitHubTransportError.timeout() from exc
        except httpx.RequestError as exc:
            raise GitHubTransportError.network_error(str(exc)) from exc

        if not response.is_success:
            raise GitHubAPIError.http_error(response.status_code, response.text)

    async def dispatch(self, payload: DispatchPayload) -> DispatchOutcome:
        """Send ``payload`` once and map the result to a :class:`DispatchOutcome`.

        Downstream diagnostics are logged here and never returned, so
        callers cannot leak them to the webhook sender.
        """
        log_info(
            logger,
            "Sending %s for %s to %s",
            payload.event_type,
            payload.client_payload.entity,
            self._config.repository,
        )
        try:
            await self.send(payload)
        except GitHubAPIError as exc:
            log_error(
                logger,
                "GitHub dispatch failed with HTTP %d: %s",
                exc.status_code,
                exc.body,
            )
            return DispatchOutcome.DOWNSTREAM_ERROR
        except GitHubTransportError as exc:
            log_error(logger, "GitHub dispatch did not complete: %s", exc)
            return DispatchOutcome.TRANSPORT_ERROR

        log_info(
            logger, "GitHub dispatch succeeded for %s", payload.client_payload.entity
        )
        return DispatchOutcome.SUCCESS
