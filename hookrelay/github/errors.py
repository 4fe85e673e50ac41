"""GitHub dispatch errors."""

from __future__ import annotations

# Response body preview length for error messages
_BODY_PREVIEW_LIMIT = 200


class GitHubDispatchError(RuntimeError):
    """Base class for failed ``repository_dispatch`` calls."""


class GitHubAPIError(GitHubDispatchError):
    """Raised when GitHub answers a dispatch with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int, body: str = "") -> None:
        """Initialise with the HTTP status and the response body."""
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int, body: str) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses."""
        preview = body
        if len(preview) > _BODY_PREVIEW_LIMIT:
            preview = preview[:_BODY_PREVIEW_LIMIT] + "..."
        return cls(
            f"GitHub dispatch HTTP {status_code}: {preview}",
            status_code=status_code,
            body=body,
        )


class GitHubTransportError(GitHubDispatchError):
    """Raised when no response could be obtained from GitHub."""

    @classmethod
    def timeout(cls) -> GitHubTransportError:
        """Return an error for a request that timed out."""
        return cls("GitHub dispatch request timed out")

    @classmethod
    def network_error(cls, detail: str) -> GitHubTransportError:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"GitHub dispatch network error: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")

    @classmethod
    def invalid_repository(cls, repository: str) -> GitHubConfigError:
        """Return an error for a repository not in ``owner/name`` form."""
        return cls(f"GitHub repository must be 'owner/name', got {repository!r}")
