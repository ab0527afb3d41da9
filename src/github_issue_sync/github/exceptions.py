"""GitHub client exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors.

    Raised directly for permanent failures (malformed requests, GraphQL
    errors, forbidden access) that abort the current source.
    """

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401) or no token is configured."""

    pass


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    pass


class GitHubRetryableError(GitHubClientError):
    """Base class for errors the orchestrator should retry with backoff.

    Page fetchers never retry on their own; these propagate to the sync
    loop, which waits and re-requests the same page.
    """

    pass


class GitHubRateLimitError(GitHubRetryableError):
    """Raised when the rate limit is exceeded (403/429 with quota exhausted)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubTransientError(GitHubRetryableError):
    """Raised for 5xx responses, timeouts and network failures."""

    pass


class GitHubSearchLimitError(GitHubClientError):
    """Raised when a search connection ends before all matching records were returned.

    GitHub search stops at 1,000 results, so large repositories cannot be
    fully synced in cursor mode.
    """

    def __init__(self, message: str, returned: int, total: int) -> None:
        super().__init__(message)
        self.returned = returned
        self.total = total
