"""Error types and error handling utilities."""

from typing import List, Optional

from .logging_config import get_logger

logger = get_logger(__name__)


def log_error(error: Exception, context: Optional[str] = None) -> None:
    """Log an error with optional context.

    Args:
        error: The exception to log
        context: Optional context about where/why the error occurred
    """
    if context:
        logger.error("%s: %s", context, str(error))
    else:
        logger.error(str(error))


class SporesError(Exception):
    """Base class for all errors surfaced to the user."""

    pass


class ConfigMissingError(SporesError):
    """Raised when the config file did not exist and a template was written."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Created config file at {path}. "
            "Please fill in your Spotify credentials and run again."
        )


class ConfigInvalidError(SporesError):
    """Raised when the config file exists but cannot be used."""

    pass


class AuthExpiredError(SporesError):
    """Raised when the service rejects a token exchange or refresh."""

    pass


class MalformedIdentifierError(SporesError):
    """Raised when an ID or URI does not name the expected kind of resource."""

    def __init__(self, message: str, expected: Optional[str] = None, found: Optional[str] = None):
        """Initialize error.

        Args:
            message: Human readable description
            expected: Kind the caller asked for
            found: Kind tag found in the URI, if any
        """
        self.expected = expected
        self.found = found
        super().__init__(message)


class RemoteRequestError(SporesError):
    """Raised when a request to the Web API fails or returns a non-2xx status."""

    def __init__(self, message: str, status: Optional[int] = None):
        """Initialize error.

        Args:
            message: Message reported by the service, or a transport error description
            status: HTTP status code, None for transport errors
        """
        self.status = status
        super().__init__(message)


class RateLimitError(RemoteRequestError):
    """Error raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = None):
        """Initialize error.

        Args:
            retry_after: Number of seconds the service asked us to wait
        """
        self.retry_after = retry_after
        if retry_after:
            super().__init__(f"Rate limit exceeded. Retry after {retry_after} seconds", 429)
        else:
            super().__init__("Rate limit exceeded", 429)


class PartialFailureError(RemoteRequestError):
    """Raised when a sequence of per-item requests stops part way through."""

    def __init__(self, completed: List[str], failed: str, total: int, cause: RemoteRequestError):
        """Initialize error.

        Args:
            completed: Items that were applied before the failure
            failed: Item whose request failed
            total: Number of items requested
            cause: The underlying request error
        """
        self.completed = completed
        self.failed = failed
        self.total = total
        self.cause = cause
        super().__init__(
            f"Failed on {failed} after {len(completed)} of {total} succeeded: {cause}",
            cause.status,
        )


class TokenCacheError(SporesError):
    """Raised when the token cache cannot be read or written."""

    pass


class UnsupportedOperationError(SporesError):
    """Raised when a command is asked to do something the API has no endpoint for."""

    pass
