"""Database update custom exceptions.

Update failures never reach lookup callers: the scheduler catches and logs them.
"""
from country_lookup.error_messages import format_update_fetch_failed_message


class UpdateError(Exception):
    """Base class for all database update errors."""


class UpdateFetchError(UpdateError):
    """Raised when the update endpoint could not be reached or answered with an error status."""

    def __init__(self, url: str, http_code: int | None = None, *, reason: str | None = None) -> None:
        """Initialize the exception with the failed request details.

        The underlying request error is not chained, as its message carries the license key.

        Args:
            url: The update URL that failed, without its query string.
            http_code: HTTP status code, if a response was received.
            reason: Name of the request error, e.g. `Timeout` or `HTTPError`.
        """
        super().__init__(format_update_fetch_failed_message(url=url, http_code=http_code, reason=reason))
        self.url = url
        self.http_code = http_code
        self.reason = reason


class UpdateApplyError(UpdateError):
    """Raised when a downloaded update could not be decompressed or installed."""

    def __init__(self, message: str) -> None:
        """Initialize the exception with the failing step.

        Args:
            message: Description of the step that failed.
        """
        super().__init__(message)
