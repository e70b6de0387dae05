"""WorkOS API exceptions."""

from typing import Optional


class WorkOSAPIError(Exception):
    """Base exception for WorkOS API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[dict] = None,
    ):
        """Initialize WorkOS API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response body returned by the API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class WorkOSAuthenticationError(WorkOSAPIError):
    """The API key was rejected."""

    pass


class WorkOSRateLimitError(WorkOSAPIError):
    """Rate limit exceeded error."""

    def __init__(self, message: str, retry_after: int = 60, **kwargs):
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds the API asked us to wait
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class WorkOSNotFoundError(WorkOSAPIError):
    """Resource not found error."""

    pass
