"""REST API exceptions."""

from typing import Any, Optional


class RestAPIError(Exception):
    """Base exception for REST API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Any] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        """Initialize REST API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response body from the API
            method: HTTP method of the failing request
            url: URL of the failing request
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data
        self.method = method
        self.url = url


class AuthenticationError(RestAPIError):
    """Authentication error with a REST API."""

    pass


class RateLimitError(RestAPIError):
    """Rate limit exceeded error."""

    def __init__(self, message: str, retry_after: int = 60, **kwargs):
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retry
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class NotFoundError(RestAPIError):
    """Resource not found error."""

    pass


class ResponseDecodeError(RestAPIError):
    """Response body did not have the expected structure."""

    pass
