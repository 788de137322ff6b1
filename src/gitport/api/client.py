"""Shared REST transport used by the Bitbucket and GitLab clients."""

from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urljoin

import requests
from loguru import logger
from pydantic import BaseModel

from .exceptions import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    RestAPIError,
)

USER_AGENT = 'gitport/0.1.0'


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


def require_field(data: Any, *keys: Any) -> Any:
    """Walk ``keys`` into a decoded JSON payload.

    Args:
        data: Decoded response body
        *keys: Dictionary keys or list indexes to follow, in order

    Returns:
        The value found at the end of the path

    Raises:
        ResponseDecodeError: If any key is missing or the payload has the wrong shape
    """
    value = data
    for key in keys:
        try:
            value = value[key]
        except (KeyError, IndexError, TypeError):
            path = '.'.join(str(k) for k in keys)
            raise ResponseDecodeError(f'Unexpected response structure: missing {path}')
    return value


class RestSession:
    """Thin wrapper around ``requests.Session`` for one REST host."""

    def __init__(
        self,
        base_url: str,
        api_root: str = '',
        timeout: int = 30,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[Tuple[str, str]] = None,
    ):
        """Initialize REST session.

        Args:
            base_url: Host URL including scheme
            api_root: Path prefix shared by all endpoints of the API
            timeout: Request timeout in seconds
            headers: Extra headers sent with every request
            auth: Basic authentication credentials
        """
        self.base_url = base_url.rstrip('/') + '/' + api_root.strip('/')
        self.base_url = self.base_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})

        if headers:
            self.session.headers.update(headers)
        if auth:
            self.session.auth = auth

    def build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: requests.Response, method: str) -> APIResponse:
        """Validate the HTTP status and convert to standard format.

        Args:
            response: Raw HTTP response
            method: HTTP method used for the request

        Returns:
            Standardized API response

        Raises:
            RestAPIError: For any non-success status
        """
        headers = dict(response.headers)
        status_code = response.status_code
        url = response.url

        if status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text

            message = (
                f'{method} {url} was unsuccessful. '
                f'Status code: {status_code}. Response body: {body}'
            )
            context = {
                'status_code': status_code,
                'response_data': body,
                'method': method,
                'url': url,
            }

            if status_code == 429:
                retry_after = int(headers.get('Retry-After', 60))
                raise RateLimitError(message, retry_after=retry_after, **context)
            if status_code == 401:
                raise AuthenticationError(message, **context)
            if status_code == 404:
                raise NotFoundError(message, **context)
            raise RestAPIError(message, **context)

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        return APIResponse(
            status_code=status_code,
            data=data,
            headers=headers,
            success=200 <= status_code < 300,
        )

    def request(self, method: str, endpoint: str, **kwargs) -> APIResponse:
        """Make an HTTP request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            **kwargs: Additional request arguments

        Returns:
            API response
        """
        url = self.build_url(endpoint)
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.debug(f'Network error during {method} {url}: {e}')
            raise RestAPIError(f'Network error: {e}', method=method, url=url)

        return self._handle_response(response, method)

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make GET request."""
        return self.request('GET', endpoint, params=params, **kwargs)

    def post(
        self, endpoint: str, data: Optional[Any] = None, **kwargs
    ) -> APIResponse:
        """Make POST request with a JSON body."""
        return self.request('POST', endpoint, json=data, **kwargs)

    def put(
        self, endpoint: str, data: Optional[Any] = None, **kwargs
    ) -> APIResponse:
        """Make PUT request with a JSON body.

        Pass ``files`` instead of ``data`` for a multipart body.
        """
        if data is not None:
            kwargs['json'] = data
        return self.request('PUT', endpoint, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> APIResponse:
        """Make DELETE request."""
        return self.request('DELETE', endpoint, **kwargs)

    def close(self):
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
