"""REST clients for the source and target hosts."""

from .client import APIResponse, RestSession, require_field
from .bitbucket import BitbucketClient
from .gitlab import GitLabClient
from .factory import ClientFactory
from .interfaces import SourceRepositoryClient, TargetRepositoryClient
from .exceptions import (
    RestAPIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
)

__all__ = [
    'APIResponse',
    'RestSession',
    'require_field',
    'BitbucketClient',
    'GitLabClient',
    'ClientFactory',
    'SourceRepositoryClient',
    'TargetRepositoryClient',
    'RestAPIError',
    'AuthenticationError',
    'NotFoundError',
    'RateLimitError',
    'ResponseDecodeError',
]
