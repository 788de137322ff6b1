"""Factory for creating the source and target clients."""

from ..config.config import BitbucketInstanceConfig, GitLabInstanceConfig
from .bitbucket import BitbucketClient
from .exceptions import AuthenticationError
from .gitlab import GitLabClient


class ClientFactory:
    """Factory for creating REST API clients."""

    @staticmethod
    def create_source_client(config: BitbucketInstanceConfig) -> BitbucketClient:
        """Create Bitbucket client from configuration.

        Raises:
            AuthenticationError: If the credentials are incomplete
        """
        if not config.username or not config.token:
            raise AuthenticationError('Bitbucket username and token must be provided')

        return BitbucketClient(config)

    @staticmethod
    def create_target_client(config: GitLabInstanceConfig) -> GitLabClient:
        """Create GitLab client from configuration.

        Raises:
            AuthenticationError: If no token is configured
        """
        if not config.token:
            raise AuthenticationError('GitLab token must be provided')

        return GitLabClient(config)
