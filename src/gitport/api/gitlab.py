"""GitLab REST client (target host).

See https://docs.gitlab.com/ee/api/rest/
"""

from typing import Any, Dict, List, Optional

from loguru import logger

from ..config.config import GitLabInstanceConfig
from ..models.group import GroupCreate
from ..models.project import BaselineProjectSettings, ImportedProject
from .client import RestSession, require_field
from .exceptions import AuthenticationError, ResponseDecodeError, RestAPIError

REST_API_ROOT = '/api/v4'
IMPORT_BITBUCKET_SERVER_ENDPOINT = '/import/bitbucket_server'


class GitLabClient:
    """Client for groups, imports and project settings on GitLab."""

    def __init__(self, config: GitLabInstanceConfig):
        """Initialize GitLab client.

        Args:
            config: GitLab instance configuration
        """
        self.config = config
        self.url = config.url

        if not config.token:
            raise AuthenticationError('No authentication token provided')

        self.rest = RestSession(
            config.url,
            api_root=REST_API_ROOT,
            timeout=config.timeout,
            headers={'Private-Token': config.token},
        )

        logger.info(f'Initialized GitLab client for {config.url}')

    def get_paginated(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        per_page: int = 100,
    ) -> List[Dict[str, Any]]:
        """Get all pages of a paginated endpoint.

        Args:
            endpoint: API endpoint
            params: Query parameters
            per_page: Items per page

        Returns:
            List of all items from all pages
        """
        all_items = []
        page = 1

        params = dict(params or {})
        params['per_page'] = per_page

        while True:
            params['page'] = page
            response = self.rest.get(endpoint, params=params)

            items = response.data
            if not items:
                break
            if not isinstance(items, list):
                raise ResponseDecodeError(
                    f'Unexpected response structure from {endpoint}: expected a list'
                )

            all_items.extend(items)

            total_pages = response.headers.get('X-Total-Pages')
            if total_pages and page >= int(total_pages):
                break

            if len(items) < per_page:
                break

            page += 1

        logger.debug(f'Retrieved {len(all_items)} items from {endpoint}')
        return all_items

    def find_group_id(self, name: str) -> Optional[int]:
        """Find a group by name.

        The search endpoint matches substrings, so candidates are filtered to a
        case-insensitive exact name match.

        Returns:
            Id of the first matching group, or None if there is none
        """
        wanted = name.lower()
        for group in self.get_paginated('/groups', params={'search': name}):
            if str(require_field(group, 'name')).lower() == wanted:
                return require_field(group, 'id')
        return None

    def create_group(self, name: str, parent_id: Optional[int] = None) -> int:
        """Create a group.

        Args:
            name: Group name
            parent_id: Parent group id, or None for a top-level group

        Returns:
            Id of the new group
        """
        payload = GroupCreate.from_name(name, parent_id)
        response = self.rest.post('/groups', data=payload.model_dump(exclude_none=True))
        group_id = require_field(response.data, 'id')

        logger.info(f'Created group {name}. Id = {group_id}')
        return group_id

    def get_group_path(self, group_id: int) -> str:
        """Get the full namespace path of a group."""
        response = self.rest.get(f'/namespaces/{group_id}')
        return require_field(response.data, 'full_path')

    def is_project_in_group(self, repo_name: str, group_id: int) -> bool:
        """Check whether the group already holds a project with this name."""
        wanted = repo_name.lower()
        projects = self.get_paginated(
            f'/groups/{group_id}/projects', params={'search': repo_name}
        )
        return any(
            str(require_field(project, 'name')).lower() == wanted
            for project in projects
        )

    def import_from_source(
        self,
        source_url: str,
        source_username: str,
        source_token: str,
        source_project_key: str,
        repo_name: str,
        target_namespace: str,
    ) -> Optional[ImportedProject]:
        """Import a repository from Bitbucket Server.

        The import itself runs asynchronously on GitLab; the response only
        describes the project that was created for it.

        Args:
            source_url: Bitbucket Server URL
            source_username: Bitbucket username
            source_token: Bitbucket personal access token
            source_project_key: Bitbucket project key
            repo_name: Bitbucket repository slug
            target_namespace: Full path of the group receiving the project

        Returns:
            The created project, or None if the response describes no project
        """
        payload = {
            'bitbucket_server_url': source_url,
            'bitbucket_server_username': source_username,
            'personal_access_token': source_token,
            'bitbucket_server_project': source_project_key,
            'bitbucket_server_repo': repo_name,
            'target_namespace': target_namespace,
        }
        response = self.rest.post(IMPORT_BITBUCKET_SERVER_ENDPOINT, data=payload)

        if not response.data:
            return None

        return ImportedProject(
            id=require_field(response.data, 'id'),
            name=require_field(response.data, 'name'),
            full_path=require_field(response.data, 'full_path'),
            import_status=response.data.get('import_status'),
        )

    def apply_baseline_settings(self, project_id: int) -> None:
        """Apply the fixed baseline settings to a project."""
        settings = BaselineProjectSettings()
        self.rest.put(f'/projects/{project_id}', data=settings.model_dump())

    def set_description(self, project_id: int, text: str) -> None:
        """Update a project's description."""
        self.rest.put(f'/projects/{project_id}', data={'description': text})

    def test_connection(self) -> bool:
        """Test connection to the GitLab instance.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response = self.rest.get('/user')
            return response.success
        except RestAPIError as e:
            logger.error(f'GitLab connection test failed: {e}')
            return False

    def close(self):
        """Close the client session."""
        self.rest.close()
        logger.info('GitLab client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
