"""Bitbucket Server REST client (source host).

See https://developer.atlassian.com/server/bitbucket/reference/rest-api/
"""

from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from ..config.config import BitbucketInstanceConfig
from ..models.repository import DefaultBranch
from ..models.restriction import BranchRestriction
from .client import APIResponse, RestSession, require_field
from .exceptions import ResponseDecodeError, RestAPIError

REST_API_ROOT = '/rest'
PROJECTS_ENDPOINT = '/api/1.0/projects'
BRANCH_PERMISSIONS_ENDPOINT = '/branch-permissions/2.0/projects'
PAGE_LIMIT = 1000


class BitbucketClient:
    """Client for querying and updating repositories on Bitbucket Server."""

    def __init__(self, config: BitbucketInstanceConfig):
        """Initialize Bitbucket client.

        Args:
            config: Bitbucket instance configuration
        """
        self.config = config
        self.url = config.url
        self.username = config.username
        self.token = config.token
        self.rest = RestSession(
            config.url,
            api_root=REST_API_ROOT,
            timeout=config.timeout,
            headers={'Accept': 'application/json'},
            auth=(config.username, config.token),
        )

        logger.info(f'Initialized Bitbucket client for {config.url}')

    @staticmethod
    def _repo_endpoint(project_key: str, repo_name: str) -> str:
        return f'{PROJECTS_ENDPOINT}/{project_key}/repos/{repo_name}'

    def _iter_pages(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, *keys: str
    ) -> Iterator[Dict[str, Any]]:
        """Yield each page of a Bitbucket paged resource.

        Args:
            endpoint: API endpoint
            params: Query parameters
            *keys: Path inside the response body to the paged object

        Yields:
            The paged object of every page (holding ``values`` or ``lines``)
        """
        params = dict(params or {})
        params['limit'] = PAGE_LIMIT
        start = 0

        while True:
            params['start'] = start
            response = self.rest.get(endpoint, params=params)
            page = require_field(response.data, *keys) if keys else response.data
            yield page

            if not isinstance(page, dict) or page.get('isLastPage', True):
                break

            next_start = page.get('nextPageStart')
            if next_start is None or next_start <= start:
                break
            start = next_start

    def list_repositories(self, project_key: str) -> Dict[str, str]:
        """Get the repositories of a project.

        Args:
            project_key: Key of the project to list

        Returns:
            Map of repository slug to HTTP clone URL
        """
        repos = {}
        endpoint = f'{PROJECTS_ENDPOINT}/{project_key}/repos'

        for page in self._iter_pages(endpoint):
            for value in require_field(page, 'values'):
                slug = require_field(value, 'slug')
                clone_links = value.get('links', {}).get('clone', [])
                for link in clone_links:
                    if link.get('name') == 'http':
                        repos[slug] = require_field(link, 'href')
                        break
                else:
                    repos[slug] = ''

        logger.debug(f'Found {len(repos)} repos in project {project_key}')
        return repos

    def find_file(
        self, project_key: str, repo_name: str, name_substring: str
    ) -> Optional[str]:
        """Find a file in the repository root by partial name.

        Directories are ignored even when their name matches.

        Args:
            project_key: Key of the project
            repo_name: Repository slug
            name_substring: Case-insensitive part of the file name

        Returns:
            Name of the first matching file, or None if nothing matches
        """
        needle = name_substring.lower()
        endpoint = f'{self._repo_endpoint(project_key, repo_name)}/browse'

        for page in self._iter_pages(endpoint, None, 'children'):
            for value in require_field(page, 'values'):
                if value.get('type') != 'FILE':
                    continue
                name = require_field(value, 'path', 'name')
                if needle in name.lower():
                    return name

        return None

    def read_file(self, project_key: str, repo_name: str, file_name: str) -> List[str]:
        """Read the text lines of a file on the default branch."""
        endpoint = f'{self._repo_endpoint(project_key, repo_name)}/browse/{file_name}'

        lines = []
        for page in self._iter_pages(endpoint):
            for line in require_field(page, 'lines'):
                lines.append(require_field(line, 'text'))
        return lines

    def write_file(
        self,
        project_key: str,
        repo_name: str,
        file_name: str,
        content: str,
        commit_message: str,
        branch_name: str,
        prior_commit_id: Optional[str] = None,
    ) -> None:
        """Commit new content for a file.

        Args:
            project_key: Key of the project
            repo_name: Repository slug
            file_name: Path of the file in the repository
            content: Full new file content
            commit_message: Message of the commit
            branch_name: Branch to commit on
            prior_commit_id: Latest commit id when updating an existing file;
                None creates the file
        """
        endpoint = f'{self._repo_endpoint(project_key, repo_name)}/browse/{file_name}'
        form = {'message': commit_message, 'branch': branch_name}
        if prior_commit_id is not None:
            form['sourceCommitId'] = prior_commit_id

        files = {'content': (file_name, content.encode('utf-8'), 'text/plain')}
        self.rest.request('PUT', endpoint, data=form, files=files)
        logger.debug(f'Committed {file_name} to {repo_name} on {branch_name}')

    def get_description(self, project_key: str, repo_name: str) -> str:
        """Get the repository description, or an empty string if none is set."""
        response = self.rest.get(self._repo_endpoint(project_key, repo_name))
        if not isinstance(response.data, dict):
            raise ResponseDecodeError(
                'Unexpected response structure: expected a repository'
            )
        return response.data.get('description') or ''

    def set_description(self, project_key: str, repo_name: str, text: str) -> None:
        """Update the repository description."""
        self.rest.put(
            self._repo_endpoint(project_key, repo_name), data={'description': text}
        )

    def get_default_branch(self, project_key: str, repo_name: str) -> DefaultBranch:
        """Get the default branch and its latest commit."""
        endpoint = f'{self._repo_endpoint(project_key, repo_name)}/default-branch'
        response = self.rest.get(endpoint)
        return DefaultBranch(
            id=require_field(response.data, 'id'),
            display_id=require_field(response.data, 'displayId'),
            latest_commit=require_field(response.data, 'latestCommit'),
        )

    def add_branch_restriction(
        self, project_key: str, repo_name: str, restriction: BranchRestriction
    ) -> None:
        """Add a branch permission to the repository."""
        endpoint = (
            f'{BRANCH_PERMISSIONS_ENDPOINT}/{project_key}/repos/{repo_name}/restrictions'
        )
        self.rest.post(endpoint, data=restriction.to_payload())

    def test_connection(self) -> bool:
        """Test that the configured project can be read.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response: APIResponse = self.rest.get(
                f'{PROJECTS_ENDPOINT}/{self.config.project_key}'
            )
            return response.success
        except RestAPIError as e:
            logger.error(f'Bitbucket connection test failed: {e}')
            return False

    def close(self):
        """Close the client session."""
        self.rest.close()
        logger.info('Bitbucket client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
