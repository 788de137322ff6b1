"""Marks source repositories as deprecated once they have been ported.

A repository is deprecated by prepending a banner to its readme, replacing
its description and making every branch read-only. The banner and the
description are templates in which ``$URL`` stands for the new location.
"""

from typing import List, Optional, Sequence

from loguru import logger

from ..api.interfaces import SourceRepositoryClient
from ..config.config import URL_PLACEHOLDER
from ..models.restriction import BranchRestriction, read_only_restriction
from .exceptions import RepositoryDeprecationError
from .porter import migration_step

README_SEARCH_TERM = 'readme'
DEFAULT_README_NAME = 'README.md'
COMMIT_MESSAGE = 'Update {file_name} with deprecation banner'


def render_template(template: str, url: str) -> str:
    """Substitute the new repository URL into a template string."""
    return template.replace(URL_PLACEHOLDER, url)


def render_banner(banner: Sequence[str], url: str) -> List[str]:
    """Render every banner line with the new repository URL."""
    return [render_template(line, url) for line in banner]


def has_banner(original_lines: Sequence[str], rendered_banner: Sequence[str]) -> bool:
    """Whether the readme already starts with the banner's first line."""
    if not original_lines or not rendered_banner:
        return False
    return original_lines[0] == rendered_banner[0]


def deprecated_readme(
    banner: Sequence[str], original_lines: Optional[Sequence[str]], url: str
) -> List[str]:
    """Readme lines with the rendered banner prepended to the original content."""
    return render_banner(banner, url) + list(original_lines or [])


def join_lines(lines: Sequence[str]) -> str:
    """Join lines into file content terminated by a newline."""
    return ''.join(f'{line}\n' for line in lines)


class RepositoryDeprecator:
    """Deprecates repositories in one source project."""

    def __init__(
        self,
        source_client: SourceRepositoryClient,
        project_key: str,
        readme_banner: Sequence[str],
        description: str,
        restriction: Optional[BranchRestriction] = None,
    ):
        """Initialize repository deprecator.

        Args:
            source_client: Client for the source host
            project_key: Key of the source project holding the repos
            readme_banner: Lines to prepend to the readme; may contain $URL
            description: New repository description; may contain $URL
            restriction: Branch restriction to apply, read-only on all
                branches by default
        """
        if not readme_banner:
            raise ValueError('readme_banner must contain at least one line')

        self.source_client = source_client
        self.project_key = project_key
        self.readme_banner = tuple(readme_banner)
        self.description = description
        self.restriction = restriction or read_only_restriction()
        self.logger = logger.bind(component='RepositoryDeprecator')

    def deprecate_repo(self, repo_name: str, new_repo_url: str) -> None:
        """Update the readme and description and make the repo read-only.

        Steps already completed are not undone if a later one fails.

        Args:
            repo_name: Slug of the source repository
            new_repo_url: URL of the repository's new location

        Raises:
            RepositoryDeprecationError: If any step fails
        """
        self.logger.info(f'Deprecating repo {repo_name}...')

        self.update_readme(repo_name, new_repo_url)
        self.update_description(repo_name, new_repo_url)
        self.lock_branches(repo_name)

    def update_readme(self, repo_name: str, new_repo_url: str) -> bool:
        """Prepend the deprecation banner to the repo's readme.

        A readme whose first line already matches the banner is left alone.

        Returns:
            True if the readme was written, False if it already had the banner
        """
        with migration_step(repo_name, 'Reading readme', RepositoryDeprecationError):
            readme_name = self.source_client.find_file(
                self.project_key, repo_name, README_SEARCH_TERM
            )
            original_lines = None
            if readme_name is not None:
                original_lines = self.source_client.read_file(
                    self.project_key, repo_name, readme_name
                )

        if has_banner(original_lines, render_banner(self.readme_banner, new_repo_url)):
            self.logger.debug(f'Readme of {repo_name} already has banner, skipping')
            return False

        content = join_lines(
            deprecated_readme(self.readme_banner, original_lines, new_repo_url)
        )
        file_name = readme_name or DEFAULT_README_NAME

        with migration_step(repo_name, 'Writing readme', RepositoryDeprecationError):
            branch = self.source_client.get_default_branch(self.project_key, repo_name)

            # A new file must be committed without a source commit id
            commit_id = branch.latest_commit if readme_name is not None else None

            self.source_client.write_file(
                self.project_key,
                repo_name,
                file_name,
                content,
                COMMIT_MESSAGE.format(file_name=file_name),
                branch.display_id,
                commit_id,
            )

        self.logger.info(f'Added deprecation banner to {file_name} in {repo_name}')
        return True

    def update_description(self, repo_name: str, new_repo_url: str) -> None:
        """Replace the repo description with the deprecation description."""
        with migration_step(
            repo_name, 'Updating description', RepositoryDeprecationError
        ):
            self.source_client.set_description(
                self.project_key,
                repo_name,
                render_template(self.description, new_repo_url),
            )

    def lock_branches(self, repo_name: str) -> None:
        """Apply the branch restriction to the repo."""
        with migration_step(repo_name, 'Locking branches', RepositoryDeprecationError):
            self.source_client.add_branch_restriction(
                self.project_key, repo_name, self.restriction
            )
