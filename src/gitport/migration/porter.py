"""Imports repositories into the target group and configures them."""

from contextlib import contextmanager
from typing import Iterator, Optional, Type

from loguru import logger

from ..api.exceptions import RestAPIError
from ..api.interfaces import SourceRepositoryClient, TargetRepositoryClient
from ..models.group import Group
from ..models.project import ImportedProject
from .exceptions import RepositoryMigrationError, RepositoryPortError


@contextmanager
def migration_step(
    repo_name: str,
    step: str,
    error_cls: Type[RepositoryMigrationError] = RepositoryPortError,
) -> Iterator[None]:
    """Wrap REST failures raised inside the block as a repository error."""
    try:
        yield
    except RestAPIError as e:
        raise error_cls(repo_name, step, e) from e


class RepositoryPorter:
    """Ports repositories from the source project into one target group."""

    def __init__(
        self,
        source_client: SourceRepositoryClient,
        project_key: str,
        target_client: TargetRepositoryClient,
        group: Group,
    ):
        """Initialize repository porter.

        Args:
            source_client: Client for the source host
            project_key: Key of the source project holding the repos
            target_client: Client for the target host
            group: Group receiving the imported projects
        """
        self.source_client = source_client
        self.project_key = project_key
        self.target_client = target_client
        self.group = group
        self.logger = logger.bind(component='RepositoryPorter')

    def target_namespace(self) -> str:
        """Full path of the target group, looked up once per run."""
        if self.group.full_path is None:
            self.group.full_path = self.target_client.get_group_path(self.group.id)
        return self.group.full_path

    def is_already_ported(self, repo_name: str) -> bool:
        """Check whether the target group already holds the repo."""
        with migration_step(repo_name, 'Checking target group'):
            return self.target_client.is_project_in_group(repo_name, self.group.id)

    def port_repo(self, repo_name: str) -> Optional[ImportedProject]:
        """Import the repo into the target group and configure it.

        Completed steps are not rolled back when a later step fails. A re-run
        skips the import because the project is then already in the group.

        Args:
            repo_name: Slug of the source repository

        Returns:
            The imported project, or None if the repo was already in the group

        Raises:
            RepositoryPortError: If any step fails
        """
        self.logger.info(f'Porting repo {repo_name}...')

        if self.is_already_ported(repo_name):
            self.logger.info(
                f'Repo {repo_name} already exists in group {self.group.name}, skipping'
            )
            return None

        with migration_step(repo_name, 'Resolving target namespace'):
            namespace = self.target_namespace()

        # A 403 here usually means the Bitbucket Server importer is disabled
        # in the GitLab admin settings.
        with migration_step(repo_name, 'Import'):
            project = self.target_client.import_from_source(
                self.source_client.url,
                self.source_client.username,
                self.source_client.token,
                self.project_key,
                repo_name,
                namespace,
            )
        if project is None:
            self.logger.info(f'Repo {repo_name} was not imported')
            return None

        self.logger.info(
            f'Imported {repo_name} as {project.full_path} (id {project.id}, '
            f'import status {project.import_status})'
        )

        with migration_step(repo_name, 'Applying project settings'):
            self.target_client.apply_baseline_settings(project.id)

        # The importer copies the project description rather than the repo's
        with migration_step(repo_name, 'Copying description'):
            description = self.source_client.get_description(
                self.project_key, repo_name
            )
            self.target_client.set_description(project.id, description)

        return project
