"""Drives a full run: port every selected repository, then deprecate it."""

from datetime import datetime
from typing import Callable, Dict, List, Optional

from loguru import logger

from ..api.interfaces import SourceRepositoryClient, TargetRepositoryClient
from ..config.config import Config
from ..models.group import Group
from ..models.project import ImportedProject
from ..models.repository import RepositoryRecord
from .deprecator import RepositoryDeprecator
from .group_resolver import GroupResolver
from .porter import RepositoryPorter
from .results import MigrationResult, MigrationStatus, MigrationSummary

ProgressCallback = Callable[[int, int, str], None]


class MigrationCoordinator:
    """Ports and deprecates the repositories of one source project.

    Repositories are processed one after another. A failure in one
    repository is logged and recorded, and the run moves on to the next.
    """

    def __init__(
        self,
        config: Config,
        source_client: SourceRepositoryClient,
        target_client: TargetRepositoryClient,
    ):
        """Initialize migration coordinator.

        Args:
            config: Run configuration
            source_client: Client for the source host
            target_client: Client for the target host
        """
        self.config = config
        self.source_client = source_client
        self.target_client = target_client
        self.group_resolver = GroupResolver(target_client)
        self.logger = logger.bind(component='MigrationCoordinator')

    @property
    def project_key(self) -> str:
        return self.config.source.project_key

    def select_repositories(self, repo_urls: Dict[str, str]) -> List[RepositoryRecord]:
        """Apply the include and exclude lists to the listed repositories.

        Args:
            repo_urls: Map of repository name to clone URL

        Returns:
            Repositories to migrate, sorted by name
        """
        include = set(self.config.migration.repos_to_include)
        exclude = set(self.config.migration.repos_to_exclude)

        names = sorted(repo_urls)
        if include:
            missing = include.difference(names)
            if missing:
                self.logger.warning(
                    f'Included repos not found in project {self.project_key}: '
                    f'{sorted(missing)}'
                )
            names = [name for name in names if name in include]

        if exclude:
            self.logger.debug(f'Excluding repos: {sorted(exclude)}')
            names = [name for name in names if name not in exclude]

        return [RepositoryRecord(name=name, clone_url=repo_urls[name]) for name in names]

    def resolve_group(self, dry_run: bool = False) -> Optional[Group]:
        """Resolve the target group once for the run.

        In a dry run the group is only looked up, never created, so the
        result may be None.
        """
        target = self.config.target
        if dry_run:
            group = self.group_resolver.find_group(
                target.group_name, target.parent_group_id
            )
            if group is None:
                self.logger.info(f'Dry run: would create group {target.group_name}')
            return group

        group = self.group_resolver.get_or_create_group(
            target.group_name, target.parent_group_id
        )
        self.logger.info(f'Id for group {target.group_name}: {group.id}')
        return group

    def new_repo_url(self, project: ImportedProject) -> str:
        """URL of the ported project on the target host."""
        return f'{self.config.target.url}/{project.full_path}'

    def migrate_repository(
        self,
        record: RepositoryRecord,
        porter: RepositoryPorter,
        deprecator: RepositoryDeprecator,
    ) -> MigrationResult:
        """Port one repository and deprecate its source.

        Any error is logged and turned into a failed result.
        """
        started_at = datetime.now()
        try:
            project = porter.port_repo(record.name)
            if project is None:
                return MigrationResult(
                    repo_name=record.name,
                    status=MigrationStatus.SKIPPED,
                    started_at=started_at,
                    completed_at=datetime.now(),
                    reason='already_migrated',
                )

            new_url = self.new_repo_url(project)
            deprecator.deprecate_repo(record.name, new_url)

            self.logger.info(f'Repo {record.name} ported to {new_url}')
            return MigrationResult(
                repo_name=record.name,
                status=MigrationStatus.COMPLETED,
                started_at=started_at,
                completed_at=datetime.now(),
                project_id=project.id,
                new_url=new_url,
            )
        except Exception as e:
            self.logger.opt(exception=e).error(f'Port failed for repo {record.name}: {e}')
            return MigrationResult(
                repo_name=record.name,
                status=MigrationStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(),
                error_message=str(e),
            )

    def preview_repository(
        self, record: RepositoryRecord, porter: Optional[RepositoryPorter]
    ) -> MigrationResult:
        """Report what a real run would do with one repository."""
        started_at = datetime.now()
        try:
            if porter is not None and porter.is_already_ported(record.name):
                status, reason = MigrationStatus.SKIPPED, 'already_migrated'
            else:
                status, reason = MigrationStatus.COMPLETED, 'dry_run'
                self.logger.info(f'Dry run: would port and deprecate {record.name}')
        except Exception as e:
            self.logger.opt(exception=e).error(f'Check failed for repo {record.name}: {e}')
            return MigrationResult(
                repo_name=record.name,
                status=MigrationStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(),
                error_message=str(e),
            )

        return MigrationResult(
            repo_name=record.name,
            status=status,
            started_at=started_at,
            completed_at=datetime.now(),
            reason=reason,
        )

    def run(
        self,
        dry_run: Optional[bool] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> MigrationSummary:
        """Migrate every selected repository.

        Group resolution and listing the source repositories are fatal on
        failure; errors for a single repository are not.

        Args:
            dry_run: Override ``migration.dry_run`` from the configuration
            progress_callback: Called with (done, total, repo name) after each
                repository

        Returns:
            Summary of the run
        """
        if dry_run is None:
            dry_run = self.config.migration.dry_run

        started_at = datetime.now()
        group = self.resolve_group(dry_run=dry_run)

        repo_urls = self.source_client.list_repositories(self.project_key)
        self.logger.debug(f'Repos in project {self.project_key}: {sorted(repo_urls)}')

        records = self.select_repositories(repo_urls)
        self.logger.info(
            f'Repos to port from project {self.project_key}: '
            f'{[record.name for record in records]}'
        )

        porter = None
        if group is not None:
            porter = RepositoryPorter(
                self.source_client, self.project_key, self.target_client, group
            )
        deprecator = RepositoryDeprecator(
            self.source_client,
            self.project_key,
            self.config.migration.readme_banner,
            self.config.migration.description,
        )

        results = []
        for record in records:
            if dry_run:
                results.append(self.preview_repository(record, porter))
            else:
                results.append(self.migrate_repository(record, porter, deprecator))

            if progress_callback is not None:
                progress_callback(len(results), len(records), record.name)

        summary = MigrationSummary(
            group_id=group.id if group is not None else None,
            dry_run=dry_run,
            started_at=started_at,
            completed_at=datetime.now(),
            results=results,
        )

        if dry_run:
            self.logger.info(
                f'Dry run completed: {summary.successful} would be ported, '
                f'{summary.failed} failed checks, {summary.skipped} already migrated'
            )
        else:
            self.logger.info(
                f'Migration completed: {summary.successful} successful, '
                f'{summary.failed} failed, {summary.skipped} skipped'
            )
        return summary
