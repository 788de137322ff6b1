"""Errors raised while migrating repositories."""

from typing import Optional


class MigrationError(Exception):
    """Base exception for migration failures."""

    pass


class GroupResolutionError(MigrationError):
    """The target group could not be found or created."""

    def __init__(self, group_name: str, cause: Exception):
        super().__init__(f'Error getting or creating group {group_name}: {cause}')
        self.group_name = group_name
        self.__cause__ = cause


class RepositoryMigrationError(MigrationError):
    """A step of one repository's migration failed."""

    def __init__(self, repo_name: str, step: str, cause: Optional[Exception] = None):
        """Initialize repository migration error.

        Args:
            repo_name: Repository being migrated
            step: Step that failed
            cause: Underlying error
        """
        message = f'{step} failed for repo {repo_name}'
        if cause is not None:
            message = f'{message}: {cause}'
        super().__init__(message)
        self.repo_name = repo_name
        self.step = step
        self.__cause__ = cause


class RepositoryPortError(RepositoryMigrationError):
    """Importing or configuring the repository on the target host failed."""

    pass


class RepositoryDeprecationError(RepositoryMigrationError):
    """Deprecating the repository on the source host failed."""

    pass
