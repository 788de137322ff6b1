"""Migration engine and its steps."""

from .results import MigrationStatus, MigrationResult, MigrationSummary
from .exceptions import (
    MigrationError,
    GroupResolutionError,
    RepositoryMigrationError,
    RepositoryPortError,
    RepositoryDeprecationError,
)
from .group_resolver import GroupResolver
from .porter import RepositoryPorter
from .deprecator import RepositoryDeprecator
from .coordinator import MigrationCoordinator
from .engine import MigrationEngine

__all__ = [
    'MigrationStatus',
    'MigrationResult',
    'MigrationSummary',
    'MigrationError',
    'GroupResolutionError',
    'RepositoryMigrationError',
    'RepositoryPortError',
    'RepositoryDeprecationError',
    'GroupResolver',
    'RepositoryPorter',
    'RepositoryDeprecator',
    'MigrationCoordinator',
    'MigrationEngine',
]
