"""Configuration loading and validation."""

from .config import (
    Config,
    BitbucketInstanceConfig,
    GitLabInstanceConfig,
    MigrationConfig,
    LoggingConfig,
)

__all__ = [
    'Config',
    'BitbucketInstanceConfig',
    'GitLabInstanceConfig',
    'MigrationConfig',
    'LoggingConfig',
]
