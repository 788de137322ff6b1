"""Configuration management for GitPort."""

from typing import Any, Dict, List, Optional
from pathlib import Path
import os

from pydantic import BaseModel, Field, validator
import yaml
from dotenv import load_dotenv

URL_PLACEHOLDER = '$URL'

DEFAULT_README_BANNER = [
    '# :warning: This repository has moved',
    '',
    f'This repository is deprecated and read-only. Its new home is {URL_PLACEHOLDER}',
    '',
]
DEFAULT_DESCRIPTION = f'DEPRECATED: moved to {URL_PLACEHOLDER}'

# Separates banner lines in MIGRATION_README_BANNER
ENV_BANNER_SEPARATOR = '|'

# (section, field) -> environment variable
ENV_VARS = {
    ('source', 'url'): 'SOURCE_BITBUCKET_URL',
    ('source', 'username'): 'SOURCE_BITBUCKET_USERNAME',
    ('source', 'token'): 'SOURCE_BITBUCKET_TOKEN',
    ('source', 'project_key'): 'SOURCE_PROJECT_KEY',
    ('target', 'url'): 'TARGET_GITLAB_URL',
    ('target', 'token'): 'TARGET_GITLAB_TOKEN',
    ('target', 'group_name'): 'TARGET_GROUP_NAME',
    ('target', 'parent_group_id'): 'TARGET_PARENT_GROUP_ID',
    ('migration', 'repos_to_exclude'): 'SOURCE_REPOS_TO_EXCLUDE',
    ('migration', 'repos_to_include'): 'SOURCE_REPOS_TO_INCLUDE',
    ('migration', 'readme_banner'): 'MIGRATION_README_BANNER',
    ('migration', 'description'): 'MIGRATION_DESCRIPTION',
    ('migration', 'dry_run'): 'MIGRATION_DRY_RUN',
    ('logging', 'level'): 'LOG_LEVEL',
    ('logging', 'file'): 'LOG_FILE',
}


def _split_names(v: Any) -> Any:
    """Accept a comma-separated string where a list of names is expected."""
    if v is None:
        return []
    if isinstance(v, str):
        v = v.split(',')
    if isinstance(v, (list, tuple)):
        return [str(name).strip() for name in v if str(name).strip()]
    return v


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError('Value must not be blank')
    return v


def _write_yaml(path: str, data: Dict[str, Any]) -> None:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, default_flow_style=False, indent=2, sort_keys=False)


class HostConfig(BaseModel):
    """Settings shared by both hosts."""

    url: str = Field(..., description='Base URL of the host')
    timeout: int = Field(default=30, description='Request timeout in seconds')

    @validator('url')
    def validate_url(cls, v):
        """Require an HTTP(S) URL and drop the trailing slash."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @validator('timeout')
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v


class BitbucketInstanceConfig(HostConfig):
    """Bitbucket Server instance the repositories come from."""

    username: str = Field(..., description='Username owning the access token')
    token: str = Field(..., description='Personal access token')
    project_key: str = Field(..., description='Key of the project holding the repos')

    @validator('username', 'token', 'project_key')
    def validate_not_blank(cls, v):
        return _not_blank(v)


class GitLabInstanceConfig(HostConfig):
    """GitLab instance the repositories are ported to."""

    token: str = Field(..., description='Personal access token')
    group_name: str = Field(..., description='Group that receives the projects')
    parent_group_id: Optional[int] = Field(
        default=None, description='Parent of the group, None for a top-level group'
    )

    @validator('token', 'group_name')
    def validate_not_blank(cls, v):
        return _not_blank(v)

    @validator('parent_group_id', pre=True)
    def validate_parent_group_id(cls, v):
        """Treat empty and negative ids as a top-level group."""
        if v in (None, ''):
            return None
        v = int(v)
        return v if v >= 0 else None


class MigrationConfig(BaseModel):
    """What to migrate and how to mark the originals."""

    repos_to_exclude: List[str] = Field(
        default_factory=list, description='Repository names to leave alone'
    )
    repos_to_include: List[str] = Field(
        default_factory=list,
        description='If set, only these repository names are migrated',
    )
    readme_banner: List[str] = Field(
        default_factory=lambda: list(DEFAULT_README_BANNER),
        description='Lines prepended to the readme; $URL is the new location',
    )
    description: str = Field(
        default=DEFAULT_DESCRIPTION,
        description='Description set on the deprecated repo; $URL is the new location',
    )
    dry_run: bool = Field(default=False, description='Report only, change nothing')

    @validator('repos_to_exclude', 'repos_to_include', pre=True)
    def validate_repo_names(cls, v):
        """Split comma-separated repository lists."""
        return _split_names(v)

    @validator('readme_banner', pre=True)
    def validate_readme_banner(cls, v):
        if isinstance(v, str):
            v = v.split(ENV_BANNER_SEPARATOR)
        if not v:
            raise ValueError('readme_banner must contain at least one line')
        return v


class LoggingConfig(BaseModel):
    """Log level and optional log file."""

    level: str = Field(default='INFO', description='Minimum level logged')
    file: Optional[str] = Field(default=None, description='Rotated log file')
    format: Optional[str] = Field(default=None, description='Console log format')

    @validator('level')
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return level


class Config(BaseModel):
    """Complete run configuration."""

    source: BitbucketInstanceConfig = Field(..., description='Source Bitbucket server')
    target: GitLabInstanceConfig = Field(..., description='Target GitLab instance')
    migration: MigrationConfig = Field(
        default_factory=MigrationConfig, description='Migration settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    class Config:
        """Pydantic configuration."""

        extra = 'forbid'

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not hold a valid configuration
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError(f'Configuration file is not a mapping: {config_path}')
        return cls(**data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables (and a ``.env`` file).

        Unset variables fall back to the model defaults.
        """
        load_dotenv()

        data: Dict[str, Dict[str, Any]] = {}
        for (section, field), name in ENV_VARS.items():
            value = os.getenv(name)
            if value is not None:
                data.setdefault(section, {})[field] = value

        migration = data.get('migration', {})
        if 'dry_run' in migration:
            migration['dry_run'] = migration['dry_run'].lower() == 'true'

        return cls(**data)

    def to_file(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        _write_yaml(config_path, self.model_dump())

    @staticmethod
    def create_template(output_path: str) -> None:
        """Write a template holding every setting with a placeholder value."""
        template = {
            'source': {
                'url': 'https://bitbucket.example.com',
                'username': 'your-bitbucket-username',
                'token': 'your-bitbucket-personal-access-token',
                'project_key': 'PROJ',
                'timeout': 30,
            },
            'target': {
                'url': 'https://gitlab.example.com',
                'token': 'your-gitlab-personal-access-token',
                'group_name': 'Ported Repos',
                'parent_group_id': None,
                'timeout': 30,
            },
            'migration': {
                'repos_to_exclude': [],
                'repos_to_include': [],
                'readme_banner': list(DEFAULT_README_BANNER),
                'description': DEFAULT_DESCRIPTION,
                'dry_run': False,
            },
            'logging': {
                'level': 'INFO',
                'file': 'gitport.log',
            },
        }
        _write_yaml(output_path, template)
