"""Capability sets the migration code needs from each host."""

from typing import Dict, List, Optional, Protocol

from ..models.repository import DefaultBranch
from ..models.project import ImportedProject
from ..models.restriction import BranchRestriction


class SourceRepositoryClient(Protocol):
    """Operations on the host repositories are migrated from."""

    url: str
    username: str
    token: str

    def list_repositories(self, project_key: str) -> Dict[str, str]: ...

    def find_file(
        self, project_key: str, repo_name: str, name_substring: str
    ) -> Optional[str]: ...

    def read_file(
        self, project_key: str, repo_name: str, file_name: str
    ) -> List[str]: ...

    def write_file(
        self,
        project_key: str,
        repo_name: str,
        file_name: str,
        content: str,
        commit_message: str,
        branch_name: str,
        prior_commit_id: Optional[str] = None,
    ) -> None: ...

    def get_description(self, project_key: str, repo_name: str) -> str: ...

    def set_description(self, project_key: str, repo_name: str, text: str) -> None: ...

    def get_default_branch(self, project_key: str, repo_name: str) -> DefaultBranch: ...

    def add_branch_restriction(
        self, project_key: str, repo_name: str, restriction: BranchRestriction
    ) -> None: ...


class TargetRepositoryClient(Protocol):
    """Operations on the host repositories are migrated to."""

    url: str

    def find_group_id(self, name: str) -> Optional[int]: ...

    def create_group(self, name: str, parent_id: Optional[int] = None) -> int: ...

    def get_group_path(self, group_id: int) -> str: ...

    def is_project_in_group(self, repo_name: str, group_id: int) -> bool: ...

    def import_from_source(
        self,
        source_url: str,
        source_username: str,
        source_token: str,
        source_project_key: str,
        repo_name: str,
        target_namespace: str,
    ) -> Optional[ImportedProject]: ...

    def apply_baseline_settings(self, project_id: int) -> None: ...

    def set_description(self, project_id: int, text: str) -> None: ...
