"""Data models for source and target entities."""

from .repository import RepositoryRecord, DefaultBranch
from .group import Group, GroupCreate, group_path_from_name
from .project import ImportedProject, BaselineProjectSettings
from .restriction import BranchRestriction, read_only_restriction

__all__ = [
    'RepositoryRecord',
    'DefaultBranch',
    'Group',
    'GroupCreate',
    'group_path_from_name',
    'ImportedProject',
    'BaselineProjectSettings',
    'BranchRestriction',
    'read_only_restriction',
]
