"""Target group models."""

import re
from typing import Optional

from pydantic import BaseModel, Field, validator


def group_path_from_name(name: str) -> str:
    """Derive a group path from its display name.

    Runs of whitespace become a single hyphen and the result is lower-cased.
    """
    return re.sub(r'\s+', '-', name.strip()).lower()


class Group(BaseModel):
    """Group (namespace) on the target host that receives imported projects."""

    id: int = Field(..., description='Group ID')
    name: str = Field(..., description='Group name')
    parent_id: Optional[int] = Field(
        default=None, description='Parent group ID, None for a top-level group'
    )
    full_path: Optional[str] = Field(
        default=None, description='Full namespace path, resolved on first use'
    )

    @validator('name')
    def validate_name(cls, v):
        """Validate group name is not blank."""
        if not v.strip():
            raise ValueError('Group name must not be blank')
        return v


class GroupCreate(BaseModel):
    """Payload for creating a new group."""

    name: str = Field(..., description='Group name')
    path: str = Field(..., description='Group path')
    parent_id: Optional[int] = Field(default=None, description='Parent group ID')

    @classmethod
    def from_name(cls, name: str, parent_id: Optional[int] = None) -> 'GroupCreate':
        """Build the create payload for a group name."""
        return cls(name=name, path=group_path_from_name(name), parent_id=parent_id)
