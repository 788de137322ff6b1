"""Per-repository results and run summary."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class MigrationStatus(str, Enum):
    """Migration status enumeration."""

    PENDING = 'pending'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class MigrationResult(BaseModel):
    """Outcome of migrating one repository."""

    repo_name: str = Field(..., description='Source repository slug')
    status: MigrationStatus = Field(..., description='Migration status')

    started_at: datetime = Field(..., description='Migration start time')
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )

    project_id: Optional[int] = Field(
        default=None, description='Id of the imported target project'
    )
    new_url: Optional[str] = Field(default=None, description='URL of the new repo')

    error_message: Optional[str] = Field(
        default=None, description='Error message if failed'
    )
    reason: Optional[str] = Field(default=None, description='Why it was skipped')

    @property
    def success(self) -> bool:
        """Whether the repository ended in a non-failed state."""
        return self.status != MigrationStatus.FAILED


class MigrationSummary(BaseModel):
    """Summary of a migration run."""

    group_id: Optional[int] = Field(default=None, description='Target group id')
    dry_run: bool = Field(default=False, description='Whether this was a dry run')

    started_at: datetime = Field(..., description='Migration start time')
    completed_at: Optional[datetime] = Field(
        default=None, description='Migration completion time'
    )

    results: List[MigrationResult] = Field(
        default_factory=list, description='Results in processing order'
    )

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return self._count(MigrationStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return self._count(MigrationStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(MigrationStatus.SKIPPED)

    def _count(self, status: MigrationStatus) -> int:
        return sum(1 for r in self.results if r.status == status)
