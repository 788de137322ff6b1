"""Source repository models."""

from pydantic import BaseModel, Field


class RepositoryRecord(BaseModel):
    """A repository listed from the source project."""

    name: str = Field(..., description='Repository slug, unique within the project')
    clone_url: str = Field(..., description='HTTP clone URL')

    class Config:
        """Pydantic configuration."""

        frozen = True


class DefaultBranch(BaseModel):
    """Default branch of a source repository."""

    id: str = Field(..., description='Fully qualified ref, e.g. refs/heads/main')
    display_id: str = Field(
        ..., alias='displayId', description='Human readable branch name'
    )
    latest_commit: str = Field(
        ..., alias='latestCommit', description='Id of the latest commit on the branch'
    )

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
