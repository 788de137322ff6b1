"""Target project models."""

from typing import Optional

from pydantic import BaseModel, Field

SUGGESTION_COMMIT_MESSAGE = (
    'Apply %{suggestions_count} suggestion(s) to %{files_count} file(s)'
)


class ImportedProject(BaseModel):
    """Project created on the target host by an import."""

    id: int = Field(..., description='Project ID')
    name: str = Field(..., description='Project name')
    full_path: str = Field(..., description='Full path including namespace')
    import_status: Optional[str] = Field(
        default=None, description='Import status reported by the target host'
    )


class BaselineProjectSettings(BaseModel):
    """Settings applied to every imported project."""

    squash_option: str = Field(default='never', description='Squash on merge policy')
    only_allow_merge_if_all_discussions_are_resolved: bool = Field(
        default=True, description='Require all discussions resolved before merge'
    )
    suggestion_commit_message: str = Field(
        default=SUGGESTION_COMMIT_MESSAGE,
        description='Commit message used when applying suggestions',
    )

    class Config:
        """Pydantic configuration."""

        frozen = True
