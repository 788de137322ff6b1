"""Branch restriction payloads for the source host."""

from typing import Any, Dict

from pydantic import BaseModel, Field

WILDCARD_PATTERN = '**/*'


class BranchMatcherType(BaseModel):
    """Kind of matcher used by a branch restriction."""

    id: str = Field(default='PATTERN')
    name: str = Field(default='Pattern')


class BranchMatcher(BaseModel):
    """Selects the branches a restriction applies to."""

    id: str = Field(..., description='Matcher value')
    display_id: str = Field(..., alias='displayId', description='Matcher display value')
    type: BranchMatcherType = Field(default_factory=BranchMatcherType)
    active: bool = Field(default=True)

    class Config:
        """Pydantic configuration."""

        populate_by_name = True


class BranchRestriction(BaseModel):
    """Branch permission applied through the branch permissions API."""

    type: str = Field(..., description='Restriction type, e.g. read-only')
    matcher: BranchMatcher = Field(..., description='Branches the restriction covers')

    def to_payload(self) -> Dict[str, Any]:
        """Serialize using the field names the API expects."""
        return self.model_dump(by_alias=True)


def read_only_restriction() -> BranchRestriction:
    """Restriction that makes every branch of a repository read-only."""
    return BranchRestriction(
        type='read-only',
        matcher=BranchMatcher(id=WILDCARD_PATTERN, display_id=WILDCARD_PATTERN),
    )
