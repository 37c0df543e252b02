"""Project entity models."""

from typing import Optional

from pydantic import BaseModel, Field, validator


class Project(BaseModel):
    """Subversion project to convert into a Git repository."""

    name: str = Field(
        ..., description='Project identifier, used for its directory and log file'
    )
    svn: str = Field(..., description='Subversion repository URL')
    title: Optional[str] = Field(default=None, description='Display name')
    std: bool = Field(
        default=False, description='Project uses the trunk/branches/tags layout'
    )

    class Config:
        """Pydantic configuration."""

        frozen = True
        extra = 'forbid'

    @validator('name')
    def validate_name(cls, v):
        """Validate project name can be used as a directory name."""
        v = v.strip()
        if not v or v in ('.', '..'):
            raise ValueError('Project name must not be empty')
        if '/' in v or '\\' in v:
            raise ValueError(f'Project name must not contain path separators: {v}')
        return v

    @validator('svn')
    def validate_svn(cls, v):
        """Validate SVN location is not blank."""
        if not v.strip():
            raise ValueError('SVN location must not be empty')
        return v.strip()

    @property
    def display_name(self) -> str:
        """Name shown in progress output."""
        return self.title or self.name

    @property
    def stale_branch(self) -> str:
        """Branch left behind by git-svn that is deleted after cleanup."""
        # Standard projects have a trunk branch, otherwise a git-svn branch
        return 'trunk' if self.std else 'git-svn'
