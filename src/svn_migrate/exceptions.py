"""SVN migration exceptions."""

from typing import Optional


class SvnMigrateError(Exception):
    """Base exception for SVN migration errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        """Initialize SVN migration error.

        Args:
            message: Error message
            path: Filesystem path involved in the failure
        """
        super().__init__(message)
        self.path = path


class MigrationSetupError(SvnMigrateError):
    """Setup failed before any project work started."""

    pass


class AssetGenerationError(MigrationSetupError):
    """Helper scripts or the authors file could not be written."""

    pass
