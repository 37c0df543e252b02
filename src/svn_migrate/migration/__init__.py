"""Migration engine and coordination."""

from .lock import CriticalSection
from .migrator import (
    CleanupStep,
    MigrationStatus,
    MigrationTask,
    ProjectMigrator,
)
from .coordinator import MigrationCoordinator, ProgressCounter
from .engine import MigrationEngine

__all__ = [
    'CriticalSection',
    'CleanupStep',
    'MigrationStatus',
    'MigrationTask',
    'ProjectMigrator',
    'MigrationCoordinator',
    'ProgressCounter',
    'MigrationEngine',
]
