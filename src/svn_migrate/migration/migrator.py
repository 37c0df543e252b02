"""Per-project migration: clone, then serialized cleanup."""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import IO, List, Optional

from loguru import logger

from ..config.config import Config
from ..git.assets import HelperAssets
from ..git.runner import JobRunner
from ..models.project import Project
from .lock import CriticalSection


class MigrationStatus(str, Enum):
    """Migration status enumeration."""

    PENDING = 'pending'
    CLONING = 'cloning'
    SKIPPED = 'skipped'
    CLONE_FAILED = 'clone_failed'
    CLEANING_UP = 'cleaning_up'
    FAILED = 'failed'
    DONE = 'done'


@dataclass
class MigrationTask:
    """Execution context of one project migration."""

    project: Project
    status: MigrationStatus = MigrationStatus.PENDING
    log_sink: Optional[IO[str]] = None
    failed_steps: List[str] = field(default_factory=list)

    def close(self) -> None:
        """Release the log sink if one was opened."""
        if self.log_sink is not None:
            self.log_sink.close()
            self.log_sink = None


@dataclass
class CleanupStep:
    """One best-effort command of the cleanup phase."""

    description: str
    command: str
    args: List[str]


class ProjectMigrator:
    """Migrates a single project from Subversion to Git."""

    def __init__(
        self,
        config: Config,
        critical_section: CriticalSection,
        runner: Optional[JobRunner] = None,
    ):
        """Initialize project migrator.

        Args:
            config: Migration configuration
            critical_section: Gate shared by every migrator of the run
            runner: Command runner, a new JobRunner when not given
        """
        self.config = config
        self.critical_section = critical_section
        self.runner = runner or JobRunner()
        self.assets = HelperAssets(config.base_path)
        self.logger = logger.bind(component='ProjectMigrator')

    async def migrate(self, project: Project) -> MigrationTask:
        """Run the whole migration of one project.

        Failures never propagate; they end in a terminal status on the
        returned task.

        Args:
            project: Project to migrate

        Returns:
            The completed migration task
        """
        task = MigrationTask(project=project)

        if os.path.exists(self.config.project_path(project)):
            self.logger.info(f'{project.name} already exists, skipping...')
            task.status = MigrationStatus.SKIPPED
            return task

        try:
            task.log_sink = open(
                self.config.log_path(project), 'w', encoding='utf-8'
            )
        except OSError as e:
            self.logger.error(f'Could not open log file for {project.name}: {e}')
            task.status = MigrationStatus.FAILED
            return task

        try:
            if not await self._clone(task):
                return task
            await self._cleanup(task)
        finally:
            task.close()

        return task

    def clone_args(self, project: Project) -> List[str]:
        """Arguments of the ``git svn clone`` invocation for a project."""
        args = [
            'svn',
            'clone',
            project.svn,
            f'--authors-file={self.assets.authors_file}',
            '--no-metadata',
            '--prefix=',
        ]
        if project.std:
            args.append('-s')
        args.append(self.config.project_path(project))
        return args

    def cleanup_steps(self, project: Project) -> List[CleanupStep]:
        """Cleanup commands for a project, in execution order."""
        bash = self.config.bash_path
        return [
            CleanupStep('Converting tags', bash, [self.assets.tags_script]),
            CleanupStep('Converting branches', bash, [self.assets.branches_script]),
            CleanupStep('Converting peg-revisions', bash, [self.assets.pegs_script]),
            CleanupStep(
                f'Deleting the {project.stale_branch} branch',
                self.config.git_path,
                ['branch', '-d', project.stale_branch],
            ),
        ]

    async def _clone(self, task: MigrationTask) -> bool:
        """Import the project history into its own directory.

        Uses absolute paths only, so it runs outside the critical section.
        """
        project = task.project
        task.status = MigrationStatus.CLONING
        self.logger.info(f'Migrating {project.name}...')

        result = await self.runner.run(
            self.config.git_path,
            self.clone_args(project),
            task.log_sink,
            cwd=self.config.base_path,
        )

        if not result.success:
            self.logger.error(f'Could not migrate {project.name}: {result.error}')
            task.status = MigrationStatus.CLONE_FAILED
            return False

        return True

    async def _cleanup(self, task: MigrationTask) -> None:
        """Normalize branches and tags inside the project directory."""
        project = task.project

        async with self.critical_section.hold(project.name):
            task.status = MigrationStatus.CLEANING_UP

            try:
                os.chdir(self.config.project_path(project))
            except OSError as e:
                self.logger.error(f'Could not change directory: {e}')
                task.status = MigrationStatus.FAILED
                return

            try:
                for step in self.cleanup_steps(project):
                    self.logger.info(f'{step.description} for {project.name}...')
                    result = await self.runner.run(
                        step.command, step.args, task.log_sink
                    )
                    if not result.success:
                        self.logger.warning(
                            f'{step.description} failed for {project.name}: '
                            f'{result.error}'
                        )
                        task.failed_steps.append(step.description)
            finally:
                try:
                    os.chdir(self.config.base_path)
                except OSError as e:
                    self.logger.error(f'Could not change directory: {e}')
                    task.status = MigrationStatus.FAILED

            if task.status == MigrationStatus.CLEANING_UP:
                task.status = MigrationStatus.DONE
