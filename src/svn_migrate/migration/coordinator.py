"""Fan-out of project migrations and completion tracking."""

import asyncio
from typing import Callable, List, Optional, Sequence, Tuple

from loguru import logger

from ..config.config import Config
from ..git.runner import JobRunner
from ..models.project import Project
from .lock import CriticalSection
from .migrator import ProjectMigrator


ProgressCallback = Callable[[int, int, Project], None]


class ProgressCounter:
    """Completed/total counter with a wait-for-all primitive.

    ``total`` grows while tasks are spawned and is frozen by ``seal``;
    ``completed`` grows by one per finished task and never exceeds it.
    """

    def __init__(self):
        self.completed = 0
        self.total = 0
        self._sealed = False
        self._finished = asyncio.Event()

    def add(self) -> None:
        """Account for one more spawned task."""
        if self._sealed:
            raise RuntimeError('Cannot add tasks to a sealed counter')
        self.total += 1

    def seal(self) -> None:
        """Freeze the total once every task has been spawned."""
        self._sealed = True
        self._check_finished()

    def complete(self) -> Tuple[int, int]:
        """Record one finished task.

        Returns:
            The (completed, total) pair right after this completion
        """
        if self.completed >= self.total:
            raise RuntimeError(
                f'More completions than spawned tasks ({self.total})'
            )
        self.completed += 1
        self._check_finished()
        return self.completed, self.total

    async def wait(self) -> None:
        """Block until every spawned task has completed."""
        await self._finished.wait()

    def _check_finished(self) -> None:
        if self._sealed and self.completed == self.total:
            self._finished.set()


class MigrationCoordinator:
    """Runs one concurrent migration task per configured project."""

    def __init__(
        self,
        config: Config,
        runner: Optional[JobRunner] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        """Initialize migration coordinator.

        Args:
            config: Migration configuration
            runner: Command runner shared by every project
            on_progress: Called with (completed, total, project) once per
                finished project
        """
        self.config = config
        self.critical_section = CriticalSection()
        self.migrator = ProjectMigrator(config, self.critical_section, runner)
        self.on_progress = on_progress or self._log_progress
        self.counter: Optional[ProgressCounter] = None
        self.logger = logger.bind(component='MigrationCoordinator')

    async def run_all(self, projects: Sequence[Project]) -> None:
        """Migrate every project concurrently and wait for all of them.

        Individual outcomes are not collected; the run is over once every
        task has finished, whatever the result.

        Args:
            projects: Projects to migrate
        """
        counter = ProgressCounter()
        self.counter = counter

        tasks: List[asyncio.Task] = []
        for project in projects:
            counter.add()
            tasks.append(
                asyncio.create_task(
                    self._run_project(project, counter), name=f'migrate-{project.name}'
                )
            )
        counter.seal()

        self.logger.info(f'Started {counter.total} project migrations')

        await counter.wait()
        await asyncio.gather(*tasks)

    async def _run_project(self, project: Project, counter: ProgressCounter) -> None:
        try:
            await self.migrator.migrate(project)
        except Exception as e:
            self.logger.exception(f'Migration of {project.name} crashed: {e}')
        finally:
            completed, total = counter.complete()
            self.on_progress(completed, total, project)

    def _log_progress(self, completed: int, total: int, project: Project) -> None:
        self.logger.info(
            f'[{completed}/{total}] Finished migrating {project.display_name}'
        )
