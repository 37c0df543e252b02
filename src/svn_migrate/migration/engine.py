"""Migration engine - main entry point for migration operations."""

import asyncio
import os
from typing import Dict, Optional

from loguru import logger

from ..config.config import Config
from ..exceptions import AssetGenerationError, MigrationSetupError
from ..git.assets import HelperAssets
from ..git.runner import JobRunner
from .coordinator import MigrationCoordinator, ProgressCallback


class MigrationEngine:
    """Prepares the base directory and runs every project migration."""

    def __init__(
        self,
        config: Config,
        runner: Optional[JobRunner] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        """Initialize migration engine.

        Args:
            config: Migration configuration
            runner: Command runner (a new JobRunner when not given)
            on_progress: Per-project completion callback
        """
        self.config = config
        self.assets = HelperAssets(config.base_path)
        self.coordinator = MigrationCoordinator(
            config, runner=runner, on_progress=on_progress
        )
        self.logger = logger.bind(component='MigrationEngine')

    def prepare(self) -> None:
        """Enter the base path and write the helper assets.

        Raises:
            MigrationSetupError: If either step fails
        """
        try:
            os.chdir(self.config.base_path)
        except OSError as e:
            raise MigrationSetupError(
                f'Could not change directory: {e}', path=self.config.base_path
            ) from e

        try:
            self.assets.generate(self.config.users_path)
        except AssetGenerationError as e:
            raise AssetGenerationError(
                f'Could not generate assets: {e}', path=e.path
            ) from e

        self.logger.debug(f'Prepared base path {self.config.base_path}')

    async def migrate(self) -> None:
        """Prepare the base path, then migrate all configured projects.

        Raises:
            MigrationSetupError: If preparation fails; no project is touched
        """
        self.prepare()

        self.logger.info(
            f'Starting migration of {len(self.config.projects)} projects '
            f'into {self.config.base_path}'
        )
        await self.coordinator.run_all(self.config.projects)
        self.logger.info('All project migrations finished')

    async def validate_prerequisites(self) -> Dict[str, bool]:
        """Check the external tools and files a migration depends on.

        Returns:
            Dictionary with validation results
        """
        return {
            'base_path_exists': os.path.isdir(self.config.base_path),
            'users_file_exists': os.path.isfile(self.config.users_path),
            'git_available': await self._check_command(
                self.config.git_path, '--version'
            ),
            'bash_available': await self._check_command(
                self.config.bash_path, '-c', 'exit 0'
            ),
        }

    async def _check_command(self, command: str, *args: str) -> bool:
        """Return True if the command starts and exits with status 0."""
        try:
            process = await asyncio.create_subprocess_exec(
                command,
                *args,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            self.logger.debug(f'Could not start {command}: {e}')
            return False

        return await process.wait() == 0
