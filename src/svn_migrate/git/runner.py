"""Execution of single external commands into a project log."""

import asyncio
from dataclasses import dataclass
from typing import IO, Optional, Sequence

from loguru import logger


@dataclass
class JobResult:
    """Result of an external command."""

    success: bool
    error: Optional[str] = None
    return_code: Optional[int] = None


class JobRunner:
    """Runs one external command, writing its output to a log sink."""

    def __init__(self):
        """Initialize job runner."""
        self.logger = logger.bind(component='JobRunner')

    async def run(
        self,
        command: str,
        args: Sequence[str],
        log_sink: IO[str],
        cwd: Optional[str] = None,
    ) -> JobResult:
        """Run a command once and wait for it to exit.

        The invocation is written to the log sink first, then the process
        standard output and standard error are both sent to it.

        Args:
            command: Executable to start
            args: Arguments passed to the executable
            log_sink: Open text file receiving the transcript
            cwd: Working directory, inherited from the process when None

        Returns:
            Job result, unsuccessful when the process cannot be started or
            exits with a non-zero status
        """
        cmd = [command, *args]
        log_sink.write(f'{" ".join(cmd)}\n')
        log_sink.flush()

        self.logger.debug(f'Running command: {" ".join(cmd)} in {cwd or "."}')

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=log_sink,
                stderr=asyncio.subprocess.STDOUT,
                cwd=cwd,
            )
        except OSError as e:
            self.logger.debug(f'Could not start {command}: {e}')
            return JobResult(success=False, error=str(e))

        return_code = await process.wait()

        self.logger.debug(f'Command return code: {return_code}')

        if return_code != 0:
            return JobResult(
                success=False,
                error=f'exit status {return_code}',
                return_code=return_code,
            )

        return JobResult(success=True, return_code=return_code)
