"""Critical section serializing working-directory dependent cleanup."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from loguru import logger


class CriticalSection:
    """Single mutual-exclusion gate shared by every project migration.

    The process working directory is shared by all tasks; only the holder
    of this gate may change it or run commands that depend on it.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self.holder: Optional[str] = None
        self.logger = logger.bind(component='CriticalSection')

    def locked(self) -> bool:
        """Return True while some task holds the gate."""
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self, owner: str) -> AsyncIterator[None]:
        """Hold the gate for the duration of the ``async with`` block.

        Args:
            owner: Name recorded as the current holder
        """
        if self._lock.locked():
            self.logger.debug(f'{owner} waiting for {self.holder}')

        async with self._lock:
            self.holder = owner
            self.logger.debug(f'{owner} entered critical section')
            try:
                yield
            finally:
                self.holder = None
                self.logger.debug(f'{owner} left critical section')
