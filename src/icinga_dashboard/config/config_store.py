"""
Shared holder for the active dashboard configuration.

The store is created once at startup and handed to every component that needs
configuration. Readers take a short read acquisition, copy out what they need
and release it before doing any I/O. Replacing the configuration takes the
write side, so a reload can swap the snapshot without touching the readers.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from icinga_dashboard.config.settings import Config

# Module logger
logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    An asyncio lock allowing many concurrent readers or one exclusive writer.

    Waiting writers take priority over new readers, so a steady stream of
    readers cannot starve a writer.
    """

    def __init__(self) -> None:
        self._condition: asyncio.Condition = asyncio.Condition()
        self._readers: int = 0
        self._writer_active: bool = False
        self._writers_waiting: int = 0

    @property
    def readers(self) -> int:
        """Number of readers currently holding the lock."""
        return self._readers

    @property
    def writer_active(self) -> bool:
        """Whether a writer currently holds the lock."""
        return self._writer_active

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._condition:
            await self._condition.wait_for(
                lambda: not self._writer_active and self._writers_waiting == 0
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._condition:
                self._readers -= 1
                if self._readers == 0:
                    self._condition.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._condition:
            self._writers_waiting += 1
            try:
                await self._condition.wait_for(
                    lambda: not self._writer_active and self._readers == 0
                )
            finally:
                self._writers_waiting -= 1
                # readers blocked on a cancelled writer must re-check
                self._condition.notify_all()
            self._writer_active = True
        try:
            yield
        finally:
            async with self._condition:
                self._writer_active = False
                self._condition.notify_all()


class ConfigStore:
    """
    Holds the active :class:`Config` behind a :class:`ReadWriteLock`.

    Config objects are immutable, so a snapshot returned by :meth:`snapshot`
    stays valid for the whole request even if the store is replaced meanwhile.
    """

    def __init__(self, config: Config) -> None:
        self._config: Config = config
        self._lock: ReadWriteLock = ReadWriteLock()

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    async def snapshot(self) -> Config:
        """
        Return the current configuration under a read acquisition.

        The lock is released before returning.
        """
        async with self._lock.read():
            return self._config

    async def replace(self, config: Config) -> None:
        """
        Atomically swap in a new configuration.

        Waits until all current readers are done; readers arriving meanwhile
        see the new configuration.
        """
        async with self._lock.write():
            self._config = config
        logger.info("Configuration replaced.")
