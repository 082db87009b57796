"""
Reloads the configuration file while the matchmaker is running
"""

import asyncio
import contextlib
from typing import Optional

from .config import ConfigurationStore, config
from .core import Service
from .decorators import with_logger

# Seconds to wait after a failed reload before trying again
RETRY_DELAY = 60


@with_logger
class ConfigurationService(Service):
    """
    Calls `refresh()` on the configuration store every
    `CONFIGURATION_REFRESH_TIME` seconds. Changed tuning values reach the
    lobbies through the callbacks registered on the store.
    """

    def __init__(self, store: ConfigurationStore = config) -> None:
        self.store = store
        self._refresh_task: Optional[asyncio.Task] = None

    async def initialize(self) -> None:
        self._refresh_task = asyncio.create_task(self._refresh_periodically())
        self._logger.info(
            "Reloading configuration every %ss",
            self.store.CONFIGURATION_REFRESH_TIME
        )

    async def _refresh_periodically(self) -> None:
        while True:
            await asyncio.sleep(self.store.CONFIGURATION_REFRESH_TIME)
            try:
                self.store.refresh()
            except Exception:
                self._logger.exception(
                    "Could not reload configuration, keeping the current values"
                )
                await asyncio.sleep(RETRY_DELAY)

    async def shutdown(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is None:
            return

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._logger.info("Stopped reloading configuration")
