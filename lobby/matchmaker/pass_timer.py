import asyncio
from time import time

import lobby.metrics as metrics

from ..config import TRACE, config
from ..decorators import with_logger


@with_logger
class PassTimer(object):
    """ Paces the matchmaking passes of one lobby.

        timer = PassTimer("default")
        # Pauses the coroutine until the next pass is due
        await timer.next_pass()

    Passes are scheduled at a fixed interval measured from the start of the
    previous pass, so the time spent matching does not delay the schedule. If
    a pass overran the interval the next one starts immediately.
    The interval is read from `config.PASS_INTERVAL` on every tick so config
    refreshes take effect without a restart.
    """
    def __init__(self, lobby_id: str):
        self.lobby_id = lobby_id
        self._last_pass = time()
        self.next_pass_time = self._last_pass + config.PASS_INTERVAL

    def time_remaining(self) -> float:
        return max(self.next_pass_time - time(), 0.0)

    async def next_pass(self) -> None:
        """ Wait for the timer to fire. """

        time_remaining = self.time_remaining()
        self._logger.log(
            TRACE, "Next %s pass happening in %.2fs", self.lobby_id, time_remaining
        )
        metrics.pass_timer.labels(self.lobby_id).set(time_remaining)
        await asyncio.sleep(time_remaining)

        self._last_pass = time()
        self.next_pass_time = self._last_pass + config.PASS_INTERVAL
