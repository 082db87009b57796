import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import lobby.metrics as metrics

from ..asyncio_extensions import synchronizedmethod
from ..decorators import with_logger
from .matchmaking_pass import MatchmakingPass, PassOutcome, RoomFormed
from .pass_timer import PassTimer

RoomFormedCallback = Callable[[RoomFormed], Any]


class MatchmakerPassTimer:
    def __init__(self, lobby_id):
        self.lobby_id = lobby_id

    def __enter__(self):
        self.start_time = time.monotonic()

    def __exit__(self, exc_type, exc_value, traceback):
        total_time = time.monotonic() - self.start_time
        if exc_type is None:
            status = "successful"
        elif exc_type is asyncio.CancelledError:
            status = "cancelled"
        else:
            status = "errored"

        metric = metrics.pass_duration.labels(self.lobby_id, status)
        metric.observe(total_time)


@with_logger
class LobbyQueue:
    """
    Runs matchmaking passes for a single lobby on a timer.

    Passes of the same lobby are serialized. Different lobbies each have
    their own `LobbyQueue` and never wait for each other.
    """

    def __init__(
        self,
        lobby_id: str = "default",
        matchmaking_pass: MatchmakingPass = None,
        on_room_formed: Optional[RoomFormedCallback] = None,
    ):
        assert matchmaking_pass is not None

        self.id = lobby_id
        self.matchmaking_pass = matchmaking_pass
        self.on_room_formed = on_room_formed
        self.last_outcome: Optional[PassOutcome] = None
        self._is_running = True
        self._task: Optional[asyncio.Task] = None

        self.timer = PassTimer(lobby_id)

    def initialize(self):
        self._task = asyncio.create_task(self.pass_timer())

    async def pass_timer(self) -> None:
        """ Periodically runs a matchmaking pass over the waiting pool.
        Errors are logged and the loop carries on with the next pass, the
        waiting pool is left untouched by a failed pass.
        """
        self._logger.debug("LobbyQueue initialized for %s", self.id)
        while self._is_running:
            try:
                await self.timer.next_pass()

                await self.run_pass()
            except asyncio.CancelledError:
                break
            except Exception:
                self._logger.exception(
                    "Unexpected error during matchmaking pass in lobby %s!",
                    self.id
                )
                # To avoid potential busy loops
                await asyncio.sleep(1)
        self._logger.info("%s lobby stopped", self.id)

    @synchronizedmethod
    async def run_pass(self) -> PassOutcome:
        """
        Run one matchmaking pass right now.

        Note that this method is synchronized per lobby so that a manually
        triggered pass can't race the timer for the same waiting pool.
        """
        self._logger.debug("Running matchmaking pass: %s", self.id)
        try:
            with MatchmakerPassTimer(self.id):
                outcome = await self.matchmaking_pass.run_pass(self.id)
        except Exception:
            metrics.matchmaker_passes.labels(
                self.id, metrics.PassResult.ERRORED
            ).inc()
            raise

        self.last_outcome = outcome
        if isinstance(outcome, RoomFormed):
            metrics.matchmaker_passes.labels(
                self.id, metrics.PassResult.FORMED
            ).inc()
            metrics.room_size.labels(self.id).observe(len(outcome.members))
            self._notify_room_formed(outcome)
        else:
            metrics.matchmaker_passes.labels(
                self.id, metrics.PassResult.NO_ACTION
            ).inc()

        return outcome

    def _notify_room_formed(self, outcome: RoomFormed) -> None:
        if self.on_room_formed is None:
            return
        try:
            self.on_room_formed(outcome)
        except Exception:
            self._logger.exception("Room formed callback raised an exception!")

    def shutdown(self):
        self._is_running = False
        if self._task is not None:
            self._task.cancel()

    def to_dict(self):
        """
        Return a status summary of this lobby
        """
        outcome = self.last_outcome
        return {
            "lobby_id": self.id,
            "next_pass_time": datetime.fromtimestamp(
                self.timer.next_pass_time, timezone.utc
            ).isoformat(),
            "next_pass_time_delta": self.timer.next_pass_time - time.time(),
            "last_result": None if outcome is None else type(outcome).__name__,
            "last_average_happiness": (
                None if outcome is None else outcome.average_happiness
            ),
        }

    def __repr__(self):
        return f"LobbyQueue({self.id!r})"
