import time
from typing import Callable, NamedTuple, Optional, Union

import humanize

import lobby.metrics as metrics

from ..decorators import timed, with_logger
from ..exceptions import CommitError, FetchError
from ..store.base import WaitingPoolStore
from .happiness import average_happiness, calc_happiness
from .room_id import generate_room_id
from .settings import MatchmakingSettings
from .user import User


class RoomFormed(NamedTuple):
    """A room was committed and its members left the waiting pool"""

    room_id: str
    lobby_id: str
    members: tuple[User, ...]
    average_happiness: float
    skipped: int = 0


class NoAction(NamedTuple):
    """Nothing changed, everybody is still waiting"""

    lobby_id: str
    reason: str
    average_happiness: Optional[float] = None
    skipped: int = 0


PassOutcome = Union[RoomFormed, NoAction]


@timed(limit=0.1)
def rank_users(
    users: list[User],
    settings: MatchmakingSettings,
    now: float
) -> list[User]:
    """
    Order users by how happy they would be if the whole pool was one room,
    happiest first. Ties are broken by user id so that the same set of users
    always gives the same order.
    """
    scored = [(calc_happiness(user, users, settings, now), user) for user in users]
    scored.sort(key=lambda pair: (-pair[0], str(pair[1].id)))
    return [user for _, user in scored]


def select_room(
    users: list[User],
    settings: MatchmakingSettings,
    now: float
) -> list[User]:
    """
    Pick the candidate room from the pool. Ranking happens against the whole
    pool, before trimming to capacity.
    """
    return rank_users(users, settings, now)[:settings.full_room]


@with_logger
class MatchmakingPass:
    """
    One round of matchmaking for one lobby.

        mm_pass = MatchmakingPass(store, settings)
        outcome = await mm_pass.run_pass("default")

    The pass holds no locks. Callers must not run two passes for the same
    lobby at the same time, see `LobbyQueue`.
    """

    def __init__(
        self,
        store: WaitingPoolStore,
        settings: MatchmakingSettings,
        make_room_id: Callable[[], str] = generate_room_id,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.settings = settings
        self.make_room_id = make_room_id
        self.clock = clock

    async def run_pass(self, lobby_id: str) -> PassOutcome:
        """
        Fetch, score, select and, if the candidate room is happy enough,
        commit.

        # Errors
        Raises `FetchError` if the waiting pool could not be read and
        `CommitError` if the room could not be persisted. In both cases no
        user has left the waiting pool.
        """
        settings = self.settings
        now = self.clock()

        users = await self._fetch_waiting(lobby_id)
        metrics.waiting_users.labels(lobby_id).set(len(users))
        if not users:
            self._logger.debug("No users waiting in lobby %s", lobby_id)
            return NoAction(lobby_id, "empty pool")

        candidates = self._valid_users(lobby_id, users)
        skipped = len(users) - len(candidates)
        if not candidates:
            return NoAction(lobby_id, "no valid users", skipped=skipped)

        room = select_room(candidates, settings, now)
        average = average_happiness(room, settings, now)
        metrics.room_happiness.labels(lobby_id).observe(average)

        if average <= settings.start_threshold:
            self._logger.debug(
                "Candidate room of %d users in lobby %s not happy enough "
                "(%.1f <= %.1f)",
                len(room), lobby_id, average, settings.start_threshold
            )
            return NoAction(lobby_id, "below threshold", average, skipped)

        room_id = self.make_room_id()
        await self._commit_room(lobby_id, room_id, room)

        longest_wait = max(user.seconds_waited(now) for user in room)
        self._logger.info(
            "Formed room %s in lobby %s with %d users, average happiness "
            "%.1f, longest wait %s",
            room_id, lobby_id, len(room), average,
            humanize.naturaldelta(longest_wait)
        )
        return RoomFormed(room_id, lobby_id, tuple(room), average, skipped)

    async def _fetch_waiting(self, lobby_id: str) -> list[User]:
        try:
            users = await self.store.fetch_waiting(lobby_id)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(
                lobby_id, f"Could not fetch waiting users of {lobby_id}: {e}"
            ) from e

        if not isinstance(users, (list, tuple)):
            raise FetchError(
                lobby_id,
                f"Waiting pool of {lobby_id} is a {type(users).__name__}, "
                "expected a sequence of users"
            )
        seen_ids = set()
        for user in users:
            if not isinstance(user, User):
                raise FetchError(
                    lobby_id,
                    f"Waiting pool of {lobby_id} contains {user!r}"
                )
            # Copies of one user would take up several seats in the room
            if user.id in seen_ids:
                raise FetchError(
                    lobby_id,
                    f"Waiting pool of {lobby_id} lists user {user.id} "
                    "more than once"
                )
            seen_ids.add(user.id)
        return list(users)

    def _valid_users(self, lobby_id: str, users: list[User]) -> list[User]:
        valid = []
        for user in users:
            if user.has_valid_join_time():
                valid.append(user)
                continue

            self._logger.warning(
                "Skipping user %s in lobby %s with invalid join time %r",
                user.id, lobby_id, user.join_time
            )
            metrics.skipped_users.labels(lobby_id).inc()
        return valid

    async def _commit_room(
        self,
        lobby_id: str,
        room_id: str,
        room: list[User]
    ) -> None:
        try:
            await self.store.commit_room(room_id, lobby_id, room)
        except CommitError:
            raise
        except Exception as e:
            raise CommitError(
                lobby_id, room_id, f"Could not commit room {room_id}: {e}"
            ) from e
