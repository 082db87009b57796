from collections import OrderedDict, defaultdict
from typing import Optional, Sequence

from ..decorators import with_logger
from ..exceptions import CommitError
from ..matchmaker.user import User
from .base import WaitingPoolStore


@with_logger
class InMemoryWaitingPool(WaitingPoolStore):
    """
    Keeps waiting users and formed rooms in process memory.

    All mutations happen without yielding to the event loop, so a commit can
    never interleave with another commit or with `add_user`.
    """

    def __init__(self):
        self._waiting: dict[str, dict] = defaultdict(OrderedDict)
        self._rooms: dict[str, tuple[str, tuple[User, ...]]] = {}

    def add_user(self, lobby_id: str, user: User) -> None:
        """
        Put a user into the waiting pool of a lobby. Adding a user that is
        already waiting replaces the old record.
        """
        self._waiting[lobby_id][user.id] = user

    def remove_user(self, lobby_id: str, user_id) -> bool:
        """
        Take a user out of the waiting pool, e.g. because they left. Returns
        whether the user was waiting.
        """
        return self._waiting[lobby_id].pop(user_id, None) is not None

    def num_waiting(self, lobby_id: str) -> int:
        return len(self._waiting.get(lobby_id, ()))

    def get_room(self, room_id: str) -> Optional[tuple[User, ...]]:
        room = self._rooms.get(room_id)
        if room is None:
            return None
        _, members = room
        return members

    async def fetch_waiting(self, lobby_id: str) -> list[User]:
        return list(self._waiting.get(lobby_id, {}).values())

    async def commit_room(
        self,
        room_id: str,
        lobby_id: str,
        members: Sequence[User]
    ) -> None:
        if room_id in self._rooms:
            raise CommitError(lobby_id, room_id, f"Room {room_id} already exists")

        if len({user.id for user in members}) != len(members):
            raise CommitError(
                lobby_id, room_id, f"Room {room_id} lists a user twice"
            )

        waiting = self._waiting.get(lobby_id, {})
        missing = [user.id for user in members if user.id not in waiting]
        if missing:
            raise CommitError(
                lobby_id,
                room_id,
                f"Users {missing} are no longer waiting in {lobby_id}"
            )

        for user in members:
            del waiting[user.id]
        self._rooms[room_id] = (lobby_id, tuple(members))
        self._logger.debug(
            "Committed room %s with %d users from %s",
            room_id, len(members), lobby_id
        )
