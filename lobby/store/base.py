from abc import ABCMeta, abstractmethod
from typing import Sequence

from ..matchmaker.user import User


class WaitingPoolStore(metaclass=ABCMeta):
    """
    Where waiting users live between matchmaking passes.

    Implementations must make `commit_room` an atomic claim: either the room
    is persisted and every member is removed from the waiting pool, or a
    `CommitError` is raised and the pool is left exactly as it was. Two
    commits racing for the same user must never both succeed.
    """

    @abstractmethod
    async def fetch_waiting(self, lobby_id: str) -> list[User]:
        """
        Return the users currently waiting in `lobby_id`. An unknown or empty
        lobby is not an error.
        """
        pass  # pragma: no cover

    @abstractmethod
    async def commit_room(
        self,
        room_id: str,
        lobby_id: str,
        members: Sequence[User]
    ) -> None:
        pass  # pragma: no cover
