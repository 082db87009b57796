from collections import defaultdict
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import and_, delete, select

from ..db import LobbyDatabase, stat_db_errors
from ..db.models import friendship, lobby_member, room, room_member
from ..decorators import with_logger
from ..exceptions import CommitError
from ..matchmaker.user import User
from .base import WaitingPoolStore


def _to_timestamp(value: Optional[datetime]) -> Optional[float]:
    if value is None:
        return None
    # MySQL TIMESTAMP columns come back naive, in UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def _from_timestamp(value: Optional[float]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value, timezone.utc).replace(tzinfo=None)


@with_logger
class DatabaseWaitingPool(WaitingPoolStore):
    """
    Waiting pool backed by the `lobby_member` table.

    Committing a room deletes the members' waiting rows and inserts the room
    in one transaction. If the delete does not hit every member, somebody else
    claimed at least one of them first and the whole transaction is rolled
    back.
    """

    def __init__(self, database: LobbyDatabase):
        self._db = database

    async def add_user(self, lobby_id: str, user: User) -> None:
        async with self._db.acquire() as conn:
            with stat_db_errors():
                await conn.execute(
                    lobby_member.insert().values(
                        lobby_id=lobby_id,
                        user_id=str(user.id),
                        language=user.language,
                        join_time=_from_timestamp(user.join_time),
                    )
                )
                await conn.execute(
                    delete(friendship).where(
                        friendship.c.user_id == str(user.id)
                    )
                )
                if user.friends:
                    await conn.execute(
                        friendship.insert(),
                        [
                            {"user_id": str(user.id), "friend_id": str(friend_id)}
                            for friend_id in user.friends
                        ]
                    )

    async def remove_user(self, lobby_id: str, user_id) -> bool:
        async with self._db.acquire() as conn:
            with stat_db_errors():
                result = await conn.execute(
                    delete(lobby_member).where(and_(
                        lobby_member.c.lobby_id == lobby_id,
                        lobby_member.c.user_id == str(user_id)
                    ))
                )
        return result.rowcount > 0

    async def fetch_waiting(self, lobby_id: str) -> list[User]:
        async with self._db.acquire() as conn:
            with stat_db_errors():
                result = await conn.execute(
                    select(
                        lobby_member.c.user_id,
                        lobby_member.c.language,
                        lobby_member.c.join_time,
                    )
                    .where(lobby_member.c.lobby_id == lobby_id)
                    .order_by(lobby_member.c.id)
                )
                rows = result.fetchall()
                if not rows:
                    return []

                result = await conn.execute(
                    select(friendship.c.user_id, friendship.c.friend_id)
                    .where(friendship.c.user_id.in_(
                        [row.user_id for row in rows]
                    ))
                )
                friends = defaultdict(set)
                for row in result:
                    friends[row.user_id].add(row.friend_id)

        users = []
        for row in rows:
            user = User(row.user_id, row.language, friends[row.user_id])
            # A NULL join time is passed through as is, the matchmaker skips
            # and reports such users.
            user.join_time = _to_timestamp(row.join_time)
            users.append(user)
        return users

    async def commit_room(
        self,
        room_id: str,
        lobby_id: str,
        members: Sequence[User]
    ) -> None:
        user_ids = [str(user.id) for user in members]

        async with self._db.acquire() as conn:
            with stat_db_errors():
                result = await conn.execute(
                    delete(lobby_member).where(and_(
                        lobby_member.c.lobby_id == lobby_id,
                        lobby_member.c.user_id.in_(user_ids)
                    ))
                )
                if result.rowcount != len(user_ids):
                    # Leaving the context manager with an exception rolls
                    # back the delete
                    raise CommitError(
                        lobby_id,
                        room_id,
                        f"Only {result.rowcount} of {len(user_ids)} users "
                        f"were still waiting in {lobby_id}"
                    )

                await conn.execute(
                    room.insert().values(
                        id=room_id,
                        lobby_id=lobby_id,
                        create_time=datetime.now(timezone.utc).replace(tzinfo=None),
                    )
                )
                await conn.execute(
                    room_member.insert(),
                    [
                        {
                            "room_id": room_id,
                            "user_id": str(user.id),
                            "happiness": user.happiness,
                        }
                        for user in members
                    ]
                )

        self._logger.debug(
            "Committed room %s with %d users from %s",
            room_id, len(members), lobby_id
        )

    async def get_room(self, room_id: str) -> Optional[list[str]]:
        async with self._db.acquire() as conn:
            with stat_db_errors():
                result = await conn.execute(
                    select(room.c.id).where(room.c.id == room_id)
                )
                if result.first() is None:
                    return None

                result = await conn.execute(
                    select(room_member.c.user_id)
                    .where(room_member.c.room_id == room_id)
                    .order_by(room_member.c.user_id)
                )
                return [row.user_id for row in result]
