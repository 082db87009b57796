import pytest
from sqlalchemy import update

from lobby.db.models import lobby_member
from lobby.exceptions import CommitError
from lobby.matchmaker import MatchmakingPass, MatchmakingSettings, RoomFormed
from tests.utils import NOW, FrozenClock

pytestmark = pytest.mark.mysql


@pytest.fixture
def friends(user_factory):
    ids = [f"user{i}" for i in range(10)]
    return [user_factory(user_id, friends=ids) for user_id in ids]


async def fill(db_pool, users, lobby_id="default"):
    for user in users:
        await db_pool.add_user(lobby_id, user)


async def test_fetch_waiting(db_pool, user_factory):
    await fill(db_pool, [
        user_factory("alice", language="en", friends=["bob"], waited=30),
        user_factory("bob", language="de"),
    ])
    await fill(db_pool, [user_factory("carol")], lobby_id="other")

    users = await db_pool.fetch_waiting("default")

    assert [user.id for user in users] == ["alice", "bob"]
    alice, bob = users
    assert alice.language == "en"
    assert alice.friends == frozenset({"bob"})
    assert alice.join_time == NOW - 30
    assert bob.friends == frozenset()


async def test_fetch_waiting_empty(db_pool):
    assert await db_pool.fetch_waiting("default") == []


async def test_fetch_waiting_null_join_time(db_pool, database, user_factory):
    await fill(db_pool, [user_factory("alice")])
    async with database.acquire() as conn:
        await conn.execute(
            update(lobby_member)
            .where(lobby_member.c.user_id == "alice")
            .values(join_time=None)
        )

    users = await db_pool.fetch_waiting("default")

    assert users[0].join_time is None
    assert not users[0].has_valid_join_time()


async def test_add_user_replaces_friends(db_pool, user_factory):
    await fill(db_pool, [user_factory("alice", friends=["bob", "carol"])])
    await db_pool.remove_user("default", "alice")
    await fill(db_pool, [user_factory("alice", friends=["dave"])])

    users = await db_pool.fetch_waiting("default")

    assert users[0].friends == frozenset({"dave"})


async def test_remove_user(db_pool, user_factory):
    await fill(db_pool, [user_factory("alice"), user_factory("bob")])

    assert await db_pool.remove_user("default", "alice") is True
    assert await db_pool.remove_user("default", "alice") is False
    assert [u.id for u in await db_pool.fetch_waiting("default")] == ["bob"]


async def test_commit_room(db_pool, friends):
    await fill(db_pool, friends)

    await db_pool.commit_room("room-1", "default", friends[:4])

    assert await db_pool.get_room("room-1") == ["user0", "user1", "user2", "user3"]
    waiting = await db_pool.fetch_waiting("default")
    assert [user.id for user in waiting] == [f"user{i}" for i in range(4, 10)]


async def test_commit_room_already_claimed(db_pool, friends):
    await fill(db_pool, friends)
    await db_pool.remove_user("default", "user3")

    with pytest.raises(CommitError):
        await db_pool.commit_room("room-1", "default", friends[:4])

    assert await db_pool.get_room("room-1") is None
    assert len(await db_pool.fetch_waiting("default")) == 9


async def test_commit_room_wrong_lobby(db_pool, friends):
    await fill(db_pool, friends)

    with pytest.raises(CommitError):
        await db_pool.commit_room("room-1", "other", friends)

    assert len(await db_pool.fetch_waiting("default")) == 10


async def test_get_room_unknown(db_pool):
    assert await db_pool.get_room("nope") is None


async def test_matchmaking_pass(db_pool, friends, room_ids):
    await fill(db_pool, friends)
    mm_pass = MatchmakingPass(
        db_pool,
        MatchmakingSettings(),
        make_room_id=room_ids,
        clock=FrozenClock(),
    )

    outcome = await mm_pass.run_pass("default")

    assert isinstance(outcome, RoomFormed)
    assert outcome.average_happiness == 280
    assert await db_pool.get_room("room-1") == sorted(
        user.id for user in friends
    )
    assert await db_pool.fetch_waiting("default") == []
