from unittest import mock

import pytest

from lobby.config import config
from lobby.matchmaker import MatchmakingSettings, NoAction, RoomFormed
from lobby.matchmaker_service import MatchmakerService


@pytest.fixture(autouse=True)
def isolated_callbacks(monkeypatch):
    monkeypatch.setattr(config, "_callbacks", {})


@pytest.fixture
def on_room_formed():
    return mock.Mock()


@pytest.fixture
async def matchmaker_service(waiting_pool, settings, on_room_formed, room_ids):
    service = MatchmakerService(
        waiting_pool,
        settings,
        on_room_formed=on_room_formed,
        make_room_id=room_ids,
    )
    await service.initialize(lobbies=["default", "other"])

    yield service

    await service.shutdown()


@pytest.fixture
def friends(user_factory):
    ids = [f"user{i}" for i in range(10)]
    return [user_factory(user_id, friends=ids) for user_id in ids]


async def test_initialize_lobbies(matchmaker_service):
    assert set(matchmaker_service.queues) == {"default", "other"}


async def test_initialize_lobbies_from_config(waiting_pool, settings, mocker):
    mocker.patch.object(config, "LOBBIES", ["lobby1", "lobby2", "lobby3"])
    service = MatchmakerService(waiting_pool, settings)

    await service.initialize()

    assert set(service.queues) == {"lobby1", "lobby2", "lobby3"}
    await service.shutdown()


async def test_settings_default_to_config(waiting_pool, mocker):
    mocker.patch.object(config, "FULL_ROOM", 4)

    service = MatchmakerService(waiting_pool)

    assert service.settings.full_room == 4


async def test_add_lobby_is_idempotent(matchmaker_service):
    queue = matchmaker_service.add_lobby("default")

    assert matchmaker_service.add_lobby("default") is queue
    assert len(matchmaker_service.queues) == 2


async def test_lobbies_share_the_pass(matchmaker_service):
    queue = matchmaker_service.add_lobby("new")

    assert queue.matchmaking_pass is matchmaker_service.matchmaking_pass
    assert queue.on_room_formed is matchmaker_service.on_room_formed


async def test_remove_lobby(matchmaker_service):
    queue = matchmaker_service.queues["other"]

    matchmaker_service.remove_lobby("other")
    matchmaker_service.remove_lobby("never_existed")

    assert "other" not in matchmaker_service.queues
    assert queue._is_running is False


async def test_run_pass(
    matchmaker_service,
    waiting_pool,
    friends,
    on_room_formed
):
    for user in friends:
        waiting_pool.add_user("default", user)

    outcome = await matchmaker_service.run_pass("default")

    assert isinstance(outcome, RoomFormed)
    assert outcome.room_id == "room-1"
    on_room_formed.assert_called_once_with(outcome)
    assert waiting_pool.num_waiting("default") == 0


async def test_run_pass_other_lobby_untouched(
    matchmaker_service,
    waiting_pool,
    friends
):
    for user in friends:
        waiting_pool.add_user("default", user)

    outcome = await matchmaker_service.run_pass("other")

    assert outcome == NoAction("other", "empty pool")
    assert waiting_pool.num_waiting("default") == 10


async def test_run_pass_unknown_lobby(matchmaker_service):
    with pytest.raises(KeyError):
        await matchmaker_service.run_pass("nope")


async def test_reload_settings(matchmaker_service, mocker):
    mocker.patch.object(config, "FULL_ROOM", 5)
    mocker.patch.object(config, "START_THRESHOLD", 150)

    matchmaker_service.reload_settings()

    assert matchmaker_service.settings.full_room == 5
    assert matchmaker_service.settings.start_threshold == 150
    assert matchmaker_service.matchmaking_pass.settings.full_room == 5


async def test_reload_settings_invalid(matchmaker_service, mocker, caplog):
    old_settings = matchmaker_service.settings
    mocker.patch.object(config, "FULL_ROOM", 0)

    matchmaker_service.reload_settings()

    assert matchmaker_service.settings is old_settings
    assert "Ignoring new matchmaking settings" in caplog.text


async def test_initialize_registers_callbacks(matchmaker_service):
    for key in (
        "WANT_FULL_ROOM",
        "WANT_NO_WAIT",
        "WANT_SAME_LANGUAGE",
        "WANT_FRIENDS",
        "MAX_WAIT_SECONDS",
        "START_THRESHOLD",
        "FULL_ROOM",
    ):
        assert config._callbacks[key] == matchmaker_service.reload_settings


async def test_to_dict(matchmaker_service):
    status = matchmaker_service.to_dict()

    assert [lobby["lobby_id"] for lobby in status["lobbies"]] == [
        "default",
        "other",
    ]


async def test_shutdown(waiting_pool, settings):
    service = MatchmakerService(waiting_pool, settings)
    await service.initialize(lobbies=["default"])
    queue = service.queues["default"]

    await service.shutdown()

    assert service.queues == {}
    assert queue._is_running is False


def test_explicit_settings(waiting_pool):
    settings = MatchmakingSettings(full_room=3)
    service = MatchmakerService(waiting_pool, settings)

    assert service.settings is settings
