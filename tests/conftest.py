"""
This module is the 'top level' configuration for all the unit tests.

'Real world' fixtures are put here.
If a test suite needs specific mocked versions of dependencies,
these should be put in the ``conftest.py'' relative to it.
"""

import logging
from unittest import mock

import hypothesis
import pytest

from lobby.config import TRACE, config
from lobby.matchmaker import MatchmakingPass, MatchmakingSettings, User
from lobby.store import InMemoryWaitingPool
from tests.utils import NOW, FrozenClock

logging.getLogger().setLevel(TRACE)
hypothesis.settings.register_profile(
    "nightly",
    max_examples=10_000,
    deadline=None,
    print_blob=True
)


def pytest_addoption(parser):
    parser.addoption(
        "--mysql_host",
        action="store",
        default=config.DB_SERVER,
        help="mysql host to use for test database",
    )
    parser.addoption(
        "--mysql_username",
        action="store",
        default=config.DB_LOGIN,
        help="mysql username to use for test database",
    )
    parser.addoption(
        "--mysql_password",
        action="store",
        default=config.DB_PASSWORD,
        help="mysql password to use for test database",
    )
    parser.addoption(
        "--mysql_database",
        action="store",
        default="lobby_test",
        help="mysql database to use for tests",
    )
    parser.addoption(
        "--mysql_port",
        action="store",
        default=int(config.DB_PORT),
        help="mysql port to use for tests",
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "mysql: marks tests as requiring a running MySQL server"
    )


def make_user(
    user_id="user",
    language="en",
    friends=(),
    waited=0,
    now=NOW,
):
    return User(
        user_id,
        language=language,
        friends=friends,
        join_time=now - waited,
    )


@pytest.fixture(scope="session")
def user_factory():
    return make_user


@pytest.fixture
def settings():
    return MatchmakingSettings()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def waiting_pool():
    return InMemoryWaitingPool()


@pytest.fixture
def room_ids():
    """Deterministic room id generator"""
    counter = 0

    def make_room_id():
        nonlocal counter
        counter += 1
        return f"room-{counter}"

    return mock.Mock(side_effect=make_room_id)


@pytest.fixture
def matchmaking_pass(waiting_pool, settings, clock, room_ids):
    return MatchmakingPass(
        waiting_pool,
        settings,
        make_room_id=room_ids,
        clock=clock,
    )
