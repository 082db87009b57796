"""
Lobby room matchmaker.

# Overview
Users who want to join a room wait in a lobby. Every lobby is matched on a
timer: on each pass the matchmaker looks at everybody waiting, works out how
happy each of them would be in a room together, and forms a room from the
happiest users if the room as a whole is happy enough. Everybody else keeps
waiting for the next pass.

## Happiness
A user's happiness in a room is made up of four parts, each with its own
weight:

- Friends: how many of the other members are on the user's friend list
- Full room: how close the room is to being full
- Language: how many of the other members speak the same language
- Boredom: how long the user has been waiting

The boredom part grows without limit, so users who have waited long enough
will eventually be put into a room even if it is a poor fit.

## Storage
The waiting pool lives in a store, either in memory or in a MySQL database.
Committing a formed room is an atomic claim on its members: either the room is
stored and all of them leave the waiting pool, or nothing changes.

# Legal
Distributed under GPLv3.
"""

from .config import config
from .configuration_service import ConfigurationService
from .core import Service
from .db import LobbyDatabase
from .exceptions import (
    CommitError,
    ConfigurationError,
    FetchError,
    MatchmakingError
)
from .matchmaker_service import MatchmakerService
from .store import DatabaseWaitingPool, InMemoryWaitingPool, WaitingPoolStore

__license__ = "GPLv3"

__all__ = (
    "CommitError",
    "ConfigurationError",
    "ConfigurationService",
    "DatabaseWaitingPool",
    "FetchError",
    "InMemoryWaitingPool",
    "LobbyDatabase",
    "MatchmakerService",
    "MatchmakingError",
    "Service",
    "WaitingPoolStore",
    "config",
)
