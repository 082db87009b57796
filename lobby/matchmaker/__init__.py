"""
The matchmaker system

Used for grouping users waiting in a lobby into rooms. Every lobby is matched
on its own timer, see `LobbyQueue`. A single `MatchmakingPass` ranks the
waiting users by their happiness score and forms a room from the happiest
ones if the room as a whole is happy enough.
"""
from .happiness import (
    average_happiness,
    calc_happiness,
    happiness_from_boredom,
    happiness_from_friends,
    happiness_from_full_room,
    happiness_from_language,
    room_happiness
)
from .lobby_queue import LobbyQueue, RoomFormedCallback
from .matchmaking_pass import (
    MatchmakingPass,
    NoAction,
    PassOutcome,
    RoomFormed,
    rank_users,
    select_room
)
from .pass_timer import PassTimer
from .room_id import generate_numeric_room_id, generate_room_id
from .settings import MatchmakingSettings
from .user import User

__all__ = (
    "LobbyQueue",
    "MatchmakingPass",
    "MatchmakingSettings",
    "NoAction",
    "PassOutcome",
    "PassTimer",
    "RoomFormed",
    "RoomFormedCallback",
    "User",
    "average_happiness",
    "calc_happiness",
    "generate_numeric_room_id",
    "generate_room_id",
    "happiness_from_boredom",
    "happiness_from_friends",
    "happiness_from_full_room",
    "happiness_from_language",
    "rank_users",
    "room_happiness",
    "select_room",
)
