"""
The happiness score.

A user's happiness inside a candidate room is the sum of four independent
factors, each scaled by its weight from `MatchmakingSettings`:

- friends: other members of the room the user has listed as friends
- full room: how close the room is to being full
- language: other members speaking the same language
- boredom: how long the user has been waiting

The friends and language factors are normalised by the room capacity so that
a full room of friends speaking the same language scores close to the
weight. The boredom factor is normalised by `max_wait_seconds` but is not
capped, so a user that waits long enough will eventually accept any room.

All functions here are pure apart from `calc_happiness`, which caches the
result on `User.happiness`.
"""

import math
import statistics
from typing import Optional, Sequence

from .settings import MatchmakingSettings
from .user import User

Room = Sequence[User]


def _other_members(user: User, room: Room) -> dict:
    """Distinct members of the room other than `user`, keyed by id."""
    return {other.id: other for other in room if other.id != user.id}


def happiness_from_friends(
    user: User,
    room: Room,
    settings: MatchmakingSettings
) -> float:
    if not user.friends:
        return 0.0

    friends = sum(
        1 for other_id in _other_members(user, room)
        if other_id in user.friends
    )
    return friends * settings.want_friends / settings.full_room


def happiness_from_full_room(
    user: User,
    room: Room,
    settings: MatchmakingSettings
) -> float:
    room_size = min(len(room), settings.full_room)
    return room_size * settings.want_full_room / settings.full_room


def happiness_from_language(
    user: User,
    room: Room,
    settings: MatchmakingSettings
) -> float:
    same_language = sum(
        1 for other in _other_members(user, room).values()
        if other.language == user.language
    )
    return same_language * settings.want_same_language / settings.full_room


def happiness_from_boredom(
    user: User,
    settings: MatchmakingSettings,
    now: Optional[float] = None
) -> float:
    # Whole seconds, rounding half up
    seconds_waited = math.floor(user.seconds_waited(now) + 0.5)
    return seconds_waited * settings.want_no_wait / settings.max_wait_seconds


def calc_happiness(
    user: User,
    room: Room,
    settings: MatchmakingSettings,
    now: Optional[float] = None
) -> float:
    """
    Compute how happy `user` would be in `room`. The room may or may not
    contain the user itself, the user is never counted as their own friend or
    language partner.
    """
    happiness = (
        happiness_from_friends(user, room, settings)
        + happiness_from_full_room(user, room, settings)
        + happiness_from_language(user, room, settings)
        + happiness_from_boredom(user, settings, now)
    )
    user.happiness = happiness
    return happiness


def room_happiness(
    room: Room,
    settings: MatchmakingSettings,
    now: Optional[float] = None
) -> list[float]:
    """
    Score every member against this exact room composition.
    """
    return [calc_happiness(user, room, settings, now) for user in room]


def average_happiness(
    room: Room,
    settings: MatchmakingSettings,
    now: Optional[float] = None
) -> float:
    """
    Arithmetic mean of the members' happiness in `room`.

    # Errors
    Raises `statistics.StatisticsError` if the room is empty.
    """
    return statistics.mean(room_happiness(room, settings, now))
