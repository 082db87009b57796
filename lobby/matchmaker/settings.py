"""
Tuning values for the happiness score
"""

import math
from dataclasses import dataclass
from typing import Any

from ..exceptions import ConfigurationError


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


@dataclass(frozen=True)
class MatchmakingSettings:
    """
    Weights, threshold and capacity used by a matchmaking pass.

    Instances are validated on creation so that a bad value fails when the
    settings are loaded instead of producing nonsense scores later on.
    """

    want_full_room: float = 100
    want_no_wait: float = 100
    want_same_language: float = 100
    want_friends: float = 100
    max_wait_seconds: float = 10
    start_threshold: float = 200
    full_room: int = 10

    def __post_init__(self):
        for key in (
            "want_full_room",
            "want_no_wait",
            "want_same_language",
            "want_friends",
        ):
            value = getattr(self, key)
            if not _is_number(value):
                raise ConfigurationError(key.upper(), value, "not a finite number")
            if value < 0:
                raise ConfigurationError(key.upper(), value, "must not be negative")

        if not _is_number(self.start_threshold):
            raise ConfigurationError(
                "START_THRESHOLD", self.start_threshold, "not a finite number"
            )

        if not _is_number(self.max_wait_seconds) or self.max_wait_seconds <= 0:
            raise ConfigurationError(
                "MAX_WAIT_SECONDS", self.max_wait_seconds, "must be positive"
            )

        if (
            not isinstance(self.full_room, int)
            or isinstance(self.full_room, bool)
            or self.full_room <= 0
        ):
            raise ConfigurationError(
                "FULL_ROOM", self.full_room, "must be a positive integer"
            )

    @classmethod
    def from_config(cls, config) -> "MatchmakingSettings":
        return cls(
            want_full_room=config.WANT_FULL_ROOM,
            want_no_wait=config.WANT_NO_WAIT,
            want_same_language=config.WANT_SAME_LANGUAGE,
            want_friends=config.WANT_FRIENDS,
            max_wait_seconds=config.MAX_WAIT_SECONDS,
            start_threshold=config.START_THRESHOLD,
            full_room=config.FULL_ROOM,
        )
