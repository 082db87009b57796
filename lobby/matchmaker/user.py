"""
User type definitions
"""

import math
import time
from typing import Hashable, Iterable, Optional


class User:
    """
    A user waiting in a lobby to be put into a room.

    `happiness` is only a cache of the last computed score for display
    purposes. It is overwritten on every scoring and never read back by the
    matchmaker.
    """

    def __init__(
        self,
        user_id: Hashable,
        language: Optional[str] = None,
        friends: Optional[Iterable[Hashable]] = None,
        join_time: Optional[float] = None,
    ) -> None:
        self.id = user_id
        self.language = language
        self.friends = frozenset(friends) if friends is not None else frozenset()
        self.join_time = time.time() if join_time is None else join_time
        self.happiness = 0.0

    def has_valid_join_time(self) -> bool:
        """
        Records coming from a store can carry anything in `join_time`. Only
        finite numbers can be used to compute a wait time.
        """
        join_time = self.join_time
        if isinstance(join_time, bool):
            return False
        if not isinstance(join_time, (int, float)):
            return False
        return math.isfinite(join_time)

    def seconds_waited(self, now: Optional[float] = None) -> float:
        if now is None:
            now = time.time()
        return max(now - self.join_time, 0.0)

    def __eq__(self, other):
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __str__(self) -> str:
        return f"User({self.id}, {self.language})"

    def __repr__(self) -> str:
        return (
            f"User(id={self.id!r}, language={self.language!r}, "
            f"friends={sorted(map(str, self.friends))}, "
            f"join_time={self.join_time!r}, happiness={self.happiness:.1f})"
        )
