"""
Common exception definitions
"""

from typing import Any, Optional


class MatchmakingError(Exception):
    """
    Base class for all errors raised by the matchmaker.
    """


class ConfigurationError(MatchmakingError):
    """
    A weight, threshold or capacity setting has a value the happiness score
    can't work with.
    """
    def __init__(self, key: str, value: Any, reason: str, *args, **kwargs):
        super().__init__(
            f"Invalid value {value!r} for {key}: {reason}", *args, **kwargs
        )
        self.key = key
        self.value = value
        self.reason = reason


class FetchError(MatchmakingError):
    """
    The waiting pool of a lobby could not be read, or came back in a shape we
    don't understand. Nothing was changed.
    """
    def __init__(self, lobby_id: str, message: str, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.lobby_id = lobby_id
        self.message = message


class CommitError(MatchmakingError):
    """
    A formed room could not be persisted. The store guarantees that all
    members are still waiting.
    """
    def __init__(
        self,
        lobby_id: str,
        room_id: Optional[str],
        message: str,
        *args,
        **kwargs
    ):
        super().__init__(message, *args, **kwargs)
        self.lobby_id = lobby_id
        self.room_id = room_id
        self.message = message
