"""
Manages the lobbies that are being matched
"""

from typing import Callable, Iterable, Optional

from .config import TUNING_KEYS, config
from .core import Service
from .decorators import with_logger
from .exceptions import ConfigurationError
from .matchmaker import (
    LobbyQueue,
    MatchmakingPass,
    MatchmakingSettings,
    PassOutcome,
    RoomFormedCallback,
    generate_room_id
)
from .store import WaitingPoolStore


@with_logger
class MatchmakerService(Service):
    """
    Service responsible for running the matchmaker of every lobby. Owns one
    `LobbyQueue` per lobby, all sharing the same store and settings.
    """

    def __init__(
        self,
        store: WaitingPoolStore,
        settings: Optional[MatchmakingSettings] = None,
        on_room_formed: Optional[RoomFormedCallback] = None,
        make_room_id: Callable[[], str] = generate_room_id,
    ):
        self.store = store
        self.on_room_formed = on_room_formed
        self.matchmaking_pass = MatchmakingPass(
            store,
            settings or MatchmakingSettings.from_config(config),
            make_room_id=make_room_id,
        )
        self.queues: dict[str, LobbyQueue] = {}

    @property
    def settings(self) -> MatchmakingSettings:
        return self.matchmaking_pass.settings

    async def initialize(self, lobbies: Optional[Iterable[str]] = None) -> None:
        for key in TUNING_KEYS:
            config.register_callback(key, self.reload_settings)

        for lobby_id in (config.LOBBIES if lobbies is None else lobbies):
            self.add_lobby(lobby_id)

    def reload_settings(self) -> None:
        """
        Rebuild the settings after a config refresh. Bad values are rejected
        and the current settings stay in place.
        """
        try:
            settings = MatchmakingSettings.from_config(config)
        except ConfigurationError as e:
            self._logger.error(
                "Ignoring new matchmaking settings: %s", e
            )
            return

        if settings != self.matchmaking_pass.settings:
            self._logger.info("Matchmaking settings changed to %s", settings)
            self.matchmaking_pass.settings = settings

    def add_lobby(self, lobby_id: str) -> LobbyQueue:
        if lobby_id in self.queues:
            return self.queues[lobby_id]

        queue = LobbyQueue(
            lobby_id,
            matchmaking_pass=self.matchmaking_pass,
            on_room_formed=self.on_room_formed,
        )
        self.queues[lobby_id] = queue
        queue.initialize()
        self._logger.info("Started matchmaking for lobby %s", lobby_id)
        return queue

    def remove_lobby(self, lobby_id: str) -> None:
        queue = self.queues.pop(lobby_id, None)
        if queue is not None:
            queue.shutdown()

    async def run_pass(self, lobby_id: str) -> PassOutcome:
        """
        Trigger a pass for a lobby right now instead of waiting for its timer.
        Errors are propagated to the caller.
        """
        queue = self.queues.get(lobby_id)
        if queue is None:
            raise KeyError(f"Unknown lobby {lobby_id!r}")
        return await queue.run_pass()

    def to_dict(self):
        return {
            "lobbies": [queue.to_dict() for queue in self.queues.values()]
        }

    async def shutdown(self) -> None:
        for queue in self.queues.values():
            queue.shutdown()
        self.queues.clear()
