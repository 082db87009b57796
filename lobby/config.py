"""
Server config variables
"""

import asyncio
import logging
import os
from typing import Callable

import yaml

from .decorators import with_logger

# Logging setup
TRACE = 5
logging.addLevelName(TRACE, "TRACE")
logging.getLogger("aiomysql").setLevel(logging.INFO)

# Keys that feed into `MatchmakingSettings`
TUNING_KEYS = (
    "WANT_FULL_ROOM",
    "WANT_NO_WAIT",
    "WANT_SAME_LANGUAGE",
    "WANT_FRIENDS",
    "MAX_WAIT_SECONDS",
    "START_THRESHOLD",
    "FULL_ROOM",
)


@with_logger
class ConfigurationStore:
    def __init__(self):
        """
        Change default values here.
        """
        self.CONFIGURATION_REFRESH_TIME = 300
        self.LOG_LEVEL = "DEBUG"
        # Whether or not to use uvloop as a drop-in replacement for asyncio's
        # default event loop
        self.USE_UVLOOP = True

        self.METRICS_PORT = 8011
        self.ENABLE_METRICS = False

        self.DB_SERVER = "127.0.0.1"
        self.DB_PORT = 3306
        self.DB_LOGIN = "root"
        self.DB_PASSWORD = "banana"
        self.DB_NAME = "lobby"

        # Weights for the competing goals of the happiness score. Equal
        # weights give every goal the same priority.
        self.WANT_FULL_ROOM = 100
        self.WANT_NO_WAIT = 100
        self.WANT_SAME_LANGUAGE = 100
        self.WANT_FRIENDS = 100

        # Waiting this long earns the full `WANT_NO_WAIT` bonus. Longer waits
        # keep earning more.
        self.MAX_WAIT_SECONDS = 10
        # Average happiness a candidate room must exceed to be formed
        self.START_THRESHOLD = 200
        # Maximum number of users in a room
        self.FULL_ROOM = 10

        # Seconds between two matchmaking passes of the same lobby
        self.PASS_INTERVAL = 1
        # Lobbies that are matched as soon as the service starts
        self.LOBBIES = ["default"]

        self._defaults = {
            key: value for key, value in vars(self).items() if key.isupper()
        }

        self._callbacks: dict[str, Callable] = {}
        self.refresh()

    def refresh(self) -> None:
        new_values = self._defaults.copy()

        config_file = os.getenv("CONFIGURATION_FILE")
        if config_file is not None:
            try:
                with open(config_file) as f:
                    new_values.update(yaml.safe_load(f))
            except FileNotFoundError:
                self._logger.warning(
                    "No configuration file found at %s",
                    config_file
                )
            except TypeError:
                self._logger.info(
                    "Configuration file at %s appears to be empty",
                    config_file
                )

        triggered_callback_keys = tuple(
            key
            for key in new_values
            if key in self._callbacks
            and hasattr(self, key)
            and getattr(self, key) != new_values[key]
        )

        for key, new_value in new_values.items():
            old_value = getattr(self, key, None)
            if new_value != old_value:
                self._logger.info(
                    "New value for %s: %r -> %r", key, old_value, new_value
                )
            setattr(self, key, new_value)

        for key in triggered_callback_keys:
            self._dispatch_callback(key)

    def register_callback(self, key: str, callback: Callable) -> None:
        self._callbacks[key.upper()] = callback

    def _dispatch_callback(self, key: str) -> None:
        callback = self._callbacks[key]
        if asyncio.iscoroutinefunction(callback):
            asyncio.create_task(callback())
        else:
            callback()


def set_log_level():
    logger = logging.getLogger()
    logger.setLevel(config.LOG_LEVEL)


config = ConfigurationStore()
config.register_callback("LOG_LEVEL", set_log_level)
