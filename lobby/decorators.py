"""
Logging helpers shared by the matchmaker classes
"""

import logging
import time
from functools import wraps
from typing import Callable, Optional

_logger = logging.getLogger(__name__)

# Scoring a full waiting pool should stay well inside one pass interval
DEFAULT_TIME_LIMIT = 0.2


def with_logger(cls):
    """
    Class decorator that gives every instance a `_logger` named after the
    class, so log lines show which component wrote them.

    # Examples
    >>> @with_logger
    ... class LobbyThing:
    ...    pass
    >>> LobbyThing._logger.name
    'LobbyThing'
    """
    cls._logger = logging.getLogger(cls.__qualname__)
    return cls


def timed(
    func: Optional[Callable] = None,
    *,
    logger: logging.Logger = _logger,
    limit: float = DEFAULT_TIME_LIMIT
):
    """
    Warn when a call to the decorated function takes `limit` seconds or more.
    Works both bare and with arguments.

    # Examples
    >>> from unittest import mock
    >>> log = mock.Mock()
    >>> @timed(logger=log, limit=0)
    ... def rank():
    ...    return []
    >>> rank()
    []
    >>> log.warning.assert_called_once()
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return f(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                if elapsed >= limit:
                    logger.warning(
                        "%s took %.3f s, limit is %.3f s",
                        f.__qualname__, elapsed, limit
                    )
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
