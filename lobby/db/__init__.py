"""
Database interaction
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine

from lobby.metrics import db_exceptions

logger = logging.getLogger(__name__)


@contextmanager
def stat_db_errors():
    """
    Collect metrics on errors thrown
    """
    try:
        yield
    except DBAPIError as e:
        db_exceptions.labels(e.__class__.__name__, e.code).inc()
        raise e


class LobbyDatabase:
    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        user: str = "root",
        password: str = "",
        db: str = "lobby_test",
        **kwargs
    ):
        self.engine = create_async_engine(
            f"mysql+aiomysql://{user}:{password}@{host}:{port}/{db}",
            **kwargs
        )

    def acquire(self):
        """
        Returns a context manager for a connection with an open transaction.
        The transaction is committed when the block exits normally and rolled
        back if it raises.
        """
        return self.engine.begin()

    async def close(self):
        await self.engine.dispose()
