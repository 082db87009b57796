import pytest
from sqlalchemy.exc import DBAPIError

from lobby.db import LobbyDatabase
from lobby.db.models import metadata
from lobby.store import DatabaseWaitingPool


@pytest.fixture
async def database(request):
    def opt(val):
        return request.config.getoption(val)

    host, user, pw, name, port = (
        opt("--mysql_host"),
        opt("--mysql_username"),
        opt("--mysql_password"),
        opt("--mysql_database"),
        opt("--mysql_port")
    )
    db = LobbyDatabase(
        host=host,
        user=user,
        password=pw or "",
        port=int(port),
        db=name
    )
    try:
        async with db.acquire() as conn:
            await conn.run_sync(metadata.drop_all)
            await conn.run_sync(metadata.create_all)
    except (DBAPIError, OSError) as e:
        await db.close()
        pytest.skip(f"MySQL is not available: {e}")

    yield db

    await db.close()


@pytest.fixture
def db_pool(database):
    return DatabaseWaitingPool(database)
