import pytest
import pytest_asyncio
from sqlalchemy import text

from marine_ops.db import Database, validate_database_startup
from marine_ops.models import Base


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path}/startup.db")
    await database.initialize(max_retries=1)
    yield database
    await database.close()


async def test_startup_fails_without_schema(database):
    health = await database.health_check()

    assert health["status"] == "healthy"
    assert health["checks"]["tables"]["count"] == 0
    assert await validate_database_startup(database) is False


async def test_startup_passes_once_schema_exists(database):
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    assert await validate_database_startup(database) is True
    assert "vessels" in await database.table_names()


async def test_session_rolls_back_on_error(database):
    async with database.engine.begin() as conn:
        await conn.execute(text("CREATE TABLE notes (body TEXT)"))

    with pytest.raises(RuntimeError):
        async with database.get_session() as session:
            await session.execute(text("INSERT INTO notes VALUES ('draft')"))
            raise RuntimeError("abort")

    async with database.get_session() as session:
        count = (await session.execute(text("SELECT COUNT(*) FROM notes"))).scalar()
    assert count == 0
