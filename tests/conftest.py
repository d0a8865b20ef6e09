import os

# Configuration is read at import time
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-marine-ops-tests-0123456789")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ["RATE_LIMIT_ENABLED"] = "false"

from dataclasses import dataclass
from typing import AsyncIterator, Dict

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from marine_ops.accounts import UserManager
from marine_ops.api.deps import jwt_handler
from marine_ops.api.main import app
from marine_ops.db import get_db_session
from marine_ops.models import Base, Company

PASSWORD = "correct-horse-battery"


@dataclass(frozen=True)
class SeededUser:
    id: int
    email: str
    role: str

    @property
    def password(self) -> str:
        return PASSWORD


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db")

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    async def override_get_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def users(session_factory) -> Dict[str, SeededUser]:
    """One active user per role, keyed by role."""
    seeded = {}
    async with session_factory() as session:
        manager = UserManager(session, jwt_handler)
        for role in ("admin", "accountant", "hr", "storekeeper"):
            user = await manager.create_user(
                email=f"{role}@marineops.ae",
                password=PASSWORD,
                full_name=f"{role.title()} User",
                role=role,
            )
            seeded[role] = SeededUser(id=user.id, email=user.email, role=role)
    return seeded


def bearer(user: SeededUser) -> Dict[str, str]:
    token = jwt_handler.create_access_token({"sub": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(users) -> Dict[str, str]:
    return bearer(users["admin"])


@pytest.fixture
def accountant_headers(users) -> Dict[str, str]:
    return bearer(users["accountant"])


@pytest.fixture
def hr_headers(users) -> Dict[str, str]:
    return bearer(users["hr"])


@pytest.fixture
def storekeeper_headers(users) -> Dict[str, str]:
    return bearer(users["storekeeper"])


@pytest_asyncio.fixture
async def companies(db_session) -> Dict[str, Company]:
    """A parent company with one marine and one scrap subsidiary."""
    parent = Company(name="Gulf Holdings", type="parent")
    db_session.add(parent)
    await db_session.flush()
    marine = Company(name="Gulf Marine", type="marine", parent_id=parent.id)
    scrap = Company(name="Gulf Scrap", type="scrap", parent_id=parent.id)
    db_session.add_all([marine, scrap])
    await db_session.commit()
    return {"parent": parent, "marine": marine, "scrap": scrap}


@pytest.fixture
def auth_headers():
    """Build bearer headers for any seeded user."""
    return bearer
