"""
Shared fixtures: in-memory SQLite, an app client bound to it, a fake Redis
and factories for the rows most tests need.
"""

from __future__ import annotations

import os

os.environ.setdefault("QUAD_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("QUAD_SECRET_KEY", "test-secret-key-that-is-long-enough-for-hs256")
os.environ.setdefault("QUAD_LOG_FORMAT", "console")

from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event as sa_event
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, select

from quad_server.core.auth import create_jwt, hash_password
from quad_server.core.database import get_session
from quad_server.main import app
from quad_server.models import (
    Event,
    EventAdmin,
    OrgAdmin,
    OrgMember,
    Organization,
    Staff,
    User,
)

# One bcrypt hash for every factory user keeps the suite fast.
PASSWORD = "correct-horse-battery"
PASSWORD_HASH = hash_password(PASSWORD)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the JWT revocation list."""

    def __init__(self):
        self.store: dict[str, tuple[str, int]] = {}

    async def setex(self, key, ttl, value):
        self.store[key] = (value, ttl)

    async def exists(self, key):
        return 1 if key in self.store else 0


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN; emit it ourselves so SAVEPOINTs behave.
    @sa_event.listens_for(engine.sync_engine, "connect")
    def _disable_implicit_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @sa_event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    """A session for service-level tests that do not go through the client."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def fake_redis():
    redis = FakeRedis()
    with patch("quad_server.core.auth.get_redis", AsyncMock(return_value=redis)):
        yield redis


# ---------------------------------------------------------------------------
# Factories (each commits in its own short session)
# ---------------------------------------------------------------------------

@pytest.fixture
def db(session_factory):
    """Run ``fn(session)`` in a committed session and return its result."""
    async def _run(fn):
        async with session_factory() as session:
            result = await fn(session)
            await session.commit()
            return result
    return _run


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    async def _make(email: Optional[str] = None, *, staff: bool = False) -> User:
        counter["n"] += 1
        email = email or f"user{counter['n']}@campus.edu"

        async def _create(session):
            user = User(
                email=email,
                password_hash=PASSWORD_HASH,
                first_name="Test",
                last_name=f"User{counter['n']}",
            )
            session.add(user)
            await session.flush()
            if staff:
                session.add(Staff(user_id=user.id))
            return user

        return await db(_create)
    return _make


@pytest.fixture
def make_org(db):
    counter = {"n": 0}

    async def _make(
        admin: Optional[User] = None,
        *,
        name: Optional[str] = None,
        thumbnail: Optional[str] = "t.png",
        banner: Optional[str] = "b.png",
        privacy: str = "public",
        members: tuple = (),
    ) -> Organization:
        counter["n"] += 1

        async def _create(session):
            org = Organization(
                name=name or f"Org {counter['n']}",
                thumbnail=thumbnail,
                banner=banner,
                privacy=privacy,
            )
            session.add(org)
            await session.flush()
            if admin is not None:
                session.add(OrgAdmin(user_id=admin.id, org_id=org.id))
            for member in members:
                session.add(OrgMember(user_id=member.id, org_id=org.id))
            return org

        return await db(_create)
    return _make


@pytest.fixture
def make_event(db):
    async def _make(
        org: Organization,
        admin: Optional[User] = None,
        *,
        title: str = "Kickoff",
        thumbnail: Optional[str] = "t.png",
        banner: Optional[str] = "b.png",
        start: Optional[datetime] = None,
    ) -> Event:
        start = start or datetime.now(timezone.utc) + timedelta(days=3)

        async def _create(session):
            event = Event(
                organization_id=org.id,
                title=title,
                start_date=start,
                end_date=start + timedelta(hours=2),
                thumbnail=thumbnail,
                banner=banner,
            )
            session.add(event)
            await session.flush()
            if admin is not None:
                session.add(EventAdmin(user_id=admin.id, event_id=event.id))
            return event

        return await db(_create)
    return _make


@pytest.fixture
def count_rows(db):
    """Count rows of ``model`` matching keyword equality filters."""
    async def _count(model, **filters) -> int:
        async def _query(session):
            query = select(func.count()).select_from(model)
            for column, value in filters.items():
                query = query.where(getattr(model, column) == value)
            return await session.scalar(query)
        return await db(_query)
    return _count


def auth_headers(user: User) -> dict[str, str]:
    token, _, _ = create_jwt(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth_headers

