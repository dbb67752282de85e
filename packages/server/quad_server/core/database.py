"""
Database engine and per-request sessions.

Production runs on PostgreSQL (asyncpg); local runs may point
QUAD_DATABASE_URL at ``sqlite+aiosqlite:///quad.db``.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from quad_server.core.config import get_settings

settings = get_settings()


def _create_engine(url: str) -> AsyncEngine:
    if make_url(url).get_backend_name() != "sqlite":
        return create_async_engine(url, echo=settings.debug, pool_pre_ping=True)

    sqlite_engine = create_async_engine(url, echo=settings.debug)

    # SQLite leaves foreign keys off unless asked per connection.
    @event.listens_for(sqlite_engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = _create_engine(settings.database_url)

async_session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db():
    """Create missing tables. Used when QUAD_AUTO_CREATE_TABLES is set and by the scripts."""
    import quad_server.models  # noqa: F401  (registers every table on SQLModel.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


@asynccontextmanager
async def get_session_context():
    """One unit of work: commit on success, roll back on any exception."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: each request is a single transaction.

    The official-status approval relies on this; its insert and delete
    commit together when the handler returns.
    """
    async with get_session_context() as session:
        yield session
