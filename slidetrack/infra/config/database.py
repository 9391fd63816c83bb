"""
Database configuration and session management.
"""

from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from slidetrack.infra.config.settings import get_settings
from slidetrack.infra.config.logging_config import get_logger

log = get_logger("db")

SQLITE_BUSY_TIMEOUT = 30


def configure_sqlite(async_engine: AsyncEngine) -> None:
    """
    Let SQLAlchemy drive transactions on aiosqlite so SAVEPOINTs work, and
    turn on foreign key enforcement.

    Transactions take the write lock up front (BEGIN IMMEDIATE). Concurrent
    writers then wait on the busy timeout instead of failing the upgrade
    from a read lock.
    """
    sync_engine = async_engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # aiosqlite connections are handed between tasks
        return {"connect_args": {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}}
    return {"pool_pre_ping": True, "pool_recycle": 300}


settings = get_settings()
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug_sql,
    **_engine_options(settings.database_url),
)
if engine.dialect.name == "sqlite":
    configure_sqlite(engine)

async_session_factory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


def get_engine() -> AsyncEngine:
    """Get the database engine."""
    return engine


async def init_models(bind: AsyncEngine = None) -> None:
    """Create all tables for the tracking schema."""
    from slidetrack.data.models import Base

    target = bind or engine
    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    log.info("database.initialized", url=target.url.render_as_string(hide_password=True))


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database session.

    Yields an async database session and ensures proper cleanup.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
