"""Database Session Manager — async engine, per-request sessions, readiness ping.

Invariants:
    - Every session rolls back on a SQLAlchemy exception and re-raises it as DatabaseError
    - Engine options come from Settings; pool sizing applies only to pooled drivers
    - The engine is disposed exactly once, on application shutdown

Design Decisions:
    - Singleton db_manager built on startup from Settings: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: ORM rows stay readable after the store commits
    - aiosqlite (tests, local play) runs on SQLAlchemy's default static pool
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from harbor_quest.config import Settings
from harbor_quest.core.errors import DatabaseError

logger = logging.getLogger(__name__)


def engine_options(settings: Settings) -> dict[str, Any]:
    """create_async_engine kwargs for the configured database backend."""
    options: dict[str, Any] = {"echo": settings.database_echo}
    if make_url(settings.database_url).get_backend_name() == "sqlite":
        return options
    options.update(
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle_seconds,
    )
    return options


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that map driver errors to DatabaseError."""

    def __init__(self, database_url: str, **options: Any):
        self.engine = create_async_engine(database_url, **options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseSessionManager":
        return cls(settings.database_url, **engine_options(settings))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "query") from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a fresh session; False on any database error."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e.message}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(settings: Settings) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager.from_settings(settings)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
