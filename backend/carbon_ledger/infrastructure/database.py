"""Database Session Manager — async engine, sessions, schema bootstrap and readiness.

Invariants:
    - A session rolls back on any SQLAlchemy error and surfaces DatabaseError
      (core/errors.py), never a driver exception
    - Pool sizing only applied to server databases (SQLite keeps its own pool)
    - create_schema() is idempotent (CREATE IF NOT EXISTS semantics)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: snapshot rows are read back after the service commits
    - Error translation table ordered most specific first
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from carbon_ledger.core.errors import DatabaseError
from carbon_ledger.db.base import Base
import carbon_ledger.models  # noqa: F401  (populates Base.metadata)

logger = logging.getLogger(__name__)

# (exception type, client-safe message, failed step)
_ERROR_TRANSLATIONS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def translate_error(error: SQLAlchemyError) -> DatabaseError:
    for error_type, message, step in _ERROR_TRANSLATIONS:
        if isinstance(error, error_type):
            return DatabaseError(message, step)
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out ledger sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        options: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session that rolls back and raises DatabaseError on SQLAlchemy failures."""
        async with self._session_factory() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"{type(e).__name__} in ledger session: {e}")
                raise translate_error(e) from e

    async def create_schema(self) -> None:
        """Create missing ledger tables (local runs; deployments use alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """True when a trivial query round-trips (readiness probe)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"DB health check failed: {e}")
            return False
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
