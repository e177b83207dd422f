"""Database Session Manager — async engine and sessions for the SQL document backend.

Invariants:
    - A session that raises is rolled back before the error leaves the context
    - SQLAlchemy errors surface as StoreError (first match in _SQL_ERRORS);
      DirectoryError subclasses pass through untouched after rollback
    - SQLite URLs get no pool sizing (aiosqlite uses a static/null pool)

Design Decisions:
    - Built once in the FastAPI lifespan and handed to SqlDocumentStore by reference
      (no module-level singleton)
    - from_engine(): tests bring their own in-memory engine
    - expire_on_commit=False: rows stay readable after commit without lazy loads
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from sitedir.core.errors import DirectoryError, StoreError

logger = logging.getLogger(__name__)

# (exception type, StoreError message, operation); most specific first
_SQL_ERRORS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Database operation failed", "unknown"),
)


def to_store_error(error: SQLAlchemyError) -> StoreError:
    for error_type, message, operation in _SQL_ERRORS:
        if isinstance(error, error_type):
            return StoreError(message, operation)
    return StoreError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out rollback-guarded sessions."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        if database_url.startswith("sqlite"):
            engine = create_async_engine(database_url)
        else:
            engine = create_async_engine(
                database_url,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
        self._bind(engine)

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        manager = cls.__new__(cls)
        manager._bind(engine)
        return manager

    def _bind(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except DirectoryError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            store_error = to_store_error(e)
            logger.error(
                f"SQL store {store_error.operation} failed: {e}",
                extra={"backend": "sql", "error_code": store_error.code},
            )
            raise store_error from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 round-trip, for the readiness probe."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"SQL health check failed: {e}", extra={"backend": "sql"})
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()
