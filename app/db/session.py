# app/db/session.py
"""
Async engine and session management.

One AsyncSession is handed out per request through `get_session`.
"""

import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings

logger = logging.getLogger(__name__)


class Database:
    """Owns the async engine and the session factory bound to it."""

    def __init__(self, url: str):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, **self._engine_options(url))
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @staticmethod
    def _engine_options(url: str) -> dict:
        options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
        # SQLite uses a single-connection pool that rejects sizing arguments.
        if not url.startswith("sqlite"):
            options.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_recycle=settings.DB_POOL_RECYCLE,
                pool_timeout=settings.DB_POOL_TIMEOUT,
            )
        return options

    async def connect(self, create_tables: Optional[bool] = None) -> None:
        """Verify connectivity and optionally create missing tables."""
        if create_tables is None:
            create_tables = settings.DB_CREATE_TABLES

        async with self.engine.begin() as conn:
            if create_tables:
                await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database connection established", extra={"create_tables": create_tables})

    async def disconnect(self) -> None:
        await self.engine.dispose()
        logger.info("Database connection closed")


db = Database(settings.DATABASE_URL)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a request-scoped session."""
    async with db.session_factory() as session:
        yield session
