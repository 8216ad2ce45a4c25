# backend/rentdesk/db/database.py
"""
Database handle shared by every request of the process.

One `Database` is built per application (see `rentdesk.main.create_app`)
and kept on `app.state`; its engine and pool are created on first use and
disposed on shutdown.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from rentdesk.core.config import Settings, settings as default_settings
from rentdesk.core.logging import logger


class Database:
    """Lazily-initialised async engine plus session factory"""

    def __init__(self, url: str, config: Optional[Settings] = None):
        self.url = url
        self.config = config or default_settings
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = self._create_engine()
            self._session_factory = async_sessionmaker(
                self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        url = self.url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

        if url.startswith("sqlite"):
            # SQLite serialises writers itself; pooled connections would share locks
            logger.info("Using SQLite database")
            return create_async_engine(url, poolclass=NullPool, echo=self.config.DB_ECHO)

        logger.info("Using PostgreSQL database")
        return create_async_engine(
            url,
            pool_size=self.config.DB_POOL_SIZE,
            max_overflow=self.config.DB_MAX_OVERFLOW,
            pool_timeout=self.config.DB_POOL_TIMEOUT,
            pool_pre_ping=True,
            echo=self.config.DB_ECHO,
        )

    @property
    def session_factory(self) -> async_sessionmaker:
        if self._session_factory is None:
            self._engine = self.engine
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scoped to a unit of work; rolled back if the block raises"""
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """Create tables (development and tests; production uses Alembic)"""
        from rentdesk.db.base import Base
        from rentdesk.db import models  # noqa: F401  registers the tables

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        from rentdesk.db.base import Base
        from rentdesk.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None


def get_database(request: Request) -> Database:
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Database session dependency"""
    async with get_database(request).session() as session:
        yield session
