"""
Database connection management.

Provides ``DatabaseHandle``, the explicitly owned holder of the async
engine and session factory. The engine is created on first use under an
asyncio lock, so concurrent first callers share one pool, and is disposed
on shutdown. Nothing here is module-level state: callers construct a
handle and pass it to the stores that need it.

Dependencies: sqlalchemy, restaurant_rag.configs
System role: Database connection lifecycle management
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from restaurant_rag.configs.database import DatabaseSettings
from restaurant_rag.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class DatabaseHandle:
    """
    Lazily connected owner of one async engine.

    Usage:
        handle = DatabaseHandle.from_settings(settings.database)
        async with handle.session() as session:
            ...
        await handle.dispose()
    """

    def __init__(self, url: str | None, **engine_kwargs: Any) -> None:
        """
        Args:
            url: SQLAlchemy async URL
            **engine_kwargs: Passed through to ``create_async_engine``
        """
        self._url = url
        self._engine_kwargs = engine_kwargs
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "DatabaseHandle":
        """Build a pooled handle from database settings."""
        return cls(
            settings.async_database_url,
            echo=settings.echo_sql,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
            pool_pre_ping=True,
        )

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> async_sessionmaker[AsyncSession]:
        """
        Create the engine and session factory if absent.

        Returns:
            async_sessionmaker: Session factory bound to the engine

        Raises:
            ConfigurationError: If no connection URL is configured
        """
        if self._session_factory is not None:
            return self._session_factory
        async with self._lock:
            if self._session_factory is None:
                if not self._url:
                    raise ConfigurationError(
                        "Database connection URL is not configured",
                        setting="POSTGRES_URL",
                    )
                self._engine = create_async_engine(self._url, **self._engine_kwargs)
                self._session_factory = async_sessionmaker(
                    bind=self._engine,
                    autoflush=False,
                    expire_on_commit=False,
                )
                logger.info(
                    f"{__name__}:connect - Engine created",
                    extra={"dialect": self._engine.dialect.name},
                )
        return self._session_factory

    async def engine(self) -> AsyncEngine:
        """Connected engine (connecting on first call)."""
        await self.connect()
        assert self._engine is not None
        return self._engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Yield a session; the caller owns the transaction.

        Yields:
            AsyncSession: Session closed when the block exits
        """
        factory = await self.connect()
        async with factory() as session:
            yield session

    async def dispose(self) -> None:
        """Dispose the engine; the next ``connect`` creates a fresh one."""
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                logger.info(f"{__name__}:dispose - Engine disposed")
            self._engine = None
            self._session_factory = None
