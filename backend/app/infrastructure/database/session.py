"""SQLAlchemy engine, session factory and transactional unit of work.

``Database`` is the process-wide resource handle: it is built once at startup
(see ``app.main.lifespan``), injected wherever sessions are needed, and
disposed at shutdown.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings
from app.domain.exceptions import ConnectivityError, TransactionError
from app.infrastructure.database.base import Base

logger = logging.getLogger(__name__)


def _get_async_url(url: str) -> str:
    """Convert a sync SQLAlchemy URL to an async one."""
    if url.startswith("sqlite:///") or url == "sqlite://":
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _reason(exc: SQLAlchemyError) -> str:
    return str(getattr(exc, "orig", None) or exc)


class Database:
    """Owns the async engine (and its connection pool) plus the session factory."""

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        pool_timeout: float = 2.0,
        pool_recycle: int = 30,
    ):
        async_url = _get_async_url(url)

        engine_kwargs: dict[str, Any] = {"echo": echo, "future": True}
        if _is_memory_sqlite(async_url):
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
        elif make_url(async_url).get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=pool_size,
                pool_timeout=pool_timeout,
                pool_recycle=pool_recycle,
                pool_pre_ping=True,
            )

        self._engine: AsyncEngine = create_async_engine(async_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=False,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=settings.db_pool_recycle,
        )

    async def create_all(self) -> None:
        """Create every table registered on the ORM metadata."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        """Return True when a trivial query round-trips to the database."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Database connection test failed: %s", exc)
            return False
        return True

    async def dispose(self) -> None:
        """Close every pooled connection. Call once at shutdown."""
        await self._engine.dispose()
        logger.info("Database pool closed")

    @asynccontextmanager
    async def session(self, operation: str = "read") -> AsyncIterator[AsyncSession]:
        """Yield a short-lived session for reads; the connection is always released."""
        async with self._translate_errors(operation):
            async with self._session_factory() as session:
                yield session

    @asynccontextmanager
    async def transaction(self, operation: str = "write") -> AsyncIterator[AsyncSession]:
        """Yield a session inside BEGIN … COMMIT.

        Any exception raised in the block rolls the whole unit of work back
        before the connection returns to the pool. Database errors are
        re-raised as ``ConnectivityError`` or ``TransactionError``; other
        exceptions propagate unchanged.
        """
        async with self._translate_errors(operation):
            async with self._session_factory() as session:
                async with session.begin():
                    yield session

    @asynccontextmanager
    async def _translate_errors(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except (OperationalError, InterfaceError, PoolTimeoutError) as exc:
            logger.error("%s: database unavailable — %s", operation, _reason(exc))
            raise ConnectivityError(_reason(exc)) from exc
        except SQLAlchemyError as exc:
            logger.error("%s rolled back — %s", operation, _reason(exc))
            raise TransactionError(operation, _reason(exc)) from exc
