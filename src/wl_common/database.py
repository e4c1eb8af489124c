"""Store handle and unit of work.

One `Database` is constructed at process start (see `src.main.create_app`),
handed to every service, and disposed at shutdown.

    async with database.transaction() as db:
        ...   # commits on normal exit, rolls back on any exception

    async with database.snapshot() as db:
        ...   # read-only projections, no locks

SQLite has no row locks, so every SQLite transaction starts with
BEGIN IMMEDIATE and holds the database write lock until it ends. A
check-then-act (market still OPEN, then debit and insert) can then never
interleave with a settlement. Waits are bounded by lock_timeout_ms there too.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import Settings


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


class Database:
    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 10,
        lock_timeout_ms: int | None = None,
    ) -> None:
        engine_kwargs: dict[str, Any] = {}
        is_sqlite = url.startswith("sqlite")
        if is_sqlite:
            if lock_timeout_ms:
                engine_kwargs["connect_args"] = {"timeout": lock_timeout_ms / 1000}
        else:
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        if is_sqlite:
            _begin_immediate_on_sqlite(self.engine)
        self._lock_timeout_ms = lock_timeout_ms
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            echo=settings.DEBUG,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            lock_timeout_ms=settings.LOCK_TIMEOUT_MS,
        )

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """One atomic, isolated unit of work."""
        async with self._session_factory() as session:
            async with session.begin():
                if self.dialect == "postgresql" and self._lock_timeout_ms:
                    # SET does not accept bind parameters
                    await session.execute(
                        text(f"SET LOCAL lock_timeout = {int(self._lock_timeout_ms)}")
                    )
                yield session

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            yield session

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_schema(self) -> None:
        """Create tables from ORM metadata (tests and local dev; prod uses Alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()



def _begin_immediate_on_sqlite(engine: AsyncEngine) -> None:
    # pysqlite otherwise defers BEGIN until the first write, leaving reads
    # outside the transaction.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")
