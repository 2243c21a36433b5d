"""
Database session configuration.

This module owns the embedded SQLite store: engine creation, session
acquisition, schema bootstrap and the exclusive maintenance window used by
backup/restore. A single ``Database`` instance is created by the application
factory and held on ``app.state``.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, AsyncEngine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from inventory_backend.app.core.exceptions import InternalError, ResourceNotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

SQLITE_HEADER = b"SQLite format 3\x00"

# Create declarative base for models
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Explicitly owned handle on the embedded store.

    Every request acquires its session through ``session()``. ``exclusive()``
    opens a maintenance window: it waits until no session is in flight and
    holds new acquisitions until the window closes.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._gate = asyncio.Condition()
        self._active_sessions = 0
        self._maintenance = False
        self.engine: Optional[AsyncEngine] = None
        self._sessionmaker: Optional[async_sessionmaker] = None
        self._open()

    @property
    def is_memory(self) -> bool:
        database = make_url(self.url).database
        return not database or database == ":memory:"

    @property
    def file_path(self) -> Optional[Path]:
        if self.is_memory:
            return None
        return Path(make_url(self.url).database).resolve()

    def _open(self) -> None:
        kwargs = {"echo": self.echo, "future": True}
        if self.is_memory:
            kwargs["connect_args"] = {"check_same_thread": False}
            kwargs["poolclass"] = StaticPool
        else:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_async_engine(self.url, **kwargs)
        event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self._sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    async def create_schema(self, reset: bool = False) -> None:
        """Create all tables; with ``reset`` drop everything first."""
        from inventory_backend.app.db import base  # noqa: F401

        async with self.engine.begin() as conn:
            if reset:
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    async def startup(self, reset: bool, admin_username: str, admin_password: str) -> None:
        """Bootstrap schema and reference data."""
        from inventory_backend.app.db.seed import seed_reference_data

        await self.create_schema(reset=reset)
        async with self._sessionmaker() as session:
            await seed_reference_data(session, admin_username, admin_password)
        logger.info("Database ready (reset=%s, url=%s)", reset, self.url)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._gate:
            await self._gate.wait_for(lambda: not self._maintenance)
            self._active_sessions += 1
        try:
            async with self._sessionmaker() as session:
                yield session
        finally:
            async with self._gate:
                self._active_sessions -= 1
                self._gate.notify_all()

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        async with self._gate:
            await self._gate.wait_for(lambda: not self._maintenance)
            self._maintenance = True
            await self._gate.wait_for(lambda: self._active_sessions == 0)
        try:
            yield
        finally:
            async with self._gate:
                self._maintenance = False
                self._gate.notify_all()

    async def read_backup(self) -> bytes:
        """Return a consistent copy of the database file."""
        path = self.file_path
        if path is None or not path.exists():
            raise ResourceNotFoundError("Database file")

        async with self.exclusive():
            # release pooled connections so the file is fully written
            await self.engine.dispose()
            return await asyncio.to_thread(path.read_bytes)

    async def restore_from(self, data: bytes, admin_username: str, admin_password: str) -> None:
        """
        Replace the whole store with ``data``.

        Full-stop maintenance: the engine is disposed, the file overwritten
        and the store reopened with a non-destructive schema/seed pass.
        """
        path = self.file_path
        if path is None:
            raise ValidationFailedError("In-memory databases cannot be restored")

        async with self.exclusive():
            await self.engine.dispose()
            try:
                await asyncio.to_thread(path.write_bytes, data)
            except OSError as exc:
                logger.exception("Writing restored database to %s failed", path)
                raise InternalError("Database restore failed", details={"path": str(path)}) from exc
            finally:
                self._open()
            await self.create_schema(reset=False)
            async with self._sessionmaker() as session:
                from inventory_backend.app.db.seed import seed_reference_data
                await seed_reference_data(session, admin_username, admin_password)
        logger.info("Database restored from backup (%d bytes)", len(data))


async def get_db(request: Request):
    """
    FastAPI dependency for database sessions.

    Yields an async database session from the application's store and
    ensures it's properly closed.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
