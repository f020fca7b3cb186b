"""Async SQLAlchemy engine and session handling.

One ``DatabaseManager`` per process owns the engine. Request handlers get a
session through ``get_db_session``; startup and the CLI go through
``init_database`` and ``close_database``.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import MetaData, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from cinevault.core.config import get_settings
from cinevault.core.logging import get_logger

logger = get_logger(__name__)

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base shared by every CineVault table."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def sqlite_file_for(database_url: str) -> Path | None:
    """Return the on-disk file behind a SQLite URL, or None for other URLs."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return None
    if not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


class DatabaseManager:
    """Lazily builds the engine and hands out sessions bound to it."""

    def __init__(self, database_url: str | None = None) -> None:
        settings = get_settings()
        self.database_url = database_url or settings.database_url
        self.echo = settings.db_echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            connect_args = {"check_same_thread": False} if self.is_sqlite else {}
            self._engine = create_async_engine(
                self.database_url,
                echo=self.echo,
                connect_args=connect_args,
            )
            logger.info(
                "Engine ready",
                url=self._engine.url.render_as_string(hide_password=True),
            )
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            # Loaded attributes stay readable after commit; routes serialize
            # models once the service has already committed.
            self._sessionmaker = async_sessionmaker(
                self.engine,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._sessionmaker

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Open a session that is rolled back if the block raises.

        Example:
            async with db.session() as session:
                movies = await MovieRepository(session).list_all()
        """
        async with self.sessionmaker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    async def ensure_schema(self) -> None:
        """Create any missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema ensured", tables=sorted(Base.metadata.tables))

    async def ping(self) -> bool:
        """Run ``SELECT 1`` and report whether it succeeded."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database ping failed", error=str(e))
            return False
        return True

    async def dispose(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("Engine disposed")


_manager: DatabaseManager | None = None


def get_db_manager() -> DatabaseManager:
    """Return the process-wide manager, creating it on first use."""
    global _manager
    if _manager is None:
        _manager = DatabaseManager()
    return _manager


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request."""
    async with get_db_manager().session() as session:
        yield session


async def init_database() -> None:
    """Make the database reachable and its tables present.

    Raises:
        RuntimeError: If the database does not answer.
    """
    # Registers every table on Base.metadata.
    import cinevault.infrastructure.persistence.models  # noqa: F401

    db = get_db_manager()

    db_file = sqlite_file_for(db.database_url)
    if db_file is not None and not db_file.parent.exists():
        db_file.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Created database directory", path=str(db_file.parent))

    if not await db.ping():
        raise RuntimeError("Database is not reachable")

    await db.ensure_schema()


async def close_database() -> None:
    await get_db_manager().dispose()
