"""Async database configuration and session management."""

import asyncio

from typing import Any, ClassVar

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.infrastructure.config.settings import Settings, get_settings
from src.infrastructure.persistence.sqlalchemy_models import Base


def configure_sqlite_connection(
    dbapi_connection: Any, connection_record: Any
) -> None:
    """Prepare a new SQLite connection.

    Foreign keys (and so ON DELETE CASCADE) are off by default in SQLite.
    The driver's own transaction handling is disabled so that SAVEPOINTs
    behave; ``begin_sqlite_transaction`` emits BEGIN instead.
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def begin_sqlite_transaction(conn: Any) -> None:
    conn.exec_driver_sql("BEGIN")


def install_sqlite_listeners(engine: AsyncEngine) -> None:
    """Attach the SQLite connection listeners to an async engine."""
    event.listen(engine.sync_engine, "connect", configure_sqlite_connection)
    event.listen(engine.sync_engine, "begin", begin_sqlite_transaction)


class AsyncDatabase:
    """Async database manager.

    Engines are cached per event loop so sessions created from different
    loops (CLI runs, test loops) never share a connection pool.
    """

    _engines: ClassVar[dict[tuple[str, int], AsyncEngine]] = {}
    _session_makers: ClassVar[
        dict[tuple[str, int], async_sessionmaker[AsyncSession]]
    ] = {}

    def __init__(
        self, database_url: str | None = None, settings: Settings | None = None
    ):
        """Initialize async database manager.

        Args:
            database_url: Explicit URL; defaults to the configured one
            settings: Settings instance; defaults to the cached settings
        """
        self._settings = settings or get_settings()
        self._async_url = database_url or self._settings.get_database_url()

    @property
    def url(self) -> str:
        return self._async_url

    def _get_engine_and_session_maker(
        self,
    ) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
        """Engine and session maker for the running event loop."""
        try:
            loop_id = id(asyncio.get_running_loop())
        except RuntimeError:
            loop_id = 0

        key = (self._async_url, loop_id)
        if key not in self._engines:
            engine = create_async_engine(
                self._async_url, echo=self._settings.sql_echo
            )
            if engine.dialect.name == "sqlite":
                install_sqlite_listeners(engine)
            self._engines[key] = engine
            self._session_makers[key] = async_sessionmaker(
                engine, class_=AsyncSession, expire_on_commit=False
            )

        return self._engines[key], self._session_makers[key]

    @property
    def engine(self) -> AsyncEngine:
        engine, _ = self._get_engine_and_session_maker()
        return engine

    @property
    def async_session_maker(self) -> async_sessionmaker[AsyncSession]:
        _, session_maker = self._get_engine_and_session_maker()
        return session_maker

    async def create_all(self) -> None:
        """Create every table that does not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Dispose the engine of the running loop and forget it."""
        try:
            loop_id = id(asyncio.get_running_loop())
        except RuntimeError:
            loop_id = 0

        key = (self._async_url, loop_id)
        engine = self._engines.pop(key, None)
        self._session_makers.pop(key, None)
        if engine is not None:
            await engine.dispose()
