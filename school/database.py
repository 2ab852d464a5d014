"""SQLite connection provider and schema helpers for the school service."""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from .config import DEFAULT_DB_TIMEOUT

LOGGER = logging.getLogger(__name__)

DATABASE_PRAGMA = "PRAGMA foreign_keys = ON"
_SQLITE_PREFIX = "sqlite:///"


def resolve_sqlite_target(database_url: str) -> tuple[str, bool]:
    """Return the SQLite connection target and whether URI mode is required."""

    if not database_url.startswith(_SQLITE_PREFIX):
        raise ValueError(f"Unsupported database URL: {database_url}")

    target = database_url.replace(_SQLITE_PREFIX, "", 1)
    if not target:
        raise ValueError(f"Database URL has no target: {database_url}")
    if target == ":memory:":
        # Every call opens a new connection, so an in-memory database would
        # be empty each time.
        raise ValueError("In-memory databases are not supported; use a file-backed database")
    if target.startswith("file:"):
        return target, True

    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return str(path), False


class ConnectionProvider:
    """Hands out a fresh SQLite connection for every call.

    There is no pooling: callers own the returned connection and should use
    :meth:`scope` so that it is committed or rolled back and always closed.
    """

    def __init__(self, database_url: str, timeout: float = DEFAULT_DB_TIMEOUT) -> None:
        self.database_url = database_url
        self.timeout = timeout
        self._target, self._uri = resolve_sqlite_target(database_url)

    def raw_connection(self) -> sqlite3.Connection:
        """Open a connection without the row factory, for SQLAlchemy."""

        conn = sqlite3.connect(
            self._target,
            timeout=self.timeout,
            check_same_thread=False,
            uri=self._uri,
        )
        conn.execute(DATABASE_PRAGMA)
        return conn

    def connect(self) -> sqlite3.Connection:
        """Create a SQLite connection with row access by column name."""

        conn = self.raw_connection()
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def scope(self) -> Iterator[sqlite3.Connection]:
        """Context manager that commits on success and rolls back on error."""

        conn = self.connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def __repr__(self) -> str:
        return f"ConnectionProvider(database_url={self.database_url!r}, timeout={self.timeout!r})"


def create_engine_for(provider: ConnectionProvider) -> Engine:
    """Build a SQLAlchemy engine that opens connections through ``provider``."""

    return create_engine("sqlite://", creator=provider.raw_connection, poolclass=NullPool)


def init_db(provider: ConnectionProvider) -> None:
    """Create the teachers, courses and join tables if they do not exist."""

    from .db import Base
    from .db import models  # noqa: F401

    engine = create_engine_for(provider)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()
    LOGGER.info("Database schema ready at %s", provider.database_url)


def seed_db(provider: ConnectionProvider) -> bool:
    """Load the demo fixtures when the teachers table is empty."""

    from .db.fixtures import seed_demo_data

    engine = create_engine_for(provider)
    try:
        with Session(engine) as session, session.begin():
            return seed_demo_data(session)
    finally:
        engine.dispose()


__all__ = [
    "ConnectionProvider",
    "create_engine_for",
    "init_db",
    "resolve_sqlite_target",
    "seed_db",
]
