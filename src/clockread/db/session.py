"""Database engine and session management.

`Database` owns one SQLAlchemy engine and its session factory. The
application constructs it once at startup, hands sessions to request
handlers, and disposes the engine at shutdown.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from clockread.config import Settings
from clockread.db.schema import Base
from clockread.errors import SchemaInitError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on foreign key enforcement so ON DELETE CASCADE applies."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine for the given URL.

    SQLite thread-safety config for FastAPI concurrency:
    - check_same_thread=False: sessions are used from the threadpool
    - StaticPool for in-memory databases so every session sees one connection
    - Foreign keys enabled on every new connection

    Args:
        database_url: SQLAlchemy database URL.

    Returns:
        SQLAlchemy engine instance.
    """
    url = make_url(database_url)

    if url.get_backend_name() != "sqlite":
        return create_engine(url, echo=False, pool_pre_ping=True)

    kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    else:
        # Create parent directories for file databases
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=False, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class Database:
    """Explicitly owned store handle.

    Example:
        database = Database.from_url("sqlite:///data/clockread.db")
        database.ensure_schema()
        with database.session() as session:
            session.add(record)
            # Auto-commits on exit, rolls back on exception
        database.dispose()
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, database_url: str) -> Database:
        return cls(create_db_engine(database_url))

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls.from_url(settings.database_url)

    def get_session(self) -> Session:
        """Get a new session.

        Note: Caller is responsible for closing the session. For automatic
        resource management, use session() instead.
        """
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager for sessions with automatic cleanup.

        Commits on successful exit, rolls back on exception, and always
        closes the session.
        """
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def ensure_schema(self) -> None:
        """Create users, experiments and trials tables if they are missing.

        Raises:
            SchemaInitError: If the store is unreachable or DDL fails.
        """
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.critical(f"Failed to create tables: {e}")
            raise SchemaInitError("Failed to create database schema") from e
        logger.info("Tables created or already exist")

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
