"""Request dependencies shared by the API routes."""

from __future__ import annotations

from typing import Generator

from fastapi import Request

from clockread.db.repo import DbSession
from clockread.db.session import Database


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    database: Database = request.app.state.database
    session = database.get_session()
    try:
        yield session
    finally:
        session.close()
