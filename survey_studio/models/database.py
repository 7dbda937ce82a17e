"""Database setup and session management using SQLAlchemy 2.0.

This module configures the database engine, session factory, and base class
for all ORM models. The engine is built lazily from settings so that tests can
point ``DATABASE_URL`` at SQLite before anything connects.
"""

import uuid
from functools import lru_cache
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from survey_studio.config import get_settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def new_id() -> str:
    """Primary key factory: UUID4 rendered as a string."""
    return str(uuid.uuid4())


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL.

    SQLite doesn't support pool_size/max_overflow and needs foreign keys
    switched on per connection for ON DELETE CASCADE to fire.
    """
    settings = get_settings()
    engine_kwargs = {
        "pool_pre_ping": True,
        "echo": echo,
    }

    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = settings.database_pool_size
        engine_kwargs["max_overflow"] = settings.database_max_overflow

    engine = create_engine(database_url, **engine_kwargs)

    if database_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


@lru_cache
def get_engine() -> Engine:
    """Get the process-wide engine built from settings."""
    settings = get_settings()
    return create_db_engine(settings.database_url, echo=settings.is_development)


@lru_cache
def get_session_factory() -> sessionmaker:
    """Get the process-wide session factory."""
    return sessionmaker(
        bind=get_engine(),
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,  # Prevent lazy loading after commit
    )


def get_db() -> Generator[Session, None, None]:
    """Dependency function for FastAPI to provide database sessions.

    Yields:
        Session: SQLAlchemy database session

    Note:
        The session is automatically closed after the request completes,
        even if an exception occurs.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
