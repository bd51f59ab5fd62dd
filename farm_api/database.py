"""
Database Configuration and Session Management

This module handles SQLAlchemy setup with connection pooling.

The engine and session factory live on a Database object that is created
once by the application factory and stored on app.state. Request handlers
get a session through the get_db dependency, so tests can hand the app an
in-memory database without touching module globals.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool
import logging

from farm_api.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


def _build_engine(url: str, settings: Settings) -> Engine:
    if url.startswith("sqlite"):
        # SQLite is only used for tests and local experiments. An in-memory
        # database must share one connection or every session sees an empty db.
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool if ":memory:" in url or url == "sqlite://" else None,
            echo=settings.DEBUG,
        )

    return create_engine(
        url,
        poolclass=QueuePool,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_pre_ping=True,  # Verify connections before using (handles stale connections)
        echo=settings.DEBUG,  # Log SQL in debug mode
    )


class Database:
    """
    Owns the engine and the session factory for one application instance.
    """

    def __init__(self, url: Optional[str] = None, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.url = url or settings.DATABASE_URL
        self.engine = _build_engine(self.url, settings)

        # expire_on_commit=False lets handlers serialize objects after commit
        # without another round trip.
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            expire_on_commit=False,
        )

        event.listen(self.engine, "connect", self._on_connect)

    def _on_connect(self, dbapi_connection, connection_record):
        """Set connection-level configuration on new connections."""
        cursor = dbapi_connection.cursor()
        if self.url.startswith("postgresql"):
            cursor.execute("SET TIME ZONE 'UTC'")
        elif self.url.startswith("sqlite"):
            # Foreign keys are off by default in SQLite
            cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("New database connection established")

    def session(self) -> Session:
        return self.session_factory()

    def create_all(self) -> None:
        # Import models so every table is registered on Base.metadata
        import farm_api.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        import farm_api.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function that provides a database session.

    The session is closed after the request completes; closing rolls back
    anything that was not committed.
    """
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block, or nothing.

    Any exception raised inside the block rolls the session back before it
    propagates, so partial multi-step writes are never persisted.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db(database: Database) -> None:
    """
    Initialize database tables.

    In production, you'd use migrations instead. This is here for
    dev/testing convenience.
    """
    logger.warning("init_db() called - use migrations in production!")
    database.create_all()
