"""
Database configuration and connection management.

The connection string comes from ``settings.DATABASE_URL``; callers may also
build their own engine and session factory and hand them to a unit of work.
"""

import sqlite3
import threading
import time
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import settings
from .logging_config import get_logger
from .models import Base

logger = get_logger(__name__)


def safe_url(db_url: str) -> str:
    """
    Strip credentials from a database URL for logging.

    Args:
        db_url: Database connection URL

    Returns:
        URL with the user and password part replaced
    """
    if "@" in db_url:
        scheme = db_url.split("://", 1)[0]
        return f"{scheme}://...@{db_url.rsplit('@', 1)[1]}"
    return db_url


def get_connect_args(db_url: str) -> dict:
    """
    Get database-specific connection arguments.

    Args:
        db_url: Database connection URL

    Returns:
        Connection arguments dict
    """
    if db_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite leaves foreign key enforcement off unless asked per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@event.listens_for(Engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Track query start time."""
    conn.info.setdefault("query_start_time", []).append(time.time())


@event.listens_for(Engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log slow queries."""
    total_time_ms = (time.time() - conn.info["query_start_time"].pop()) * 1000

    if total_time_ms > settings.QUERY_LOG_THRESHOLD_MS:
        logger.warning(
            "Slow query detected",
            query_time_ms=round(total_time_ms, 2),
            statement=statement[:200],
        )


@event.listens_for(Engine, "handle_error")
def discard_query_start_time(exception_context):
    """Drop the start time of a statement that raised."""
    conn = exception_context.connection
    if conn is None or exception_context.cursor is None:
        return
    start_times = conn.info.get("query_start_time")
    if start_times:
        start_times.pop()


def create_db_engine(db_url: Optional[str] = None) -> Engine:
    """
    Create an engine for ``db_url``.

    Args:
        db_url: Database connection URL, defaults to ``settings.DATABASE_URL``

    Returns:
        SQLAlchemy engine
    """
    db_url = db_url or settings.DATABASE_URL
    logger.info("Using database", url=safe_url(db_url))
    return create_engine(
        db_url,
        connect_args=get_connect_args(db_url),
        pool_pre_ping=settings.DB_POOL_PRE_PING,
        echo=settings.DB_ECHO,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory whose sessions only flush on commit."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None
_init_lock = threading.Lock()


def get_engine() -> Engine:
    """Get the application engine, creating it once on first use."""
    global _engine
    if _engine is None:
        with _init_lock:
            if _engine is None:
                _engine = create_db_engine()
    return _engine


def get_session_factory() -> sessionmaker:
    """Get the application session factory, creating it once on first use."""
    global _session_factory
    if _session_factory is None:
        engine = get_engine()
        with _init_lock:
            if _session_factory is None:
                _session_factory = create_session_factory(engine)
    return _session_factory


def init_db(engine: Optional[Engine] = None) -> None:
    """
    Initialize database tables.

    Uses checkfirst=True to safely handle existing tables.

    Args:
        engine: Engine to create tables on, defaults to the application engine
    """
    engine = engine or get_engine()
    try:
        logger.info("Initializing database tables")
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise


def get_db() -> Generator[Session, None, None]:
    """
    Get database session.

    Yields:
        SQLAlchemy database session, closed afterwards
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
