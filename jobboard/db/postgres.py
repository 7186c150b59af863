import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from jobboard.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def utc_now() -> datetime:
    """Naive UTC timestamp for TIMESTAMP (without time zone) columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def build_engine(url: str) -> Engine:
    """
    Create the SQLAlchemy engine for `url`.

    PostgreSQL gets a connection pool (5 ready, 10 overflow).
    SQLite is only used for tests: one shared connection for in-memory
    databases and foreign keys switched on so cascades work.
    """
    if url.startswith("sqlite"):
        # Raw text() binds bypass SQLAlchemy's DateTime type; sqlite3's own default adapter is deprecated
        sqlite3.register_adapter(datetime, lambda value: value.isoformat(" "))
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            options["poolclass"] = StaticPool
        new_engine = create_engine(url, echo=settings.debug, **options)

        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return new_engine

    return create_engine(
        url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        echo=settings.debug  # Log SQL queries in debug mode
    )


engine = build_engine(settings.sqlalchemy_url)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def on_commit(session: Session, callback: Callable[[], None]) -> None:
    """Run `callback` once the session's current transaction commits."""
    session.info.setdefault("on_commit", []).append(callback)


def on_rollback(session: Session, callback: Callable[[], None]) -> None:
    """Run `callback` if the session's current transaction is rolled back."""
    session.info.setdefault("on_rollback", []).append(callback)


def _run_callbacks(callbacks: list) -> None:
    for callback in callbacks:
        try:
            callback()
        except Exception:
            # The transaction outcome is already final
            logger.exception("Transaction callback %r failed", callback)


@event.listens_for(SessionLocal, "after_commit")
def _after_commit(session: Session) -> None:
    session.info.pop("on_rollback", None)
    _run_callbacks(session.info.pop("on_commit", []))


@event.listens_for(SessionLocal, "after_rollback")
def _after_rollback(session: Session) -> None:
    session.info.pop("on_commit", None)
    _run_callbacks(session.info.pop("on_rollback", []))


@contextmanager
def get_db_session():
    """
    Context manager for database sessions. One call = one transaction.
    Usage:
        with get_db_session() as db:
            db.execute(text("SELECT * FROM users"))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def test_postgres_connection() -> bool:
    """
    Test if the database is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        with get_db_session() as db:
            result = db.execute(text("SELECT 1 as test"))
            row = result.fetchone()
            return row[0] == 1
    except Exception:
        logger.exception("Database connection failed")
        return False


def fetch_all(db: Session, sql: str, params: dict = None) -> list:
    """Run `sql` on an open session and return rows as a list of dicts."""
    result = db.execute(text(sql), params or {})
    return [dict(row) for row in result.mappings().all()]


def fetch_one(db: Session, sql: str, params: dict = None):
    """Run `sql` on an open session and return the first row as a dict, or None."""
    row = db.execute(text(sql), params or {}).mappings().first()
    return dict(row) if row is not None else None
