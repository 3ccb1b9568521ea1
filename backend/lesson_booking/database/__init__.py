"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from datetime import datetime
import logging
from typing import Any, Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from lesson_booking.core.config import settings

logger = logging.getLogger(__name__)

_DEFAULT_POOL_KWARGS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 5,
    "pool_timeout": 5,
    "pool_recycle": 300,
    "pool_pre_ping": True,
}


def _is_sqlite_url(db_url: str) -> bool:
    return db_url.lower().startswith("sqlite")


def _is_memory_sqlite(db_url: str) -> bool:
    return _is_sqlite_url(db_url) and (":memory:" in db_url or db_url.rstrip("/").endswith("sqlite:"))


def _install_sqlite_immediate_transactions(engine: Engine) -> None:
    """
    Open every SQLite transaction with BEGIN IMMEDIATE.

    pysqlite defers BEGIN until the first DML statement, so two writers can
    both read a free slot before either takes the write lock. Taking the
    lock up front serializes the read-check-insert sequence of a booking.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        connection_record.info["connect_time"] = datetime.now()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_database_engine(db_url: str, *, echo: bool = False) -> Engine:
    """Build an engine for ``db_url`` with the transaction semantics bookings rely on."""

    if _is_sqlite_url(db_url):
        connect_args = {
            "check_same_thread": False,
            "timeout": settings.sqlite_busy_timeout_seconds,
        }
        if _is_memory_sqlite(db_url):
            sqlite_engine = create_engine(
                db_url, echo=echo, connect_args=connect_args, poolclass=StaticPool
            )
        else:
            sqlite_engine = create_engine(db_url, echo=echo, connect_args=connect_args)
        _install_sqlite_immediate_transactions(sqlite_engine)
        return sqlite_engine

    return create_engine(db_url, echo=echo, **_DEFAULT_POOL_KWARGS)


engine: Engine = create_database_engine(settings.database_url, echo=settings.database_echo)


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_connection: Any, connection_record: Any, connection_proxy: Any) -> None:
    logger.debug("Connection checked out from pool")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "create_database_engine",
    "engine",
    "get_db",
]
