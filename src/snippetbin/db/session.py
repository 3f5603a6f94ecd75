"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from snippetbin.core.settings import settings

# Connection execution option marking a transaction that will write.
WRITE_INTENT = "snippetbin_write_intent"


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def configure_sqlite_engine(engine: Engine, busy_timeout: float | None = None) -> None:
    """Make a SQLite engine safe for concurrent readers and writers.

    The database runs in WAL mode, so readers work from a snapshot and never
    block a writer. pysqlite's implicit transaction handling is switched off:
    read transactions start with a plain ``BEGIN``, while connections marked
    with ``WRITE_INTENT`` (see ``begin_write``) start with ``BEGIN IMMEDIATE``.
    Writers therefore take the write lock up front and wait on the busy
    timeout instead of failing mid-transaction.
    """
    timeout_ms = int((busy_timeout or settings.sqlite_busy_timeout_seconds) * 1000)

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={timeout_ms}")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        if conn.get_execution_options().get(WRITE_INTENT):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


def build_engine(url: str, busy_timeout: float | None = None, **kwargs: Any) -> Engine:
    """Create an engine for ``url``, applying SQLite tuning when relevant."""
    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        kwargs["connect_args"] = connect_args
    else:
        kwargs.setdefault("pool_pre_ping", True)
    engine = create_engine(url, echo=settings.sql_debug, **kwargs)
    if is_sqlite:
        configure_sqlite_engine(engine, busy_timeout)
    return engine


def begin_write(session: Session) -> None:
    """Start a write transaction on ``session``.

    An open read transaction is committed first; its snapshot may be stale
    and SQLite refuses to upgrade a stale snapshot to a writer. On other
    backends the option is ignored and this is an ordinary begin.
    """
    if session.in_transaction():
        if session.connection().get_execution_options().get(WRITE_INTENT):
            return
        session.commit()
    session.connection(execution_options={WRITE_INTENT: True})


# Ensure model modules are imported so that metadata is populated when create_all runs.
import snippetbin.models  # noqa: E402,F401

engine = build_engine(settings.effective_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
