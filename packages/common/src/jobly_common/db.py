"""
Database Connection, Session Management and Query Execution.

This module owns the process-wide SQLAlchemy engine and session factory, and
is the single place a `ParameterizedQuery` produced by `jobly_common.sql`
crosses into the database.

Key Components:
- **Global Engine**: A lazily created singleton `Engine` with a connection
  pool. SQLite URLs (used by the test suite) get a `StaticPool` so an
  in-memory database is shared by every session, and foreign keys enabled so
  `ON DELETE CASCADE` behaves as on PostgreSQL.
- **Transactional Context Manager**: `get_db` yields a `Session` and commits
  on success, rolls back on any exception and always closes.
- **Query Execution**: `execute` binds a `ParameterizedQuery` through
  `sqlalchemy.text`, so values are always sent as parameters.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, Result
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import get_config
from .models import Base
from .sql import ParameterizedQuery

_engine: Engine | None = None
_SessionLocal: sessionmaker[Session] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    """
    Retrieves the global SQLAlchemy engine, creating it if necessary.

    PostgreSQL engines use `pool_pre_ping=True` to drop dead connections and a
    small fixed pool with overflow. SQLite engines share one connection.

    Returns:
        Engine: The singleton engine for the configured database URL.
    """
    global _engine
    if _engine is None:
        config = get_config()
        url = config.get_database_url()
        if url.startswith("sqlite"):
            _engine = create_engine(
                url,
                echo=config.sql_echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            _engine = create_engine(
                url,
                echo=config.sql_echo,
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
            )
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """
    Retrieves the global session factory bound to the global engine.

    Sessions are created with `autoflush=False`; every repository statement is
    explicit SQL, so there is nothing for the ORM to flush implicitly.
    """
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


@contextmanager
def get_db() -> Generator[Session, None, None]:
    """
    Provides a transactional database session via a context manager.

    Usage:
    ```
    with get_db() as session:
        job = JobRepository(session).get(job_id)
    ```

    The transaction is committed when the block exits normally and rolled back
    if it raises; the session is closed either way.
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def execute(session: Session, query: ParameterizedQuery) -> Result[Any]:
    """
    Executes a `ParameterizedQuery` in the given session.

    The `$n` placeholders are rewritten as named binds for `sqlalchemy.text`;
    the query text itself never contains a value.
    """
    statement, binds = query.as_named()
    return session.execute(text(statement), binds)


def create_tables() -> None:
    """
    Creates all tables defined by the models that do not already exist.

    Suitable for tests and first-time local setup. Schema changes on a live
    database go through the Alembic migrations instead.
    """
    Base.metadata.create_all(bind=get_engine())


def drop_tables() -> None:
    """
    Drops all tables defined by the models.

    Warning:
        Permanently deletes all data. Only for development and tests.
    """
    Base.metadata.drop_all(bind=get_engine())


def init_db() -> None:
    """Initializes the database schema; an alias for `create_tables`."""
    create_tables()


def reset_engine() -> None:
    """
    Disposes of the global engine and session factory.

    Tests call this after changing `DATABASE_URL` so the next `get_engine`
    connects to the new database.
    """
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None
