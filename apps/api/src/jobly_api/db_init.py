"""
Standalone Database Initialization Script.

Creates the Jobly schema from the SQLAlchemy models in `jobly_common` for a
fresh local or CI database:

    python -m jobly_api.db_init

This only creates missing tables. Upgrading an existing database is the job of
the Alembic migrations in `packages/common/alembic`.
"""

from __future__ import annotations

from jobly_common.db import init_db

from .logger import log_event


def main() -> None:
    """Creates any missing tables, logging start and completion."""
    log_event("INFO", "db_init_started")
    init_db()
    log_event("INFO", "db_init_finished")


if __name__ == "__main__":
    main()
