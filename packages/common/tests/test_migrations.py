"""Tests that the initial migration builds the same schema as the models."""

from __future__ import annotations

import importlib.util
from collections.abc import Generator
from pathlib import Path
from types import ModuleType

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError

from jobly_common.models import Base

MIGRATION = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "001_jobly_init.py"


def load_migration() -> ModuleType:
    spec = importlib.util.spec_from_file_location("jobly_init_migration", MIGRATION)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _foreign_keys_on(dbapi_connection: object, _record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def connection() -> Generator[Connection, None, None]:
    engine = create_engine("sqlite://")
    event.listen(engine, "connect", _foreign_keys_on)
    with engine.connect() as conn:
        yield conn
    engine.dispose()


def run(connection: Connection, step: str) -> None:
    migration = load_migration()
    with Operations.context(MigrationContext.configure(connection)):
        getattr(migration, step)()
    connection.commit()


class TestInitialMigration:
    """Test upgrade and downgrade of 001_jobly_init."""

    def test_revision_is_root(self) -> None:
        migration = load_migration()

        assert migration.revision == "001_jobly_init"
        assert migration.down_revision is None

    def test_upgrade_matches_models(self, connection: Connection) -> None:
        run(connection, "upgrade")
        inspector = inspect(connection)

        assert set(inspector.get_table_names()) == set(Base.metadata.tables)
        for name, table in Base.metadata.tables.items():
            columns = {column["name"] for column in inspector.get_columns(name)}
            assert columns == {column.name for column in table.columns}, name

        assert "idx_jobs__company_handle" in {
            index["name"] for index in inspector.get_indexes("jobs")
        }

    def test_upgrade_enforces_constraints(self, connection: Connection) -> None:
        run(connection, "upgrade")
        connection.execute(
            text(
                "INSERT INTO companies (handle, name, description) "
                "VALUES ('c1', 'C1', 'Desc1')"
            )
        )
        connection.execute(
            text("INSERT INTO jobs (title, salary, equity, company_handle) VALUES ('j', 1, 0, 'c1')")
        )
        connection.commit()

        with pytest.raises(IntegrityError):
            connection.execute(
                text("INSERT INTO jobs (title, company_handle) VALUES ('j', 'c1')")
            )
        connection.rollback()

        with pytest.raises(IntegrityError):
            connection.execute(
                text("INSERT INTO jobs (title, equity, company_handle) VALUES ('k', 2, 'c1')")
            )
        connection.rollback()

        connection.execute(text("DELETE FROM companies WHERE handle = 'c1'"))
        assert connection.execute(text("SELECT COUNT(*) FROM jobs")).scalar_one() == 0

    def test_downgrade_removes_tables(self, connection: Connection) -> None:
        run(connection, "upgrade")
        run(connection, "downgrade")

        assert inspect(connection).get_table_names() == []
