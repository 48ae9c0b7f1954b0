"""Pytest configuration for jobly_common tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from jobly_common.config import reset_config
from jobly_common.db import create_tables, drop_tables, get_db, reset_engine
from jobly_common.repositories import CompanyRepository, JobRepository


@pytest.fixture
def database(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point the engine at a fresh in-memory SQLite database with the schema created."""
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("JOBLY_ENV", "test")
    reset_config()
    reset_engine()
    create_tables()
    yield
    drop_tables()
    reset_engine()
    reset_config()


@pytest.fixture
def seeded(database: None) -> dict[str, int]:
    """
    Three companies and three jobs:

    - c1 (1 employee): "job 1", salary 1000, equity 0
    - c2 (2 employees): "job 2", salary 2000, equity 1; "job 3", salary 3000, equity 1
    - c3 (3 employees): no jobs

    Returns the generated job ids keyed by title.
    """
    with get_db() as session:
        companies = CompanyRepository(session)
        for n in (1, 2, 3):
            companies.create(
                {
                    "handle": f"c{n}",
                    "name": f"C{n}",
                    "description": f"Desc{n}",
                    "numEmployees": n,
                    "logoUrl": f"http://c{n}.img",
                }
            )

        jobs = JobRepository(session)
        ids = {}
        for title, salary, equity, handle in (
            ("job 1", 1000, 0.0, "c1"),
            ("job 2", 2000, 1.0, "c2"),
            ("job 3", 3000, 1.0, "c2"),
        ):
            job = jobs.create(
                {"title": title, "salary": salary, "equity": equity, "companyHandle": handle}
            )
            ids[title] = job["id"]
    return ids
