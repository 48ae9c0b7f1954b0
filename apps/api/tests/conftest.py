"""Pytest configuration for the Jobly API tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from jobly_api.main import app
from jobly_common.auth import create_token
from jobly_common.config import reset_config
from jobly_common.db import create_tables, drop_tables, get_db, reset_engine
from jobly_common.repositories import CompanyRepository, JobRepository


@pytest.fixture(autouse=True)
def database(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Fresh in-memory database per test, seeded with:

    - companies c1, c2, c3 with 1, 2 and 3 employees
    - "job 1" (c1, 1000, equity 0), "job 2" (c2, 2000, equity 1),
      "job 3" (c2, 3000, equity 1), created in that order so their ids are 1, 2, 3
    """
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("JOBLY_ENV", "test")
    monkeypatch.setenv("SECRET_KEY", "api-test-secret")
    reset_config()
    reset_engine()
    create_tables()

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
        jobs.create({"title": "job 1", "salary": 1000, "equity": 0.0, "companyHandle": "c1"})
        jobs.create({"title": "job 2", "salary": 2000, "equity": 1.0, "companyHandle": "c2"})
        jobs.create({"title": "job 3", "salary": 3000, "equity": 1.0, "companyHandle": "c2"})

    yield

    drop_tables()
    reset_engine()
    reset_config()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization header for u1, an admin."""
    return {"Authorization": f"Bearer {create_token('u1', is_admin=True)}"}


@pytest.fixture
def user_headers() -> dict[str, str]:
    """Authorization header for u2, a regular user."""
    return {"Authorization": f"Bearer {create_token('u2')}"}
