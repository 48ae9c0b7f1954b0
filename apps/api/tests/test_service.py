"""Tests for the health check, error envelope and schema bootstrap."""

from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect

from jobly_api import SERVICE_NAME
from jobly_api.db_init import main as db_init_main
from jobly_api.logger import log_event
from jobly_common.db import drop_tables, get_engine


class TestHealthz:
    """GET /healthz"""

    def test_reports_service(self, client: TestClient) -> None:
        resp = client.get("/healthz")

        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["service"] == SERVICE_NAME
        assert body["env"] == "test"


class TestLogEvent:
    """Test the structured log line."""

    def test_single_json_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        log_event("warn", "job_created", job_id=7)

        line = capsys.readouterr().out.strip()
        record = json.loads(line)
        assert "\n" not in line
        assert record["msg"] == "job_created"
        assert record["level"] == "INFO"
        assert record["env"] == "test"
        assert record["job_id"] == 7

    def test_known_level_is_upper_cased(self, capsys: pytest.CaptureFixture[str]) -> None:
        log_event("error", "boom")

        assert json.loads(capsys.readouterr().out)["level"] == "ERROR"


class TestDbInit:
    """Test the schema bootstrap entrypoint."""

    def test_creates_missing_tables(self) -> None:
        drop_tables()
        assert inspect(get_engine()).get_table_names() == []

        db_init_main()

        assert set(inspect(get_engine()).get_table_names()) == {"companies", "jobs"}

    def test_is_idempotent(self, client: TestClient) -> None:
        db_init_main()

        assert len(client.get("/jobs").json()["jobs"]) == 3


class TestErrorEnvelope:
    """Framework-raised HTTP errors share the error envelope."""

    def test_unknown_route(self, client: TestClient) -> None:
        resp = client.get("/nope")

        assert resp.status_code == 404
        assert resp.json() == {"error": {"message": "Not Found", "status": 404}}
