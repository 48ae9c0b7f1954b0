"""Repository for job data access."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import execute
from ..errors import BadRequestError, ConflictError, NotFoundError
from ..sql import (
    Clause,
    ColumnMapper,
    ParameterizedQuery,
    Predicate,
    PredicateKind,
    assemble_query,
    build_filter_clause,
    build_partial_update,
)

logger = logging.getLogger(__name__)

# `id` and `companyHandle` are not allow-listed: neither may change after creation.
JOB_COLUMNS = ColumnMapper("jobs", {"title", "salary", "equity"})

# hasEquity=true keeps jobs with equity > 0; hasEquity=false filters nothing.
JOB_FILTERS: Mapping[str, Predicate] = {
    "title": Predicate("title", PredicateKind.CONTAINS),
    "minSalary": Predicate("salary", PredicateKind.AT_LEAST),
    "hasEquity": Predicate("equity", PredicateKind.POSITIVE_FLAG),
}

_SELECT_COLUMNS = '"id", "title", "salary", "equity", "company_handle" AS "companyHandle"'


def format_equity(value: Any) -> str | None:
    """
    Renders a stored equity value as an exact decimal string.

    Equity travels as a string on the wire (`"0"`, `"0.5"`) so clients never
    see binary floating point artifacts.
    """
    if value is None:
        return None
    return format(Decimal(str(value)).normalize(), "f")


def _to_store(data: Mapping[str, Any]) -> dict[str, Any]:
    values = dict(data)
    if values.get("equity") is not None:
        values["equity"] = format_equity(values["equity"])
    return values


def _shape(row: Mapping[str, Any]) -> dict[str, Any]:
    job = dict(row)
    job["equity"] = format_equity(job["equity"])
    return job


class JobRepository:
    """
    Repository for job CRUD operations.

    Statements are built with `jobly_common.sql`; list filtering happens in
    SQL, never on fetched rows.
    """

    def __init__(self, session: Session):
        """
        Initialize the repository with a SQLAlchemy session.

        Args:
            session: Active SQLAlchemy session for database operations
        """
        self.session = session

    def _fetch_one(self, query: ParameterizedQuery) -> dict[str, Any] | None:
        row = execute(self.session, query).mappings().one_or_none()
        return dict(row) if row is not None else None

    def _company_exists(self, handle: str) -> bool:
        query = assemble_query(Clause('SELECT 1 AS "found" FROM "companies" WHERE "handle" = $1', (handle,)))
        return self._fetch_one(query) is not None

    def _find_duplicate(self, title: str, company_handle: str) -> int | None:
        """
        Advisory duplicate check on the natural key `(title, company_handle)`.

        This is not atomic with the insert that follows it; the unique
        constraint on the table is what actually prevents duplicates.
        """
        row = self._fetch_one(
            assemble_query(
                Clause(
                    'SELECT "id" FROM "jobs" WHERE "title" = $1 AND "company_handle" = $2',
                    (title, company_handle),
                )
            )
        )
        return row["id"] if row is not None else None

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a job.

        Args:
            data: `{title, salary, equity, companyHandle}`

        Returns:
            `{id, title, salary, equity, companyHandle}`

        Raises:
            BadRequestError: If the company does not exist.
            ConflictError: If the company already has a job with this title.
        """
        values = _to_store(data)
        title = values["title"]
        company_handle = values["companyHandle"]

        if not self._company_exists(company_handle):
            raise BadRequestError(f"No company: {company_handle}")
        if self._find_duplicate(title, company_handle) is not None:
            raise ConflictError(f"Duplicate title: {title}")

        query = assemble_query(
            Clause(
                'INSERT INTO "jobs" ("title", "salary", "equity", "company_handle") '
                "VALUES ($1, $2, $3, $4)",
                (title, values.get("salary"), values.get("equity"), company_handle),
            ),
            f"RETURNING {_SELECT_COLUMNS}",
        )
        try:
            job = self._fetch_one(query)
        except IntegrityError as e:
            logger.warning("job insert rejected by constraint: %s / %s", company_handle, title)
            raise ConflictError(f"Duplicate title: {title}") from e
        assert job is not None
        return _shape(job)

    def find_all(self, criteria: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        List jobs ordered by title.

        Args:
            criteria: Optional `{title, minSalary, hasEquity}`.
        """
        query = assemble_query(
            f'SELECT {_SELECT_COLUMNS} FROM "jobs"',
            build_filter_clause(criteria or {}, JOB_FILTERS, JOB_COLUMNS),
            'ORDER BY "title", "id"',
        )
        return [_shape(row) for row in execute(self.session, query).mappings()]

    def get(self, job_id: int) -> dict[str, Any]:
        """
        Retrieve a job with its company.

        Returns:
            `{id, title, salary, equity, company}` where company is
            `{handle, name, description, numEmployees, logoUrl}`.

        Raises:
            NotFoundError: If no job has this id.
        """
        row = self._fetch_one(
            assemble_query(
                'SELECT j."id", j."title", j."salary", j."equity", '
                'c."handle", c."name", c."description", '
                'c."num_employees" AS "numEmployees", c."logo_url" AS "logoUrl" '
                'FROM "jobs" AS j JOIN "companies" AS c ON c."handle" = j."company_handle"',
                Clause('WHERE j."id" = $1', (job_id,)),
            )
        )
        if row is None:
            raise NotFoundError(f"No job: {job_id}")

        return {
            "id": row["id"],
            "title": row["title"],
            "salary": row["salary"],
            "equity": format_equity(row["equity"]),
            "company": {
                key: row[key] for key in ("handle", "name", "description", "numEmployees", "logoUrl")
            },
        }

    def update(self, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Partially update a job.

        Args:
            job_id: The job to update.
            data: Any of `{title, salary, equity}`.

        Raises:
            EmptyPayloadError: If `data` is empty.
            ColumnNotAllowedError: If `data` names any other field.
            NotFoundError: If no job has this id.
            ConflictError: If the new title collides with another job of the company.
        """
        query = assemble_query(
            'UPDATE "jobs" SET',
            build_partial_update(_to_store(data), JOB_COLUMNS),
            Clause('WHERE "id" = $1', (job_id,)),
            f"RETURNING {_SELECT_COLUMNS}",
        )
        try:
            job = self._fetch_one(query)
        except IntegrityError as e:
            raise ConflictError(f"Duplicate title: {data.get('title')}") from e
        if job is None:
            raise NotFoundError(f"No job: {job_id}")
        return _shape(job)

    def remove(self, job_id: int) -> None:
        """
        Delete a job.

        Raises:
            NotFoundError: If no job has this id.
        """
        deleted = self._fetch_one(
            assemble_query(
                'DELETE FROM "jobs"',
                Clause('WHERE "id" = $1', (job_id,)),
                'RETURNING "id"',
            )
        )
        if deleted is None:
            raise NotFoundError(f"No job: {job_id}")
