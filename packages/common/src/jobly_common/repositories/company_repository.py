"""Repository for company data access."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import execute
from ..errors import ConflictError, NotFoundError
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
from .job_repository import format_equity

logger = logging.getLogger(__name__)

# `handle` is deliberately absent: it is the identifier and never changes.
COMPANY_COLUMNS = ColumnMapper(
    "companies",
    {"name", "description", "numEmployees", "logoUrl"},
)

COMPANY_FILTERS: Mapping[str, Predicate] = {
    "nameLike": Predicate("name", PredicateKind.CONTAINS),
    "minEmployees": Predicate("numEmployees", PredicateKind.AT_LEAST),
    "maxEmployees": Predicate("numEmployees", PredicateKind.AT_MOST),
}

_SELECT_COLUMNS = (
    '"handle", "name", "description", '
    '"num_employees" AS "numEmployees", "logo_url" AS "logoUrl"'
)


class CompanyRepository:
    """
    Repository for company CRUD operations.

    Every statement is built with `jobly_common.sql` and executed through
    `jobly_common.db.execute`; rows come back as plain dicts keyed by the
    external (camelCase) field names.
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

    def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Create a company.

        Args:
            data: `{handle, name, description, numEmployees, logoUrl}`

        Returns:
            The created company.

        Raises:
            ConflictError: If the handle or name is already taken.
        """
        handle = data["handle"]
        existing = self._fetch_one(
            assemble_query(Clause('SELECT "handle" FROM "companies" WHERE "handle" = $1', (handle,)))
        )
        if existing is not None:
            raise ConflictError(f"Duplicate company: {handle}")

        query = assemble_query(
            Clause(
                'INSERT INTO "companies" ("handle", "name", "description", "num_employees", "logo_url") '
                "VALUES ($1, $2, $3, $4, $5)",
                (
                    handle,
                    data["name"],
                    data["description"],
                    data.get("numEmployees"),
                    data.get("logoUrl"),
                ),
            ),
            f"RETURNING {_SELECT_COLUMNS}",
        )
        try:
            company = self._fetch_one(query)
        except IntegrityError as e:
            # Lost a race with a concurrent insert, or the name is taken.
            logger.warning("company insert rejected by constraint: %s", handle)
            raise ConflictError(f"Duplicate company: {handle}") from e
        assert company is not None
        return company

    def find_all(self, criteria: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        List companies ordered by name.

        Args:
            criteria: Optional `{nameLike, minEmployees, maxEmployees}`.
        """
        query = assemble_query(
            f'SELECT {_SELECT_COLUMNS} FROM "companies"',
            build_filter_clause(criteria or {}, COMPANY_FILTERS, COMPANY_COLUMNS),
            'ORDER BY "name"',
        )
        return [dict(row) for row in execute(self.session, query).mappings()]

    def get(self, handle: str) -> dict[str, Any]:
        """
        Retrieve a company with its jobs.

        Returns:
            `{handle, name, description, numEmployees, logoUrl, jobs}` where
            jobs is `[{id, title, salary, equity}, ...]` ordered by id.

        Raises:
            NotFoundError: If no company has this handle.
        """
        company = self._fetch_one(
            assemble_query(
                f'SELECT {_SELECT_COLUMNS} FROM "companies"',
                Clause('WHERE "handle" = $1', (handle,)),
            )
        )
        if company is None:
            raise NotFoundError(f"No company: {handle}")

        jobs = execute(
            self.session,
            assemble_query(
                'SELECT "id", "title", "salary", "equity" FROM "jobs"',
                Clause('WHERE "company_handle" = $1', (handle,)),
                'ORDER BY "id"',
            ),
        ).mappings()
        company["jobs"] = [{**job, "equity": format_equity(job["equity"])} for job in jobs]
        return company

    def update(self, handle: str, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Partially update a company.

        Args:
            handle: The company to update.
            data: Any of `{name, description, numEmployees, logoUrl}`.

        Raises:
            EmptyPayloadError: If `data` is empty.
            ColumnNotAllowedError: If `data` names any other field.
            NotFoundError: If no company has this handle.
            ConflictError: If the new name is already taken.
        """
        query = assemble_query(
            'UPDATE "companies" SET',
            build_partial_update(data, COMPANY_COLUMNS),
            Clause('WHERE "handle" = $1', (handle,)),
            f"RETURNING {_SELECT_COLUMNS}",
        )
        try:
            company = self._fetch_one(query)
        except IntegrityError as e:
            raise ConflictError(f"Duplicate company name: {data.get('name')}") from e
        if company is None:
            raise NotFoundError(f"No company: {handle}")
        return company

    def remove(self, handle: str) -> None:
        """
        Delete a company and, through the foreign key, its jobs.

        Raises:
            NotFoundError: If no company has this handle.
        """
        deleted = self._fetch_one(
            assemble_query(
                'DELETE FROM "companies"',
                Clause('WHERE "handle" = $1', (handle,)),
                'RETURNING "handle"',
            )
        )
        if deleted is None:
            raise NotFoundError(f"No company: {handle}")
