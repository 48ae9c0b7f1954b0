"""
Error Taxonomy for Jobly.

Every error the query builder and repositories can produce is one of the named
variants below. Each carries the HTTP status it maps to, so the API layer can
translate any of them into a response with a single exception handler, while
the core itself stays unaware of HTTP.

Variants:
- `BadRequestError` (400): structurally invalid input.
    - `EmptyPayloadError`: a partial update with nothing to set.
    - `ColumnNotAllowedError`: a field outside the entity's allow-list.
    - `ConflictError`: a duplicate natural key.
- `NotFoundError` (404): a lookup by identifier matched no row.
- `QueryContractError` (500): a caller assembled placeholders and parameters
  that do not line up. This is a programming defect, never user input.
"""

from __future__ import annotations

from typing import Any


class JoblyError(Exception):
    """Base class for all Jobly errors."""

    status_code: int = 500

    def __init__(self, message: str | list[str]):
        super().__init__(message if isinstance(message, str) else "; ".join(message))
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"message": self.message, "status": self.status_code}}


class BadRequestError(JoblyError):
    status_code = 400


class EmptyPayloadError(BadRequestError):
    def __init__(self, message: str = "No data"):
        super().__init__(message)


class ColumnNotAllowedError(BadRequestError):
    def __init__(self, field: str, entity: str):
        super().__init__(f"Field not allowed for {entity}: {field!r}")
        self.field = field
        self.entity = entity


class ConflictError(BadRequestError):
    pass


class NotFoundError(JoblyError):
    status_code = 404


class QueryContractError(JoblyError):
    status_code = 500
