"""
API Endpoints for Companies.

Same shape as the jobs endpoints: public reads, admin-only writes, schema
validation up front, `CompanyRepository` for everything touching the store.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from jobly_common.auth import RequestContext, require_admin
from jobly_common.db import get_db
from jobly_common.repositories import CompanyRepository
from jobly_common.schemas import CompanyFilters, CompanyNew, CompanyUpdate, require_valid

from .logger import log_event

router = APIRouter(prefix="/companies", tags=["companies"])


class CompanyOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    handle: str
    name: str
    description: str
    num_employees: int | None = Field(alias="numEmployees")
    logo_url: str | None = Field(alias="logoUrl")


class CompanyJobOut(BaseModel):
    id: int
    title: str
    salary: int | None
    equity: str | None


class CompanyDetailOut(CompanyOut):
    jobs: list[CompanyJobOut]


class CompanyEnvelope(BaseModel):
    company: CompanyOut


class CompanyDetailEnvelope(BaseModel):
    company: CompanyDetailOut


class CompanyListEnvelope(BaseModel):
    companies: list[CompanyOut]


class DeletedEnvelope(BaseModel):
    deleted: str


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CompanyEnvelope)
def create_company(
    body: Annotated[Any, Body()],
    ctx: Annotated[RequestContext, Depends(require_admin)],
) -> dict[str, Any]:
    """
    Creates a company.

    Body: `{handle, name, description, numEmployees, logoUrl}`; the last two
    are optional.
    """
    payload = require_valid(CompanyNew, body)
    with get_db() as session:
        company = CompanyRepository(session).create(payload.to_payload())
    log_event("INFO", "company_created", handle=company["handle"], by=ctx.username)
    return {"company": company}


@router.get("", response_model=CompanyListEnvelope)
def list_companies(request: Request) -> dict[str, Any]:
    """
    Lists companies, optionally filtered.

    Query parameters (all optional, combined with AND):
    - `nameLike`: case-insensitive substring of the name.
    - `minEmployees` / `maxEmployees`: inclusive head-count bounds. A minimum
      greater than the maximum is a 400.
    """
    filters = require_valid(CompanyFilters, dict(request.query_params))
    with get_db() as session:
        companies = CompanyRepository(session).find_all(filters.to_criteria())
    return {"companies": companies}


@router.get("/{handle}", response_model=CompanyDetailEnvelope)
def get_company(handle: str) -> dict[str, Any]:
    """Returns the company with its jobs."""
    with get_db() as session:
        company = CompanyRepository(session).get(handle)
    return {"company": company}


@router.patch("/{handle}", response_model=CompanyEnvelope)
def update_company(
    handle: str,
    body: Annotated[Any, Body()],
    ctx: Annotated[RequestContext, Depends(require_admin)],
) -> dict[str, Any]:
    """
    Partially updates a company.

    Body may contain any of `{name, description, numEmployees, logoUrl}`.
    The handle cannot be changed.
    """
    payload = require_valid(CompanyUpdate, body)
    with get_db() as session:
        company = CompanyRepository(session).update(handle, payload.to_payload())
    log_event("INFO", "company_updated", handle=handle, by=ctx.username)
    return {"company": company}


@router.delete("/{handle}", response_model=DeletedEnvelope)
def delete_company(
    handle: str,
    ctx: Annotated[RequestContext, Depends(require_admin)],
) -> dict[str, Any]:
    """Deletes a company together with its jobs."""
    with get_db() as session:
        CompanyRepository(session).remove(handle)
    log_event("INFO", "company_deleted", handle=handle, by=ctx.username)
    return {"deleted": handle}
