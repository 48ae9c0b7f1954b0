"""
API Endpoints for Jobs.

Reads are public; creating, updating and deleting require an admin token.
Request bodies and query strings are validated with the schemas in
`jobly_common.schemas`, then handed to `JobRepository`, which builds and runs
the SQL. Domain errors raised below (`BadRequestError`, `NotFoundError`, ...)
are turned into responses by the handlers registered in `main`.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Path, Request, status
from pydantic import BaseModel, ConfigDict, Field

from jobly_common.auth import RequestContext, require_admin
from jobly_common.db import get_db
from jobly_common.repositories import JobRepository
from jobly_common.schemas import MAX_INT, JobFilters, JobNew, JobUpdate, require_valid

from .logger import log_event

router = APIRouter(prefix="/jobs", tags=["jobs"])

# Ids outside the INTEGER range cannot exist; reject them before they reach the driver.
JobId = Annotated[int, Path(ge=1, le=MAX_INT)]


class JobOut(BaseModel):
    """A job as returned by list, create and update."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    salary: int | None
    equity: str | None = Field(description="Exact decimal, e.g. '0.05'.")
    company_handle: str = Field(alias="companyHandle")


class JobCompanyOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    handle: str
    name: str
    description: str
    num_employees: int | None = Field(alias="numEmployees")
    logo_url: str | None = Field(alias="logoUrl")


class JobDetailOut(BaseModel):
    """A single job with its company joined in."""

    id: int
    title: str
    salary: int | None
    equity: str | None
    company: JobCompanyOut


class JobEnvelope(BaseModel):
    job: JobOut


class JobDetailEnvelope(BaseModel):
    job: JobDetailOut


class JobListEnvelope(BaseModel):
    jobs: list[JobOut]


class DeletedEnvelope(BaseModel):
    deleted: str


@router.post("", status_code=status.HTTP_201_CREATED, response_model=JobEnvelope)
def create_job(
    body: Annotated[Any, Body()],
    ctx: Annotated[RequestContext, Depends(require_admin)],
) -> dict[str, Any]:
    """
    Creates a job.

    Body: `{title, salary, equity, companyHandle}`; `salary` and `equity` are
    optional. Returns `{job: {id, title, salary, equity, companyHandle}}`.
    """
    payload = require_valid(JobNew, body)
    with get_db() as session:
        job = JobRepository(session).create(payload.to_payload())
    log_event("INFO", "job_created", job_id=job["id"], company_handle=job["companyHandle"], by=ctx.username)
    return {"job": job}


@router.get("", response_model=JobListEnvelope)
def list_jobs(request: Request) -> dict[str, Any]:
    """
    Lists jobs, optionally filtered.

    Query parameters (all optional, combined with AND):
    - `title`: case-insensitive substring of the title.
    - `minSalary`: salary at least this value.
    - `hasEquity`: `true` keeps only jobs offering equity; `false` is the same
      as leaving it out.
    """
    filters = require_valid(JobFilters, dict(request.query_params))
    with get_db() as session:
        jobs = JobRepository(session).find_all(filters.to_criteria())
    return {"jobs": jobs}


@router.get("/{job_id}", response_model=JobDetailEnvelope)
def get_job(job_id: JobId) -> dict[str, Any]:
    """Returns `{job: {id, title, salary, equity, company}}`."""
    with get_db() as session:
        job = JobRepository(session).get(job_id)
    return {"job": job}


@router.patch("/{job_id}", response_model=JobEnvelope)
def update_job(
    job_id: JobId,
    body: Annotated[Any, Body()],
    ctx: Annotated[RequestContext, Depends(require_admin)],
) -> dict[str, Any]:
    """
    Partially updates a job.

    Body may contain any of `{title, salary, equity}`. Changing `id` or
    `companyHandle` is refused with a 400, as is an empty body.
    """
    payload = require_valid(JobUpdate, body)
    with get_db() as session:
        job = JobRepository(session).update(job_id, payload.to_payload())
    log_event("INFO", "job_updated", job_id=job_id, by=ctx.username)
    return {"job": job}


@router.delete("/{job_id}", response_model=DeletedEnvelope)
def delete_job(
    job_id: JobId,
    ctx: Annotated[RequestContext, Depends(require_admin)],
) -> dict[str, Any]:
    """Deletes a job and returns `{deleted: "<id>"}`."""
    with get_db() as session:
        JobRepository(session).remove(job_id)
    log_event("INFO", "job_deleted", job_id=job_id, by=ctx.username)
    return {"deleted": str(job_id)}
