"""
Data Access Layer: Repositories for Jobly.

Repositories are the CRUD orchestration layer. They take already validated
payloads and filter criteria, hand them to the clause builder in
`jobly_common.sql` together with the entity's `ColumnMapper`, execute the
resulting `ParameterizedQuery`, and shape rows into response dicts. They raise
`NotFoundError` and `ConflictError`; committing is left to the caller's
`get_db()` block.
"""

from __future__ import annotations

from .company_repository import COMPANY_COLUMNS, COMPANY_FILTERS, CompanyRepository
from .job_repository import JOB_COLUMNS, JOB_FILTERS, JobRepository

__all__ = [
    "COMPANY_COLUMNS",
    "COMPANY_FILTERS",
    "CompanyRepository",
    "JOB_COLUMNS",
    "JOB_FILTERS",
    "JobRepository",
]
