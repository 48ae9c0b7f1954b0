"""Initial schema with companies and jobs tables

Revision ID: 001_jobly_init
Revises:
Create Date: 2026-10-19

This migration establishes:
- companies: one row per company, keyed by its immutable handle
- jobs: postings owned by a company, deleted along with it

The unique constraint on jobs(title, company_handle) is the authoritative
duplicate guard. The API checks for duplicates before inserting, but that
check is not atomic with the insert.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "001_jobly_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("handle", sa.String(length=25), nullable=False, comment="Immutable company handle"),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("num_employees", sa.Integer(), nullable=True),
        sa.Column("logo_url", sa.Text(), nullable=True),
        sa.CheckConstraint(
            "num_employees >= 0", name="ck_companies__num_employees_non_negative"
        ),
        sa.PrimaryKeyConstraint("handle", name="pk_companies"),
        sa.UniqueConstraint("name", name="uq_companies__name"),
        comment="Companies that post jobs",
    )

    op.create_table(
        "jobs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("salary", sa.Integer(), nullable=True),
        sa.Column(
            "equity",
            sa.Numeric(),
            nullable=True,
            comment="Fraction of equity offered, 0 to 1",
        ),
        sa.Column(
            "company_handle",
            sa.String(length=25),
            nullable=False,
            comment="Owning company; immutable after creation",
        ),
        sa.CheckConstraint("salary >= 0", name="ck_jobs__salary_non_negative"),
        sa.CheckConstraint("equity <= 1.0", name="ck_jobs__equity_at_most_one"),
        sa.ForeignKeyConstraint(
            ["company_handle"],
            ["companies.handle"],
            name="fk_jobs__companies",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_jobs"),
        sa.UniqueConstraint("title", "company_handle", name="uq_jobs__title_company_handle"),
        comment="Job postings",
    )

    # Listing jobs orders by title and filters by company on the detail page.
    op.create_index("idx_jobs__company_handle", "jobs", ["company_handle"])


def downgrade() -> None:
    op.drop_index("idx_jobs__company_handle", table_name="jobs")
    op.drop_table("jobs")
    op.drop_table("companies")
