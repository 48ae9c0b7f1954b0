"""
SQLAlchemy Models Defining the Jobly Database Schema.

These models are the code-first definition of the `companies` and `jobs`
tables. Repositories query them through generated SQL rather than through the
ORM, so the models exist to create the schema (tests, `init_db`) and to keep
the Alembic migration honest.

The unique constraints declared here are the authoritative duplicate guard.
Repositories also check for duplicates before inserting, but that check and
the insert are two statements, so two concurrent requests can both pass it.
Only the constraint stops the second insert.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# A standardized naming convention so constraint names are predictable and
# match between `create_all` and the Alembic migration.
metadata_obj = MetaData(
    naming_convention={
        "ix": "idx_%(table_name)s__%(column_0_label)s",
        "uq": "uq_%(table_name)s__%(column_0_name)s",
        "ck": "ck_%(table_name)s__%(constraint_name)s",
        "fk": "fk_%(table_name)s__%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)


class Base(DeclarativeBase):
    """Common declarative base carrying the shared `MetaData`."""

    metadata = metadata_obj


class Company(Base):
    """
    A company that posts jobs.

    Attributes:
        handle: Short, URL-safe identifier; the primary key. Immutable.
        name: Display name, unique across companies.
        description: Free-text description.
        num_employees: Head count, if known.
        logo_url: URL of the company logo, if any.
        jobs: The company's postings; deleted along with the company.
    """

    __tablename__ = "companies"

    handle: Mapped[str] = mapped_column(String(25), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    num_employees: Mapped[int | None] = mapped_column(Integer)
    logo_url: Mapped[str | None] = mapped_column(Text)

    jobs: Mapped[list[Job]] = relationship(
        "Job", back_populates="company", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("num_employees >= 0", name="num_employees_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Company(handle={self.handle}, name={self.name})>"


class Job(Base):
    """
    A job posting.

    Attributes:
        id: Generated identifier. Immutable.
        title: Job title; unique per company.
        salary: Yearly salary, if published.
        equity: Fraction of equity offered, between 0 and 1. Stored as an
            exact numeric and sent over the wire as a string.
        company_handle: Owning company. Immutable after creation.
    """

    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    salary: Mapped[int | None] = mapped_column(Integer)
    equity: Mapped[Decimal | None] = mapped_column(Numeric)
    company_handle: Mapped[str] = mapped_column(
        String(25), ForeignKey("companies.handle", ondelete="CASCADE"), nullable=False
    )

    company: Mapped[Company] = relationship("Company", back_populates="jobs")

    __table_args__ = (
        UniqueConstraint("title", "company_handle", name="uq_jobs__title_company_handle"),
        CheckConstraint("salary >= 0", name="salary_non_negative"),
        CheckConstraint("equity <= 1.0", name="equity_at_most_one"),
        Index("idx_jobs__company_handle", "company_handle"),
    )

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title}, company_handle={self.company_handle})>"
