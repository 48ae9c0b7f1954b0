"""
Jobly Common Package.

This package provides the shared configuration, persistence, and query-building
code used by the Jobly API service. It is kept free of any HTTP routing so that
the same building blocks can be reused by scripts and tests.

Key modules include:
-   `config`: Centralized configuration management.
-   `db`: Database connection, session management and query execution.
-   `models`: SQLAlchemy data models for the database schema.
-   `sql`: The dynamic SQL clause builder (column mapping, partial updates,
    filters and query assembly).
-   `repositories`: Data access layer for companies and jobs.
-   `errors`: The error taxonomy shared by every layer.
-   `schemas`: Request validation with typed `Valid`/`Invalid` results.
-   `auth`: Token issuance and the admin route guard.
"""

__version__ = "0.1.0"
