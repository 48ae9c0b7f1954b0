"""
Dynamic SQL clause builder.

Turns sparse, externally supplied fields into parameterized SQL without one
hand-written query per combination of fields:

- `ColumnMapper`: per-entity allow-list and field-to-column mapping.
- `build_partial_update`: update payload to a `SET` clause body.
- `build_filter_clause`: optional criteria to a `WHERE` clause.
- `assemble_query`: base statement plus clauses to a `ParameterizedQuery`.

Values only ever travel as parameters, and identifiers only ever come from a
mapper's configuration. Nothing here performs I/O or keeps state between calls.
"""

from __future__ import annotations

from .clauses import Clause, build_partial_update
from .columns import ColumnMapper, to_snake_case
from .filters import Predicate, PredicateKind, build_filter_clause, escape_like
from .query import ParameterizedQuery, assemble_query

__all__ = [
    "Clause",
    "ColumnMapper",
    "ParameterizedQuery",
    "Predicate",
    "PredicateKind",
    "assemble_query",
    "build_filter_clause",
    "build_partial_update",
    "escape_like",
    "to_snake_case",
]
