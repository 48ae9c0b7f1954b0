"""
Filter criteria to WHERE clause translation.

Each entity declares which criteria it accepts and how each one becomes a
predicate. Criteria are optional: a criterion whose value is `None` adds
nothing, and when nothing is present the resulting clause is empty so the
assembled query has no WHERE at all.

The `POSITIVE_FLAG` kind deserves a note. It backs `hasEquity` on jobs: `True`
keeps only rows whose column is strictly positive, while `False` means the
same as leaving the criterion out. It does NOT select the rows without equity.

CONTAINS matching is case-insensitive through `LOWER()` on both sides. PostgreSQL
folds all of Unicode there; SQLite, used by the test suite, folds only ASCII
letters, so on SQLite "É" does not match "é".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import BadRequestError, ColumnNotAllowedError
from .clauses import Clause
from .columns import ColumnMapper

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


class PredicateKind(str, Enum):
    """How a present criterion value is compared against its column."""

    CONTAINS = "contains"  # case-insensitive substring
    AT_LEAST = "at_least"  # inclusive lower bound
    AT_MOST = "at_most"  # inclusive upper bound
    POSITIVE_FLAG = "positive_flag"  # True -> column > 0, False -> no predicate


@dataclass(frozen=True)
class Predicate:
    """Binds a criterion to the allow-listed field it filters and its kind."""

    field: str
    kind: PredicateKind


def escape_like(value: str) -> str:
    """Escapes LIKE wildcards so user input only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_filter_clause(
    criteria: Mapping[str, Any],
    predicates: Mapping[str, Predicate],
    mapper: ColumnMapper,
    start: int = 1,
) -> Clause:
    """
    Builds a `WHERE` clause that ANDs one predicate per present criterion.

    Args:
        criteria: Criterion name to value; `None` values are treated as absent.
        predicates: The entity's declared criteria.
        mapper: The entity's column configuration.
        start: Number of the first placeholder.

    Returns:
        `WHERE ... AND ...` with its parameters, or an empty `Clause` when no
        criterion adds a predicate.

    Raises:
        ColumnNotAllowedError: For a criterion the entity does not declare.
        BadRequestError: For a flag criterion whose value is not a boolean.
    """
    if start < 1:
        raise ValueError(f"Placeholders are 1-based, got start={start}")

    terms: list[str] = []
    values: list[Any] = []
    for name, value in criteria.items():
        predicate = predicates.get(name)
        if predicate is None:
            raise ColumnNotAllowedError(name, mapper.entity)
        if value is None:
            continue

        column = mapper.quoted(predicate.field)
        placeholder = f"${start + len(values)}"

        if predicate.kind is PredicateKind.CONTAINS:
            terms.append(f"LOWER({column}) LIKE LOWER({placeholder}) ESCAPE '{LIKE_ESCAPE}'")
            values.append(f"%{escape_like(str(value))}%")
        elif predicate.kind is PredicateKind.AT_LEAST:
            terms.append(f"{column} >= {placeholder}")
            values.append(value)
        elif predicate.kind is PredicateKind.AT_MOST:
            terms.append(f"{column} <= {placeholder}")
            values.append(value)
        elif predicate.kind is PredicateKind.POSITIVE_FLAG:
            if not isinstance(value, bool):
                raise BadRequestError(f"{name} must be true or false")
            if value:
                terms.append(f"{column} > 0")

    if not terms:
        return Clause.empty()

    clause = Clause("WHERE " + " AND ".join(terms), tuple(values))
    logger.debug("WHERE clause for %s: %s", mapper.entity, clause.text)
    return clause
