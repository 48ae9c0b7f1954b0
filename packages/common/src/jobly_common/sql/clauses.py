"""Clause values and the partial-update SET clause builder."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..errors import EmptyPayloadError
from .columns import ColumnMapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Clause:
    """
    An SQL fragment with `$n` placeholders and the values bound to them.

    An empty clause (no text) is falsy and is skipped by `assemble_query`.
    """

    text: str
    params: tuple[Any, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.text)

    @classmethod
    def empty(cls) -> Clause:
        return cls("")


def build_partial_update(
    payload: Mapping[str, Any],
    mapper: ColumnMapper,
    start: int = 1,
) -> Clause:
    """
    Builds the body of a `SET` clause from a sparse update payload.

    Example:
        >>> mapper = ColumnMapper("companies", {"name", "numEmployees"})
        >>> build_partial_update({"name": "Acme", "numEmployees": 10}, mapper)
        Clause(text='"name"=$1, "num_employees"=$2', params=('Acme', 10))

    Args:
        payload: Field name to new value. Only the fields being changed.
        mapper: The entity's column configuration.
        start: Number of the first placeholder, for callers that place this
            clause after parameters of their own.

    Returns:
        A `Clause` with one `"column"=$n` term per key, in payload order, and
        the values in the same order.

    Raises:
        EmptyPayloadError: If `payload` has no keys.
        ColumnNotAllowedError: On the first key outside the allow-list.
    """
    if start < 1:
        raise ValueError(f"Placeholders are 1-based, got start={start}")
    if not payload:
        raise EmptyPayloadError()

    terms: list[str] = []
    values: list[Any] = []
    for index, (field_name, value) in enumerate(payload.items(), start=start):
        terms.append(f"{mapper.quoted(field_name)}=${index}")
        values.append(value)

    clause = Clause(", ".join(terms), tuple(values))
    logger.debug("SET clause for %s: %s", mapper.entity, clause.text)
    return clause
