"""
Query assembly: base statement plus generated clauses to one executable query.

Every fragment numbers its own placeholders from wherever its builder was told
to start. `assemble_query` rewrites them so the final text reads `$1..$N` from
left to right and reorders the parameters to match, which lets builders be
used without knowing what comes before them in the statement.
"""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Any

from ..errors import QueryContractError
from .clauses import Clause

PLACEHOLDER = re.compile(r"\$(\d+)")


@dataclass(frozen=True)
class ParameterizedQuery:
    """Final query text with `$n` placeholders and the values bound to them."""

    text: str
    params: tuple[Any, ...]

    @property
    def placeholders(self) -> list[int]:
        """Placeholder numbers in the order they appear in the text."""
        return [int(n) for n in PLACEHOLDER.findall(self.text)]

    def as_named(self, prefix: str = "p_") -> tuple[str, dict[str, Any]]:
        """
        Rewrites `$n` as `:{prefix}n` named binds.

        This is the form `sqlalchemy.text` accepts, and it works across
        DBAPI paramstyles.
        """
        text = PLACEHOLDER.sub(lambda m: f":{prefix}{m.group(1)}", self.text)
        binds = {f"{prefix}{i}": value for i, value in enumerate(self.params, start=1)}
        return text, binds


def _renumber(fragment: Clause, offset: int) -> tuple[str, list[Any]]:
    found = [int(n) for n in PLACEHOLDER.findall(fragment.text)]
    count = len(fragment.params)

    if len(found) != count:
        raise QueryContractError(
            f"Fragment has {len(found)} placeholders but {count} parameters: {fragment.text!r}"
        )
    if len(set(found)) != count:
        raise QueryContractError(f"Fragment repeats a placeholder: {fragment.text!r}")
    if not found:
        return fragment.text, []

    first = min(found)
    if sorted(found) != list(range(first, first + count)):
        raise QueryContractError(f"Fragment placeholders are not contiguous: {fragment.text!r}")

    params = [fragment.params[n - first] for n in found]
    numbers = itertools.count(offset + 1)
    text = PLACEHOLDER.sub(lambda _: f"${next(numbers)}", fragment.text)
    return text, params


def assemble_query(*fragments: Clause | str | None) -> ParameterizedQuery:
    """
    Joins fragments into a `ParameterizedQuery`.

    Args:
        *fragments: Plain strings (text without parameters), `Clause` values,
            or `None`. `None` and empty clauses are skipped, which is how an
            absent WHERE clause drops out.

    Raises:
        QueryContractError: If a fragment's placeholders are repeated, not
            contiguous, or do not match its number of parameters.
    """
    parts: list[str] = []
    params: list[Any] = []
    for fragment in fragments:
        if fragment is None:
            continue
        if isinstance(fragment, str):
            fragment = Clause(fragment)
        if not fragment:
            continue
        text, ordered = _renumber(fragment, len(params))
        parts.append(text.strip())
        params.extend(ordered)
    return ParameterizedQuery(" ".join(parts), tuple(params))
