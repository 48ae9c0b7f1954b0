"""
Per-entity mapping from external field names to SQL column names.

A `ColumnMapper` is the only place a generated clause can get an identifier
from. Field names arriving in request payloads are camelCase (`numEmployees`)
while the store uses snake_case (`num_employees`); the mapper translates
between them and, more importantly, refuses any field that is not on the
entity's allow-list.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ..errors import ColumnNotAllowedError

_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_snake_case(name: str) -> str:
    """Converts a camelCase field name to the store's snake_case convention."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True, eq=False)
class ColumnMapper:
    """
    Immutable field-to-column configuration for one entity.

    Attributes:
        entity: Name used in error messages (e.g. "jobs").
        fields: The allow-list of external field names that may reach SQL text.
        aliases: Explicit field-to-column overrides. Allow-listed fields not
            listed here fall back to `to_snake_case`.

    Construction fails with `ValueError` if an alias names a field outside the
    allow-list, if a resolved column is not a plain lowercase identifier, or if
    two fields would resolve to the same column. The last rule keeps the
    mapping a bijection, so `field_for` can always invert `resolve`.
    """

    entity: str
    fields: Iterable[str]
    aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        fields = frozenset(self.fields)
        aliases = MappingProxyType(dict(self.aliases))

        unknown = sorted(set(aliases) - fields)
        if unknown:
            raise ValueError(f"{self.entity}: aliases for fields not allow-listed: {unknown}")

        columns: dict[str, str] = {}
        by_field: dict[str, str] = {}
        for name in sorted(fields):
            column = aliases.get(name, to_snake_case(name))
            if not _IDENTIFIER.match(column):
                raise ValueError(f"{self.entity}: {column!r} is not a valid column name")
            if column in columns:
                raise ValueError(
                    f"{self.entity}: fields {columns[column]!r} and {name!r} "
                    f"both map to column {column!r}"
                )
            columns[column] = name
            by_field[name] = column

        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "aliases", aliases)
        object.__setattr__(self, "_columns", MappingProxyType(by_field))
        object.__setattr__(self, "_fields", MappingProxyType(columns))

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._columns

    def resolve(self, field_name: str) -> str:
        """
        Returns the column for an external field name.

        Raises:
            ColumnNotAllowedError: If the field is not on the allow-list.
        """
        try:
            return self._columns[field_name]
        except KeyError:
            raise ColumnNotAllowedError(field_name, self.entity) from None

    def quoted(self, field_name: str) -> str:
        """Returns the resolved column as a double-quoted SQL identifier."""
        return f'"{self.resolve(field_name)}"'

    def field_for(self, column: str) -> str:
        """
        Returns the external field name that resolves to `column`.

        Raises:
            ColumnNotAllowedError: If no allow-listed field maps to the column.
        """
        try:
            return self._fields[column]
        except KeyError:
            raise ColumnNotAllowedError(column, self.entity) from None
