"""Tests for the field-to-column mapping."""

from __future__ import annotations

import dataclasses

import pytest

from jobly_common.errors import ColumnNotAllowedError
from jobly_common.repositories import COMPANY_COLUMNS, JOB_COLUMNS
from jobly_common.sql import ColumnMapper, to_snake_case


class TestSnakeCase:
    """Test camelCase to snake_case conversion."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("title", "title"),
            ("numEmployees", "num_employees"),
            ("logoUrl", "logo_url"),
            ("companyHandle", "company_handle"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_converts(self, name: str, expected: str) -> None:
        assert to_snake_case(name) == expected


class TestResolve:
    """Test resolving external field names to columns."""

    def test_camel_case_field_resolves_to_snake_case_column(self) -> None:
        assert COMPANY_COLUMNS.resolve("numEmployees") == "num_employees"
        assert COMPANY_COLUMNS.resolve("logoUrl") == "logo_url"

    def test_alias_overrides_convention(self) -> None:
        mapper = ColumnMapper("users", {"firstName", "email"}, {"firstName": "given_name"})

        assert mapper.resolve("firstName") == "given_name"
        assert mapper.resolve("email") == "email"

    def test_quoted_wraps_identifier(self) -> None:
        assert JOB_COLUMNS.quoted("salary") == '"salary"'

    def test_field_outside_allow_list_is_rejected(self) -> None:
        with pytest.raises(ColumnNotAllowedError) as exc_info:
            JOB_COLUMNS.resolve("companyHandle")

        assert exc_info.value.field == "companyHandle"
        assert exc_info.value.entity == "jobs"
        assert exc_info.value.status_code == 400

    def test_immutable_identifiers_are_not_allow_listed(self) -> None:
        assert "id" not in JOB_COLUMNS
        assert "companyHandle" not in JOB_COLUMNS
        assert "handle" not in COMPANY_COLUMNS

    def test_injection_shaped_field_is_rejected(self) -> None:
        """A hostile key never reaches SQL text, it is just an unknown field."""
        with pytest.raises(ColumnNotAllowedError):
            COMPANY_COLUMNS.quoted('name" = 1; DROP TABLE "companies"; --')

    def test_column_name_is_not_accepted_as_field(self) -> None:
        with pytest.raises(ColumnNotAllowedError):
            COMPANY_COLUMNS.resolve("num_employees")


class TestFieldFor:
    """Test the inverse mapping from column back to field."""

    @pytest.mark.parametrize("mapper", [JOB_COLUMNS, COMPANY_COLUMNS], ids=["jobs", "companies"])
    def test_round_trips_every_allowed_field(self, mapper: ColumnMapper) -> None:
        for name in mapper.fields:
            assert mapper.field_for(mapper.resolve(name)) == name

    def test_unknown_column_is_rejected(self) -> None:
        with pytest.raises(ColumnNotAllowedError):
            JOB_COLUMNS.field_for("company_handle")


class TestConstruction:
    """Test configuration errors caught when a mapper is built."""

    def test_alias_for_field_not_allow_listed(self) -> None:
        with pytest.raises(ValueError, match="not allow-listed"):
            ColumnMapper("jobs", {"title"}, {"salary": "pay"})

    def test_invalid_column_name(self) -> None:
        with pytest.raises(ValueError, match="not a valid column name"):
            ColumnMapper("jobs", {"job title"})

    def test_invalid_alias_target(self) -> None:
        with pytest.raises(ValueError, match="not a valid column name"):
            ColumnMapper("jobs", {"title"}, {"title": 'title"; --'})

    def test_two_fields_mapping_to_one_column(self) -> None:
        with pytest.raises(ValueError, match="both map to column"):
            ColumnMapper("companies", {"numEmployees", "num_employees"})

    def test_mapper_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            JOB_COLUMNS.entity = "companies"  # type: ignore[misc]

    def test_aliases_are_read_only(self) -> None:
        mapper = ColumnMapper("users", {"firstName"}, {"firstName": "given_name"})

        with pytest.raises(TypeError):
            mapper.aliases["firstName"] = "name"  # type: ignore[index]
