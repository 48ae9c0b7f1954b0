"""
Request Schemas and Typed Validation.

Request bodies and query strings are validated against the Pydantic models in
this module before anything reaches a repository or the clause builder.
`validate` never raises for bad input: it returns either `Valid(payload)` with
the parsed model or `Invalid(errors)` with a human-readable list of
violations, and the route decides what to do with it.

Bodies are validated in strict mode (`"1000"` is not a salary) and reject
unknown fields, which is also how attempts to change `id` or `companyHandle`
through a PATCH are refused. Query strings arrive as text, so filter schemas
use lax mode to parse numbers and booleans.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Generic, TypeVar
from urllib.parse import urlparse

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    model_validator,
)

from .errors import BadRequestError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Largest value an INTEGER column holds; larger ints fail in the driver.
MAX_INT = 2**31 - 1


@dataclass(frozen=True)
class Valid(Generic[ModelT]):
    """Validation succeeded; `payload` is the parsed model."""

    payload: ModelT


@dataclass(frozen=True)
class Invalid:
    """Validation failed; `errors` lists each violation as `field: message`."""

    errors: list[str]


def _describe(error: Any) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


def validate(schema: type[ModelT], data: Any) -> Valid[ModelT] | Invalid:
    """Validates `data` against `schema` and returns a discriminated result."""
    try:
        return Valid(schema.model_validate(data))
    except ValidationError as e:
        return Invalid([_describe(error) for error in e.errors()])


def _check_url(value: str) -> str:
    parsed = urlparse(value)
    if not (parsed.scheme in ("http", "https") and parsed.netloc):
        raise ValueError("must be an absolute http(s) URL")
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


UrlStr = Annotated[str, AfterValidator(_check_url)]
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]


class _Body(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    # Fields that may be omitted from a PATCH but may not be set to null.
    _not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> _Body:
        for name in self._not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                alias = type(self).model_fields[name].alias or name
                raise ValueError(f"{alias} may not be null")
        return self

    def to_payload(self) -> dict[str, Any]:
        """The fields the client actually sent, keyed by their external names."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# --- Companies ---


class CompanyNew(_Body):
    handle: str = Field(min_length=1, max_length=25, pattern=r"^[a-z0-9-]+$")
    name: str = Field(min_length=1)
    description: str
    num_employees: int | None = Field(default=None, alias="numEmployees", ge=0, le=MAX_INT)
    logo_url: UrlStr | None = Field(default=None, alias="logoUrl")


class CompanyUpdate(_Body):
    _not_nullable: ClassVar[tuple[str, ...]] = ("name", "description")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    num_employees: int | None = Field(default=None, alias="numEmployees", ge=0, le=MAX_INT)
    logo_url: UrlStr | None = Field(default=None, alias="logoUrl")


class CompanyFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name_like: OptionalText = Field(default=None, alias="nameLike")
    min_employees: int | None = Field(default=None, alias="minEmployees", ge=0, le=MAX_INT)
    max_employees: int | None = Field(default=None, alias="maxEmployees", ge=0, le=MAX_INT)

    @model_validator(mode="after")
    def check_employee_range(self) -> CompanyFilters:
        if (
            self.min_employees is not None
            and self.max_employees is not None
            and self.min_employees > self.max_employees
        ):
            raise ValueError("minEmployees cannot be greater than maxEmployees")
        return self

    def to_criteria(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# --- Jobs ---


class JobNew(_Body):
    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0, le=MAX_INT)
    equity: float | None = Field(default=None, ge=0, le=1)
    company_handle: str = Field(alias="companyHandle", min_length=1, max_length=25)


class JobUpdate(_Body):
    _not_nullable: ClassVar[tuple[str, ...]] = ("title",)

    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0, le=MAX_INT)
    equity: float | None = Field(default=None, ge=0, le=1)


class JobFilters(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: OptionalText = None
    min_salary: int | None = Field(default=None, alias="minSalary", ge=0, le=MAX_INT)
    has_equity: bool | None = Field(default=None, alias="hasEquity")

    def to_criteria(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def require_valid(schema: type[ModelT], data: Any) -> ModelT:
    """
    Validates `data` and returns the parsed model.

    Raises:
        BadRequestError: Carrying the list of violations when `data` is invalid.
    """
    result = validate(schema, data)
    if isinstance(result, Invalid):
        raise BadRequestError(result.errors)
    return result.payload
