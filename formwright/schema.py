"""Compile field declarations into one Pydantic model that validates submissions.

Each field kind maps to an ``Annotated`` type carrying its coercion and
constraints. The resulting model is built once per form and reused for
every request.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Annotated, Any, Callable, Literal, Optional

from litestar.datastructures import UploadFile
from pydantic import (
    AfterValidator,
    AnyUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    InstanceOf,
    StringConstraints,
    TypeAdapter,
    create_model,
)
from pydantic import ValidationError as PydanticValidationError

from formwright.exceptions import ValidationError
from formwright.fields import FieldKind, FieldSpec, to_utc_date

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

# Kinds whose empty-string submissions are kept as-is instead of meaning "absent"
KEEP_EMPTY_KINDS = frozenset(
    {FieldKind.SELECT, FieldKind.COLOR, FieldKind.RANGE, FieldKind.CHECKBOX}
)

_FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})

_url_adapter = TypeAdapter(AnyUrl)
_email_adapter = TypeAdapter(EmailStr)


def _check_url(value: str) -> str:
    try:
        _url_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Invalid url") from None
    return value


def _check_email(value: str) -> str:
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        raise ValueError("Invalid email address") from None
    return value


def _full_match(pattern: re.Pattern) -> Callable[[str], str]:
    def check(value: str) -> str:
        if pattern.fullmatch(value) is None:
            raise ValueError(f"String should match pattern '{pattern.pattern}'")
        return value

    return check


def _coerce_checkbox(value: Any) -> Any:
    """Browsers send "on" for a checked box and nothing for an unchecked one."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return value


def _coerce_integer(value: Any) -> Any:
    """Accept any numeric spelling of a whole number, e.g. "1e2" or "18.0"."""
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return value
        if math.isfinite(number) and number.is_integer():
            return int(number)
    return value


def _coerce_date(value: Any) -> Any:
    """Parse ISO dates and datetimes to a UTC calendar date. Bare digits are not timestamps."""
    if isinstance(value, date):
        return to_utc_date(value)
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.isdigit():
        raise ValueError("Invalid date")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return to_utc_date(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError("Invalid date") from None


def _string_type(field: FieldSpec) -> Any:
    opts = field.options
    metadata: list[Any] = [
        StringConstraints(min_length=opts.min_length, max_length=opts.max_length)
    ]
    if field.kind is FieldKind.URL:
        metadata.append(AfterValidator(_check_url))
    elif field.kind is FieldKind.EMAIL:
        metadata.append(AfterValidator(_check_email))
    if opts.pattern is not None:
        metadata.append(AfterValidator(_full_match(opts.pattern)))
    return Annotated[(str, *metadata)]


def _number_type(field: FieldSpec) -> Any:
    opts = field.options
    if opts.integer:
        return Annotated[int, BeforeValidator(_coerce_integer), Field(ge=opts.min, le=opts.max)]
    return Annotated[float, Field(ge=opts.min, le=opts.max, allow_inf_nan=False)]


def _date_type(field: FieldSpec) -> Any:
    opts = field.options
    return Annotated[date, BeforeValidator(_coerce_date), Field(ge=opts.min, le=opts.max)]


def _checkbox_type(field: FieldSpec) -> Any:
    if field.options.optional:
        return Annotated[bool, BeforeValidator(_coerce_checkbox)]
    # An unchecked required box fails here, e.g. terms acceptance
    return Annotated[Literal[True], BeforeValidator(_coerce_checkbox)]


def _select_type(field: FieldSpec) -> Any:
    return Literal[field.options.choice_values]


_TYPE_BUILDERS: dict[FieldKind, Callable[[FieldSpec], Any]] = {
    FieldKind.TEXT: _string_type,
    FieldKind.URL: _string_type,
    FieldKind.EMAIL: _string_type,
    FieldKind.PASSWORD: _string_type,
    FieldKind.TEL: _string_type,
    FieldKind.NUMBER: _number_type,
    FieldKind.RANGE: _number_type,
    FieldKind.DATE: _date_type,
    FieldKind.CHECKBOX: _checkbox_type,
    FieldKind.FILE: lambda field: InstanceOf[UploadFile],
    FieldKind.SELECT: _select_type,
    FieldKind.COLOR: lambda field: Annotated[str, StringConstraints(pattern=COLOR_PATTERN)],
    FieldKind.HIDDEN: lambda field: str,
}


def field_type(field: FieldSpec) -> tuple[Any, Any]:
    """Return the ``(annotation, FieldInfo)`` pair for one declaration."""
    annotation = _TYPE_BUILDERS[field.kind](field)
    if field.optional and field.kind is not FieldKind.CHECKBOX:
        return Optional[annotation], Field(default=None, alias=field.name)
    if field.kind is FieldKind.CHECKBOX and field.options.optional:
        return annotation, Field(default=False, alias=field.name)
    return annotation, Field(alias=field.name)


class CompiledValidator:
    """Record-level validator derived from an ordered list of fields.

    Stateless after construction; safe to share across concurrent requests.
    """

    def __init__(self, fields: tuple[FieldSpec, ...], model_name: str = "FormSubmission"):
        self.fields = fields
        # Attribute names are positional so any submitted name works as an alias
        self._attrs = {f"field_{index}": field for index, field in enumerate(fields)}
        self.model: type[BaseModel] = create_model(
            model_name,
            __config__=ConfigDict(extra="ignore"),
            **{attr: field_type(field) for attr, field in self._attrs.items()},
        )

    def _prepare(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field in self.fields:
            value = raw.get(field.name)
            if field.kind not in KEEP_EMPTY_KINDS and value == "":
                value = None
            if value is None:
                if field.kind is FieldKind.CHECKBOX:
                    # Unchecked boxes are simply missing from the body
                    data[field.name] = False
                continue
            data[field.name] = value
        return data

    def validate(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Validate a raw submission, returning a typed record keyed by field name.

        Raises formwright.exceptions.ValidationError listing every failing field.
        """
        try:
            instance = self.model.model_validate(self._prepare(raw))
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(exc) from exc

        return {
            field.name: getattr(instance, attr)
            for attr, field in self._attrs.items()
            if attr in instance.model_fields_set
        }


def compile_schema(fields: tuple[FieldSpec, ...] | list[FieldSpec]) -> CompiledValidator:
    return CompiledValidator(tuple(fields))
