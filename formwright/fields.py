"""Field declarations: the closed set of field kinds and their option records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, NonNegativeInt, field_validator

from formwright.exceptions import ConfigurationError


class FieldKind(str, Enum):
    TEXT = "text"
    URL = "url"
    EMAIL = "email"
    NUMBER = "number"
    DATE = "date"
    CHECKBOX = "checkbox"
    PASSWORD = "password"
    RANGE = "range"
    FILE = "file"
    SELECT = "select"
    COLOR = "color"
    TEL = "tel"
    HIDDEN = "hidden"


def to_utc_date(value: date) -> date:
    """Reduce a date or datetime to its calendar date in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


class _Options(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class StringOptions(_Options):
    """Options shared by text, url, email, password and tel fields."""

    optional: bool = False
    placeholder: str | None = None
    min_length: NonNegativeInt | None = None
    max_length: NonNegativeInt | None = None
    pattern: re.Pattern | None = None


class NumberOptions(_Options):
    optional: bool = False
    min: int | float | None = None
    max: int | float | None = None
    integer: bool = False


class RangeOptions(_Options):
    """Range inputs always carry a value, so they cannot be optional."""

    min: int | float | None = None
    max: int | float | None = None
    integer: bool = False


class DateOptions(_Options):
    optional: bool = False
    min: date | None = None
    max: date | None = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def _reduce_to_date(cls, value: Any) -> Any:
        if isinstance(value, date):
            return to_utc_date(value)
        return value


class CheckboxOptions(_Options):
    optional: bool = False


class FileOptions(_Options):
    optional: bool = False
    accept: str | None = None


class Choice(_Options):
    value: str
    label: str


class SelectOptions(_Options):
    choices: tuple[Choice, ...] = ()
    optional: bool = False
    placeholder: str | None = None

    @field_validator("choices", mode="before")
    @classmethod
    def _accept_pairs(cls, value: Any) -> Any:
        """Allow ``[("us", "United States"), ...]`` alongside Choice objects."""
        if value is None:
            return ()
        choices = []
        for item in value:
            if isinstance(item, (tuple, list)) and len(item) == 2:
                item = {"value": item[0], "label": item[1]}
            choices.append(item)
        return tuple(choices)

    @property
    def choice_values(self) -> tuple[str, ...]:
        return tuple(choice.value for choice in self.choices)


class ColorOptions(_Options):
    pass


class HiddenOptions(_Options):
    pass


KindOptions = Union[
    StringOptions,
    NumberOptions,
    RangeOptions,
    DateOptions,
    CheckboxOptions,
    FileOptions,
    SelectOptions,
    ColorOptions,
    HiddenOptions,
]

OPTIONS_BY_KIND: dict[FieldKind, type[_Options]] = {
    FieldKind.TEXT: StringOptions,
    FieldKind.URL: StringOptions,
    FieldKind.EMAIL: StringOptions,
    FieldKind.PASSWORD: StringOptions,
    FieldKind.TEL: StringOptions,
    FieldKind.NUMBER: NumberOptions,
    FieldKind.RANGE: RangeOptions,
    FieldKind.DATE: DateOptions,
    FieldKind.CHECKBOX: CheckboxOptions,
    FieldKind.FILE: FileOptions,
    FieldKind.SELECT: SelectOptions,
    FieldKind.COLOR: ColorOptions,
    FieldKind.HIDDEN: HiddenOptions,
}

STRING_KINDS = frozenset(
    {FieldKind.TEXT, FieldKind.URL, FieldKind.EMAIL, FieldKind.PASSWORD, FieldKind.TEL}
)


@dataclass(frozen=True)
class FieldSpec:
    """One named, typed slot in a form.

    ``name`` is the key used for rendering, validation, and looking up
    submitted and current values.
    """

    name: str
    kind: FieldKind
    options: KindOptions
    label: str | None = None

    def __post_init__(self):
        expected = OPTIONS_BY_KIND[self.kind]
        if not isinstance(self.options, expected):
            raise ConfigurationError(
                f"Field '{self.name}' of kind '{self.kind.value}' requires "
                f"{expected.__name__}, got {type(self.options).__name__}"
            )

    @property
    def display_label(self) -> str:
        if self.label is not None:
            return self.label
        return self.name.replace("_", " ").title()

    @property
    def optional(self) -> bool:
        return bool(getattr(self.options, "optional", False))

    def __repr__(self) -> str:
        return f"FieldSpec({self.name!r}, kind={self.kind.value!r})"
