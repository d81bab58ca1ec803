"""Tests for field declarations from formwright.fields."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from formwright.exceptions import ConfigurationError
from formwright.fields import (
    OPTIONS_BY_KIND,
    Choice,
    DateOptions,
    FieldKind,
    FieldSpec,
    HiddenOptions,
    NumberOptions,
    RangeOptions,
    SelectOptions,
    StringOptions,
    to_utc_date,
)


class TestOptions:
    def test_every_kind_has_an_options_record(self):
        assert set(OPTIONS_BY_KIND) == set(FieldKind)

    def test_fields_are_required_by_default(self):
        assert StringOptions().optional is False
        assert NumberOptions().optional is False
        assert SelectOptions().optional is False

    def test_pattern_string_is_compiled(self):
        opts = StringOptions(pattern="^[a-z]+$")
        assert isinstance(opts.pattern, re.Pattern)
        assert opts.pattern.pattern == "^[a-z]+$"

    def test_compiled_pattern_is_kept(self):
        pattern = re.compile(r"\d+")
        assert StringOptions(pattern=pattern).pattern.pattern == r"\d+"

    def test_invalid_regex_rejected(self):
        with pytest.raises(PydanticValidationError):
            StringOptions(pattern="(unclosed")

    def test_negative_length_rejected(self):
        with pytest.raises(PydanticValidationError):
            StringOptions(min_length=-1)

    def test_unknown_option_rejected(self):
        with pytest.raises(PydanticValidationError):
            NumberOptions(step=5)

    def test_range_has_no_optional_flag(self):
        with pytest.raises(PydanticValidationError):
            RangeOptions(optional=True)

    def test_options_are_frozen(self):
        opts = NumberOptions(min=1)
        with pytest.raises(PydanticValidationError):
            opts.min = 5

    def test_number_bounds_keep_ints(self):
        opts = NumberOptions(min=0, max=120)
        assert opts.min == 0 and isinstance(opts.min, int)

    def test_date_bounds_reduce_datetimes_to_utc_dates(self):
        late_evening = datetime(2023, 12, 31, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        opts = DateOptions(min=datetime(2000, 1, 1, 12, 0), max=late_evening)
        assert opts.min == date(2000, 1, 1)
        assert opts.max == date(2024, 1, 1)


class TestSelectOptions:
    def test_pairs_become_choices(self):
        opts = SelectOptions(choices=[("us", "United States"), ("ca", "Canada")])
        assert opts.choices == (
            Choice(value="us", label="United States"),
            Choice(value="ca", label="Canada"),
        )
        assert opts.choice_values == ("us", "ca")

    def test_choice_objects_accepted(self):
        opts = SelectOptions(choices=[Choice(value="a", label="A")])
        assert opts.choice_values == ("a",)

    def test_missing_choices_default_to_empty(self):
        assert SelectOptions().choices == ()
        assert SelectOptions(choices=None).choices == ()


class TestFieldSpec:
    def test_mismatched_options_rejected(self):
        with pytest.raises(ConfigurationError, match="requires NumberOptions"):
            FieldSpec(name="age", kind=FieldKind.NUMBER, options=StringOptions())

    def test_display_label_uses_explicit_label(self):
        field = FieldSpec(name="email", kind=FieldKind.EMAIL, options=StringOptions(), label="E-mail")
        assert field.display_label == "E-mail"

    def test_display_label_derived_from_name(self):
        field = FieldSpec(name="first_name", kind=FieldKind.TEXT, options=StringOptions())
        assert field.display_label == "First Name"

    def test_optional_reflects_options(self):
        field = FieldSpec(name="bio", kind=FieldKind.TEXT, options=StringOptions(optional=True))
        assert field.optional is True

    def test_kinds_without_optional_flag_are_required(self):
        hidden = FieldSpec(name="token", kind=FieldKind.HIDDEN, options=HiddenOptions())
        volume = FieldSpec(name="volume", kind=FieldKind.RANGE, options=RangeOptions())
        assert hidden.optional is False
        assert volume.optional is False

    def test_field_spec_is_immutable(self):
        field = FieldSpec(name="name", kind=FieldKind.TEXT, options=StringOptions())
        with pytest.raises(AttributeError):
            field.name = "other"


def test_to_utc_date_passes_dates_through():
    assert to_utc_date(date(1990, 1, 1)) == date(1990, 1, 1)


def test_to_utc_date_converts_aware_datetimes():
    value = datetime(1990, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc_date(value) == date(1989, 12, 31)
