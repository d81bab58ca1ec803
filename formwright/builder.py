"""Fluent form declaration and the immutable Form it builds."""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from litestar.handlers import HTTPRouteHandler
from markupsafe import Markup
from pydantic import ValidationError as PydanticValidationError

from formwright.config import get_settings
from formwright.exceptions import ConfigurationError
from formwright.fields import OPTIONS_BY_KIND, Choice, FieldKind, FieldSpec
from formwright.html import render_form
from formwright.paths import PathParam, build_action_url, parse_path_pattern
from formwright.routing import ErrorHandler, SideEffect, SuccessHandler, create_route_handler
from formwright.schema import CompiledValidator, compile_schema

ALLOWED_METHODS = ("GET", "POST")

Number = int | float


@dataclass(frozen=True)
class Form:
    """A built form. Read-only, safe to share across concurrent requests.

    Usage:
        form = (
            FormBuilder("/users/:id{\\d+}/profile")
            .add_text("name", "Name", min_length=2)
            .add_number("age", "Age", min=18, integer=True)
            .set_success_handler(on_success)
            .set_error_handler(on_error)
            .build()
        )

        html = form.render({"id": "42"}, {"name": "Jo"})
        form.register_route(app)
    """

    path: str
    method: str
    fields: tuple[FieldSpec, ...]
    path_params: tuple[PathParam, ...]
    validator: CompiledValidator
    success_handler: SuccessHandler
    error_handler: ErrorHandler
    side_effect: SideEffect | None = None

    def render(
        self,
        url_params: Mapping[str, Any] | None = None,
        values: Mapping[str, Any] | None = None,
        *,
        submit_label: str | None = None,
    ) -> Markup:
        """Render the form, substituting ``url_params`` into the action path.

        Raises MissingPathParameter, InvalidPathParameter or UnsupportedValueType.
        """
        settings = get_settings()
        action = build_action_url(self.path, self.path_params, url_params)
        return render_form(
            action=action,
            method=self.method,
            fields=self.fields,
            values=values,
            submit_label=submit_label if submit_label is not None else settings.submit_label,
            label_suffix=settings.label_suffix,
        )

    def validate(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        return self.validator.validate(raw)

    def route_handler(self) -> HTTPRouteHandler:
        """A fresh Litestar handler, usable in ``Litestar(route_handlers=[...])``."""
        return create_route_handler(
            path=self.path,
            method=self.method,
            validator=self.validator,
            side_effect=self.side_effect,
            success_handler=self.success_handler,
            error_handler=self.error_handler,
        )

    def register_route(self, app: Any) -> HTTPRouteHandler:
        """Install the submission handler on a running Litestar app or Router."""
        handler = self.route_handler()
        app.register(handler)
        return handler


class FormBuilder:
    """Accumulates field declarations and callbacks. Every mutator returns self."""

    def __init__(self, path: str, method: str = "POST"):
        method = method.upper()
        if method not in ALLOWED_METHODS:
            raise ConfigurationError(
                f"Unsupported form method '{method}', expected one of {', '.join(ALLOWED_METHODS)}"
            )
        self._path = path
        self._method = method
        self._fields: list[FieldSpec] = []
        self._side_effect: SideEffect | None = None
        self._success_handler: SuccessHandler | None = None
        self._error_handler: ErrorHandler | None = None

    def _add(self, kind: FieldKind, name: str, label: str | None, **options: Any) -> FormBuilder:
        options_type = OPTIONS_BY_KIND[kind]
        try:
            parsed = options_type(**options)
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid options for field '{name}': {exc}") from exc
        self._fields.append(FieldSpec(name=name, kind=kind, options=parsed, label=label))
        return self

    # -- Text-like fields --

    def add_text(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        placeholder: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | re.Pattern | None = None,
    ) -> FormBuilder:
        return self._add(
            FieldKind.TEXT, name, label,
            optional=optional, placeholder=placeholder,
            min_length=min_length, max_length=max_length, pattern=pattern,
        )

    def add_url(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        placeholder: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | re.Pattern | None = None,
    ) -> FormBuilder:
        return self._add(
            FieldKind.URL, name, label,
            optional=optional, placeholder=placeholder,
            min_length=min_length, max_length=max_length, pattern=pattern,
        )

    def add_email(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        placeholder: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | re.Pattern | None = None,
    ) -> FormBuilder:
        return self._add(
            FieldKind.EMAIL, name, label,
            optional=optional, placeholder=placeholder,
            min_length=min_length, max_length=max_length, pattern=pattern,
        )

    def add_password(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        placeholder: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | re.Pattern | None = None,
    ) -> FormBuilder:
        return self._add(
            FieldKind.PASSWORD, name, label,
            optional=optional, placeholder=placeholder,
            min_length=min_length, max_length=max_length, pattern=pattern,
        )

    def add_tel(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        placeholder: str | None = None,
        min_length: int | None = None,
        max_length: int | None = None,
        pattern: str | re.Pattern | None = None,
    ) -> FormBuilder:
        return self._add(
            FieldKind.TEL, name, label,
            optional=optional, placeholder=placeholder,
            min_length=min_length, max_length=max_length, pattern=pattern,
        )

    # -- Numeric and temporal fields --

    def add_number(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        min: Number | None = None,
        max: Number | None = None,
        integer: bool = False,
    ) -> FormBuilder:
        return self._add(
            FieldKind.NUMBER, name, label, optional=optional, min=min, max=max, integer=integer
        )

    def add_range(
        self,
        name: str,
        label: str | None = None,
        *,
        min: Number | None = None,
        max: Number | None = None,
        integer: bool = False,
    ) -> FormBuilder:
        return self._add(FieldKind.RANGE, name, label, min=min, max=max, integer=integer)

    def add_date(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        min: date | None = None,
        max: date | None = None,
    ) -> FormBuilder:
        return self._add(FieldKind.DATE, name, label, optional=optional, min=min, max=max)

    # -- Everything else --

    def add_checkbox(self, name: str, label: str | None = None, *, optional: bool = False) -> FormBuilder:
        return self._add(FieldKind.CHECKBOX, name, label, optional=optional)

    def add_file(
        self,
        name: str,
        label: str | None = None,
        *,
        optional: bool = False,
        accept: str | None = None,
    ) -> FormBuilder:
        return self._add(FieldKind.FILE, name, label, optional=optional, accept=accept)

    def add_select(
        self,
        name: str,
        label: str | None = None,
        choices: Iterable[Choice | tuple[str, str]] | None = None,
        *,
        optional: bool = False,
        placeholder: str | None = None,
    ) -> FormBuilder:
        """Add a ``<select>``. ``choices`` is an ordered list of ``(value, label)`` pairs."""
        return self._add(
            FieldKind.SELECT, name, label,
            choices=list(choices) if choices is not None else None,
            optional=optional, placeholder=placeholder,
        )

    def add_color(self, name: str, label: str | None = None) -> FormBuilder:
        return self._add(FieldKind.COLOR, name, label)

    def add_hidden(self, name: str) -> FormBuilder:
        return self._add(FieldKind.HIDDEN, name, None)

    # -- Callbacks --

    def set_side_effect(self, fn: SideEffect) -> FormBuilder:
        self._side_effect = fn
        return self

    def set_success_handler(self, fn: SuccessHandler) -> FormBuilder:
        self._success_handler = fn
        return self

    def set_error_handler(self, fn: ErrorHandler) -> FormBuilder:
        self._error_handler = fn
        return self

    # -- Finalization --

    def _check_fields(self) -> None:
        duplicates = [name for name, count in Counter(f.name for f in self._fields).items() if count > 1]
        if duplicates:
            raise ConfigurationError(f"Duplicate field names: {', '.join(duplicates)}")

        for field in self._fields:
            if field.kind is FieldKind.SELECT and not field.options.choices:
                raise ConfigurationError(f"Select field '{field.name}' requires at least one choice")

    def build(self) -> Form:
        """Freeze the declaration into a Form.

        Raises ConfigurationError if a handler is missing or a field is misdeclared.
        """
        if self._error_handler is None:
            raise ConfigurationError("Error handler not set")
        if self._success_handler is None:
            raise ConfigurationError("Success handler not set")
        self._check_fields()

        fields = tuple(self._fields)
        return Form(
            path=self._path,
            method=self._method,
            fields=fields,
            path_params=parse_path_pattern(self._path),
            validator=compile_schema(fields),
            side_effect=self._side_effect,
            success_handler=self._success_handler,
            error_handler=self._error_handler,
        )
