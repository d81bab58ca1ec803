"""HTML generation for declared forms.

Each field's attributes are a direct projection of its kind and options,
so the browser enforces the same constraints the compiled validator does.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from markupsafe import Markup, escape

from formwright.exceptions import UnsupportedValueType
from formwright.fields import STRING_KINDS, FieldKind, FieldSpec, to_utc_date

Attr = tuple[str, Any]


def _render_attrs(attrs: list[Attr]) -> str:
    """Render attribute pairs in order. ``True`` renders a bare attribute, ``None``/``False`` nothing."""
    parts = []
    for name, value in attrs:
        if value is None or value is False:
            continue
        if value is True:
            parts.append(name)
        else:
            parts.append(f'{name}="{escape(str(value))}"')
    return " " + " ".join(parts) if parts else ""


def _calendar_date(value: date) -> str:
    return to_utc_date(value).isoformat()


def _format_number(value: int | float | None) -> str | None:
    """Integral floats render without a trailing ".0", as browsers print them."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return None if value is None else str(value)


def _value_attr(field: FieldSpec, value: Any) -> Attr | None:
    """Project a current value onto ``value`` or ``checked``."""
    if value is None:
        return None
    if isinstance(value, bool):
        return ("checked", value)
    if isinstance(value, date):
        return ("value", _calendar_date(value))
    if isinstance(value, (int, float)):
        return ("value", _format_number(value))
    if isinstance(value, str):
        return ("value", value)
    raise UnsupportedValueType(field.name, value)


def _constraint_attrs(field: FieldSpec) -> list[Attr]:
    opts = field.options

    if field.kind in STRING_KINDS:
        return [
            ("minlength", opts.min_length),
            ("maxlength", opts.max_length),
            ("pattern", opts.pattern.pattern if opts.pattern is not None else None),
            ("placeholder", opts.placeholder),
        ]

    if field.kind in (FieldKind.NUMBER, FieldKind.RANGE):
        return [
            ("step", "1" if opts.integer else None),
            ("min", _format_number(opts.min)),
            ("max", _format_number(opts.max)),
        ]

    if field.kind is FieldKind.DATE:
        return [
            ("min", _calendar_date(opts.min) if opts.min is not None else None),
            ("max", _calendar_date(opts.max) if opts.max is not None else None),
        ]

    return []


def render_input(field: FieldSpec, value: Any = None) -> Markup:
    """Render a single ``<input>`` element, without its label."""
    attrs: list[Attr] = [("type", field.kind.value), ("name", field.name)]
    attrs += _constraint_attrs(field)
    attrs.append(("required", not field.optional))

    if field.kind is FieldKind.CHECKBOX:
        attrs.append(("checked", bool(value)))
    elif field.kind not in (FieldKind.PASSWORD, FieldKind.FILE):
        attrs.append(_value_attr(field, value) or ("value", None))

    if field.kind is FieldKind.FILE:
        attrs.append(("accept", field.options.accept))

    return Markup(f"<input{_render_attrs(attrs)}>")


def render_hidden(field: FieldSpec, value: Any = None) -> Markup:
    attrs: list[Attr] = [("type", "hidden"), ("name", field.name)]
    if isinstance(value, bool):
        attrs.append(("value", str(value).lower()))
    else:
        attrs.append(_value_attr(field, value) or ("value", None))
    return Markup(f"<input{_render_attrs(attrs)}>")


def _selected_values(value: Any) -> set[str]:
    if value is None:
        return set()
    if isinstance(value, (list, tuple, set, frozenset)):
        return {str(item) for item in value}
    return {str(value)}


def render_select(field: FieldSpec, value: Any = None) -> Markup:
    """Render a ``<select>``; ``value`` may be one value or a collection for multi-select."""
    opts = field.options
    selected = _selected_values(value)

    html = f"<select{_render_attrs([('name', field.name), ('required', not opts.optional)])}>"
    if opts.placeholder and not selected.intersection(opts.choice_values):
        html += f'<option value="" disabled selected>{escape(opts.placeholder)}</option>'
    for choice in opts.choices:
        attrs = [("value", choice.value), ("selected", choice.value in selected)]
        html += f"<option{_render_attrs(attrs)}>{escape(choice.label)}</option>"
    html += "</select>"
    return Markup(html)


def render_field(field: FieldSpec, value: Any = None, *, label_suffix: str = ":") -> Markup:
    """Render label + control for one field. Hidden fields get no label."""
    if field.kind is FieldKind.HIDDEN:
        return render_hidden(field, value)

    if field.kind is FieldKind.SELECT:
        control = render_select(field, value)
    else:
        control = render_input(field, value)

    return Markup(f"<label>{escape(field.display_label)}{escape(label_suffix)}{control}</label>")


def render_form(
    *,
    action: str,
    method: str,
    fields: tuple[FieldSpec, ...],
    values: Mapping[str, Any] | None = None,
    submit_label: str = "Submit",
    label_suffix: str = ":",
) -> Markup:
    """Render the complete ``<form>`` element with a trailing submit button."""
    values = values or {}
    attrs: list[Attr] = [("action", action), ("method", method)]
    if any(field.kind is FieldKind.FILE for field in fields):
        attrs.append(("enctype", "multipart/form-data"))

    html = f"<form{_render_attrs(attrs)}>"
    for field in fields:
        html += str(render_field(field, values.get(field.name), label_suffix=label_suffix))
    html += f'<button type="submit">{escape(submit_label)}</button></form>'
    return Markup(html)
