"""Declare a form once; render it, validate it, and serve it with Litestar."""

from formwright.builder import Form, FormBuilder
from formwright.exceptions import (
    ConfigurationError,
    FormError,
    InvalidPathParameter,
    MissingPathParameter,
    UnsupportedValueType,
    ValidationError,
)
from formwright.fields import Choice, FieldKind, FieldSpec

__all__ = [
    "Choice",
    "ConfigurationError",
    "FieldKind",
    "FieldSpec",
    "Form",
    "FormBuilder",
    "FormError",
    "InvalidPathParameter",
    "MissingPathParameter",
    "UnsupportedValueType",
    "ValidationError",
]
