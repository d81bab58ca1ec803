"""Error taxonomy for form declaration, rendering, and submission."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError as PydanticValidationError


class FormError(Exception):
    """Base class for all formwright errors."""


class ConfigurationError(FormError):
    """Raised when a form declaration cannot be built."""


class PathParameterError(FormError):
    """Raised when render-time path parameters cannot produce an action URL."""

    reason = "Invalid path parameters"

    def __init__(self, names: list[str] | tuple[str, ...]):
        self.names = tuple(names)
        super().__init__(f"{self.reason}: {', '.join(self.names)}")


class MissingPathParameter(PathParameterError):
    reason = "Missing required path parameters"


class InvalidPathParameter(PathParameterError):
    reason = "Invalid values for path parameters"


class UnsupportedValueType(FormError, TypeError):
    """Raised when a current value cannot be projected into markup."""

    def __init__(self, field_name: str, value: Any):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"Unsupported value type for input field '{field_name}': "
            f"{type(value).__name__}"
        )


class ValidationError(FormError, ValueError):
    """A submitted body was rejected by the compiled validator.

    ``errors`` maps each failing field name to its messages. Errors that
    are not tied to a single field are stored under ``"__form__"``.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        details = "; ".join(
            f"{name}: {', '.join(messages)}" for name, messages in errors.items()
        )
        super().__init__(f"Form validation failed ({details})")

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> ValidationError:
        errors: dict[str, list[str]] = {}
        for err in exc.errors():
            field_name = str(err["loc"][0]) if err["loc"] else "__form__"
            errors.setdefault(field_name, []).append(err["msg"])
        return cls(errors)

    def first(self, field_name: str) -> str | None:
        """First message for a field, or None if it passed."""
        messages = self.errors.get(field_name)
        return messages[0] if messages else None

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.errors
