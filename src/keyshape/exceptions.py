"""Custom exceptions for KeyShape.

Every error carries a human-readable message plus a ``context`` dict that
names the offending field and value, so callers can decide whether to abort
the whole entity or substitute a default.
"""

from __future__ import annotations

import json
from typing import Any


def describe_value(value: Any) -> str:
    """Render a received value for an error message."""
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return repr(value)


class KeyShapeError(Exception):
    """Base exception for all KeyShape errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


# === Conversion Errors ===


class ConversionError(KeyShapeError):
    """A single field value could not be converted."""

    def __init__(self, message: str, field_name: str, value: Any, **extra: Any) -> None:
        super().__init__(message, {"field_name": field_name, "value": value, **extra})
        self.field_name = field_name
        self.value = value


class MalformedFieldValueError(ConversionError):
    """A raw stored string cannot be parsed as the field's declared type."""

    def __init__(self, field_name: str, raw_value: str, expected: str) -> None:
        message = (
            f"Expected {expected} for field '{field_name}' "
            f"but received: {describe_value(raw_value)}"
        )
        super().__init__(message, field_name, raw_value, expected=expected)
        self.raw_value = raw_value
        self.expected = expected


class TypeMismatchError(ConversionError):
    """A value's type is incompatible with the field's declared type."""

    def __init__(self, field_name: str, value: Any, expected: str) -> None:
        message = (
            f"Expected {expected} for field '{field_name}' "
            f"but received: {describe_value(value)}"
        )
        super().__init__(message, field_name, value, expected=expected)
        self.expected = expected


class UnexpectedNullInArrayError(ConversionError):
    """A string[] field met a null element."""

    def __init__(self, field_name: str, container: Any) -> None:
        message = (
            f"Expected a string[] for field '{field_name}' but received "
            f"an array or object containing null: {describe_value(container)}"
        )
        super().__init__(message, field_name, container)
        self.container = container


class InvalidHashValueError(KeyShapeError):
    """A value has no flat string form and cannot be stored in a Hash."""

    def __init__(self, key: str, value: Any) -> None:
        message = (
            f"Cannot store '{key}' in a Hash: nested objects are not supported. "
            f"Received: {describe_value(value)}"
        )
        super().__init__(message, {"key": key, "value": value})
        self.key = key
        self.value = value


# === Schema Errors ===


class InvalidSchemaError(KeyShapeError):
    """Schema definition is invalid."""

    pass


class UnsupportedFieldTypeError(InvalidSchemaError):
    """Unrecognized semantic type in a field definition."""

    VALID_TYPES = ["string", "text", "number", "boolean", "date", "point", "string[]"]

    def __init__(self, field_type: Any, field_name: str | None = None) -> None:
        where = f" on field '{field_name}'" if field_name else ""
        message = (
            f"Unsupported field type {describe_value(field_type)}{where}. "
            f"Valid types: {', '.join(self.VALID_TYPES)}"
        )
        super().__init__(
            message,
            {"field_type": field_type, "field_name": field_name, "valid_types": self.VALID_TYPES},
        )
        self.field_type = field_type
        self.field_name = field_name


class DuplicateFieldError(InvalidSchemaError):
    """Two fields in one schema share a name."""

    def __init__(self, field_name: str, entity_name: str) -> None:
        message = f"Field '{field_name}' is defined more than once on '{entity_name}'."
        super().__init__(message, {"field_name": field_name, "entity_name": entity_name})
        self.field_name = field_name
        self.entity_name = entity_name


class FieldNotFoundError(KeyShapeError):
    """Field does not exist on the schema."""

    def __init__(
        self, field_name: str, entity_name: str, available_fields: list[str] | None = None
    ) -> None:
        available = available_fields or []
        if available:
            message = (
                f"Field '{field_name}' not found on '{entity_name}'. "
                f"Available fields: {', '.join(available)}"
            )
        else:
            message = f"Field '{field_name}' not found on '{entity_name}'. No fields defined."

        super().__init__(
            message,
            {
                "field_name": field_name,
                "entity_name": entity_name,
                "available_fields": available,
            },
        )
        self.field_name = field_name
        self.entity_name = entity_name
        self.available_fields = available


class InvalidJsonPathError(InvalidSchemaError):
    """A JSON path cannot be parsed, or cannot be written to."""

    def __init__(self, path: str, reason: str) -> None:
        message = f"Invalid JSON path '{path}': {reason}"
        super().__init__(message, {"path": path, "reason": reason})
        self.path = path
        self.reason = reason
