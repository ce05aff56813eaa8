"""Schema management for KeyShape."""

from keyshape.schema.entity_schema import Schema, build_field_spec
from keyshape.schema.models import FieldDefinition

__all__ = [
    "Schema",
    "FieldDefinition",
    "build_field_spec",
]
