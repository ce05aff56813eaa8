"""Resolved field definitions.

A :class:`FieldDefinition` is a :class:`FieldSpec` bound to the schema's data
structure, with its storage location worked out.
"""

from __future__ import annotations

from dataclasses import dataclass

from keyshape.core.types import DataStructure, FieldSpec, FieldType
from keyshape.data.json_path import member_path, parse_path


@dataclass(frozen=True)
class FieldDefinition:
    """One schema field, immutable once the schema is built."""

    spec: FieldSpec
    data_structure: DataStructure

    def __post_init__(self) -> None:
        # Fail fast on unparseable paths instead of at conversion time
        if self.data_structure == DataStructure.JSON:
            parse_path(self.json_path)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def type(self) -> FieldType:
        return self.spec.type

    @property
    def hash_field(self) -> str:
        """Field name inside the Hash."""
        return self.spec.field or self.spec.name

    @property
    def json_path(self) -> str:
        """Path of the value inside the JSON document.

        Arrays of strings are addressed element-wise by default so the
        search module indexes each element as its own tag.
        """
        if self.spec.path:
            return self.spec.path
        path = member_path(self.spec.name)
        if self.spec.type == FieldType.STRING_ARRAY:
            return f"{path}[*]"
        return path

    @property
    def storage_path(self) -> str:
        """Locator for the configured data structure."""
        if self.data_structure == DataStructure.JSON:
            return self.json_path
        return self.hash_field

    @property
    def separator(self) -> str:
        return self.spec.separator

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "type": self.type.value,
            "storage_path": self.storage_path,
            "sortable": self.spec.sortable,
            "indexed": self.spec.indexed,
            "case_sensitive": self.spec.case_sensitive,
            "separator": self.spec.separator,
            "normalized": self.spec.normalized,
            "stemming": self.spec.stemming,
            "weight": self.spec.weight,
            "matcher": self.spec.matcher.value if self.spec.matcher else None,
        }
