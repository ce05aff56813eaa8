"""Core types and specifications for KeyShape.

All specs are immutable pydantic models so a constructed schema can be
shared across threads without coordination.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

# Entity data: field name -> semantic value (str, int/float, bool, datetime,
# Point, list[str]). JSON schemas may also nest values at their JSON paths.
EntityData = dict[str, Any]
HashData = dict[str, str]
JsonData = dict[str, Any]

# Range accepted by the search module's GEO index
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -85.05112878
MAX_LATITUDE = 85.05112878


class FieldType(StrEnum):
    """Supported semantic field types."""

    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    POINT = "point"
    STRING_ARRAY = "string[]"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid field type values."""
        return [t.value for t in cls]


class DataStructure(StrEnum):
    """Physical representation used to store entities."""

    HASH = "HASH"  # Flat field -> string map
    JSON = "JSON"  # Nested document

    @classmethod
    def parse(cls, value: str | DataStructure) -> DataStructure:
        """Parse a data structure name, case-insensitively."""
        return cls(str(value).upper())


class StopWordsMode(StrEnum):
    """How the search index treats stop words."""

    OFF = "OFF"  # STOPWORDS 0
    DEFAULT = "DEFAULT"  # Module defaults, nothing emitted
    CUSTOM = "CUSTOM"  # STOPWORDS n word...


class PhoneticMatcher(StrEnum):
    """Double Metaphone matchers for text fields."""

    ENGLISH = "dm:en"
    FRENCH = "dm:fr"
    PORTUGUESE = "dm:pt"
    SPANISH = "dm:es"


class Point(BaseModel):
    """A geographic point."""

    longitude: float = Field(..., ge=MIN_LONGITUDE, le=MAX_LONGITUDE)
    latitude: float = Field(..., ge=MIN_LATITUDE, le=MAX_LATITUDE)

    model_config = {"frozen": True}

    def to_text(self) -> str:
        """Return the ``"<longitude>,<latitude>"`` storage form."""
        return f"{self.longitude},{self.latitude}"


class FieldSpec(BaseModel):
    """Specification for a field definition.

    This is the input format for schema fields. Options that make no sense for
    the field's type or data structure are accepted here and reported by the
    index builder as warnings.
    """

    name: str = Field(..., min_length=1, description="Field name, unique within a schema")
    type: FieldType = Field(default=FieldType.STRING, description="Semantic type")
    path: str | None = Field(default=None, description="JSON path (JSON schemas only)")
    field: str | None = Field(default=None, description="Hash field name (Hash schemas only)")
    sortable: bool = Field(default=False, description="Add SORTABLE to the index")
    indexed: bool = Field(default=True, description="Index the field (NOINDEX when false)")
    case_sensitive: bool = Field(default=False, description="Case-sensitive TAG matching")
    separator: str = Field(default="|", description="Delimiter for TAG values")
    normalized: bool = Field(default=True, description="Normalize sortable values (UNF when false)")
    stemming: bool = Field(default=True, description="Stem text values (NOSTEM when false)")
    weight: float | None = Field(default=None, gt=0, description="Text field weight")
    matcher: PhoneticMatcher | None = Field(default=None, description="Phonetic matcher")

    # Schema files use camelCase option names (caseSensitive)
    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}

    @field_validator("separator")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("separator must be exactly one character")
        return value


class StopWordsSpec(BaseModel):
    """Stop word configuration for an index."""

    mode: StopWordsMode = StopWordsMode.DEFAULT
    words: tuple[str, ...] = ()

    model_config = {"frozen": True}
