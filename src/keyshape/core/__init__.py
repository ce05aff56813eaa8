"""Core components for KeyShape."""

from keyshape.core.types import (
    DataStructure,
    EntityData,
    FieldSpec,
    FieldType,
    HashData,
    JsonData,
    PhoneticMatcher,
    Point,
    StopWordsMode,
    StopWordsSpec,
)

__all__ = [
    "DataStructure",
    "EntityData",
    "FieldSpec",
    "FieldType",
    "HashData",
    "JsonData",
    "PhoneticMatcher",
    "Point",
    "StopWordsMode",
    "StopWordsSpec",
]
