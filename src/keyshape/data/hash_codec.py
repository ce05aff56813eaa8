"""Hash codec: entity data <-> flat field/value map.

Every value in a Hash is a string. Absent and null fields are never written,
so an entity whose fields are all null produces an empty Hash; the store
layer must then delete the key rather than write it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, assert_never

from keyshape.core.types import EntityData, FieldType, HashData, Point
from keyshape.data.conversions import (
    format_number,
    from_epoch_ms,
    is_number,
    parse_number,
    point_from_text,
    stringify,
    to_epoch_ms,
    to_point,
)
from keyshape.exceptions import (
    InvalidHashValueError,
    MalformedFieldValueError,
    TypeMismatchError,
    UnexpectedNullInArrayError,
)

if TYPE_CHECKING:
    from keyshape.schema.entity_schema import Schema
    from keyshape.schema.models import FieldDefinition

logger = logging.getLogger(__name__)

# Separator for list values that no schema field describes
DEFAULT_SEPARATOR = "|"


@dataclass
class HashConversion:
    """Result of converting entity data to a Hash."""

    data: HashData = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when nothing is left to store and the key should be deleted."""
        return not self.data


def to_hash(schema: Schema, data: Mapping[str, Any]) -> HashConversion:
    """Convert entity data to a Hash.

    Schema fields are written in schema order; keys the schema doesn't know
    pass through, converted by their runtime type.

    Raises:
        TypeMismatchError: If a value doesn't fit its field's type
        UnexpectedNullInArrayError: If a string[] value contains None
        InvalidHashValueError: If an unknown key holds a nested object
    """
    hash_data: HashData = {}
    known = set()
    for definition in schema:
        known.add(definition.name)
        value = data.get(definition.name)
        if value is None:
            continue
        hash_data[definition.hash_field] = _to_hash_value(definition, value)

    for key, value in data.items():
        if key in known or key in hash_data or value is None:
            continue
        hash_data[key] = _unknown_to_hash_value(key, value)

    logger.debug(f"Converted '{schema.entity_name}' entity to Hash with {len(hash_data)} fields")
    return HashConversion(hash_data)


def from_hash(schema: Schema, hash_data: Mapping[str, str | bytes]) -> EntityData:
    """Convert a Hash to entity data.

    Missing hash fields stay absent. Hash fields the schema doesn't know
    pass through as strings.

    Raises:
        MalformedFieldValueError: If a stored value can't be parsed or isn't UTF-8
    """
    data: EntityData = {}
    known = set()
    for definition in schema:
        known.add(definition.hash_field)
        raw = hash_data.get(definition.hash_field)
        if raw is None:
            continue
        data[definition.name] = _from_hash_value(definition, _decode(definition.name, raw))

    for key, raw in hash_data.items():
        if key in known or key in data:
            continue
        data[key] = _decode(key, raw)

    return data


def _decode(key: str, raw: Any) -> str:
    # Clients without decode_responses hand back bytes
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedFieldValueError(key, raw, "a UTF-8 string") from e
    if not isinstance(raw, str):
        raise TypeMismatchError(key, raw, "a string from the Hash")
    return raw


def _to_hash_value(definition: FieldDefinition, value: Any) -> str:
    name = definition.name
    field_type = definition.type
    match field_type:
        case FieldType.BOOLEAN:
            if isinstance(value, bool):
                return "1" if value else "0"
            raise TypeMismatchError(name, value, "a boolean")
        case FieldType.NUMBER:
            if is_number(value):
                return format_number(value)
            raise TypeMismatchError(name, value, "a number")
        case FieldType.DATE:
            return format_number(to_epoch_ms(name, value))
        case FieldType.POINT:
            return to_point(name, value).to_text()
        case FieldType.STRING | FieldType.TEXT:
            text = stringify(value)
            if text is None:
                raise TypeMismatchError(name, value, "a string")
            return text
        case FieldType.STRING_ARRAY:
            if not isinstance(value, (list, tuple)):
                raise TypeMismatchError(name, value, "a string[]")
            # Elements containing the separator are not escaped
            return definition.separator.join(_array_element(name, value, item) for item in value)
        case _:
            assert_never(field_type)


def _array_element(field_name: str, container: Any, item: Any) -> str:
    if item is None:
        raise UnexpectedNullInArrayError(field_name, container)
    text = stringify(item)
    if text is None:
        raise TypeMismatchError(field_name, item, "a string[] element")
    return text


def _from_hash_value(definition: FieldDefinition, raw: str) -> Any:
    name = definition.name
    field_type = definition.type
    match field_type:
        case FieldType.BOOLEAN:
            if raw == "1":
                return True
            if raw == "0":
                return False
            raise MalformedFieldValueError(name, raw, "'1' or '0'")
        case FieldType.NUMBER:
            number = parse_number(raw)
            if number is None:
                raise MalformedFieldValueError(name, raw, "a number")
            return number
        case FieldType.DATE:
            number = parse_number(raw)
            if number is None:
                raise MalformedFieldValueError(name, raw, "epoch milliseconds")
            try:
                return from_epoch_ms(number)
            except OverflowError as e:
                raise MalformedFieldValueError(name, raw, "epoch milliseconds in range") from e
        case FieldType.POINT:
            return point_from_text(name, raw)
        case FieldType.STRING | FieldType.TEXT:
            return raw
        case FieldType.STRING_ARRAY:
            # An empty string splits to [""], not []
            return raw.split(definition.separator)
        case _:
            assert_never(field_type)


def _unknown_to_hash_value(key: str, value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, date):
        return format_number(to_epoch_ms(key, value))
    if isinstance(value, Point):
        return value.to_text()
    if isinstance(value, (list, tuple)):
        return DEFAULT_SEPARATOR.join(_unknown_element(key, value, item) for item in value)
    text = stringify(value)
    if text is None:
        raise InvalidHashValueError(key, value)
    return text


def _unknown_element(key: str, container: Any, item: Any) -> str:
    text = stringify(item)
    if text is None:
        raise InvalidHashValueError(key, container)
    return text
