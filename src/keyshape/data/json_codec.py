"""JSON codec: entity data <-> nested document.

Entity data maps field names to values. A field stored at a definite path
other than ``$.<name>`` (``$.address.city``) is written at that path and read
back under its name. Data already shaped like the document is accepted on
write too. Fields with wildcard paths are converted in place, element by
element. Work happens on a deep copy, so the caller's objects are never
modified, and keys the schema doesn't describe are carried along.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, assert_never

from keyshape.core.types import EntityData, FieldType, JsonData, Point
from keyshape.data.conversions import (
    from_epoch_ms,
    is_number,
    is_point_text,
    point_from_text,
    stringify,
    to_epoch_ms,
    to_point,
)
from keyshape.data.json_path import (
    Location,
    assign,
    is_definite,
    member_path,
    remove,
    resolve,
    strip_wildcard,
)
from keyshape.exceptions import TypeMismatchError, UnexpectedNullInArrayError

if TYPE_CHECKING:
    from keyshape.schema.entity_schema import Schema
    from keyshape.schema.models import FieldDefinition

logger = logging.getLogger(__name__)


@dataclass
class JsonConversion:
    """Result of converting entity data to a JSON document."""

    data: JsonData = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True when the document holds nothing and the key should be deleted."""
        return not self.data


def _value_path(definition: FieldDefinition) -> str:
    # string[] paths address elements ($.tags[*]); values are read and written
    # at the array itself
    if definition.type == FieldType.STRING_ARRAY:
        return strip_wildcard(definition.json_path)
    return definition.json_path


def _is_element_wise(definition: FieldDefinition, path: str) -> bool:
    return definition.type == FieldType.STRING_ARRAY and not is_definite(path)


def to_json(schema: Schema, data: Mapping[str, Any]) -> JsonConversion:
    """Convert entity data to a JSON document.

    Null fields are removed rather than written as null, along with any
    objects or arrays that removal leaves empty.

    Raises:
        TypeMismatchError: If a value doesn't fit its field's type
        UnexpectedNullInArrayError: If a string[] value contains None
    """
    document: JsonData = copy.deepcopy(dict(data))
    for definition in schema:
        path = _value_path(definition)
        locations = resolve(document, path)

        if not locations:
            _relocate(definition, document, path)
        elif _is_element_wise(definition, path):
            for location in locations:
                location.set(_convert_array_match(definition, location.value, location.container))
        elif len(locations) == 1:
            location = locations[0]
            if location.value is None:
                remove(document, path)
            else:
                location.set(_to_json_value(definition, location.value))
        else:
            _raise_multiple(definition, locations)

    document = _convert_unknown(document)
    logger.debug(f"Converted '{schema.entity_name}' entity to JSON with {len(document)} keys")
    return JsonConversion(document)


def _is_relocated(definition: FieldDefinition, path: str) -> bool:
    """Whether the field lives under its name in entity data but elsewhere in the document."""
    return path != member_path(definition.name) and is_definite(path)


def _relocate(definition: FieldDefinition, document: JsonData, path: str) -> None:
    """Move a value held under the field's name to its storage path."""
    if not _is_relocated(definition, path) or definition.name not in document:
        return
    value = document.pop(definition.name)
    if value is not None:
        assign(document, path, _to_json_value(definition, value))


def from_json(schema: Schema, document: Mapping[str, Any]) -> EntityData:
    """Convert a JSON document to entity data.

    Fields whose path matches nothing stay absent; nulls pass through.
    Values read from a relocated path are returned under the field's name.

    Raises:
        TypeMismatchError: If a stored value doesn't fit its field's type
        UnexpectedNullInArrayError: If a string[] field holds a null element
    """
    data: EntityData = copy.deepcopy(dict(document))
    for definition in schema:
        path = _value_path(definition)
        locations = resolve(data, path)

        if not locations:
            continue
        if _is_element_wise(definition, path):
            for location in locations:
                location.set(_convert_array_match(definition, location.value, location.container))
        elif len(locations) == 1:
            value = _from_json_value(definition, locations[0].value)
            if _is_relocated(definition, path):
                remove(data, path)
                data[definition.name] = value
            else:
                locations[0].set(value)
        else:
            _raise_multiple(definition, locations)

    return data


def _raise_multiple(definition: FieldDefinition, locations: list[Location]) -> None:
    raise TypeMismatchError(
        definition.name,
        [location.value for location in locations],
        f"a single value at '{definition.json_path}' ({len(locations)} matched)",
    )


def _to_json_value(definition: FieldDefinition, value: Any) -> Any:
    name = definition.name
    field_type = definition.type
    match field_type:
        case FieldType.BOOLEAN:
            if isinstance(value, bool):
                return value
            raise TypeMismatchError(name, value, "a boolean")
        case FieldType.NUMBER:
            if is_number(value):
                return value
            raise TypeMismatchError(name, value, "a number")
        case FieldType.DATE:
            return to_epoch_ms(name, value)
        case FieldType.POINT:
            return to_point(name, value).to_text()
        case FieldType.STRING | FieldType.TEXT:
            text = stringify(value)
            if text is None:
                raise TypeMismatchError(name, value, "a string")
            return text
        case FieldType.STRING_ARRAY:
            if isinstance(value, (list, tuple)):
                return [_array_element(name, value, item) for item in value]
            raise TypeMismatchError(name, value, "a string[]")
        case _:
            assert_never(field_type)


def _from_json_value(definition: FieldDefinition, value: Any) -> Any:
    if value is None:
        return None

    name = definition.name
    field_type = definition.type
    match field_type:
        case FieldType.BOOLEAN:
            if isinstance(value, bool):
                return value
            raise TypeMismatchError(name, value, "true, false, or null")
        case FieldType.NUMBER:
            if is_number(value):
                return value
            raise TypeMismatchError(name, value, "a number")
        case FieldType.DATE:
            if not is_number(value):
                raise TypeMismatchError(name, value, "a number containing an epoch date")
            try:
                return from_epoch_ms(value)
            except OverflowError as e:
                raise TypeMismatchError(name, value, "an epoch date in range") from e
        case FieldType.POINT:
            if is_point_text(value):
                return point_from_text(name, value)
            raise TypeMismatchError(name, value, "a point string")
        case FieldType.STRING | FieldType.TEXT:
            text = stringify(value)
            if text is None:
                raise TypeMismatchError(name, value, "a string")
            return text
        case FieldType.STRING_ARRAY:
            if isinstance(value, list):
                return [_array_element(name, value, item) for item in value]
            raise TypeMismatchError(name, value, "a string[]")
        case _:
            assert_never(field_type)


def _array_element(field_name: str, container: Any, item: Any) -> str:
    if item is None:
        raise UnexpectedNullInArrayError(field_name, container)
    text = stringify(item)
    if text is None:
        raise TypeMismatchError(field_name, item, "a string[] element")
    return text


def _convert_array_match(definition: FieldDefinition, value: Any, container: Any) -> Any:
    # One match of a wildcard path: an element, or a nested array
    if value is None:
        raise UnexpectedNullInArrayError(definition.name, container)
    if isinstance(value, (list, tuple)):
        return [_array_element(definition.name, value, item) for item in value]
    return _array_element(definition.name, container, value)


def _convert_unknown(value: Any) -> Any:
    """Give values no field describes a JSON form (dates, points, tuples)."""
    if isinstance(value, dict):
        return {key: _convert_unknown(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert_unknown(item) for item in value]
    if isinstance(value, date):
        return to_epoch_ms("", value)
    if isinstance(value, Point):
        return value.to_text()
    return value
