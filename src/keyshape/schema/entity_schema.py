"""Entity schemas.

A schema is built once per entity type and then only read, so it can be
shared freely between threads.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any
from uuid import uuid4

from pydantic import ValidationError

from keyshape.core.types import DataStructure, FieldSpec, FieldType, StopWordsSpec
from keyshape.exceptions import (
    DuplicateFieldError,
    FieldNotFoundError,
    InvalidSchemaError,
    UnsupportedFieldTypeError,
)
from keyshape.schema.models import FieldDefinition

logger = logging.getLogger(__name__)

FieldsInput = Mapping[str, FieldSpec | Mapping[str, Any]] | Sequence[FieldSpec | Mapping[str, Any]]


def generate_uuid() -> str:
    """Generate a new UUID as string."""
    return str(uuid4())


def _format_errors(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(item) for item in detail["loc"]) or "options"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


def build_field_spec(
    name: str | None, options: FieldSpec | Mapping[str, Any], entity_name: str
) -> FieldSpec:
    """Validate one field's options into a FieldSpec.

    Raises:
        UnsupportedFieldTypeError: If the semantic type is unknown
        InvalidSchemaError: If any other option is invalid
    """
    if isinstance(options, FieldSpec):
        if name is not None and options.name != name:
            return options.model_copy(update={"name": name})
        return options

    raw = dict(options)
    if name is not None:
        raw["name"] = name
    if not raw.get("name"):
        raise InvalidSchemaError(
            f"A field on '{entity_name}' has no name.", {"entity_name": entity_name}
        )

    raw_type = raw.get("type", FieldType.STRING.value)
    try:
        FieldType(raw_type)
    except (ValueError, TypeError) as e:
        raise UnsupportedFieldTypeError(raw_type, raw["name"]) from e

    try:
        return FieldSpec.model_validate(raw)
    except ValidationError as e:
        raise InvalidSchemaError(
            f"Invalid options for field '{raw['name']}' on '{entity_name}': {_format_errors(e)}",
            {"entity_name": entity_name, "field_name": raw["name"]},
        ) from e


class Schema:
    """Ordered set of field definitions for one entity type.

    Field order is significant: it is the order the index builder emits
    fields in.

    Example:
        schema = Schema(
            "Bigfoot",
            {
                "title": {"type": "text"},
                "state": {"type": "string"},
                "tags": {"type": "string[]", "separator": ";"},
            },
            data_structure="JSON",
        )
    """

    def __init__(
        self,
        entity_name: str,
        fields: FieldsInput,
        *,
        data_structure: DataStructure | str = DataStructure.HASH,
        prefix: str | None = None,
        index_name: str | None = None,
        stop_words: StopWordsSpec | Mapping[str, Any] | None = None,
        id_strategy: Callable[[], str] | None = None,
    ) -> None:
        """Build a schema.

        Args:
            entity_name: Entity name, also the default key prefix
            fields: Mapping of name -> options, or a sequence of FieldSpecs/dicts
            data_structure: HASH or JSON
            prefix: Key prefix (defaults to entity_name)
            index_name: Search index name (defaults to "<prefix>:index")
            stop_words: Stop word configuration for the index
            id_strategy: Callable generating new entity ids

        Raises:
            UnsupportedFieldTypeError: If a field has an unknown type
            DuplicateFieldError: If two fields share a name
            InvalidSchemaError: If options are invalid
        """
        if not entity_name:
            raise InvalidSchemaError("Schemas need an entity name.")

        try:
            self._data_structure = DataStructure.parse(data_structure)
        except ValueError as e:
            raise InvalidSchemaError(
                f"Invalid data structure '{data_structure}'. Valid: HASH, JSON",
                {"data_structure": str(data_structure)},
            ) from e

        try:
            self._stop_words = (
                stop_words
                if isinstance(stop_words, StopWordsSpec)
                else StopWordsSpec.model_validate(stop_words or {})
            )
        except ValidationError as e:
            raise InvalidSchemaError(
                f"Invalid stop words for '{entity_name}': {_format_errors(e)}",
                {"entity_name": entity_name},
            ) from e

        self._entity_name = entity_name
        self._prefix = prefix or entity_name
        self._index_name = index_name or f"{self._prefix}:index"
        self._id_strategy = id_strategy or generate_uuid

        definitions: dict[str, FieldDefinition] = {}
        for spec in self._iter_specs(fields):
            if spec.name in definitions:
                raise DuplicateFieldError(spec.name, entity_name)
            definitions[spec.name] = FieldDefinition(spec, self._data_structure)
        self._fields = MappingProxyType(definitions)

        logger.debug(
            f"Built schema '{entity_name}' ({self._data_structure}) with {len(definitions)} fields"
        )

    def _iter_specs(self, fields: FieldsInput) -> Iterator[FieldSpec]:
        if isinstance(fields, Mapping):
            for name, options in fields.items():
                yield build_field_spec(name, options, self._entity_name)
        else:
            for options in fields:
                yield build_field_spec(None, options, self._entity_name)

    @classmethod
    def from_dict(
        cls, data: Mapping[str, Any], data_structure: DataStructure | str | None = None
    ) -> Schema:
        """Build a schema from a schema file's contents.

        Args:
            data: Parsed schema file (entity, fields, dataStructure, ...)
            data_structure: Overrides the file's dataStructure when given
        """
        entity_name = data.get("entity") or data.get("name")
        if not entity_name:
            raise InvalidSchemaError("Schema file must name its entity ('entity').")
        return cls(
            entity_name,
            data.get("fields", {}),
            data_structure=data_structure or data.get("dataStructure", DataStructure.HASH),
            prefix=data.get("prefix"),
            index_name=data.get("indexName"),
            stop_words=data.get("stopWords"),
        )

    @property
    def entity_name(self) -> str:
        return self._entity_name

    @property
    def data_structure(self) -> DataStructure:
        return self._data_structure

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def index_name(self) -> str:
        return self._index_name

    @property
    def index_hash_name(self) -> str:
        """Key holding the fingerprint of the current index definition."""
        return f"{self._index_name}:hash"

    @property
    def stop_words(self) -> StopWordsSpec:
        return self._stop_words

    @property
    def fields(self) -> Mapping[str, FieldDefinition]:
        """Read-only, ordered mapping of name -> FieldDefinition."""
        return self._fields

    @property
    def field_names(self) -> list[str]:
        return list(self._fields)

    def field(self, name: str) -> FieldDefinition:
        """Get a field definition by name."""
        if name not in self._fields:
            raise FieldNotFoundError(name, self._entity_name, self.field_names)
        return self._fields[name]

    def generate_id(self) -> str:
        return self._id_strategy()

    def key_for(self, entity_id: str) -> str:
        """Compose the storage key ``<prefix>:<id>``."""
        return f"{self._prefix}:{entity_id}"

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return (
            f"Schema({self._entity_name!r}, data_structure={self._data_structure.value!r}, "
            f"fields={self.field_names!r})"
        )
