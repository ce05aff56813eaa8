"""KeyShape - Schema-driven marshalling for Hash and JSON key-value stores.

Converts entity data to and from a store's two physical representations (a
flat Hash of strings, or a nested JSON document) and compiles schemas into
the search module's index definition. No I/O happens here: callers hand the
payloads and commands to their own client.

Example:
    from keyshape import Schema, build_index_definition, to_hash

    schema = Schema(
        "Bigfoot",
        {
            "title": {"type": "text"},
            "state": {"type": "string"},
            "eyewitness": {"type": "boolean"},
            "tags": {"type": "string[]"},
        },
    )

    payload = to_hash(schema, {"title": "Sighting", "eyewitness": True})
    if payload.is_empty:
        client.delete(schema.key_for(entity_id))
    else:
        client.hset(schema.key_for(entity_id), mapping=payload.data)

    definition = build_index_definition(schema)
    definition.log_warnings()
    client.execute_command(*definition.command)
"""

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
from keyshape.data import (
    HashConversion,
    JsonConversion,
    from_hash,
    from_json,
    to_hash,
    to_json,
)
from keyshape.exceptions import (
    ConversionError,
    DuplicateFieldError,
    FieldNotFoundError,
    InvalidHashValueError,
    InvalidJsonPathError,
    InvalidSchemaError,
    KeyShapeError,
    MalformedFieldValueError,
    TypeMismatchError,
    UnexpectedNullInArrayError,
    UnsupportedFieldTypeError,
)
from keyshape.schema import FieldDefinition, Schema
from keyshape.search import (
    IndexBuilder,
    IndexDefinition,
    build_create_command,
    build_index_arguments,
    build_index_definition,
)

__version__ = "0.1.0"

__all__ = [
    # Schema
    "Schema",
    "FieldDefinition",
    # Types
    "FieldType",
    "FieldSpec",
    "DataStructure",
    "StopWordsMode",
    "StopWordsSpec",
    "PhoneticMatcher",
    "Point",
    "EntityData",
    "HashData",
    "JsonData",
    # Codecs
    "to_hash",
    "from_hash",
    "to_json",
    "from_json",
    "HashConversion",
    "JsonConversion",
    # Index
    "IndexBuilder",
    "IndexDefinition",
    "build_index_definition",
    "build_index_arguments",
    "build_create_command",
    # Exceptions
    "KeyShapeError",
    "ConversionError",
    "MalformedFieldValueError",
    "TypeMismatchError",
    "UnexpectedNullInArrayError",
    "InvalidHashValueError",
    "InvalidSchemaError",
    "UnsupportedFieldTypeError",
    "DuplicateFieldError",
    "FieldNotFoundError",
    "InvalidJsonPathError",
]
