"""Search index definitions for KeyShape schemas.

Compiles a schema into the arguments of the search module's ``FT.CREATE``
command. Option choices that make no sense for a field's type or data
structure never fail the build: the option is dropped and a warning is
returned alongside the arguments.

Example:
    definition = build_index_definition(schema)
    definition.log_warnings()
    client.execute(definition.command)
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, assert_never

from keyshape.core.types import DataStructure, FieldType, StopWordsMode, StopWordsSpec
from keyshape.data.conversions import format_number

if TYPE_CHECKING:
    from keyshape.schema.entity_schema import Schema
    from keyshape.schema.models import FieldDefinition

logger = logging.getLogger(__name__)

SORTABLE_TAG_ON_JSON = (
    "You have marked a {type} field as sortable but RediSearch doesn't support "
    "the SORTABLE argument on a TAG for JSON. Ignored."
)
SORTABLE_GEO = (
    "You have marked a {type} field as sortable but RediSearch doesn't support "
    "the SORTABLE argument on a GEO. Ignored."
)
UNF_WITHOUT_SORTABLE = (
    "You have marked a {type} field as unnormalized but not sortable. "
    "UNF only applies to SORTABLE fields. Ignored."
)
OPTION_NOT_APPLICABLE = (
    "You have set {option} on a {type} field but it only applies to {applies_to} fields. Ignored."
)

TAG_TYPES = (FieldType.STRING, FieldType.STRING_ARRAY)


@dataclass
class IndexDefinition:
    """A compiled index definition."""

    index_name: str
    data_structure: DataStructure
    prefix: str
    stop_words: StopWordsSpec
    arguments: list[str] = field(default_factory=list)
    """Field arguments following SCHEMA, in schema field order."""

    warnings: list[str] = field(default_factory=list)
    """Options that were ignored, as human-readable messages."""

    @property
    def command(self) -> list[str]:
        """The complete FT.CREATE command."""
        command = [
            "FT.CREATE",
            self.index_name,
            "ON",
            self.data_structure.value,
            "PREFIX",
            "1",
            f"{self.prefix}:",
        ]
        match self.stop_words.mode:
            case StopWordsMode.OFF:
                command += ["STOPWORDS", "0"]
            case StopWordsMode.CUSTOM:
                command += ["STOPWORDS", str(len(self.stop_words.words)), *self.stop_words.words]
            case StopWordsMode.DEFAULT:
                pass
        return [*command, "SCHEMA", *self.arguments]

    @property
    def fingerprint(self) -> str:
        """Stable digest of the command; a change means the index must be rebuilt."""
        return hashlib.sha1(json.dumps(self.command).encode("utf-8")).hexdigest()

    def log_warnings(self, log: logging.Logger | None = None) -> None:
        """Emit each warning at WARNING level."""
        for warning in self.warnings:
            (log or logger).warning(warning)


class IndexBuilder:
    """Builds the index definition for one schema."""

    def __init__(self, schema: Schema) -> None:
        self._schema = schema
        self._is_json = schema.data_structure == DataStructure.JSON
        self._warnings: list[str] = []

    def build(self) -> IndexDefinition:
        """Compile every field, in schema order."""
        self._warnings = []
        arguments: list[str] = []
        for definition in self._schema:
            arguments.extend(self._field_arguments(definition))

        return IndexDefinition(
            index_name=self._schema.index_name,
            data_structure=self._schema.data_structure,
            prefix=self._schema.prefix,
            stop_words=self._schema.stop_words,
            arguments=arguments,
            warnings=list(self._warnings),
        )

    def _warn(self, template: str, definition: FieldDefinition, **values: str) -> None:
        self._warnings.append(template.format(type=definition.type.value, **values))

    def _field_arguments(self, definition: FieldDefinition) -> list[str]:
        arguments = [definition.storage_path, "AS", definition.name]
        field_type = definition.type
        match field_type:
            case FieldType.STRING:
                arguments += self._tag(definition, separator=True)
            case FieldType.STRING_ARRAY:
                # JSON arrays are indexed element by element; no separator needed
                arguments += self._tag(definition, separator=not self._is_json)
            case FieldType.BOOLEAN:
                arguments += self._tag(definition, separator=False)
            case FieldType.TEXT:
                arguments += self._text(definition)
            case FieldType.NUMBER | FieldType.DATE:
                arguments += ["NUMERIC", *self._sortable(definition)]
            case FieldType.POINT:
                arguments += self._geo(definition)
            case _:
                assert_never(field_type)

        self._check_text_options(definition)
        if not definition.spec.indexed:
            arguments.append("NOINDEX")
        return arguments

    def _tag(self, definition: FieldDefinition, separator: bool) -> list[str]:
        spec = definition.spec
        arguments = ["TAG"]
        if spec.case_sensitive:
            if definition.type in TAG_TYPES:
                arguments.append("CASESENSITIVE")
            else:
                self._warn(
                    OPTION_NOT_APPLICABLE,
                    definition,
                    option="caseSensitive",
                    applies_to="string and string[]",
                )
        if separator:
            arguments += ["SEPARATOR", spec.separator]

        if self._is_json:
            if spec.sortable:
                self._warn(SORTABLE_TAG_ON_JSON, definition)
            elif not spec.normalized:
                self._warn(UNF_WITHOUT_SORTABLE, definition)
        else:
            arguments += self._sortable(definition)
        return arguments

    def _text(self, definition: FieldDefinition) -> list[str]:
        spec = definition.spec
        arguments = ["TEXT"]
        if not spec.stemming:
            arguments.append("NOSTEM")
        if spec.weight is not None:
            arguments += ["WEIGHT", format_number(spec.weight)]
        if spec.matcher is not None:
            arguments += ["PHONETIC", spec.matcher.value]
        return arguments + self._sortable(definition)

    def _geo(self, definition: FieldDefinition) -> list[str]:
        if definition.spec.sortable:
            self._warn(SORTABLE_GEO, definition)
        return ["GEO"]

    def _sortable(self, definition: FieldDefinition) -> list[str]:
        spec = definition.spec
        if not spec.sortable:
            if not spec.normalized:
                self._warn(UNF_WITHOUT_SORTABLE, definition)
            return []
        return ["SORTABLE", "UNF"] if not spec.normalized else ["SORTABLE"]

    def _check_text_options(self, definition: FieldDefinition) -> None:
        if definition.type == FieldType.TEXT:
            return
        spec = definition.spec
        ignored = [
            ("weight", spec.weight is not None),
            ("matcher", spec.matcher is not None),
            ("stemming", not spec.stemming),
        ]
        for option, is_set in ignored:
            if is_set:
                self._warn(OPTION_NOT_APPLICABLE, definition, option=option, applies_to="text")


def build_index_definition(schema: Schema) -> IndexDefinition:
    """Compile a schema into its index definition."""
    return IndexBuilder(schema).build()


def build_index_arguments(schema: Schema) -> list[str]:
    """Field arguments only, with warnings logged."""
    definition = build_index_definition(schema)
    definition.log_warnings()
    return definition.arguments


def build_create_command(schema: Schema) -> list[str]:
    """The full FT.CREATE command for a schema, with warnings logged."""
    definition = build_index_definition(schema)
    definition.log_warnings()
    return definition.command
