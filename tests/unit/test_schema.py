"""Tests for Schema construction."""

import pytest

from keyshape import DataStructure, FieldSpec, FieldType, Schema
from keyshape.exceptions import (
    DuplicateFieldError,
    FieldNotFoundError,
    InvalidJsonPathError,
    InvalidSchemaError,
    UnsupportedFieldTypeError,
)


class TestSchema:
    """Tests for Schema class."""

    def test_defaults(self, hash_schema: Schema):
        assert hash_schema.entity_name == "Bigfoot"
        assert hash_schema.data_structure == DataStructure.HASH
        assert hash_schema.prefix == "Bigfoot"
        assert hash_schema.index_name == "Bigfoot:index"
        assert hash_schema.index_hash_name == "Bigfoot:index:hash"

    def test_field_order_is_preserved(self, hash_schema: Schema):
        """Fields keep their declaration order."""
        assert hash_schema.field_names == [
            "title",
            "state",
            "eyewitness",
            "temperature",
            "location",
            "sighted",
            "tags",
            "moreTags",
        ]
        assert [d.name for d in hash_schema] == hash_schema.field_names
        assert len(hash_schema) == 8

    def test_fields_from_sequence(self):
        """Fields can be a list of dicts or FieldSpecs."""
        schema = Schema(
            "Contact",
            [
                {"name": "email", "type": "string"},
                FieldSpec(name="bio", type=FieldType.TEXT),
            ],
        )
        assert schema.field_names == ["email", "bio"]
        assert schema.field("bio").type == FieldType.TEXT

    def test_fields_mapping_with_spec(self):
        """A FieldSpec under a different key takes the key's name."""
        schema = Schema("Contact", {"email": FieldSpec(name="other")})
        assert schema.field("email").name == "email"

    def test_default_type_is_string(self):
        schema = Schema("Contact", {"email": {}})
        assert schema.field("email").type == FieldType.STRING

    def test_custom_prefix_and_index(self):
        schema = Schema("Contact", {"email": {}}, prefix="crm:contact", index_name="contacts")
        assert schema.key_for("42") == "crm:contact:42"
        assert schema.index_name == "contacts"
        assert schema.index_hash_name == "contacts:hash"

    def test_key_for(self, hash_schema: Schema):
        assert hash_schema.key_for("01FYZ") == "Bigfoot:01FYZ"

    def test_generate_id_default(self, hash_schema: Schema):
        """Default ids are unique UUID strings."""
        first, second = hash_schema.generate_id(), hash_schema.generate_id()
        assert first != second
        assert len(first) == 36

    def test_generate_id_strategy(self):
        schema = Schema("Contact", {"email": {}}, id_strategy=lambda: "fixed")
        assert schema.generate_id() == "fixed"

    def test_data_structure_is_case_insensitive(self):
        schema = Schema("Contact", {"email": {}}, data_structure="json")
        assert schema.data_structure == DataStructure.JSON

    def test_fields_are_read_only(self, hash_schema: Schema):
        with pytest.raises(TypeError):
            hash_schema.fields["title"] = hash_schema.fields["state"]  # type: ignore[index]

    def test_field_not_found(self, hash_schema: Schema):
        with pytest.raises(FieldNotFoundError) as exc_info:
            hash_schema.field("color")
        assert "title" in exc_info.value.available_fields

    def test_repr(self, hash_schema: Schema):
        assert "Bigfoot" in repr(hash_schema)
        assert "HASH" in repr(hash_schema)


class TestSchemaValidation:
    """Invalid schemas fail at construction."""

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFieldTypeError) as exc_info:
            Schema("Contact", {"id": {"type": "uuid"}})
        assert exc_info.value.field_type == "uuid"
        assert exc_info.value.field_name == "id"

    def test_unsupported_type_is_a_schema_error(self):
        with pytest.raises(InvalidSchemaError):
            Schema("Contact", {"id": {"type": "int"}})

    def test_duplicate_field(self):
        with pytest.raises(DuplicateFieldError):
            Schema("Contact", [{"name": "email"}, {"name": "email", "type": "text"}])

    def test_invalid_option(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            Schema("Contact", {"tags": {"type": "string[]", "separator": ";;"}})
        assert "separator" in exc_info.value.message

    def test_invalid_matcher(self):
        with pytest.raises(InvalidSchemaError):
            Schema("Contact", {"bio": {"type": "text", "matcher": "dm:de"}})

    def test_field_without_name(self):
        with pytest.raises(InvalidSchemaError):
            Schema("Contact", [{"type": "string"}])

    def test_invalid_data_structure(self):
        with pytest.raises(InvalidSchemaError):
            Schema("Contact", {"email": {}}, data_structure="XML")

    def test_invalid_stop_words(self):
        with pytest.raises(InvalidSchemaError):
            Schema("Contact", {"email": {}}, stop_words={"mode": "SOME"})

    def test_invalid_json_path(self):
        """JSON paths are parsed when the schema is built."""
        with pytest.raises(InvalidJsonPathError):
            Schema("Contact", {"email": {"path": "email"}}, data_structure="JSON")

    def test_json_path_ignored_for_hash(self):
        schema = Schema("Contact", {"email": {"path": "email"}})
        assert schema.field("email").storage_path == "email"

    def test_missing_entity_name(self):
        with pytest.raises(InvalidSchemaError):
            Schema("", {"email": {}})


class TestFieldDefinition:
    """Storage locations resolved per data structure."""

    def test_hash_storage_path_is_name(self, hash_schema: Schema):
        assert hash_schema.field("title").storage_path == "title"

    def test_hash_field_override(self):
        schema = Schema("Contact", {"email": {"field": "mail"}})
        assert schema.field("email").hash_field == "mail"
        assert schema.field("email").storage_path == "mail"

    def test_json_default_paths(self, json_schema: Schema):
        assert json_schema.field("title").storage_path == "$.title"
        assert json_schema.field("tags").storage_path == "$.tags[*]"

    def test_json_custom_path(self):
        schema = Schema("Contact", {"city": {"path": "$.address.city"}}, data_structure="JSON")
        assert schema.field("city").storage_path == "$.address.city"

    def test_json_path_for_unusual_name(self):
        schema = Schema("Contact", {"first name": {}}, data_structure="JSON")
        assert schema.field("first name").json_path == '$["first name"]'

    def test_to_dict(self, json_schema: Schema):
        data = json_schema.field("moreTags").to_dict()
        assert data["type"] == "string[]"
        assert data["storage_path"] == "$.moreTags[*]"
        assert data["separator"] == "&"


class TestSchemaFromDict:
    """Schema files."""

    def test_from_dict(self):
        schema = Schema.from_dict(
            {
                "entity": "Bigfoot",
                "dataStructure": "JSON",
                "prefix": "sightings",
                "stopWords": {"mode": "OFF"},
                "fields": {"state": {"type": "string", "caseSensitive": True}},
            }
        )
        assert schema.data_structure == DataStructure.JSON
        assert schema.prefix == "sightings"
        assert schema.field("state").spec.case_sensitive is True

    def test_override_data_structure(self):
        schema = Schema.from_dict(
            {"entity": "Bigfoot", "dataStructure": "JSON", "fields": {}},
            data_structure=DataStructure.HASH,
        )
        assert schema.data_structure == DataStructure.HASH

    def test_missing_entity(self):
        with pytest.raises(InvalidSchemaError):
            Schema.from_dict({"fields": {}})
