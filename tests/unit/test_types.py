"""Tests for core types and exceptions."""

import pytest
from pydantic import ValidationError

from keyshape.core.types import (
    DataStructure,
    FieldSpec,
    FieldType,
    PhoneticMatcher,
    Point,
    StopWordsMode,
)
from keyshape.exceptions import (
    MalformedFieldValueError,
    TypeMismatchError,
    UnexpectedNullInArrayError,
    UnsupportedFieldTypeError,
)


class TestFieldType:
    """Tests for FieldType enum."""

    def test_all_types_exist(self):
        """All documented field types should exist."""
        expected = ["string", "text", "number", "boolean", "date", "point", "string[]"]
        assert FieldType.values() == expected

    def test_from_string(self):
        """Can create FieldType from string."""
        assert FieldType("string[]") == FieldType.STRING_ARRAY
        assert FieldType("date") == FieldType.DATE

    def test_unknown_type(self):
        """Unknown names are rejected."""
        with pytest.raises(ValueError):
            FieldType("uuid")


class TestDataStructure:
    """Tests for DataStructure parsing."""

    def test_parse_is_case_insensitive(self):
        assert DataStructure.parse("json") == DataStructure.JSON
        assert DataStructure.parse("Hash") == DataStructure.HASH
        assert DataStructure.parse(DataStructure.JSON) == DataStructure.JSON

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            DataStructure.parse("xml")


class TestFieldSpec:
    """Tests for FieldSpec model."""

    def test_minimal_spec(self):
        """Can create spec with just name."""
        spec = FieldSpec(name="state")
        assert spec.type == FieldType.STRING
        assert spec.sortable is False
        assert spec.indexed is True
        assert spec.case_sensitive is False
        assert spec.separator == "|"
        assert spec.normalized is True
        assert spec.stemming is True
        assert spec.weight is None
        assert spec.matcher is None

    def test_camel_case_options(self):
        """Schema files use camelCase option names."""
        spec = FieldSpec.model_validate(
            {"name": "state", "type": "string", "caseSensitive": True, "separator": ";"}
        )
        assert spec.case_sensitive is True
        assert spec.separator == ";"

    def test_snake_case_options(self):
        """Python callers can use field names."""
        spec = FieldSpec(name="state", case_sensitive=True)
        assert spec.case_sensitive is True

    def test_text_options(self):
        spec = FieldSpec(name="title", type="text", weight=2, matcher="dm:fr", stemming=False)
        assert spec.weight == 2.0
        assert spec.matcher == PhoneticMatcher.FRENCH
        assert spec.stemming is False

    def test_separator_must_be_one_character(self):
        with pytest.raises(ValidationError):
            FieldSpec(name="tags", type="string[]", separator="||")

    def test_weight_must_be_positive(self):
        with pytest.raises(ValidationError):
            FieldSpec(name="title", type="text", weight=0)

    def test_spec_is_frozen(self):
        """Specs cannot change once built."""
        spec = FieldSpec(name="state")
        with pytest.raises(ValidationError):
            spec.type = FieldType.TEXT


class TestPoint:
    """Tests for Point."""

    def test_to_text(self):
        assert Point(longitude=-122.4194, latitude=37.7749).to_text() == "-122.4194,37.7749"

    def test_equality(self):
        assert Point(longitude=1.5, latitude=2.5) == Point(longitude=1.5, latitude=2.5)

    @pytest.mark.parametrize(
        "longitude, latitude",
        [(-180.5, 0), (180.5, 0), (0, 85.1), (0, -85.1)],
    )
    def test_out_of_range(self, longitude, latitude):
        """Coordinates outside the GEO index range are rejected."""
        with pytest.raises(ValidationError):
            Point(longitude=longitude, latitude=latitude)


class TestStopWordsMode:
    def test_values(self):
        assert [mode.value for mode in StopWordsMode] == ["OFF", "DEFAULT", "CUSTOM"]


class TestExceptions:
    """Errors identify the field and the offending value."""

    def test_malformed_field_value(self):
        error = MalformedFieldValueError("aNumber", "NaN-ish", "a number")
        assert "aNumber" in error.message
        assert '"NaN-ish"' in error.message
        assert error.to_dict() == {
            "error": "MalformedFieldValueError",
            "message": error.message,
            "context": {"field_name": "aNumber", "value": "NaN-ish", "expected": "a number"},
        }

    def test_type_mismatch(self):
        error = TypeMismatchError("aBoolean", "yes", "a boolean")
        assert error.field_name == "aBoolean"
        assert error.value == "yes"
        assert error.message == "Expected a boolean for field 'aBoolean' but received: \"yes\""

    def test_unexpected_null_in_array(self):
        error = UnexpectedNullInArrayError("tags", ["a", None])
        assert error.container == ["a", None]
        assert '["a", null]' in error.message

    def test_unsupported_field_type(self):
        error = UnsupportedFieldTypeError("uuid", "id")
        assert "uuid" in error.message
        assert error.context["field_name"] == "id"
        assert "string[]" in error.context["valid_types"]
