#!/usr/bin/env python3

import pytest

from json_schema_to_swift.pipeline import (
    Choice,
    CodeGeneratorConfig,
    DecodingError,
    JSONCodec,
    ModuleAssembler,
    NoMatchingCaseError,
    SchemaParser,
)


def codec_for(document: dict, root_name: str = "Root", **config) -> JSONCodec:
    """Helper to assemble a document and wrap it in a codec"""
    schemas = SchemaParser().parse(document, root_name)
    module = ModuleAssembler(CodeGeneratorConfig(**config)).assemble(schemas, root_name)
    return JSONCodec(module)


PERSON = {
    "type": "object",
    "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
    "required": ["name"],
}


class TestRecords:
    """Keyed coding of records"""

    def test_decode_person(self):
        codec = codec_for(PERSON, "Person")
        assert codec.decode("Person", {"name": "Ada"}) == {"name": "Ada", "age": None}
        assert codec.decode("Person", {"name": "Ada", "age": 36}) == {"name": "Ada", "age": 36}

    def test_absent_optionals_are_omitted(self):
        codec = codec_for(PERSON, "Person")
        assert codec.encode("Person", {"name": "Ada", "age": None}) == {"name": "Ada"}

    def test_missing_required_key(self):
        codec = codec_for(PERSON, "Person")
        with pytest.raises(DecodingError):
            codec.decode("Person", {"age": 36})

    def test_wrong_primitive(self):
        codec = codec_for(PERSON, "Person")
        with pytest.raises(DecodingError):
            codec.decode("Person", {"name": 1})
        with pytest.raises(DecodingError):
            codec.decode("Person", {"name": "Ada", "age": True})

    @pytest.mark.parametrize(
        "value",
        [
            {"name": "Ada"},
            {"name": "Ada", "age": 36},
        ],
    )
    def test_round_trip(self, value):
        codec = codec_for(PERSON, "Person")
        assert codec.encode("Person", codec.decode("Person", value)) == value

    def test_additional_properties_round_trip(self):
        document = {"properties": {"a": {"type": "string"}}, "required": ["a"], "additionalProperties": True}
        codec = codec_for(document, "Open")
        value = {"a": "x", "extra": [1, 2]}
        decoded = codec.decode("Open", value)
        assert decoded == {"a": "x", "additionalProperties": {"extra": [1, 2]}}
        assert codec.encode("Open", decoded) == value

    def test_nested_enum(self):
        document = {"properties": {"status": {"enum": ["on", "off"]}}, "required": ["status"]}
        codec = codec_for(document, "Switch")
        assert codec.decode("Switch", {"status": "on"}) == {"status": "on"}
        with pytest.raises(DecodingError):
            codec.decode("Switch", {"status": "dim"})

    def test_reference_to_definition(self):
        document = {
            "properties": {"tags": {"type": "array", "items": {"$ref": "#/definitions/Tag"}}},
            "required": ["tags"],
            "definitions": {"Tag": {"type": "string"}},
        }
        codec = codec_for(document, "Post")
        assert codec.decode("Post", {"tags": ["a", "b"]}) == {"tags": ["a", "b"]}
        with pytest.raises(DecodingError):
            codec.decode("Post", {"tags": ["a", 1]})


class TestUnions:
    """Ordered decoding of oneOf values"""

    def test_string_or_integer(self):
        codec = codec_for({"oneOf": [{"type": "string"}, {"type": "integer"}]}, "Value")
        assert codec.decode("Value", "x") == Choice(0, "x")
        assert codec.decode("Value", 5) == Choice(1, 5)
        assert codec.encode("Value", Choice(0, "x")) == "x"

    def test_first_matching_case_wins(self):
        codec = codec_for({"oneOf": [{"type": "number"}, {"type": "integer"}]}, "Value")
        assert codec.decode("Value", 3).index == 0

    def test_integer_first(self):
        codec = codec_for({"oneOf": [{"type": "integer"}, {"type": "number"}]}, "Value")
        assert codec.decode("Value", 3).index == 0
        assert codec.decode("Value", 3.5).index == 1

    def test_no_matching_case(self):
        codec = codec_for({"oneOf": [{"type": "string"}, {"type": "integer"}]}, "Value")
        with pytest.raises(NoMatchingCaseError) as exc_info:
            codec.decode("Value", True)
        assert len(exc_info.value.errors) == 2

    def test_uncollapsed_union(self):
        codec = codec_for(
            {"oneOf": [{"type": "string"}, {"type": "null"}]},
            "Value",
            use_one_of_enums=False,
        )
        assert codec.decode("Value", None) == Choice(1, None, "explicitNullCase")
        assert codec.encode("Value", Choice(0, "x", "stringCase")) == "x"

    def test_record_members(self):
        document = {
            "oneOf": [
                {"properties": {"a": {"type": "string"}}, "required": ["a"]},
                {"properties": {"b": {"type": "integer"}}, "required": ["b"]},
            ]
        }
        codec = codec_for(document, "Value")
        assert codec.decode("Value", {"b": 2}) == Choice(1, {"b": 2})
        assert codec.encode("Value", Choice(0, {"a": "x"})) == {"a": "x"}

    def test_primitive_type_list(self):
        codec = codec_for({"type": ["string", "null"]}, "Value")
        assert codec.decode("Value", None) == Choice(1, None)


class TestMergedValues:
    """allOf and anyOf values decode every member from the whole value"""

    DOCUMENT = {
        "definitions": {
            "Named": {"properties": {"name": {"type": "string"}}, "required": ["name"]},
            "Aged": {"properties": {"age": {"type": "integer"}}, "required": ["age"]},
        },
    }

    def test_all_of(self):
        document = dict(self.DOCUMENT, allOf=[{"$ref": "#/definitions/Named"}, {"$ref": "#/definitions/Aged"}])
        codec = codec_for(document, "Person")
        value = {"name": "Ada", "age": 36}
        decoded = codec.decode("Person", value)
        assert decoded == ({"name": "Ada"}, {"age": 36})
        assert codec.encode("Person", decoded) == value

    def test_all_of_requires_every_member(self):
        document = dict(self.DOCUMENT, allOf=[{"$ref": "#/definitions/Named"}, {"$ref": "#/definitions/Aged"}])
        codec = codec_for(document, "Person")
        with pytest.raises(DecodingError):
            codec.decode("Person", {"name": "Ada"})

    def test_any_of(self):
        document = dict(self.DOCUMENT, anyOf=[{"$ref": "#/definitions/Named"}, {"$ref": "#/definitions/Aged"}])
        codec = codec_for(document, "Person")
        assert codec.decode("Person", {"name": "Ada"}) == ({"name": "Ada"}, None)
        assert codec.encode("Person", ({"name": "Ada"}, None)) == {"name": "Ada"}
        with pytest.raises(NoMatchingCaseError):
            codec.decode("Person", {})

    def test_all_of_record(self):
        document = dict(self.DOCUMENT, allOf=[{"$ref": "#/definitions/Named"}, {"$ref": "#/definitions/Aged"}])
        codec = codec_for(document, "Person", use_all_of_enums=False)
        value = {"name": "Ada", "age": 36}
        decoded = codec.decode("Person", value)
        assert decoded == {"p0": {"name": "Ada"}, "p1": {"age": 36}}
        assert codec.encode("Person", decoded) == value


class TestEncapsulation:
    """RawRepresentable wrappers code as their raw value"""

    def test_raw_value(self):
        codec = codec_for({"definitions": {"Token": {"type": "string"}}}, encapsulate={"Token": "String"})
        assert codec.decode("Token", "abc") == {"rawValue": "abc"}
        assert codec.encode("Token", {"rawValue": "abc"}) == "abc"


if __name__ == "__main__":
    pytest.main([__file__])
