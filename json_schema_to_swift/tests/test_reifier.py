#!/usr/bin/env python3

import pytest

from json_schema_to_swift.pipeline import CodeGeneratorConfig, Reifier, Schema, UnsupportedShapeError
from json_schema_to_swift.pipeline.analyzer import (
    Alias,
    DiscriminatedUnion,
    Record,
    SimpleEnum,
)
from json_schema_to_swift.pipeline.analyzer.ir_nodes import CodingMode
from json_schema_to_swift.pipeline.analyzer.reifier import ShapeKind, classify
from json_schema_to_swift.pipeline.ast_backends import code_value


def reify(schema: dict, id: str = "Value", **config) -> object:
    """Helper to reify one schema with the given config knobs"""
    return Reifier(CodeGeneratorConfig(**config)).reify(Schema.from_json(schema), id, [])


PERSON = {
    "type": "object",
    "properties": {"name": {"type": "string"}, "age": {"type": "integer"}},
    "required": ["name"],
}


class TestClassify:
    """Dispatch order of schema shapes"""

    @pytest.mark.parametrize(
        "schema, kind",
        [
            ({"enum": ["a"], "type": "string"}, ShapeKind.ENUM),
            ({"const": "a"}, ShapeKind.ENUM),
            ({"type": ["string", "null"]}, ShapeKind.PRIMITIVE_UNION),
            ({"type": "integer"}, ShapeKind.PRIMITIVE),
            ({"type": "array", "items": {"type": "string"}}, ShapeKind.ARRAY),
            (PERSON, ShapeKind.OBJECT),
            ({"allOf": [{"type": "string"}]}, ShapeKind.ALL_OF),
            ({"anyOf": [{"type": "string"}]}, ShapeKind.ANY_OF),
            ({"oneOf": [{"type": "string"}]}, ShapeKind.ONE_OF),
            ({"$ref": "#/definitions/A"}, ShapeKind.REF),
            ({"not": {"type": "string"}}, ShapeKind.NOT),
            ({}, ShapeKind.UNCONSTRAINED),
            ({"description": "anything"}, ShapeKind.UNCONSTRAINED),
            ({"type": "object", "additionalProperties": {"type": "string"}}, ShapeKind.MAP),
            ({"type": "object", "additionalProperties": True}, ShapeKind.OPEN_OBJECT),
            ({"type": "object"}, ShapeKind.OPAQUE),
        ],
    )
    def test_classify(self, schema, kind):
        assert classify(Schema.from_json(schema)) == kind

    def test_properties_win_over_combinators(self):
        schema = Schema.from_json({"properties": {"a": {}}, "oneOf": [{"type": "string"}]})
        assert classify(schema) == ShapeKind.OBJECT


class TestRecords:
    """Record synthesis from object schemas"""

    def test_person_record(self):
        person = reify(PERSON, "Person")
        assert isinstance(person, Record)
        text = code_value(person)

        assert "public struct Person: Equatable, Hashable, Codable {" in text
        assert "    public var name: String\n" in text
        assert "    public var age: Int?\n" in text
        assert "public init(name: String, age: Int? = nil) {" in text
        assert "try container.encode(name, forKey: .name)" in text
        assert "try container.encodeIfPresent(age, forKey: .age)" in text
        assert "self.age = try container.decodeIfPresent(Int.self, forKey: .age)" in text

        keys = person.nested_types[0]
        assert isinstance(keys, SimpleEnum)
        assert keys.name == "CodingKeys"
        assert [c.name for c in keys.cases] == ["name", "age"]
        assert "public enum CodingKeys: String, CodingKey {" in text

    def test_optional_without_shorthand(self):
        text = code_value(reify(PERSON, "Person", compact=False))
        assert "public var age: Optional<Int>" in text

    def test_required_properties_come_first(self):
        schema = {
            "properties": {"b": {"type": "string"}, "a": {"type": "string"}, "c": {"type": "string"}},
            "required": ["c"],
        }
        record = reify(schema, "Thing")
        assert [p.name for p in record.properties] == ["c", "a", "b"]

    def test_property_order_hint_wins(self):
        schema = {
            "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
            "propertyOrder": ["b", "a"],
            "required": ["a"],
        }
        record = reify(schema, "Thing")
        assert [p.name for p in record.properties] == ["b", "a"]

    def test_prop_ordering_hook(self):
        schema = {"properties": {"a": {"type": "string"}, "b": {"type": "string"}}}
        record = reify(schema, "Thing", prop_ordering=lambda parents, id: ["b"])
        assert [p.name for p in record.properties] == ["b", "a"]

    def test_nested_enum_property(self):
        schema = {"properties": {"status": {"enum": ["on", "off"]}}}
        record = reify(schema, "Switch")
        nested = [t for t in record.nested_types if isinstance(t, SimpleEnum) and t.name == "Status"]
        assert len(nested) == 1
        assert nested[0].values == ["on", "off"]
        assert record.properties[0].type.identifier == "Status?"

    def test_additional_properties(self):
        schema = {"properties": {"a": {"type": "string"}}, "additionalProperties": True}
        record = reify(schema, "Open")
        assert record.additional_property == "additionalProperties"
        text = code_value(record)
        assert "public var additionalProperties: Dictionary<String, Bric>" in text
        assert "try encoder.encodeAdditionalProperties(additionalProperties)" in text
        assert "decoder.decodeAdditionalProperties(excluding: CodingKeys.self)" in text

    def test_boxing_threshold(self):
        schema = {"properties": {"child": {"properties": {"x": {"type": "integer"}}}}}
        record = reify(schema, "Tree", indirect_count_threshold=1)
        text = code_value(record)
        assert "private var _child: Indirect<Child>" in text
        assert "public var child: Child? {" in text
        assert "get { return _child.value }" in text
        assert "self._child = Indirect(fromOptional: child)" in text
        assert "self._child = Indirect(fromOptional: try container.decodeIfPresent(Child.self, forKey: .child))" in text

    def test_no_boxing_below_threshold(self):
        schema = {"properties": {"child": {"properties": {"x": {"type": "integer"}}}}}
        text = code_value(reify(schema, "Tree"))
        assert "Indirect" not in text
        assert "public var child: Child?" in text

    def test_class_records(self):
        record = reify(PERSON, "Person", generate_value_types=False)
        assert "public class Person" in code_value(record)
        assert record.direct_references == []

    def test_type_override(self):
        record = reify(PERSON, "Person", type_overrides={"Person.age": "Int64"})
        assert record.properties[1].type.identifier == "Int64?"

    def test_codable_disabled(self):
        text = code_value(reify(PERSON, "Person", generate_codable=False, generate_hashable=False))
        assert "encode(to encoder" not in text
        assert "public struct Person: Equatable {" in text


class TestNaming:
    """Identifier sanitation and escaping"""

    def test_keyword_property(self):
        schema = {"properties": {"class": {"type": "string"}}, "required": ["class"]}
        text = code_value(reify(schema, "Thing"))
        assert "public var `class`: String" in text
        assert "public init(class: String) {" in text
        assert "self.`class` = `class`" in text
        assert "case `class`\n" in text

    def test_argument_keyword(self):
        schema = {"properties": {"let": {"type": "string"}}, "required": ["let"]}
        text = code_value(reify(schema, "Thing"))
        assert "public init(`let`: String) {" in text

    def test_codepoint_enum_cases(self):
        enum = reify({"enum": [">=", "<"]}, "Operator")
        assert [c.name for c in enum.cases] == ["u62u61", "u60"]
        text = code_value(enum)
        assert 'case u62u61 = ">="' in text

    def test_enum_cases(self):
        enum = reify({"enum": ["red", "dark-green", "red"]}, "Color")
        assert [c.name for c in enum.cases] == ["red", "darkGreen"]
        text = code_value(enum)
        assert "public enum Color: String, Equatable, Hashable, Codable {" in text
        assert "    case red\n" in text
        assert '    case darkGreen = "dark-green"\n' in text

    def test_single_case_enum_has_default(self):
        enum = reify({"const": "fixed"}, "Marker")
        assert enum.default_value == ".fixed"

    def test_definition_prefix_is_trimmed(self):
        alias = reify({"type": "string"}, "#/definitions/my-name")
        assert alias.name == "MyName"

    def test_renames(self):
        alias = reify({"type": "string"}, "#/definitions/Thing", renames={"#/definitions/Thing": "Widget"})
        assert alias.name == "Widget"


class TestAliases:
    """Scalar, array, map and reference shapes"""

    @pytest.mark.parametrize(
        "schema, expected",
        [
            ({"type": "string"}, "public typealias Value = String"),
            ({"type": "number"}, "public typealias Value = Double"),
            ({"type": "null"}, "public typealias Value = ExplicitNull"),
            ({"type": ["string", "integer"]}, "public typealias Value = OneOf2<String, Int>"),
            ({"type": ["string", "string"]}, "public typealias Value = String"),
            ({"type": "array", "items": {"type": "string"}}, "public typealias Value = [String]"),
            ({"type": "array"}, "public typealias Value = [Bric]"),
            ({"type": "array", "items": {"$ref": "#/definitions/Node"}}, "public typealias Value = [Node]"),
            ({"$ref": "#/definitions/Node"}, "public typealias Value = Node"),
            ({"not": {"type": "string"}}, "public typealias Value = NotBrac<String>"),
            ({}, "public typealias Value = Bric"),
            ({"type": "object", "additionalProperties": True}, "public typealias Value = Dictionary<String, Bric>"),
            (
                {"type": "object", "additionalProperties": {"type": "integer"}},
                "public typealias Value = Dictionary<String, Int>",
            ),
        ],
    )
    def test_alias(self, schema, expected):
        declaration = reify(schema)
        assert isinstance(declaration, Alias)
        assert code_value(declaration).splitlines()[0] == expected

    @pytest.mark.parametrize(
        "items, expected",
        [
            ([{"type": "string"}, {"type": "string"}], "public typealias Value = [String]"),
            ([{"$ref": "#/definitions/Node"}] * 3, "public typealias Value = [Node]"),
            ([], "public typealias Value = [Bric]"),
        ],
    )
    def test_identical_tuple_items(self, items, expected):
        declaration = reify({"type": "array", "items": items})
        assert isinstance(declaration, Alias)
        assert code_value(declaration).splitlines()[0] == expected

    def test_identical_tuple_items_in_property(self):
        record = reify({"properties": {"tags": {"type": "array", "items": [{"type": "string"}, {"type": "string"}]}}})
        assert isinstance(record, Record)
        assert record.properties[0].type.identifier == "[String]?"
        assert [t.name for t in record.nested_types] == ["CodingKeys"]

    def test_self_reference_alias_is_renamed(self):
        alias = reify({"$ref": "#/definitions/Node"}, "Node")
        assert alias.name == "NodeType"
        assert alias.type.identifier == "Node"

    def test_array_of_records_keeps_peer(self):
        alias = reify({"type": "array", "items": {"properties": {"x": {"type": "integer"}}}}, "Points")
        assert alias.type.identifier == "[PointsItem]"
        assert [p.name for p in alias.peer_types] == ["PointsItem"]

    def test_encapsulated_primitive(self):
        record = reify({"type": "string"}, "Identifier", encapsulate={"Identifier": "String"})
        assert isinstance(record, Record)
        assert record.mode == CodingMode.RAW
        text = code_value(record)
        assert "public struct Identifier: RawRepresentable, Equatable, Hashable, Codable {" in text
        assert "public init(rawValue: String) {" in text
        assert "public init(_ rawValue: String) {" in text

    def test_description_becomes_comment(self):
        alias = reify({"type": "string", "description": "A name"})
        assert code_value(alias).startswith("/// A name\n")


class TestSumTypes:
    """oneOf/allOf/anyOf synthesis and collapse"""

    def test_one_of_collapses(self):
        alias = reify({"oneOf": [{"type": "string"}, {"type": "integer"}]})
        assert isinstance(alias, Alias)
        assert code_value(alias) == "public typealias Value = OneOf2<String, Int>\n"

    def test_one_of_single_member(self):
        alias = reify({"oneOf": [{"type": "string"}]})
        assert isinstance(alias, Alias)
        assert alias.type.identifier == "String"

    def test_one_of_empty(self):
        alias = reify({"oneOf": []})
        assert alias.type.identifier == "Bric"

    def test_one_of_union_when_collapse_disabled(self):
        union = reify({"oneOf": [{"type": "string"}, {"type": "integer"}]}, use_one_of_enums=False)
        assert isinstance(union, DiscriminatedUnion)
        assert [c.name for c in union.cases] == ["stringCase", "intCase"]
        text = code_value(union)
        assert "public enum Value: Equatable, Hashable, Codable {" in text
        assert "case stringCase(String)" in text
        assert "public init(_ arg: String) {" in text
        assert "self = .stringCase(arg)" in text
        assert "throw OneOfDecodingError(errors: errors)" in text

    def test_one_of_enum_members_are_peers(self):
        alias = reify({"oneOf": [{"type": "string"}, {"enum": ["a", "b"]}]})
        assert alias.type.identifier == "OneOf2<String, Type2>"
        assert [type(p) for p in alias.peer_types] == [SimpleEnum]

    def test_one_of_record_members_use_namespace(self):
        alias = reify({"oneOf": [{"type": "string"}, {"properties": {"a": {"type": "string"}}}]})
        assert alias.type.identifier == "ValueTypes.Choice"
        namespace = alias.peer_types[0]
        assert isinstance(namespace, DiscriminatedUnion)
        assert namespace.name == "ValueTypes"
        inner = namespace.nested_types[0]
        assert inner.name == "Choice"
        assert inner.type.identifier == "OneOf2<String, AType>"
        text = code_value(alias)
        assert "public enum ValueTypes {" in text
        assert "    public typealias Choice = OneOf2<String, AType>" in text

    def test_eleven_members_stay_a_union(self):
        members = [{"title": f"T{i}", "properties": {"x": {"type": "string"}}} for i in range(11)]
        alias = reify({"oneOf": members})
        assert alias.type.identifier == "ValueTypes.Choice"
        namespace = alias.peer_types[0]
        union = namespace.nested_types[0]
        assert isinstance(union, DiscriminatedUnion)
        assert union.name == "Choice"
        assert len(union.cases) == 11

    def test_ten_members_collapse(self):
        members = [{"enum": [f"a{i}", f"b{i}"]} for i in range(10)]
        alias = reify({"oneOf": members})
        assert isinstance(alias, Alias)
        assert alias.type.identifier.startswith("OneOf10<")
        assert len(alias.type.generics) == 10
        assert len(alias.peer_types) == 10
        assert all(isinstance(p, SimpleEnum) for p in alias.peer_types)

    @pytest.mark.parametrize("keyword, kind", [("allOf", "AllOf"), ("anyOf", "AnyOf")])
    def test_ten_merged_members_collapse(self, keyword, kind):
        members = [{"$ref": f"#/definitions/M{i}"} for i in range(10)]
        alias = reify({keyword: members})
        assert isinstance(alias, Alias)
        assert alias.type.identifier == f"{kind}10<" + ", ".join(f"M{i}" for i in range(10)) + ">"

    @pytest.mark.parametrize("keyword, mode", [("allOf", CodingMode.ALL_OF), ("anyOf", CodingMode.ANY_OF)])
    def test_eleven_merged_members_stay_a_record(self, keyword, mode):
        members = [{"$ref": f"#/definitions/M{i}"} for i in range(11)]
        record = reify({keyword: members})
        assert isinstance(record, Record)
        assert record.mode == mode
        assert len(record.properties) == 11

    def test_recursive_member_is_boxed(self):
        schema = {
            "oneOf": [
                {"type": "string"},
                {"properties": {"next": {"$ref": "#/definitions/Node"}}},
            ]
        }
        alias = Reifier().reify(Schema.from_json(schema), "#/definitions/Node", [])
        inner = alias.peer_types[0].nested_types[0]
        assert inner.type.identifier == "OneOf2<String, Indirect<NextType>>"

    def test_all_of_collapses(self):
        alias = reify({"allOf": [{"$ref": "#/definitions/A"}, {"$ref": "#/definitions/B"}]})
        assert alias.type.identifier == "AllOf2<A, B>"

    def test_all_of_single_member(self):
        alias = reify({"allOf": [{"$ref": "#/definitions/A"}, {"$ref": "#/definitions/A"}]})
        assert isinstance(alias, Alias)
        assert alias.type.identifier == "A"

    def test_all_of_record_when_collapse_disabled(self):
        record = reify(
            {"allOf": [{"$ref": "#/definitions/A"}, {"$ref": "#/definitions/B"}]},
            use_all_of_enums=False,
        )
        assert isinstance(record, Record)
        assert record.mode == CodingMode.ALL_OF
        text = code_value(record)
        assert "public init(_ p0: A, _ p1: B) {" in text
        assert "self.p0 = try A(from: decoder)" in text
        assert "try p1.encode(to: encoder)" in text

    def test_all_of_flattens_nested_records(self):
        record = reify(
            {"allOf": [{"$ref": "#/definitions/A"}, {"properties": {"x": {"type": "integer"}}}]},
            use_all_of_enums=False,
        )
        assert "public init(_ p0: A, x: Int? = nil) {" in code_value(record)

    def test_any_of_collapses(self):
        alias = reify({"anyOf": [{"type": "string"}, {"type": "integer"}]})
        assert alias.type.identifier == "AnyOf2<String, Int>"

    def test_any_of_single_member_is_required(self):
        alias = reify({"anyOf": [{"type": "string"}]})
        assert alias.type.identifier == "String"

    def test_any_of_record_when_collapse_disabled(self):
        record = reify({"anyOf": [{"type": "string"}, {"type": "integer"}]}, use_any_of_enums=False)
        assert isinstance(record, Record)
        assert record.mode == CodingMode.ANY_OF
        text = code_value(record)
        assert "self.p0 = try? String(from: decoder)" in text
        assert "if p0 == nil && p1 == nil {" in text
        assert "throw AnyOfDecodingError(type: Self.self)" in text

    def test_any_of_as_one_of(self):
        alias = reify({"anyOf": [{"type": "string"}, {"type": "integer"}]}, any_of_as_one_of=True)
        assert alias.type.identifier == "OneOf2<String, Int>"


class TestUnsupportedShapes:
    """Shapes without a code representation"""

    def test_tuple_items(self):
        with pytest.raises(UnsupportedShapeError):
            reify({"type": "array", "items": [{"type": "string"}, {"type": "integer"}]})

    def test_heterogeneous_property_items(self):
        schema = {"properties": {"pair": {"type": "array", "items": [{"type": "string"}, {"type": "integer"}]}}}
        with pytest.raises(UnsupportedShapeError):
            reify(schema)

    def test_non_string_enum(self):
        with pytest.raises(UnsupportedShapeError):
            reify({"enum": ["a", {"b": 1}]})


if __name__ == "__main__":
    pytest.main([__file__])
