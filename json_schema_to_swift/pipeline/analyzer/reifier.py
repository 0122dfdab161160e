"""
Reifier: turns schema nodes into Code IR declarations.

Phase 2 of the pipeline. ``Reifier.reify`` classifies a schema into one
of a fixed, ordered set of shapes (first match wins) and builds the
matching declaration, recursing into subschemas with the chain of
enclosing declaration names (``parents``) passed explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ...logging import get_logger
from ..ast_backends.templates import render_lines
from ..config import MAX_SUM_ARITY, CodeAccess, CodeGeneratorConfig, EnumCase
from ..errors import UnsupportedShapeError
from ..schema_ast.nodes import PRIMITIVE_TYPES, Schema
from .ir_nodes import (
    ALL_OF,
    ANY_OF,
    ONE_OF,
    PRIMITIVE_TYPE_NAMES,
    Alias,
    Case,
    CodeType,
    CodingMode,
    DiscriminatedUnion,
    ExternalType,
    Function,
    NamedType,
    Parameter,
    Property,
    Record,
    SimpleCase,
    SimpleEnum,
    array_type,
    bric_type,
    dictionary_type,
    indirect_type,
    named_type,
    not_type,
    optional_type,
    primitive_type,
    sum_type,
)
from .name_resolver import RESERVED_ARGUMENT_NAMES, NameResolver, escape_keyword, unescape

logger = get_logger("reifier")


class ShapeKind(Enum):
    """Shape of a schema node, in dispatch order."""

    ENUM = 1  # enum present
    PRIMITIVE_UNION = 2  # type is a list
    PRIMITIVE = 3  # type is one scalar
    ARRAY = 4  # type is array
    OBJECT = 5  # non-empty properties
    ALL_OF = 6
    ANY_OF = 7
    ONE_OF = 8
    REF = 9
    NOT = 10
    UNCONSTRAINED = 11  # no shape-constraining keyword
    MAP = 12  # object with an additionalProperties schema
    OPEN_OBJECT = 13  # object with additionalProperties: true
    OPAQUE = 14  # anything else


def classify(schema: Schema) -> ShapeKind:
    """Classify a schema node. The order of the checks is significant."""
    types = schema.types
    if schema.enum is not None:
        return ShapeKind.ENUM
    if isinstance(schema.type, tuple):
        return ShapeKind.PRIMITIVE_UNION
    if len(types) == 1 and types[0] in PRIMITIVE_TYPES:
        return ShapeKind.PRIMITIVE
    if types == ("array",):
        return ShapeKind.ARRAY
    if schema.properties:
        return ShapeKind.OBJECT
    if schema.all_of is not None:
        return ShapeKind.ALL_OF
    if schema.any_of is not None:
        return ShapeKind.ANY_OF
    if schema.one_of is not None:
        return ShapeKind.ONE_OF
    if schema.ref is not None:
        return ShapeKind.REF
    if schema.not_ is not None:
        return ShapeKind.NOT
    if not schema.is_constrained:
        return ShapeKind.UNCONSTRAINED
    if types in ((), ("object",)):
        if isinstance(schema.additional_properties, Schema):
            return ShapeKind.MAP
        if schema.additional_properties is True:
            return ShapeKind.OPEN_OBJECT
    return ShapeKind.OPAQUE


@dataclass
class PropInfo:
    """A property to synthesize: its JSON key (None when anonymous) and schema."""

    name: str | None
    required: bool
    schema: Schema


def dedupe(schemas: tuple[Schema, ...] | list[Schema]) -> list[Schema]:
    """Remove structurally equal schemas, keeping the first occurrence."""
    result: list[Schema] = []
    for schema in schemas:
        if schema not in result:
            result.append(schema)
    return result


class Reifier:
    """Builds Code IR declarations from schemas."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        """
        Initialize the reifier.

        Args:
            config: Code generation configuration
        """
        self.config = config or CodeGeneratorConfig()
        self.names = NameResolver(self.config)
        self._handlers = {
            ShapeKind.ENUM: self._reify_enum,
            ShapeKind.PRIMITIVE_UNION: self._reify_primitive_union,
            ShapeKind.PRIMITIVE: self._reify_primitive,
            ShapeKind.ARRAY: self._reify_array,
            ShapeKind.OBJECT: self._reify_object,
            ShapeKind.ALL_OF: self._reify_all_of,
            ShapeKind.ANY_OF: self._reify_any_of,
            ShapeKind.ONE_OF: self._reify_one_of,
            ShapeKind.REF: self._reify_ref,
            ShapeKind.NOT: self._reify_not,
            ShapeKind.UNCONSTRAINED: self._reify_opaque,
            ShapeKind.MAP: self._reify_map,
            ShapeKind.OPEN_OBJECT: self._reify_open_object,
            ShapeKind.OPAQUE: self._reify_opaque,
        }

    def reify(self, schema: Schema, id: str, parents: list[str]) -> NamedType:
        """
        Build the declaration for a schema.

        Args:
            schema: The schema node
            id: Id the declaration is named after (reference path, title or property name)
            parents: Names of the enclosing declarations, outermost first

        Returns:
            A new declaration owning any nested declarations it needs

        Raises:
            UnsupportedShapeError: For shapes with no code representation
        """
        kind = classify(schema)
        logger.debug("Reifying %s under %s as %s", id, "/".join(parents) or "<top>", kind.name)
        declaration = self._handlers[kind](schema, id, parents)
        if schema.description and not declaration.comments:
            declaration.comments = [schema.description]
        return declaration

    def encapsulate(self, name: str, target: str, parents: list[str]) -> Record:
        """
        Wrapping struct for a primitive: a RawRepresentable with a single ``rawValue``.

        Args:
            name: Name of the wrapper
            target: Identifier of the wrapped type
            parents: Names of the enclosing declarations

        Returns:
            The wrapper record
        """
        access = self.config.access_for(parents)
        raw = named_type(target)
        record = Record(
            name=name,
            access=access,
            properties=[Property(name="rawValue", type=raw, access=access)],
            conforms=["RawRepresentable"] + self._conformances(),
            mode=CodingMode.RAW,
            value_type=self.config.generate_value_types,
        )
        body = render_lines("initializer", assignments=[{"target": "rawValue", "value": "rawValue"}])
        record.functions.append(Function(name="init", parameters=[Parameter(name="rawValue", type=raw)], body=body, access=access))
        record.functions.append(
            Function(name="init", parameters=[Parameter(name="rawValue", type=raw, anonymous=True)], body=body, access=access)
        )
        record.functions.extend(self._coders(record))
        return record

    def _conformances(self) -> list[str]:
        tags = []
        if self.config.generate_equals:
            tags.append("Equatable")
        if self.config.generate_hashable:
            tags.append("Hashable")
        if self.config.generate_codable:
            tags.append("Codable")
        return tags

    def _ref_type(self, ref: str) -> ExternalType:
        """Reference to a top-level definition."""
        return named_type(self.names.type_name([], ref))

    def _wrapping_alias(self, name: str, access: CodeAccess, wrap, inner: NamedType) -> Alias:
        """Alias to ``wrap(inner)``, inlining ``inner`` when it is a pure alias."""
        if isinstance(inner, Alias) and inner.is_pure:
            return Alias(name=name, access=access, type=wrap(inner.type))
        return Alias(name=name, access=access, type=wrap(inner), peer_types=[inner])

    # Dispatch rules

    def _reify_enum(self, schema: Schema, id: str, parents: list[str]) -> SimpleEnum:
        name = self.names.type_name(parents, id)
        scope = parents + [name]
        capitalize = self.config.enum_case == EnumCase.UPPER

        values: list[str] = []
        for value in schema.enum:
            if isinstance(value, bool) or not isinstance(value, (str, int, float)):
                raise UnsupportedShapeError(f"Enumeration {name} has a non-string value: {value!r}", id)
            raw = value if isinstance(value, str) else str(value)
            if raw not in values:
                values.append(raw)

        cases: list[SimpleCase] = []
        taken: set[str] = set()
        for raw in values:
            case_name = self.names.unique(self.names.type_name(scope, raw, capitalize=capitalize), taken)
            taken.add(case_name)
            cases.append(SimpleCase(name=case_name, value=raw))

        return SimpleEnum(
            name=name,
            access=self.config.access_for(parents),
            cases=cases,
            conforms=self._conformances(),
            default=f".{cases[0].name}" if len(cases) == 1 else None,
        )

    def _primitive_union_members(self, types: tuple[str, ...]) -> list[CodeType]:
        members: list[CodeType] = []
        for t in types:
            if t in PRIMITIVE_TYPE_NAMES:
                member = primitive_type(PRIMITIVE_TYPE_NAMES[t])
            elif t == "array":
                member = array_type(bric_type(), self.config.compact)
            elif t == "object":
                member = dictionary_type(bric_type())
            else:
                member = bric_type()
            if member.identifier not in [m.identifier for m in members]:
                members.append(member)
        return members

    def _union_of(self, members: list[CodeType]) -> CodeType:
        if len(members) == 1:
            return members[0]
        return sum_type(ONE_OF, members)

    def _reify_primitive_union(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        members = self._primitive_union_members(schema.types)
        return Alias(name=name, access=self.config.access_for(parents), type=self._union_of(members))

    def _reify_primitive(self, schema: Schema, id: str, parents: list[str]) -> NamedType:
        name = self.names.type_name(parents, id)
        if name in self.config.encapsulate:
            return self.encapsulate(name, self.config.encapsulate[name], parents)
        return Alias(
            name=name,
            access=self.config.access_for(parents),
            type=primitive_type(PRIMITIVE_TYPE_NAMES[schema.types[0]]),
        )

    def _reify_array(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        access = self.config.access_for(parents)
        items = schema.items
        if isinstance(items, tuple):
            # Repeated identical items describe a homogeneous array
            distinct = dedupe(items)
            if len(distinct) > 1:
                raise UnsupportedShapeError(f"Tuple-form items are not supported for {name}", id)
            items = distinct[0] if distinct else None
        if items is None:
            return Alias(name=name, access=access, type=array_type(bric_type(), self.config.compact))
        if items.ref is not None:
            return Alias(name=name, access=access, type=array_type(self._ref_type(items.ref), self.config.compact))

        element = self.reify(items, unescape(name) + "Item", parents)
        return self._wrapping_alias(name, access, lambda t: array_type(t, self.config.compact), element)

    def _reify_object(self, schema: Schema, id: str, parents: list[str]) -> NamedType:
        props = self._prop_info(schema, id, parents)
        return self._reify_record(schema, id, parents, CodingMode.STANDARD, props)

    def _reify_all_of(self, schema: Schema, id: str, parents: list[str]) -> NamedType:
        props = [PropInfo(None, True, member) for member in dedupe(schema.all_of)]
        return self._reify_record(schema, id, parents, CodingMode.ALL_OF, props)

    def _reify_any_of(self, schema: Schema, id: str, parents: list[str]) -> NamedType:
        if self.config.any_of_as_one_of:
            return self._one_of(schema.any_of, id, parents)
        members = dedupe(schema.any_of)
        if len(members) == 1:
            # A single alternative is simply required
            return self._reify_record(schema, id, parents, CodingMode.ALL_OF, [PropInfo(None, True, members[0])])
        props = [PropInfo(None, False, member) for member in members]
        return self._reify_record(schema, id, parents, CodingMode.ANY_OF, props)

    def _reify_one_of(self, schema: Schema, id: str, parents: list[str]) -> NamedType:
        return self._one_of(schema.one_of, id, parents)

    def _reify_ref(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        target = self._ref_type(schema.ref)
        if target.name == name:
            name = unescape(name) + "Type"
        return Alias(name=name, access=self.config.access_for(parents), type=target)

    def _reify_not(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        inner = self.reify(schema.not_, "Not" + unescape(name), parents)
        return self._wrapping_alias(name, self.config.access_for(parents), not_type, inner)

    def _reify_map(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        value = self.reify(schema.additional_properties, unescape(name) + "Value", parents)
        return self._wrapping_alias(name, self.config.access_for(parents), dictionary_type, value)

    def _reify_open_object(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        return Alias(name=name, access=self.config.access_for(parents), type=dictionary_type(bric_type()))

    def _reify_opaque(self, schema: Schema, id: str, parents: list[str]) -> Alias:
        name = self.names.type_name(parents, id)
        return Alias(name=name, access=self.config.access_for(parents), type=bric_type())

    # Records

    def _prop_info(self, schema: Schema, id: str, parents: list[str]) -> list[PropInfo]:
        """Properties of an object schema, ordered by the first source that ranks each key."""
        ordering: list[str] = []
        ordering.extend(self.config.ordering_for(parents, id) or [])
        ordering.extend(schema.property_order or ())
        ordering.extend(schema.required)
        ordering.extend(sorted(schema.properties))

        rank: dict[str, int] = {}
        for index, key in enumerate(ordering):
            rank.setdefault(key, index)

        required = set(schema.required)
        keys = sorted(schema.properties, key=lambda k: rank[k])
        return [PropInfo(k, k in required, schema.properties[k]) for k in keys]

    def _reify_record(
        self,
        schema: Schema,
        id: str,
        parents: list[str],
        mode: CodingMode,
        props: list[PropInfo],
    ) -> NamedType:
        """
        Synthesize a record from its properties.

        In standard mode every property is coded under its key. In merge
        (allOf) and any (anyOf) mode the properties are anonymous and each
        one decodes the whole value; such records collapse into an alias of
        a generic sum type when possible.
        """
        config = self.config
        name = self.names.type_name(parents, id)
        access = config.access_for(parents)
        scope = parents + [name]
        prop_access = config.access_for(scope)

        record = Record(
            name=name,
            access=access,
            conforms=self._conformances(),
            mode=mode,
            value_type=config.generate_value_types,
        )

        object_shaped = sum(1 for p in props if not p.required and p.schema.is_object_shaped)
        boxed = object_shaped >= config.indirect_count_threshold
        if boxed:
            logger.debug("Boxing optional properties of %s (%d object-shaped)", name, object_shaped)

        taken: set[str] = set()
        member_types: list[CodeType] = []
        anonymous = 0
        for info in props:
            if info.name is None:
                key = None
                prop_name = f"p{anonymous}"
                anonymous += 1
            else:
                key = info.name
                prop_name = self.names.prop_name(scope, info.name)
            prop_name = self.names.unique(prop_name, taken)
            taken.add(prop_name)

            prop_type = self._property_type(record, info, prop_name, scope)
            member_types.append(prop_type)
            comments = [info.schema.description] if info.schema.description else []

            if info.required:
                record.properties.append(
                    Property(name=prop_name, type=prop_type, key=key, access=prop_access, comments=comments)
                )
            elif boxed:
                storage = self.names.unique(
                    self.names.prop_name(scope, config.indirect_prefix + unescape(prop_name)),
                    taken,
                )
                taken.add(storage)
                record.properties.append(
                    Property(
                        name=storage,
                        type=indirect_type(prop_type),
                        required=False,
                        backing=True,
                        access=CodeAccess.PRIVATE,
                    )
                )
                record.properties.append(
                    Property(
                        name=prop_name,
                        type=optional_type(prop_type, config.compact),
                        key=key,
                        required=False,
                        indirect=True,
                        storage=storage,
                        access=prop_access,
                        body=[
                            f"get {{ return {storage}.value }}",
                            f"set {{ {storage} = Indirect(fromOptional: newValue) }}",
                        ],
                        comments=comments,
                    )
                )
            else:
                record.properties.append(
                    Property(
                        name=prop_name,
                        type=optional_type(prop_type, config.compact),
                        key=key,
                        required=False,
                        access=prop_access,
                        comments=comments,
                    )
                )

        if mode != CodingMode.STANDARD:
            collapsed = self._collapse_record(record, member_types)
            if collapsed is not None:
                return collapsed
        else:
            if schema.additional_properties is True or isinstance(schema.additional_properties, Schema):
                additional = self.names.unique("additionalProperties", taken)
                record.properties.append(
                    Property(name=additional, type=dictionary_type(bric_type()), access=prop_access)
                )
                record.additional_property = additional

            keys = SimpleEnum(
                name=config.keys_name,
                access=prop_access,
                cases=[SimpleCase(name=p.name, value=p.key) for p in record.coded_properties],
                conforms=["CodingKey"],
            )
            if record.additional_property is not None:
                keys.cases.append(SimpleCase(name=record.additional_property, value=""))
            record.nested_types.insert(0, keys)

        record.functions.append(self._initializer(record))
        record.functions.extend(self._coders(record))
        return record

    def _collapse_record(self, record: Record, member_types: list[CodeType]) -> Alias | None:
        """Alias replacing a merge/any-mode record, or None to keep the record."""
        if len(member_types) == 1:
            return Alias(
                name=record.name,
                access=record.access,
                type=member_types[0],
                peer_types=record.nested_types,
                comments=record.comments,
            )
        if record.mode == CodingMode.ALL_OF:
            enabled, kind, suffix = self.config.use_all_of_enums, ALL_OF, self.config.all_of_suffix
        else:
            enabled, kind, suffix = self.config.use_any_of_enums, ANY_OF, self.config.any_of_suffix
        if enabled and 2 <= len(member_types) <= MAX_SUM_ARITY:
            return self._collapse(record.name, record.access, kind, suffix, member_types, record.nested_types)
        return None

    def _collapse(
        self,
        name: str,
        access: CodeAccess,
        kind: str,
        suffix: str,
        members: list[CodeType],
        nested_types: list[NamedType],
    ) -> Alias:
        """
        Alias a generic sum type of ``members``.

        When the nested types are all value enumerations they travel as
        peers of the alias. Otherwise a ``<name>Types`` namespace holds them
        next to a ``suffix`` alias of the sum type, and ``name`` aliases that.
        """
        sum_alias_type = sum_type(kind, members)
        if all(isinstance(t, SimpleEnum) for t in nested_types):
            logger.debug("Collapsing %s into %s", name, sum_alias_type.identifier)
            return Alias(name=name, access=access, type=sum_alias_type, peer_types=list(nested_types))

        inner = Alias(name=suffix, access=access, type=sum_alias_type)
        namespace = DiscriminatedUnion(name=unescape(name) + "Types", access=access, nested_types=[inner] + nested_types)
        logger.debug("Collapsing %s into namespace %s", name, namespace.name)
        return Alias(
            name=name,
            access=access,
            type=named_type(f"{namespace.name}.{suffix}", target=inner),
            peer_types=[namespace],
        )

    def _property_type(self, record: Record, info: PropInfo, prop_name: str, scope: list[str]) -> CodeType:
        """Type of a record property, adding any declaration it needs to the record's nested types."""
        schema = info.schema
        key = info.name or unescape(prop_name)

        if schema.ref is not None:
            return self._ref_type(schema.ref)

        override = self.config.type_overrides.get(f"{unescape(record.name)}.{key}")
        if override is not None:
            return named_type(override)

        if isinstance(schema.type, str) and schema.type in PRIMITIVE_TYPE_NAMES:
            if schema.type != "string" or schema.enum is None:
                return primitive_type(PRIMITIVE_TYPE_NAMES[schema.type])

        if isinstance(schema.type, tuple) and schema.enum is None:
            members = self._primitive_union_members(schema.types)
            if len(members) == 1:
                return members[0]
            alias = Alias(
                name=self._nested_name(record, unescape(self.names.type_name(scope, key)) + self.config.one_of_suffix),
                access=self.config.access_for(scope),
                type=self._union_of(members),
            )
            record.nested_types.append(alias)
            return alias

        if schema.type == "array" and schema.enum is None:
            if schema.items is None:
                items = []
            elif isinstance(schema.items, tuple):
                items = dedupe(schema.items)
            else:
                items = [schema.items]
            if not items:
                return array_type(bric_type(), self.config.compact)
            if len(items) > 1:
                raise UnsupportedShapeError(f"Heterogeneous array items are not supported for {key}", key)
            element = self._property_type(record, PropInfo(key + "Item", True, items[0]), prop_name + "Item", scope)
            return array_type(element, self.config.compact)

        sub_id = schema.title or self.names.sanitize(key) + self.config.type_suffix
        nested = self.reify(schema, sub_id, scope)
        nested.name = self._nested_name(record, nested.name)
        record.nested_types.append(nested)
        return nested

    def _nested_name(self, owner: NamedType, name: str) -> str:
        taken = {t.name for children in owner.child_lists() for t in children}
        return self.names.unique(name, taken)

    def _initializer(self, record: Record) -> Function:
        """Memberwise initializer. In merge mode nested records are flattened into their own arguments."""
        parameters: list[Parameter] = []
        assignments: list[dict[str, str]] = []
        taken: set[str] = set()

        def argument(prop_name: str) -> str:
            arg = self.names.unique(escape_keyword(unescape(prop_name), RESERVED_ARGUMENT_NAMES), taken)
            taken.add(arg)
            return arg

        for prop in record.properties:
            if prop.backing or not prop.instance:
                continue
            sub = prop.type
            if record.mode == CodingMode.ALL_OF and isinstance(sub, Record) and sub.mode == CodingMode.STANDARD:
                args = []
                for sub_prop in sub.properties:
                    if sub_prop.backing or not sub_prop.instance:
                        continue
                    arg = argument(sub_prop.name)
                    label = unescape(sub_prop.name)
                    parameters.append(
                        Parameter(
                            name=arg,
                            type=sub_prop.type,
                            label=label if unescape(arg) != label else None,
                            default=sub_prop.type.default_value,
                        )
                    )
                    args.append(f"{label}: {escape_keyword(unescape(arg))}")
                assignments.append({"target": prop.name, "value": f"{sub.name}({', '.join(args)})"})
                continue

            arg = argument(prop.name)
            parameters.append(
                Parameter(
                    name=arg,
                    type=prop.type,
                    default=prop.type.default_value,
                    anonymous=record.mode != CodingMode.STANDARD,
                )
            )
            value = escape_keyword(unescape(arg))
            if prop.indirect:
                assignments.append({"target": prop.storage, "value": f"Indirect(fromOptional: {value})"})
            else:
                assignments.append({"target": prop.name, "value": value})

        return Function(
            name="init",
            parameters=parameters,
            body=render_lines("initializer", assignments=assignments),
            access=record.access,
        )

    def _coders(self, record: Record) -> list[Function]:
        """``encode(to:)`` and ``init(from:)`` for a record."""
        if not self.config.generate_codable:
            return []
        props = [
            {
                "name": p.name,
                "required": p.required,
                "boxed": p.indirect,
                "storage": p.storage,
                "type": p.type.unwrapped.identifier if isinstance(p.type, ExternalType) else p.type.identifier,
            }
            for p in record.coded_properties
        ]
        raw = record.properties[0].type.identifier if record.mode == CodingMode.RAW else None
        context = {
            "mode": record.mode.value,
            "keys": self.config.keys_name,
            "props": props,
            "additional": record.additional_property,
            "raw": raw,
        }
        encode = Function(
            name="encode",
            parameters=[Parameter(name="encoder", type=primitive_type("Encoder"), label="to")],
            body=render_lines("record_encode", **context),
            access=record.access,
            throws=True,
        )
        decode = Function(
            name="init",
            parameters=[Parameter(name="decoder", type=primitive_type("Decoder"), label="from")],
            body=render_lines("record_decode", **context),
            access=record.access,
            throws=True,
        )
        return [encode, decode]

    # Unions

    def _one_of(self, members: tuple[Schema, ...], id: str, parents: list[str]) -> NamedType:
        """
        Synthesize a discriminated union with one case per member.

        Members are tried in declaration order when decoding. The union
        then collapses into an alias of a generic sum type when it can.
        """
        config = self.config
        name = self.names.type_name(parents, id)
        access = config.access_for(parents)
        scope = parents + [name]
        union = DiscriminatedUnion(name=name, access=access, conforms=self._conformances())

        case_names: set[str] = set()
        initialized: set[str] = set()
        for index, member in enumerate(members):
            case_type = self._one_of_member(union, member, index, scope)
            case_name = self._case_name(case_type, scope, case_names)
            case_names.add(case_name)
            union.cases.append(Case(name=case_name, type=case_type))

            # One convenience initializer per distinct payload type
            if case_type.identifier in initialized:
                continue
            initialized.add(case_type.identifier)
            union.functions.append(
                Function(
                    name="init",
                    parameters=[Parameter(name="arg", type=case_type, anonymous=True)],
                    body=[f"self = .{case_name}(arg)"],
                    access=access,
                    comments=[f"Initializes with the {case_name} case"],
                )
            )

        if config.generate_codable:
            union.functions.extend(self._union_coders(union))

        count = len(union.cases)
        if count == 0:
            return Alias(name=name, access=access, type=bric_type())
        if count == 1:
            return Alias(name=name, access=access, type=union.cases[0].type, peer_types=union.nested_types)
        if not config.use_one_of_enums:
            return union
        member_types = [case.type for case in union.cases]
        if count <= MAX_SUM_ARITY:
            return self._collapse(name, access, ONE_OF, config.one_of_suffix, member_types, union.nested_types)

        # Too many cases for a generic sum type: the union itself becomes the namespaced choice
        namespace = DiscriminatedUnion(
            name=unescape(name) + "Types",
            access=access,
            nested_types=[union] + union.nested_types,
        )
        union.nested_types = []
        union.name = config.one_of_suffix
        logger.debug("Wrapping %d-case union %s in namespace %s", count, name, namespace.name)
        return Alias(
            name=name,
            access=access,
            type=named_type(f"{namespace.name}.{union.name}", target=union),
            peer_types=[namespace],
        )

    def _one_of_member(self, union: DiscriminatedUnion, member: Schema, index: int, scope: list[str]) -> CodeType:
        """Payload type of one oneOf member."""
        if member.ref is None and isinstance(member.type, str) and member.type in PRIMITIVE_TYPE_NAMES:
            if member.type != "string" or member.enum is None:
                return primitive_type(PRIMITIVE_TYPE_NAMES[member.type])

        sub = self.reify(member, self._member_type_name(union, member, index), scope)
        if isinstance(sub, Alias) and sub.is_pure:
            return sub.type
        sub.name = self._nested_name(union, sub.name)
        union.nested_types.append(sub)
        if union.name in sub.direct_references:
            logger.debug("Boxing case %s of %s to break a cycle", sub.name, union.name)
            return indirect_type(sub)
        return sub

    def _member_type_name(self, union: DiscriminatedUnion, member: Schema, index: int) -> str:
        """Name of the declaration for an anonymous oneOf member."""
        if member.title:
            return member.title
        keys = list(member.properties)
        if 1 <= len(keys) <= 5:
            base = "".join(self.names.sanitize(k) for k in keys) + "Type"
            return self.names.unique(base, {t.name for t in union.nested_types})
        return f"Type{index + 1}"

    def _case_name(self, case_type: CodeType, scope: list[str], taken: set[str]) -> str:
        lower = self.config.enum_case == EnumCase.LOWER
        base = unescape(self.names.type_name(scope, case_type.identifier, capitalize=not lower))
        name = base + self.config.case_suffix
        if lower and len(name) > 2 and not name[1].isupper():
            name = name[0].lower() + name[1:]
        return self.names.unique(name, taken)

    def _union_coders(self, union: DiscriminatedUnion) -> list[Function]:
        cases = [
            {"name": case.name, "payload": case.type.identifier if case.type is not None else None}
            for case in union.cases
        ]
        encode = Function(
            name="encode",
            parameters=[Parameter(name="encoder", type=primitive_type("Encoder"), label="to")],
            body=render_lines("one_of_encode", cases=cases),
            access=union.access,
            throws=True,
        )
        decode = Function(
            name="init",
            parameters=[Parameter(name="decoder", type=primitive_type("Decoder"), label="from")],
            body=render_lines("one_of_decode", cases=cases),
            access=union.access,
            throws=True,
        )
        return [encode, decode]
