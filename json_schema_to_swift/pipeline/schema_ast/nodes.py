"""
Schema node definition.

A ``Schema`` is the read-only parsed shape of one JSON Schema node,
restricted to the vocabulary the reifier understands. Nodes are built
once from the generic JSON tree and never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Keywords that constrain the shape of a value. A schema with none of
# these is treated as an opaque JSON value.
SHAPE_KEYWORDS = (
    "ref",
    "type",
    "enum",
    "properties",
    "items",
    "additional_properties",
    "all_of",
    "any_of",
    "one_of",
    "not_",
)

PRIMITIVE_TYPES = ("string", "number", "integer", "boolean", "null")


@dataclass(frozen=True)
class Schema:
    """A single JSON Schema node.

    Collections are stored in source order. ``properties`` keeps the key
    order of the parsed document. Boolean schemas (``true``/``false``) are
    represented as empty schemas.
    """

    ref: str | None = None  # $ref
    type: str | tuple[str, ...] | None = None  # a single type or a list of types
    title: str | None = None
    description: str | None = None
    enum: tuple[Any, ...] | None = None  # also holds a folded `const`
    properties: dict[str, Schema] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    property_order: tuple[str, ...] | None = None  # non-standard `propertyOrder` hint
    items: Schema | tuple[Schema, ...] | None = None
    additional_properties: Schema | bool | None = None
    definitions: dict[str, Schema] = field(default_factory=dict)  # `definitions`, `defs` or `$defs`
    all_of: tuple[Schema, ...] | None = None
    any_of: tuple[Schema, ...] | None = None
    one_of: tuple[Schema, ...] | None = None
    not_: Schema | None = None

    @classmethod
    def from_json(cls, value: Any) -> Schema:
        """Build a schema tree from a parsed JSON value."""
        if isinstance(value, bool) or value is None:
            return cls()
        if not isinstance(value, dict):
            raise TypeError(f"Schema must be an object or a boolean, got {type(value).__name__}")

        schema_type = value.get("type")
        if isinstance(schema_type, list):
            schema_type = tuple(schema_type)

        enum = value.get("enum")
        if enum is not None:
            enum = tuple(enum)
        elif "const" in value:
            enum = (value["const"],)

        items = value.get("items")
        if isinstance(items, list):
            items = tuple(cls.from_json(i) for i in items)
        elif items is not None:
            items = cls.from_json(items)

        additional = value.get("additionalProperties")
        if isinstance(additional, dict):
            additional = cls.from_json(additional)

        definitions = value.get("definitions") or value.get("defs") or value.get("$defs") or {}
        order = value.get("propertyOrder")

        return cls(
            ref=value.get("$ref"),
            type=schema_type,
            title=value.get("title"),
            description=value.get("description"),
            enum=enum,
            properties={k: cls.from_json(v) for k, v in (value.get("properties") or {}).items()},
            required=tuple(value.get("required") or ()),
            property_order=tuple(order) if order is not None else None,
            items=items,
            additional_properties=additional,
            definitions={k: cls.from_json(v) for k, v in definitions.items() if isinstance(v, (dict, bool))},
            all_of=cls._schema_list(value.get("allOf")),
            any_of=cls._schema_list(value.get("anyOf")),
            one_of=cls._schema_list(value.get("oneOf")),
            not_=cls.from_json(value["not"]) if "not" in value else None,
        )

    @classmethod
    def _schema_list(cls, values: list | None) -> tuple[Schema, ...] | None:
        if values is None:
            return None
        return tuple(cls.from_json(v) for v in values)

    @property
    def types(self) -> tuple[str, ...]:
        """The declared types as a tuple (empty when untyped)."""
        if self.type is None:
            return ()
        if isinstance(self.type, tuple):
            return self.type
        return (self.type,)

    @property
    def is_constrained(self) -> bool:
        """Whether any shape-constraining keyword is present."""
        for name in SHAPE_KEYWORDS:
            value = getattr(self, name)
            if value is None or value == {}:
                continue
            return True
        return False

    @property
    def is_object_shaped(self) -> bool:
        """Whether values of this schema are (possibly) objects."""
        types = self.types
        return not types or types[0] == "object"
