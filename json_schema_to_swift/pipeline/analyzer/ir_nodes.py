"""
Code IR node definitions.

These nodes are the language-neutral model the reifier produces: named
types (aliases, records, unions, enumerations, protocols) and the
anonymous types that reference them. Every type exposes an
``identifier`` (how other code refers to it) and ``direct_references``
(the names its value representation embeds, used for cycle detection).
Every declaration knows how to ``emit`` itself.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from ..ast_backends.emitter import CodeEmitter, type_ordering
from ..config import CodeAccess


class CodingMode(str, Enum):
    """How a record maps onto a JSON value."""

    STANDARD = "standard"  # one key per property
    ALL_OF = "allOf"  # every property decodes the whole value
    ANY_OF = "anyOf"  # every property tries the whole value, at least one must succeed
    RAW = "raw"  # single rawValue decoded from the value itself


class CodeType(ABC):
    """Base class for everything that can be referenced as a type."""

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Text used when another declaration references this type."""

    @property
    def direct_references(self) -> list[str]:
        """Names of the types embedded in this type's value representation."""
        return []

    @property
    def default_value(self) -> str | None:
        """Literal used as a default constructor argument, if any."""
        return None


@dataclass(eq=False)
class ExternalType(CodeType):
    """A type referenced by name: a primitive, a generic container or another declaration."""

    name: str = ""
    generics: list[CodeType] = field(default_factory=list)
    default: str | None = None
    shorthand: tuple[str, str] | None = None  # (prefix, suffix) wrapped around the generics
    embeds_generics: bool = False  # the generics are stored inline (not boxed)
    target: NamedType | None = None  # the declaration this name refers to, when known

    @property
    def identifier(self) -> str:
        if not self.generics:
            return self.name
        args = ", ".join(g.identifier for g in self.generics)
        if self.shorthand is not None:
            prefix, suffix = self.shorthand
            return f"{prefix}{args}{suffix}"
        return f"{self.name}<{args}>"

    @property
    def direct_references(self) -> list[str]:
        refs = [self.name]
        if self.embeds_generics:
            for g in self.generics:
                refs.extend(g.direct_references)
        return refs

    @property
    def default_value(self) -> str | None:
        return self.default

    @property
    def unwrapped(self) -> CodeType:
        """The wrapped type of an Optional, or self."""
        if self.name == OPTIONAL and self.generics:
            return self.generics[0]
        return self


# Names of the external types the generated code relies on
STRING = "String"
INT = "Int"
DOUBLE = "Double"
BOOL = "Bool"
NULL = "ExplicitNull"
BRIC = "Bric"
ARRAY = "Array"
OPTIONAL = "Optional"
DICTIONARY = "Dictionary"
INDIRECT = "Indirect"
NOT = "NotBrac"
ONE_OF = "OneOf"
ALL_OF = "AllOf"
ANY_OF = "AnyOf"

# JSON Schema primitive -> external type name
PRIMITIVE_TYPE_NAMES = {
    "string": STRING,
    "number": DOUBLE,
    "integer": INT,
    "boolean": BOOL,
    "null": NULL,
}


def primitive_type(name: str) -> ExternalType:
    return ExternalType(name=name)


def bric_type() -> ExternalType:
    """The opaque JSON value type."""
    return ExternalType(name=BRIC, default="nil")


def array_type(element: CodeType, compact: bool = True) -> ExternalType:
    return ExternalType(name=ARRAY, generics=[element], default="[]", shorthand=("[", "]") if compact else None)


def optional_type(wrapped: CodeType, compact: bool = True) -> ExternalType:
    return ExternalType(
        name=OPTIONAL,
        generics=[wrapped],
        default="nil",
        shorthand=("", "?") if compact else None,
        embeds_generics=True,
    )


def dictionary_type(value: CodeType) -> ExternalType:
    return ExternalType(name=DICTIONARY, generics=[primitive_type(STRING), value], default="[:]")


def indirect_type(wrapped: CodeType) -> ExternalType:
    return ExternalType(name=INDIRECT, generics=[wrapped], default="nil")


def not_type(wrapped: CodeType) -> ExternalType:
    return ExternalType(name=NOT, generics=[wrapped], default="nil")


def sum_type(kind: str, members: list[CodeType]) -> ExternalType:
    """A generic N-ary sum type such as ``OneOf2<A, B>``."""
    return ExternalType(name=f"{kind}{len(members)}", generics=list(members), embeds_generics=True)


def named_type(name: str, target: NamedType | None = None) -> ExternalType:
    """Reference to a declaration by name."""
    return ExternalType(name=name, target=target)


def _adoption(name: str, tags: list[str]) -> str:
    if not tags:
        return name
    return f"{name}: {', '.join(tags)}"


@dataclass(eq=False)
class Property:
    """A stored or computed property of a declaration."""

    name: str = ""  # declared (escaped) name
    type: CodeType | None = None
    key: str | None = None  # JSON key the property is coded under
    required: bool = True
    indirect: bool = False  # exposed through a boxed private slot
    backing: bool = False  # the private boxed slot itself
    storage: str | None = None  # name of the boxed slot backing an indirect property
    access: CodeAccess = CodeAccess.PUBLIC
    mutable: bool = True
    instance: bool = True
    value: str | None = None  # initial value
    body: list[str] = field(default_factory=list)  # accessor body of a computed property
    comments: list[str] = field(default_factory=list)

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        emitter.emit(
            self.access.value,
            None if self.instance else "static",
            "var" if self.mutable else "let",
            f"{self.name}:",
            self.type.identifier,
            "=" if self.value is not None else None,
            self.value,
            "{" if self.body else None,
        )
        if self.body:
            emitter.emit_lines(self.body)
            emitter.emit("}")


@dataclass(eq=False)
class Parameter:
    """A function parameter."""

    name: str = ""
    type: CodeType | None = None
    label: str | None = None  # external argument label, when different from the name
    default: str | None = None
    anonymous: bool = False  # called without an argument label

    @property
    def declaration(self) -> str:
        if self.anonymous:
            prefix = "_ "
        elif self.label:
            prefix = f"{self.label} "
        else:
            prefix = ""
        text = f"{prefix}{self.name}: {self.type.identifier}"
        if self.default is not None:
            text += f" = {self.default}"
        return text


@dataclass(eq=False)
class Function:
    """A function or initializer with a pre-rendered body."""

    name: str = ""  # "init" for initializers
    parameters: list[Parameter] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    access: CodeAccess = CodeAccess.PUBLIC
    returns: CodeType | None = None
    throws: bool = False
    instance: bool = True
    comments: list[str] = field(default_factory=list)

    @property
    def signature(self) -> str:
        text = "(" + ", ".join(p.declaration for p in self.parameters) + ")"
        if self.throws:
            text += " throws"
        if self.returns is not None:
            text += f" -> {self.returns.identifier}"
        return text

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        if self.name == "init":
            emitter.emit(self.access.value, "init" + self.signature, "{")
        else:
            emitter.emit(self.access.value, None if self.instance else "static", "func", self.name + self.signature, "{")
        emitter.emit_lines(self.body)
        emitter.emit("}")


@dataclass(eq=False)
class NamedType(CodeType):
    """Base class of all declarations."""

    ORDER: ClassVar[int] = 3

    name: str = ""
    access: CodeAccess = CodeAccess.PUBLIC
    comments: list[str] = field(default_factory=list)

    @property
    def identifier(self) -> str:
        return self.name

    def child_lists(self) -> list[list[NamedType]]:
        """The lists of declarations owned by this one."""
        return []

    def emit(self, emitter: CodeEmitter) -> None:
        raise NotImplementedError

    def _emit_members(
        self,
        emitter: CodeEmitter,
        properties: list[Property],
        functions: list[Function],
        nested_types: list[NamedType],
    ) -> None:
        for prop in properties:
            prop.emit(emitter)
        for func in functions:
            emitter.emit()
            func.emit(emitter)
        for nested in sorted(nested_types, key=type_ordering):
            emitter.emit()
            nested.emit(emitter)


@dataclass(eq=False)
class Alias(NamedType):
    """A synonym for another type, optionally declared together with peer types."""

    ORDER: ClassVar[int] = 1

    type: CodeType | None = None
    peer_types: list[NamedType] = field(default_factory=list)

    @property
    def direct_references(self) -> list[str]:
        return self.type.direct_references

    @property
    def is_pure(self) -> bool:
        """An alias with no peer types."""
        return not self.peer_types

    def child_lists(self) -> list[list[NamedType]]:
        return [self.peer_types]

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        emitter.emit(self.access.value, "typealias", self.name, "=", self.type.identifier)
        for peer in self.peer_types:
            emitter.emit()
            peer.emit(emitter)


@dataclass(eq=False)
class SimpleCase:
    """A literal case of a SimpleEnum."""

    name: str = ""
    value: str = ""

    def emit(self, emitter: CodeEmitter) -> None:
        if self.name.strip("`") == self.value:
            emitter.emit("case", self.name)
        else:
            emitter.emit("case", self.name, "=", json.dumps(self.value, ensure_ascii=False))


@dataclass(eq=False)
class SimpleEnum(NamedType):
    """An enumeration of literal values of one primitive kind."""

    ORDER: ClassVar[int] = 2

    cases: list[SimpleCase] = field(default_factory=list)
    raw_type: CodeType = field(default_factory=lambda: primitive_type(STRING))
    conforms: list[str] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    nested_types: list[NamedType] = field(default_factory=list)
    default: str | None = None

    @property
    def direct_references(self) -> list[str]:
        return [self.name]

    @property
    def default_value(self) -> str | None:
        return self.default

    @property
    def values(self) -> list[str]:
        return [c.value for c in self.cases]

    def child_lists(self) -> list[list[NamedType]]:
        return [self.nested_types]

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        emitter.emit(self.access.value, "enum", _adoption(self.name, [self.raw_type.identifier] + self.conforms), "{")
        for case in self.cases:
            case.emit(emitter)
        self._emit_members(emitter, self.properties, self.functions, self.nested_types)
        emitter.emit("}")


@dataclass(eq=False)
class Case:
    """A case of a DiscriminatedUnion. A case without a type carries no payload."""

    name: str = ""
    type: CodeType | None = None

    def emit(self, emitter: CodeEmitter) -> None:
        if self.type is None:
            emitter.emit("case", self.name)
        else:
            emitter.emit("case", f"{self.name}({self.type.identifier})")


@dataclass(eq=False)
class DiscriminatedUnion(NamedType):
    """A value that is exactly one of several typed cases."""

    ORDER: ClassVar[int] = 2

    cases: list[Case] = field(default_factory=list)
    conforms: list[str] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    nested_types: list[NamedType] = field(default_factory=list)

    @property
    def direct_references(self) -> list[str]:
        refs = [self.name]
        for case in self.cases:
            if case.type is not None:
                refs.extend(case.type.direct_references)
        return refs

    def child_lists(self) -> list[list[NamedType]]:
        return [self.nested_types]

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        emitter.emit(self.access.value, "enum", _adoption(self.name, self.conforms), "{")
        for case in self.cases:
            case.emit(emitter)
        self._emit_members(emitter, [], self.functions, self.nested_types)
        emitter.emit("}")


@dataclass(eq=False)
class Record(NamedType):
    """A type with ordered properties."""

    properties: list[Property] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)
    nested_types: list[NamedType] = field(default_factory=list)
    conforms: list[str] = field(default_factory=list)
    mode: CodingMode = CodingMode.STANDARD
    value_type: bool = True  # struct rather than class
    additional_property: str | None = None  # name of the property collecting unknown keys

    @property
    def direct_references(self) -> list[str]:
        if not self.value_type:
            return []
        refs = [self.name]
        for prop in self.properties:
            # Computed properties store nothing
            if prop.instance and not prop.body:
                refs.extend(prop.type.direct_references)
        return refs

    @property
    def coded_properties(self) -> list[Property]:
        """Properties that take part in coding, in declaration order."""
        return [p for p in self.properties if p.instance and not p.backing and p.name != self.additional_property]

    def child_lists(self) -> list[list[NamedType]]:
        return [self.nested_types]

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        keyword = "struct" if self.value_type else "class"
        emitter.emit(self.access.value, keyword, _adoption(self.name, self.conforms), "{")
        self._emit_members(emitter, self.properties, self.functions, self.nested_types)
        emitter.emit("}")


@dataclass(eq=False)
class Protocol(NamedType):
    """A named set of capabilities other declarations adopt."""

    ORDER: ClassVar[int] = 0

    conforms: list[str] = field(default_factory=list)
    properties: list[Property] = field(default_factory=list)

    def emit(self, emitter: CodeEmitter) -> None:
        emitter.emit_comments(self.comments)
        emitter.emit(self.access.value, "protocol", _adoption(self.name, self.conforms), "{")
        for prop in self.properties:
            emitter.emit_comments(prop.comments)
            emitter.emit(
                None if prop.instance else "static",
                "var",
                f"{prop.name}:",
                prop.type.identifier,
                "{ get set }" if prop.mutable else "{ get }",
            )
        emitter.emit("}")


@dataclass(eq=False)
class Module:
    """A complete compilation unit: imports plus top-level declarations."""

    types: list[NamedType] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    root: NamedType | None = None

    def emit(self, emitter: CodeEmitter) -> None:
        for name in sorted(set(self.imports)):
            emitter.emit("import", name)
        for declaration in sorted(self.types, key=type_ordering):
            emitter.emit()
            declaration.emit(emitter)

    @property
    def text(self) -> str:
        emitter = CodeEmitter()
        self.emit(emitter)
        return emitter.text

    def deep_types(self) -> Iterator[NamedType]:
        """Every declaration in the module, depth first."""
        return walk_types(self.types)

    def find(self, name: str) -> NamedType | None:
        """First declaration with the given name, depth first."""
        for declaration in self.deep_types():
            if declaration.name == name:
                return declaration
        return None


def walk_types(types: list[NamedType]) -> Iterator[NamedType]:
    """Iterate declarations depth first through nested and peer edges."""
    for declaration in types:
        yield declaration
        for children in declaration.child_lists():
            yield from walk_types(children)
