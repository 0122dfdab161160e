"""
Reference codec for generated types.

``JSONCodec`` executes the coding rules the generated ``encode(to:)`` /
``init(from:)`` implement, directly on plain JSON values:

- records map properties to their keys, omit absent optionals and
  collect unknown keys into their additionalProperties map
- merge (allOf) records decode every member from the whole value, any
  (anyOf) records keep the members that decode
- unions try their cases in declaration order; the first that decodes
  wins and an aggregate error is raised when none does

Decoded records are dicts keyed by property name, decoded union values
are ``Choice`` instances.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from .analyzer.ir_nodes import (
    ALL_OF,
    ANY_OF,
    ARRAY,
    BOOL,
    BRIC,
    DICTIONARY,
    DOUBLE,
    INDIRECT,
    INT,
    NOT,
    NULL,
    ONE_OF,
    OPTIONAL,
    STRING,
    Alias,
    CodeType,
    CodingMode,
    DiscriminatedUnion,
    ExternalType,
    Module,
    NamedType,
    Record,
    SimpleEnum,
    walk_types,
)
from .analyzer.name_resolver import unescape
from .errors import DecodingError, IllegalStateError, NoMatchingCaseError

_SUM_TYPE = re.compile(rf"^({ONE_OF}|{ALL_OF}|{ANY_OF})\d+$")


@dataclass(frozen=True)
class Choice:
    """A decoded union value: the position and name of the matching case and its payload."""

    index: int
    value: Any
    case: str | None = None


def _merge(results: list[Any]) -> Any:
    """Combine the encodings of the members of a merged value."""
    if not results:
        return None
    if all(isinstance(r, dict) for r in results):
        merged: dict[str, Any] = {}
        for r in results:
            merged.update(r)
        return merged
    return results[0]


class JSONCodec:
    """Encodes and decodes JSON values according to the declarations of a module."""

    def __init__(self, module: Module):
        """
        Initialize the codec.

        Args:
            module: Module whose declarations named references resolve against
        """
        self.module = module
        self._named: dict[str, NamedType] = {t.name: t for t in reversed(module.types)}
        for declaration in walk_types(module.types):
            self._named.setdefault(declaration.name, declaration)

    def lookup(self, name: str) -> NamedType:
        """Resolve a (possibly dotted) declaration name."""
        first, *rest = name.split(".")
        declaration = self._named.get(first)
        for part in rest:
            if declaration is None:
                break
            declaration = next(
                (t for children in declaration.child_lists() for t in children if t.name == part),
                None,
            )
        if declaration is None:
            raise IllegalStateError(f"Unknown type {name}")
        return declaration

    def _resolve(self, code_type: CodeType | str) -> CodeType:
        if isinstance(code_type, str):
            return self.lookup(code_type)
        return code_type

    # Decoding

    def decode(self, code_type: CodeType | str, value: Any) -> Any:
        """
        Decode a JSON value as an instance of ``code_type``.

        Raises:
            DecodingError: If the value does not fit the type
        """
        code_type = self._resolve(code_type)
        if isinstance(code_type, ExternalType):
            return self._decode_external(code_type, value)
        if isinstance(code_type, Alias):
            return self.decode(code_type.type, value)
        if isinstance(code_type, SimpleEnum):
            if not isinstance(value, str) or value not in code_type.values:
                raise DecodingError(f"{value!r} is not a case of {code_type.name}", value)
            return value
        if isinstance(code_type, DiscriminatedUnion):
            return self._decode_union(code_type, value)
        if isinstance(code_type, Record):
            return self._decode_record(code_type, value)
        raise IllegalStateError(f"Cannot decode values of {code_type.identifier}")

    def _decode_external(self, t: ExternalType, value: Any) -> Any:
        if t.target is not None:
            return self.decode(t.target, value)
        name = t.name
        if not t.generics:
            if name == STRING:
                if not isinstance(value, str):
                    raise DecodingError(f"Expected a string, got {value!r}", value)
            elif name == INT:
                if isinstance(value, float) and value.is_integer():
                    return int(value)
                if isinstance(value, bool) or not isinstance(value, int):
                    raise DecodingError(f"Expected an integer, got {value!r}", value)
            elif name == DOUBLE:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise DecodingError(f"Expected a number, got {value!r}", value)
            elif name == BOOL:
                if not isinstance(value, bool):
                    raise DecodingError(f"Expected a boolean, got {value!r}", value)
            elif name == NULL:
                if value is not None:
                    raise DecodingError(f"Expected null, got {value!r}", value)
            elif name != BRIC:
                return self.decode(self.lookup(name), value)
            return value

        if name == ARRAY:
            if not isinstance(value, list):
                raise DecodingError(f"Expected an array, got {value!r}", value)
            return [self.decode(t.generics[0], v) for v in value]
        if name in (OPTIONAL, INDIRECT):
            return None if value is None else self.decode(t.generics[0], value)
        if name == DICTIONARY:
            if not isinstance(value, dict):
                raise DecodingError(f"Expected an object, got {value!r}", value)
            return {k: self.decode(t.generics[1], v) for k, v in value.items()}
        if name == NOT:
            try:
                self.decode(t.generics[0], value)
            except DecodingError:
                return value
            raise DecodingError(f"Value must not match {t.generics[0].identifier}", value)

        match = _SUM_TYPE.match(name)
        if match is None:
            raise IllegalStateError(f"Unknown generic type {t.identifier}")
        kind = match.group(1)
        if kind == ONE_OF:
            return self._first_match(t.identifier, [(i, None, g) for i, g in enumerate(t.generics)], value)
        if kind == ALL_OF:
            return tuple(self.decode(g, value) for g in t.generics)
        return self._any_match(t.identifier, t.generics, value)

    def _first_match(self, type_name: str, cases: list[tuple[int, str | None, CodeType | None]], value: Any) -> Choice:
        errors: list[DecodingError] = []
        for index, case, payload in cases:
            if payload is None:
                if value is None:
                    return Choice(index, None, case)
                errors.append(DecodingError(f"Expected null for case {case}", value))
                continue
            try:
                return Choice(index, self.decode(payload, value), case)
            except DecodingError as e:
                errors.append(e)
        raise NoMatchingCaseError(type_name, errors, value)

    def _any_match(self, type_name: str, members: list[CodeType], value: Any) -> tuple:
        results = []
        errors: list[DecodingError] = []
        for member in members:
            try:
                results.append(self.decode(member, value))
            except DecodingError as e:
                errors.append(e)
                results.append(None)
        if len(errors) == len(members):
            raise NoMatchingCaseError(type_name, errors, value)
        return tuple(results)

    def _decode_union(self, union: DiscriminatedUnion, value: Any) -> Choice:
        cases = [(i, case.name, case.type) for i, case in enumerate(union.cases)]
        return self._first_match(union.name, cases, value)

    def _decode_record(self, record: Record, value: Any) -> dict[str, Any]:
        props = record.coded_properties
        if record.mode == CodingMode.RAW:
            return {"rawValue": self.decode(record.properties[0].type, value)}
        if record.mode == CodingMode.ALL_OF:
            return {unescape(p.name): self.decode(p.type, value) for p in props}
        if record.mode == CodingMode.ANY_OF:
            members = [p.type.unwrapped if isinstance(p.type, ExternalType) else p.type for p in props]
            results = self._any_match(record.name, members, value)
            return {unescape(p.name): r for p, r in zip(props, results)}

        if not isinstance(value, dict):
            raise DecodingError(f"Expected an object for {record.name}, got {value!r}", value)
        result: dict[str, Any] = {}
        for p in props:
            if p.key in value:
                result[unescape(p.name)] = self.decode(p.type, value[p.key])
            elif p.required:
                raise DecodingError(f"Missing key {p.key!r} for {record.name}", value)
            else:
                result[unescape(p.name)] = None
        if record.additional_property is not None:
            known = {p.key for p in props}
            result[unescape(record.additional_property)] = {k: v for k, v in value.items() if k not in known}
        return result

    # Encoding

    def encode(self, code_type: CodeType | str, value: Any) -> Any:
        """Encode a decoded value back into a JSON value."""
        code_type = self._resolve(code_type)
        if isinstance(code_type, ExternalType):
            return self._encode_external(code_type, value)
        if isinstance(code_type, Alias):
            return self.encode(code_type.type, value)
        if isinstance(code_type, SimpleEnum):
            return value
        if isinstance(code_type, DiscriminatedUnion):
            case = code_type.cases[value.index]
            return None if case.type is None else self.encode(case.type, value.value)
        if isinstance(code_type, Record):
            return self._encode_record(code_type, value)
        raise IllegalStateError(f"Cannot encode values of {code_type.identifier}")

    def _encode_external(self, t: ExternalType, value: Any) -> Any:
        if t.target is not None:
            return self.encode(t.target, value)
        name = t.name
        if not t.generics:
            if name in (STRING, INT, DOUBLE, BOOL, NULL, BRIC):
                return value
            return self.encode(self.lookup(name), value)
        if name == ARRAY:
            return [self.encode(t.generics[0], v) for v in value]
        if name in (OPTIONAL, INDIRECT):
            return None if value is None else self.encode(t.generics[0], value)
        if name == DICTIONARY:
            return {k: self.encode(t.generics[1], v) for k, v in value.items()}
        if name == NOT:
            return value

        match = _SUM_TYPE.match(name)
        if match is None:
            raise IllegalStateError(f"Unknown generic type {t.identifier}")
        kind = match.group(1)
        if kind == ONE_OF:
            return self.encode(t.generics[value.index], value.value)
        return _merge([self.encode(g, v) for g, v in zip(t.generics, value) if v is not None])

    def _encode_record(self, record: Record, value: dict[str, Any]) -> Any:
        props = record.coded_properties
        if record.mode == CodingMode.RAW:
            return self.encode(record.properties[0].type, value["rawValue"])
        if record.mode in (CodingMode.ALL_OF, CodingMode.ANY_OF):
            results = []
            for p in props:
                member = value[unescape(p.name)]
                if member is not None:
                    results.append(self.encode(p.type, member))
            return _merge(results)

        result: dict[str, Any] = {}
        if record.additional_property is not None:
            # Declared properties take precedence over additional ones
            result.update(value.get(unescape(record.additional_property)) or {})
        for p in props:
            member = value.get(unescape(p.name))
            if member is None and not p.required:
                continue
            result[p.key] = self.encode(p.type, member)
        return result
