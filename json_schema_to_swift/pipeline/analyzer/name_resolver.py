"""
Name resolver for Swift identifiers.

Turns schema ids, property keys and enum values into valid Swift
identifiers: invalid characters are dropped (capitalizing the next
character), reserved words are escaped with backticks and names that end
up empty fall back to their code points.
"""

from __future__ import annotations

from ..config import CodeGeneratorConfig, EnumCase

# Swift reserved keywords that need escaping
SWIFT_RESERVED_KEYWORDS = {
    "Protocol",
    "Self",
    "Type",
    "as",
    "associativity",
    "break",
    "case",
    "class",
    "continue",
    "convenience",
    "default",
    "deinit",
    "didSet",
    "do",
    "dynamic",
    "dynamicType",
    "else",
    "enum",
    "extension",
    "fallthrough",
    "false",
    "final",
    "for",
    "func",
    "get",
    "if",
    "import",
    "in",
    "infix",
    "init",
    "inout",
    "internal",
    "is",
    "lazy",
    "let",
    "mutating",
    "nil",
    "nonmutating",
    "operator",
    "optional",
    "override",
    "postfix",
    "precedence",
    "prefix",
    "private",
    "protocol",
    "public",
    "repeat",
    "required",
    "return",
    "self",
    "set",
    "static",
    "struct",
    "subscript",
    "super",
    "switch",
    "true",
    "typealias",
    "unowned",
    "var",
    "weak",
    "where",
    "while",
    "willSet",
}

# Keywords that cannot be used as argument labels
RESERVED_ARGUMENT_NAMES = {"inout", "var", "let"}


def escape_keyword(name: str, keywords: set[str] = SWIFT_RESERVED_KEYWORDS) -> str:
    """Escape a reserved word with backticks."""
    if name in keywords:
        return f"`{name}`"
    return name


def unescape(name: str) -> str:
    """Remove the backticks of an escaped name."""
    if len(name) > 1 and name.startswith("`") and name.endswith("`"):
        return name[1:-1]
    return name


def codepoint_name(text: str, upper: bool) -> str:
    """Deterministic identifier made of the code points of ``text``, e.g. ">=" -> "u62u61"."""
    prefix = "U" if upper else "u"
    return "".join(f"{prefix}{ord(c)}" for c in text)


def unique_name(name: str, taken: set[str] | list[str]) -> str:
    """Append the lowest numeric suffix that makes ``name`` unique among ``taken``."""
    if name not in taken:
        return name
    base = unescape(name)
    n = 2
    while f"{base}{n}" in taken:
        n += 1
    return f"{base}{n}"


def _is_name_start(c: str) -> bool:
    return c.isalpha() or c == "_"


def _is_name_body(c: str) -> bool:
    return c.isalnum() or c == "_"


class NameResolver:
    """Derives type, property and case names from schema ids."""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the resolver.

        Args:
            config: Code generation configuration (renamer hook, prefixes, case folding)
        """
        self.config = config
        # Reference id -> name assigned to a top-level declaration
        self.assigned: dict[str, str] = {}

    def sanitize(self, name: str, capitalize: bool = True) -> str:
        """
        Drop characters that cannot appear in an identifier.

        The character following a dropped one is capitalized, as is the
        first character when ``capitalize`` is set.

        Args:
            name: Raw name
            capitalize: Whether to capitalize the first character

        Returns:
            A possibly empty identifier
        """
        result: list[str] = []
        cap_next = capitalize
        for c in name:
            valid = _is_name_body(c) if result else _is_name_start(c)
            if not valid:
                cap_next = True if result else capitalize
                continue
            result.append(c.upper() if cap_next else c)
            cap_next = False
        return "".join(result)

    def trim(self, id: str) -> str:
        """Strip the first configured reference prefix from an id."""
        for prefix in self.config.trim_prefixes:
            if id.startswith(prefix):
                return id[len(prefix) :]
        return id

    def type_name(self, parents: list[str], id: str, capitalize: bool = True) -> str:
        """
        Name of the type declared for ``id`` under ``parents``.

        Args:
            parents: Names of the enclosing declarations
            id: Schema id, reference path, title or literal value
            capitalize: Whether the name starts with a capital letter

        Returns:
            A valid, keyword-escaped identifier
        """
        if not parents and id in self.assigned:
            return self.assigned[id]

        renamed = self.config.rename(parents, id)
        if renamed is not None:
            return renamed

        trimmed = self.trim(id)
        name = self.sanitize(trimmed, capitalize)
        if not name:
            if not trimmed:
                return "Empty" if capitalize else "empty"
            name = codepoint_name(trimmed, self.config.enum_case == EnumCase.UPPER)
        return escape_keyword(name)

    def prop_name(self, parents: list[str], id: str, arg: bool = False) -> str:
        """
        Name of the property declared for the key ``id``.

        Args:
            parents: Names of the enclosing declarations
            id: JSON property key
            arg: Whether the name is used in argument position, where only
                ``inout``, ``var`` and ``let`` need escaping

        Returns:
            A valid identifier, escaped for its position
        """
        renamed = self.config.rename(parents, id)
        if renamed is not None:
            return renamed

        name = self.sanitize(id, capitalize=False)
        if not name:
            name = codepoint_name(id, upper=False) if id else "empty"
        if name == "init":
            name = "initx"
        return escape_keyword(name, RESERVED_ARGUMENT_NAMES if arg else SWIFT_RESERVED_KEYWORDS)

    def unique(self, name: str, taken: set[str] | list[str]) -> str:
        """Append the lowest numeric suffix that makes ``name`` unique."""
        return unique_name(name, taken)
