"""
Configuration for the code generator pipeline.

Value knobs are plain dataclass fields that round-trip through
``from_dict``/``to_dict`` (and therefore through JSON config files).
Hook functions are optional callables that override a knob for a
specific position in the type tree; returning ``None`` from a hook
means "use the knob".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, fields
from enum import Enum

# Generic sum types exist for 2 to MAX_SUM_ARITY members
MAX_SUM_ARITY = 10


class CodeAccess(str, Enum):
    """Access level prefix for generated declarations."""

    PUBLIC = "public"
    INTERNAL = "internal"
    PRIVATE = "private"
    DEFAULT = ""


class EnumCase(str, Enum):
    """Case folding applied to generated enum case names."""

    LOWER = "lower"
    UPPER = "upper"


# Hook signatures
Accessor = Callable[[list[str]], CodeAccess | None]
Renamer = Callable[[list[str], str], str | None]
PropOrdering = Callable[[list[str], str], list[str] | None]

_HOOKS = ("accessor", "renamer", "prop_ordering")


@dataclass
class CodeGeneratorConfig:
    """Configuration options for code generation."""

    # Default access level for every generated declaration
    access: CodeAccess = CodeAccess.PUBLIC

    # Static id -> name table consulted before the renamer hook falls back
    renames: dict[str, str] = field(default_factory=dict)

    # Type names that are never emitted at the top level
    excludes: list[str] = field(default_factory=list)

    # Names that get a wrapping RawRepresentable struct instead of a typealias (name -> target type)
    encapsulate: dict[str, str] = field(default_factory=dict)

    # Explicit property types, keyed by "Owner.property"
    type_overrides: dict[str, str] = field(default_factory=dict)

    # Collapse oneOf/allOf/anyOf into generic OneOfN/AllOfN/AnyOfN aliases
    use_one_of_enums: bool = True
    use_all_of_enums: bool = True
    use_any_of_enums: bool = True

    # Reify anyOf exactly like oneOf
    any_of_as_one_of: bool = False

    # Number of object-shaped optional properties at which optionals are boxed
    indirect_count_threshold: int = 99

    # Prefix of the private stored property backing a boxed property
    indirect_prefix: str = "_"

    one_of_suffix: str = "Choice"
    all_of_suffix: str = "Sum"
    any_of_suffix: str = "Some"
    case_suffix: str = "Case"

    # Suffix appended to nested type names derived from property names
    type_suffix: str = ""

    # Name of the generated keys enumeration of every record
    keys_name: str = "CodingKeys"

    enum_case: EnumCase = EnumCase.LOWER

    # Prefixes stripped from reference ids before they become type names
    trim_prefixes: list[str] = field(default_factory=lambda: ["#/definitions/", "#/defs/", "#/$defs/"])

    generate_equals: bool = True
    generate_hashable: bool = True
    generate_codable: bool = True

    # Emit records as structs (value types) rather than classes
    generate_value_types: bool = True

    # Use [T] and T? shorthand for arrays and optionals
    compact: bool = True

    # Modules imported by the generated file
    imports: list[str] = field(default_factory=lambda: ["BricBrac"])

    # Add generation comment at top of file
    add_generation_comment: bool = True

    # Hooks (not serialized)
    accessor: Accessor | None = None
    renamer: Renamer | None = None
    prop_ordering: PropOrdering | None = None

    def __post_init__(self) -> None:
        self.access = CodeAccess(self.access)
        self.enum_case = EnumCase(self.enum_case)

    def access_for(self, parents: list[str]) -> CodeAccess:
        """Access level of a declaration nested under ``parents``."""
        if self.accessor is not None:
            access = self.accessor(parents)
            if access is not None:
                return CodeAccess(access)
        return self.access

    def rename(self, parents: list[str], id: str) -> str | None:
        """Explicit name for ``id`` under ``parents``, or None to derive one."""
        if self.renamer is not None:
            name = self.renamer(parents, id)
            if name is not None:
                return name
        return self.renames.get(id)

    def ordering_for(self, parents: list[str], id: str) -> list[str] | None:
        """Explicit property ordering for the record ``id``, if any."""
        if self.prop_ordering is None:
            return None
        return self.prop_ordering(parents, id)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k) and k not in _HOOKS:
                setattr(config, k, v)
        config.__post_init__()
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        result = {}
        for f in fields(self):
            if f.name in _HOOKS:
                continue
            value = getattr(self, f.name)
            result[f.name] = value.value if isinstance(value, Enum) else value
        return result
