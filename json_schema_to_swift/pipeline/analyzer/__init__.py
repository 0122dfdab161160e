"""
Analyzer module.

Contains reference and name resolution, the Code IR, the reifier, the
promotion pass and the module assembler.
"""

from __future__ import annotations

from .assembler import ModuleAssembler
from .ir_nodes import (
    Alias,
    Case,
    CodeType,
    CodingMode,
    DiscriminatedUnion,
    ExternalType,
    Function,
    Module,
    NamedType,
    Parameter,
    Property,
    Protocol,
    Record,
    SimpleCase,
    SimpleEnum,
)
from .name_resolver import NameResolver
from .promotion import promote_types
from .reference_resolver import ReferenceResolver
from .reifier import Reifier, ShapeKind, classify

__all__ = [
    "CodeType",
    "ExternalType",
    "NamedType",
    "Alias",
    "Record",
    "DiscriminatedUnion",
    "SimpleEnum",
    "Protocol",
    "Property",
    "Parameter",
    "Function",
    "Case",
    "SimpleCase",
    "CodingMode",
    "Module",
    "NameResolver",
    "ReferenceResolver",
    "Reifier",
    "ShapeKind",
    "classify",
    "promote_types",
    "ModuleAssembler",
]
