"""
Pipeline - JSON Schema to Swift generator.

1. Phase 1 (Parser): Parse JSON Schema into named Schema trees
2. Phase 2 (Reifier): Build Code IR declarations, one per schema
3. Phase 3 (Promotion/Assembler): Hoist duplicated enumerations, assemble the module
4. Phase 4 (Emitter): Render the module as Swift source
"""

from __future__ import annotations

from .analyzer import ModuleAssembler, Reifier, promote_types
from .codec import Choice, JSONCodec
from .config import CodeAccess, CodeGeneratorConfig, EnumCase
from .errors import (
    CodeGenerationError,
    DecodingError,
    IllegalStateError,
    NoMatchingCaseError,
    SchemaReferenceError,
    UnsupportedShapeError,
)
from .generator import PipelineGenerator
from .schema_ast import Schema, SchemaParser

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "CodeAccess",
    "EnumCase",
    "Schema",
    "SchemaParser",
    "Reifier",
    "ModuleAssembler",
    "promote_types",
    "JSONCodec",
    "Choice",
    "CodeGenerationError",
    "SchemaReferenceError",
    "UnsupportedShapeError",
    "IllegalStateError",
    "DecodingError",
    "NoMatchingCaseError",
]
