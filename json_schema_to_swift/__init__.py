"""JSON Schema to Swift Generator

A Python package for generating Swift value types from JSON Schema
definitions: records, discriminated unions, enumerations and aliases,
with generic sum types for oneOf/allOf/anyOf and promotion of
duplicated enumerations.
"""

__version__ = "1.0.0"

from .pipeline import (
    CodeGeneratorConfig,
    CodeGenerationError,
    IllegalStateError,
    JSONCodec,
    ModuleAssembler,
    PipelineGenerator,
    Reifier,
    SchemaParser,
    SchemaReferenceError,
    UnsupportedShapeError,
)

__all__ = [
    "PipelineGenerator",
    "CodeGeneratorConfig",
    "SchemaParser",
    "Reifier",
    "ModuleAssembler",
    "JSONCodec",
    "CodeGenerationError",
    "SchemaReferenceError",
    "UnsupportedShapeError",
    "IllegalStateError",
]
