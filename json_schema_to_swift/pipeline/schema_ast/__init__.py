"""
Schema AST module.

Contains the Schema node definition and the document parser.
"""

from __future__ import annotations

from .nodes import Schema
from .parser import SchemaParser

__all__ = [
    "Schema",
    "SchemaParser",
]
