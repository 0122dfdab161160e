"""
Swift emission.

Contains the line emitter and the jinja2 templates for function bodies.
"""

from __future__ import annotations

from .emitter import CodeEmitter, code_value, type_ordering

__all__ = [
    "CodeEmitter",
    "code_value",
    "type_ordering",
]
