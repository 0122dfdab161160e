"""
Error types raised by the code generation pipeline.

Every error is terminal: it propagates to the caller of the phase that
raised it and no partial module is produced.
"""

from __future__ import annotations

from typing import Any


class CodeGenerationError(Exception):
    """Base class for all errors raised while turning a schema into code."""

    pass


class SchemaReferenceError(CodeGenerationError):
    """Raised when a ``$ref`` cannot be resolved.

    This can happen when:
    - The reference path is empty
    - The reference is not relative to the current document (does not start with ``#``)
    - The reference names a component that does not exist
    """

    def __init__(self, message: str, ref: str = ""):
        super().__init__(message)
        self.ref = ref


class UnsupportedShapeError(CodeGenerationError):
    """Raised for schema shapes that have no code representation.

    This can happen when:
    - An array uses the tuple (list) form of ``items`` with distinct item schemas
    - An enumeration contains values that are neither strings nor numbers
    """

    def __init__(self, message: str, schema_id: str = ""):
        super().__init__(message)
        self.schema_id = schema_id


class IllegalStateError(CodeGenerationError):
    """Raised when an internal invariant of the pipeline is violated."""

    pass


class DecodingError(CodeGenerationError):
    """Raised by the codec when a JSON value does not fit a generated type."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class NoMatchingCaseError(DecodingError):
    """Raised when no case of a union could decode a value.

    Collects the failure of every attempted case, in declaration order.
    """

    def __init__(self, type_name: str, errors: list[DecodingError], value: Any = None):
        details = "; ".join(str(e) for e in errors)
        super().__init__(f"No case of {type_name} matched: {details}", value)
        self.errors = errors
