"""
Reference resolver for $ref resolution.

Resolves local JSON pointer references (``#/definitions/Foo``) against
the parsed document. References to other documents are rejected.
"""

from __future__ import annotations

from typing import Any

from ..errors import SchemaReferenceError
from ..schema_ast.nodes import Schema


class ReferenceResolver:
    """Resolves $ref paths to their target schemas."""

    def __init__(self, document: dict[str, Any]):
        """
        Initialize the resolver.

        Args:
            document: The complete parsed JSON document references point into
        """
        self.document = document
        self._cache: dict[str, Schema] = {}

    def resolve(self, ref: str) -> Schema:
        """
        Resolve a reference to the schema it names.

        Args:
            ref: A reference of the form ``#/<root>/<path...>``

        Returns:
            The referenced schema

        Raises:
            SchemaReferenceError: If the path is empty, not rooted at ``#``
                or names an undefined component
        """
        if ref in self._cache:
            return self._cache[ref]
        target = self.resolve_json(ref)
        schema = Schema.from_json(target)
        self._cache[ref] = schema
        return schema

    def resolve_json(self, ref: str) -> Any:
        """Resolve a reference to the raw JSON value it names."""
        if not ref:
            raise SchemaReferenceError("Reference is empty and requires a root", ref)
        if not ref.startswith("#"):
            raise SchemaReferenceError(f"Reference must be relative to the current document: {ref}", ref)

        pointer = ref[1:]
        if not pointer.strip("/"):
            raise SchemaReferenceError(f"Reference requires a root component: {ref}", ref)

        node: Any = self.document
        for part in pointer.lstrip("/").split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                raise SchemaReferenceError(f"Reference not found: {ref}", ref)
        return node

    def check_references(self) -> list[str]:
        """
        Resolve every $ref that appears anywhere in the document.

        Returns:
            The distinct references found, in document order

        Raises:
            SchemaReferenceError: On the first reference that cannot be resolved
        """
        refs: list[str] = []
        self._collect_refs(self.document, refs)
        for ref in refs:
            self.resolve_json(ref)
        return refs

    def _collect_refs(self, node: Any, refs: list[str]) -> None:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str) and ref not in refs:
                refs.append(ref)
            for value in node.values():
                self._collect_refs(value, refs)
        elif isinstance(node, list):
            for value in node:
                self._collect_refs(value, refs)
