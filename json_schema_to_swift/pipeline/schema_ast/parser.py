"""
JSON Schema parser.

Phase 1 of the pipeline: turn a JSON document into an ordered list of
named ``Schema`` trees (every definition plus an optional root), after
checking that every local reference in the document resolves.
"""

from __future__ import annotations

import json
from typing import Any

from ...logging import get_logger
from ..analyzer.reference_resolver import ReferenceResolver
from .nodes import Schema

logger = get_logger("parser")

DEFINITION_KEYS = ("definitions", "defs", "$defs")

# Keywords whose value is a single subschema
_SUBSCHEMA_KEYS = ("items", "additionalProperties", "not")

# Keywords whose value is a list of subschemas
_SUBSCHEMA_LIST_KEYS = ("allOf", "anyOf", "oneOf", "items")

# Keywords whose value maps names to subschemas
_SUBSCHEMA_MAP_KEYS = ("properties",) + DEFINITION_KEYS


class SchemaParser:
    """Parses a JSON Schema document into named schemas."""

    def parse(self, source: str | dict[str, Any], root_name: str | None = None) -> list[tuple[str, Schema]]:
        """
        Parse a JSON Schema document.

        Args:
            source: The document, either as JSON text or as an already-loaded dict
            root_name: Name under which the root schema is returned, if any

        Returns:
            Ordered ``(id, schema)`` pairs: definitions first (keyed by their
            reference path, e.g. ``#/definitions/Foo``), then the root

        Raises:
            SchemaReferenceError: If any ``$ref`` in the document does not resolve
        """
        document = json.loads(source) if isinstance(source, str) else source
        if not isinstance(document, dict):
            raise TypeError("A schema document must be a JSON object")

        document = self.impute_property_ordering(document)
        ReferenceResolver(document).check_references()

        schemas: list[tuple[str, Schema]] = []
        for key in DEFINITION_KEYS:
            definitions = document.get(key)
            if not isinstance(definitions, dict):
                continue
            for name, definition in definitions.items():
                # Skip comment fields which are strings, not schemas
                if not isinstance(definition, (dict, bool)):
                    continue
                schemas.append((f"#/{key}/{name}", Schema.from_json(definition)))

        if root_name is not None:
            root = Schema.from_json({k: v for k, v in document.items() if k not in DEFINITION_KEYS})
            if root.is_constrained:
                schemas.append((root_name, root))

        logger.debug("Parsed %d schema(s)", len(schemas))
        return schemas

    def impute_property_ordering(self, node: Any) -> Any:
        """
        Record the source key order of every ``properties`` map.

        JSON objects are unordered, so the order in which properties were
        written is kept in the non-standard ``propertyOrder`` keyword,
        unless the schema already declares one.

        Args:
            node: A schema as a JSON value

        Returns:
            A copy of ``node`` with ``propertyOrder`` filled in
        """
        if not isinstance(node, dict):
            return node

        result = dict(node)
        for key in _SUBSCHEMA_KEYS:
            if isinstance(result.get(key), dict):
                result[key] = self.impute_property_ordering(result[key])
        for key in _SUBSCHEMA_LIST_KEYS:
            if isinstance(result.get(key), list):
                result[key] = [self.impute_property_ordering(v) for v in result[key]]
        for key in _SUBSCHEMA_MAP_KEYS:
            if isinstance(result.get(key), dict):
                result[key] = {k: self.impute_property_ordering(v) for k, v in result[key].items()}

        properties = result.get("properties")
        if isinstance(properties, dict) and properties and "propertyOrder" not in result:
            result["propertyOrder"] = list(properties.keys())
        return result
