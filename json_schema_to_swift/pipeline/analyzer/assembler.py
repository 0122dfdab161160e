"""
Module assembler.

Drives the reifier over a named schema set, promotes duplicated
enumerations, injects encapsulated types, drops excluded names and
finally attaches everything to an optional root declaration.
"""

from __future__ import annotations

from ...logging import get_logger
from ..config import CodeGeneratorConfig
from ..schema_ast.nodes import Schema
from .ir_nodes import Module, NamedType, Record, walk_types
from .name_resolver import unique_name
from .promotion import promote_types
from .reifier import Reifier

logger = get_logger("assembler")


class ModuleAssembler:
    """Builds a Module from named schemas."""

    def __init__(self, config: CodeGeneratorConfig | None = None):
        """
        Initialize the assembler.

        Args:
            config: Code generation configuration
        """
        self.config = config or CodeGeneratorConfig()
        self.reifier = Reifier(self.config)

    def assemble(self, schemas: list[tuple[str, Schema]], root_name: str | None = None) -> Module:
        """
        Reify a schema set into a module.

        Args:
            schemas: Ordered ``(id, schema)`` pairs, as returned by ``SchemaParser.parse``
            root_name: Id of the root schema, if any. Its declaration is
                reified last and every other declaration is nested inside it
                when it is a record.

        Returns:
            The assembled module

        Raises:
            CodeGenerationError: If any schema fails to reify
        """
        self._assign_names(schemas, root_name)

        types: list[NamedType] = []
        root_schema: Schema | None = None
        for id, schema in schemas:
            if id == root_name:
                root_schema = schema
                continue
            types.append(self.reifier.reify(schema, id, []))

        reserved = {self.reifier.names.type_name([], root_name)} if root_schema is not None else set()
        types = promote_types(types, {self.config.keys_name}, reserved)

        declared = {t.name for t in walk_types(types)}
        for name, target in self.config.encapsulate.items():
            if name not in declared:
                logger.debug("Injecting encapsulated type %s", name)
                types.append(self.reifier.encapsulate(name, target, []))

        excluded = set(self.config.excludes)
        types = [t for t in types if t.name not in excluded]

        module = Module(types=types, imports=list(self.config.imports))
        if root_schema is None:
            return module

        root = self.reifier.reify(root_schema, root_name, [])
        module.root = root
        if isinstance(root, Record):
            root.nested_types.extend(types)
            module.types = [root]
        else:
            module.types = [root] + types
        logger.debug("Assembled module with root %s and %d other type(s)", root.name, len(types))
        return module

    def _assign_names(self, schemas: list[tuple[str, Schema]], root_name: str | None) -> None:
        """
        Give every top-level schema a distinct name.

        The root claims its name first, then definitions in document order.
        References resolve through the same table, so a suffixed
        definition is referenced by its suffixed name.
        """
        names = self.reifier.names
        names.assigned.clear()
        ids = [id for id, _ in schemas]
        if root_name in ids:
            ids.remove(root_name)
            ids.insert(0, root_name)

        taken: set[str] = set()
        for id in ids:
            base = names.type_name([], id)
            name = unique_name(base, taken)
            if name != base:
                logger.debug("Renaming %s to %s to avoid a top-level name clash", id, name)
            taken.add(name)
            names.assigned[id] = name
