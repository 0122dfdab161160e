"""
Pipeline generator: JSON Schema document in, Swift source out.

1. Phase 1 (Parser): parse the document into named schemas
2. Phase 2 (Reifier/Assembler): build and promote the Code IR module
3. Phase 3 (Emitter): render the module, prefixed by the generation header
"""

from __future__ import annotations

from typing import Any

from .. import __version__
from ..cli_utils import reconstruct_command_line
from ..logging import get_logger
from .analyzer.assembler import ModuleAssembler
from .analyzer.ir_nodes import Module
from .ast_backends.emitter import CodeEmitter
from .ast_backends.templates import render
from .config import CodeGeneratorConfig
from .schema_ast.parser import SchemaParser

logger = get_logger("generator")


class PipelineGenerator:
    """Generates Swift source from a JSON Schema document."""

    def __init__(
        self,
        name: str,
        schema: dict[str, Any],
        config: CodeGeneratorConfig | None = None,
        root: bool = True,
    ):
        """
        Initialize the generator.

        Args:
            name: Name of the root type
            schema: The JSON Schema document
            config: Code generation configuration
            root: Whether the document's own shape becomes a root type
        """
        self.name = name
        self.schema = schema
        self.config = config or CodeGeneratorConfig()
        self.root = root

    def build_module(self) -> Module:
        """Run the parser and the assembler."""
        root_name = self.name if self.root else None
        schemas = SchemaParser().parse(self.schema, root_name)
        module = ModuleAssembler(self.config).assemble(schemas, root_name)
        logger.debug("Built module %s with %d top-level type(s)", self.name, len(module.types))
        return module

    def generate(self) -> str:
        """
        Generate the Swift source.

        Returns:
            The complete file contents

        Raises:
            CodeGenerationError: If the schema cannot be turned into code
        """
        module = self.build_module()
        emitter = CodeEmitter()
        module.emit(emitter)
        prefix = render("prefix", generation_comment=self._generation_comment())
        if prefix:
            prefix += "\n"
        return prefix + emitter.text

    def _generation_comment(self) -> str:
        """Generation comment for the top of the file."""
        if not self.config.add_generation_comment:
            return ""

        try:
            from ..json_schema_to_swift import json_schema_to_swift as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "json_schema_to_swift"

        return f"// Generated by json_schema_to_swift v{__version__} : {command_line}"
