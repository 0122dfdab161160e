"""
Line-based code emitter.

IR nodes write themselves through a ``CodeEmitter`` one line at a time.
The emitter owns indentation: a line ending in ``{`` opens a level, a
line that is exactly ``}`` closes one. Comment lines never change the
level.
"""

from __future__ import annotations

from typing import Any

from ..errors import IllegalStateError


class CodeEmitter:
    """Accumulates emitted lines with brace-driven indentation."""

    INDENT = "    "  # 4 spaces

    def __init__(self):
        self.lines: list[str] = []
        self.level = 0

    def emit(self, *tokens: str | None) -> None:
        """
        Emit one line made of space-separated tokens.

        Empty and ``None`` tokens are dropped, so optional parts of a
        declaration can be passed unconditionally. Emitting no tokens
        writes a blank line.
        """
        line = " ".join(t for t in tokens if t)
        comment = line.startswith("//")

        if line == "}":
            if self.level == 0:
                raise IllegalStateError("Unbalanced closing brace in emitted code")
            self.level -= 1

        self.lines.append(self.INDENT * self.level + line if line else "")

        if line.endswith("{") and not comment:
            self.level += 1

    def emit_lines(self, lines: list[str]) -> None:
        """Emit pre-rendered lines, one token each."""
        for line in lines:
            self.emit(line)

    def emit_comments(self, comments: list[str]) -> None:
        """Emit documentation comments."""
        for comment in comments:
            for line in comment.splitlines():
                self.emit("///", line.rstrip())

    @property
    def text(self) -> str:
        """The emitted source."""
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


def code_value(node: Any) -> str:
    """Emitted text of a node, used as its structural identity."""
    emitter = CodeEmitter()
    node.emit(emitter)
    return emitter.text


def type_ordering(node: Any) -> tuple[int, str]:
    """Sort key among sibling types: protocols, aliases, enums, then the rest, by name."""
    return (node.ORDER, node.name)
