"""
Jinja2 templates for generated Swift code.

Function bodies (coders, initializers) and the file prefix are rendered
from ``templates/swift/*.swift.jinja2`` and handed to the emitter as
lines, so their indentation is still driven by braces.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import jinja2

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates" / "swift"


@lru_cache(maxsize=1)
def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        lstrip_blocks=True,
        trim_blocks=True,
        keep_trailing_newline=False,
    )


def render(name: str, **context) -> str:
    """Render ``<name>.swift.jinja2`` with the given context."""
    template = _environment().get_template(f"{name}.swift.jinja2")
    return template.render(**context)


def render_lines(name: str, **context) -> list[str]:
    """Render a template into stripped, non-empty lines."""
    return [line.strip() for line in render(name, **context).splitlines() if line.strip()]
