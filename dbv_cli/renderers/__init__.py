"""Diagram renderers for dbv.

Each renderer is a pure function from a Schema to a text document.
"""

from pathlib import Path
from typing import Callable, Dict

from ..database.models import Schema
from ..errors import UnsupportedFormat
from . import graphviz, mermaid, plantuml
from .graphviz import render_graphviz
from .mermaid import render_mermaid
from .plantuml import render_plantuml

RENDERERS: Dict[str, Callable[[Schema], str]] = {
    "mermaid": render_mermaid,
    "plantuml": render_plantuml,
    "graphviz": render_graphviz,
}

FILE_EXTENSIONS: Dict[str, str] = {
    "mermaid": mermaid.FILE_EXTENSION,
    "plantuml": plantuml.FILE_EXTENSION,
    "graphviz": graphviz.FILE_EXTENSION,
}


def validate_format(fmt: str) -> str:
    """Return the normalized format name, or raise UnsupportedFormat."""
    name = (fmt or "").strip().lower()
    if name not in RENDERERS:
        raise UnsupportedFormat(fmt, RENDERERS.keys())
    return name


def render(fmt: str, schema: Schema) -> str:
    """Render a schema in the named format."""
    return RENDERERS[validate_format(fmt)](schema)


def default_output_file(fmt: str) -> str:
    """Default output file name for a format, e.g. ``schema.md``."""
    return "schema" + FILE_EXTENSIONS[validate_format(fmt)]


def write_output(path: str, content: str) -> Path:
    """Write a rendered document, creating parent directories."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    return output


__all__ = [
    "RENDERERS",
    "FILE_EXTENSIONS",
    "render",
    "render_mermaid",
    "render_plantuml",
    "render_graphviz",
    "validate_format",
    "default_output_file",
    "write_output",
]
