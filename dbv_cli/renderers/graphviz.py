"""Graphviz DOT renderer."""

import re
from typing import Iterable

from ..database.models import Column, Schema
from ..database.type_mappers import GraphvizTypeMapper

FILE_EXTENSION = ".dot"

_type_mapper = GraphvizTypeMapper()

# Characters with meaning inside a record-shaped node label
_RECORD_SPECIAL = re.compile(r'([{}|<>"\\])')


def clean_node_name(name: str) -> str:
    """Make a table name usable as a DOT node identifier."""
    name = re.sub(r"\W", "_", name)
    if name[:1].isdigit():
        name = "_" + name
    return name


def escape_label(text: str) -> str:
    return _RECORD_SPECIAL.sub(r"\\\1", text)


def _quote(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _fields(columns: Iterable[Column], with_keys: bool) -> str:
    fields = []
    for col in columns:
        field = f"{col.name}: {_type_mapper.display_type(col)}"
        if with_keys:
            if col.is_primary_key:
                field = "+" + field
            elif not col.is_nullable:
                field += " NOT NULL"
        fields.append(escape_label(field))
    return "\\l".join(fields)


def render_graphviz(schema: Schema) -> str:
    """Render a schema as a directed graph of record nodes.

    Each foreign key becomes an edge from the referenced table to the
    owning table, labeled with the owning column.
    """
    lines = [
        "digraph schema {",
        "  rankdir=TB;",
        "  node [shape=record, style=filled, fillcolor=lightblue];",
        "  edge [color=gray];",
        "",
    ]

    for table in schema.tables:
        lines.append(
            f'  {clean_node_name(table.name)} '
            f'[label="{{{escape_label(table.name)}|{_fields(table.columns, True)}\\l}}"];'
        )

    for view in schema.views:
        lines.append(
            f'  {clean_node_name(view.name)} '
            f'[label="{{{escape_label(view.name)} (VIEW)|{_fields(view.columns, False)}\\l}}", '
            f'fillcolor=lightgreen];'
        )

    lines.append("")

    for fk in schema.foreign_keys:
        lines.append(
            f'  {clean_node_name(fk.referenced_table)} -> {clean_node_name(fk.table)} '
            f'[label="{_quote(fk.column)}"];'
        )

    lines.append("}")

    return "\n".join(lines) + "\n"
