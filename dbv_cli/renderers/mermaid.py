"""Mermaid erDiagram renderer."""

import re

from ..database.models import Column, Schema
from ..database.type_mappers import MermaidTypeMapper

FILE_EXTENSION = ".md"

_type_mapper = MermaidTypeMapper()


def clean_entity_name(name: str) -> str:
    """Make a table name usable as a Mermaid entity identifier."""
    return re.sub(r"[\s.\-]", "_", name)


def _attribute_line(column: Column, with_keys: bool = True) -> str:
    line = f"        {_type_mapper.display_type(column)} {clean_entity_name(column.name)}"
    if not with_keys:
        return line
    if column.is_primary_key:
        line += " PK"
    elif not column.is_nullable:
        line += ' "NOT NULL"'
    return line


def render_mermaid(schema: Schema) -> str:
    """Render a schema as a markdown document with a Mermaid erDiagram block.

    The fenced block is followed by summary lines with the generation time
    and table, view and foreign key counts.
    """
    lines = ["# Database Schema Diagram", "", "```mermaid", "erDiagram"]

    for table in schema.tables:
        lines.append(f"    {clean_entity_name(table.name)} {{")
        for col in table.columns:
            lines.append(_attribute_line(col))
        lines.append("    }")
        lines.append("")

    for view in schema.views:
        entity = clean_entity_name(view.name)
        lines.append(f'    {entity}["{view.name} (VIEW)"] {{')
        for col in view.columns:
            lines.append(_attribute_line(col, with_keys=False))
        lines.append("    }")
        lines.append("")

    for fk in schema.foreign_keys:
        lines.append(
            f"    {clean_entity_name(fk.referenced_table)} ||--o{{ "
            f'{clean_entity_name(fk.table)} : "{fk.column}"'
        )

    lines.append("```")
    lines.append("")
    lines.append(f"Generated on: {schema.generated_at.strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append(f"Total Tables: {len(schema.tables)}")
    lines.append(f"Total Views: {len(schema.views)}")
    lines.append(f"Total Foreign Keys: {len(schema.foreign_keys)}")

    return "\n".join(lines) + "\n"
