"""PlantUML entity-relationship renderer."""

import re

from ..database.models import Schema
from ..database.type_mappers import PlantUMLTypeMapper

FILE_EXTENSION = ".puml"

_type_mapper = PlantUMLTypeMapper()


def clean_entity_name(name: str) -> str:
    return re.sub(r"[\s.\-]", "_", name)


def render_plantuml(schema: Schema) -> str:
    """Render a schema as a PlantUML diagram.

    Key columns are listed above the ``--`` separator, marked with ``*``
    and ``<<PK>>``.
    """
    lines = ["@startuml", "!theme plain", "skinparam linetype ortho", ""]

    for table in schema.tables:
        lines.append(f'entity "{table.name}" as {clean_entity_name(table.name)} {{')

        for col in table.columns:
            if col.is_primary_key:
                lines.append(f"  * {col.name} : {_type_mapper.display_type(col)} <<PK>>")

        lines.append("  --")

        for col in table.columns:
            if not col.is_primary_key:
                null_str = "" if col.is_nullable else " <<NOT NULL>>"
                lines.append(f"  {col.name} : {_type_mapper.display_type(col)}{null_str}")

        lines.append("}")
        lines.append("")

    for view in schema.views:
        lines.append(f'entity "{view.name}" as {clean_entity_name(view.name)} <<view>> {{')
        for col in view.columns:
            lines.append(f"  {col.name} : {_type_mapper.display_type(col)}")
        lines.append("}")
        lines.append("")

    for fk in schema.foreign_keys:
        lines.append(
            f"{clean_entity_name(fk.referenced_table)} ||--o{{ "
            f"{clean_entity_name(fk.table)} : {fk.column}"
        )

    lines.append("")
    lines.append("@enduml")

    return "\n".join(lines) + "\n"
