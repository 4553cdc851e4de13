"""Per-format display type mapping for diagram renderers."""

import re
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .models import Column


# Raw backend type name (lowercased) -> display category
TYPE_CATEGORIES: Dict[str, str] = {
    "varchar": "string",
    "character varying": "string",
    "text": "string",
    "char": "string",
    "character": "string",
    "string": "string",
    "int": "integer",
    "integer": "integer",
    "int4": "integer",
    "bigint": "bigint",
    "int8": "bigint",
    "decimal": "decimal",
    "numeric": "decimal",
    "real": "float",
    "float": "float",
    "double": "float",
    "double precision": "float",
    "boolean": "boolean",
    "bool": "boolean",
    "date": "date",
    "timestamp": "timestamp",
    "datetime": "timestamp",
    "timestamp without time zone": "timestamp",
    "timestamp with time zone": "timestamp",
}


_MERMAID_LIST_SEPARATOR = re.compile(r"\s*,\s*")
_MERMAID_UNSAFE = re.compile(r"[^\w\-\[\]()]")


def type_category(db_type: str) -> Optional[str]:
    """Look up the display category of a raw type, case-insensitively."""
    return TYPE_CATEGORIES.get(db_type.strip().lower())


class TypeMapper(ABC):
    """Maps a column's raw type to the display type of one diagram format."""

    # Display name for each category; override in subclasses
    NAMES: Dict[str, str] = {}

    @abstractmethod
    def passthrough(self, db_type: str) -> str:
        """Display form of a raw type with no lookup entry."""
        pass

    def display_type(self, column: Column) -> str:
        """Convert a column's raw type to its display type.

        String types carry ``(length)`` when a length is known and decimals
        carry ``(precision,scale)`` when both are known.
        """
        category = type_category(column.type)
        if category is None:
            return self.passthrough(column.type)

        name = self.NAMES[category]
        if category == "string" and column.length is not None:
            return f"{name}({column.length})"
        if category == "decimal" and column.precision is not None and column.scale is not None:
            return f"{name}({column.precision},{column.scale})"
        return name


class MermaidTypeMapper(TypeMapper):
    """Type mapper for Mermaid erDiagram attributes."""

    NAMES = {
        "string": "varchar",
        "integer": "int",
        "bigint": "int",
        "decimal": "decimal",
        "float": "float",
        "boolean": "boolean",
        "date": "date",
        "timestamp": "timestamp",
    }

    def display_type(self, column: Column) -> str:
        # Attribute types are single tokens of word characters, "-", "[]" and "()"
        display = _MERMAID_LIST_SEPARATOR.sub("-", super().display_type(column))
        return _MERMAID_UNSAFE.sub("_", display)

    def passthrough(self, db_type: str) -> str:
        return "_".join(db_type.split()) or "unknown"


class PlantUMLTypeMapper(TypeMapper):
    """Type mapper for PlantUML entity fields."""

    NAMES = {
        "string": "VARCHAR",
        "integer": "INTEGER",
        "bigint": "BIGINT",
        "decimal": "DECIMAL",
        "float": "FLOAT",
        "boolean": "BOOLEAN",
        "date": "DATE",
        "timestamp": "TIMESTAMP",
    }

    def passthrough(self, db_type: str) -> str:
        return db_type.upper()


class GraphvizTypeMapper(TypeMapper):
    """Type mapper for Graphviz record labels."""

    NAMES = {
        "string": "VARCHAR",
        "integer": "INT",
        "bigint": "BIGINT",
        "decimal": "DECIMAL",
        "float": "FLOAT",
        "boolean": "BOOL",
        "date": "DATE",
        "timestamp": "TIMESTAMP",
    }

    def passthrough(self, db_type: str) -> str:
        return db_type.upper()
