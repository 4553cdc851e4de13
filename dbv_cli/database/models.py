"""Vendor-neutral data models for an introspected database schema."""

from datetime import datetime
from typing import Optional, Tuple
from dataclasses import dataclass, field


BASE_TABLE = "BASE TABLE"


@dataclass(frozen=True)
class Column:
    """Represents a table or view column.

    ``length``, ``precision`` and ``scale`` are ``None`` when the backend
    does not report them, which is distinct from a reported value of 0.
    """
    name: str
    type: str
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    is_nullable: bool = True
    default_value: Optional[str] = None
    is_primary_key: bool = False
    is_unique: bool = False
    comment: str = ""


@dataclass(frozen=True)
class Table:
    """Represents a database table."""
    name: str
    schema: str
    type: str = BASE_TABLE
    columns: Tuple[Column, ...] = ()
    primary_keys: Tuple[str, ...] = ()
    comment: str = ""

    def get_column(self, name: str) -> Optional[Column]:
        """Find a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None


@dataclass(frozen=True)
class View:
    """Represents a database view. The definition is stored verbatim."""
    name: str
    schema: str
    definition: str = ""
    columns: Tuple[Column, ...] = ()
    comment: str = ""


@dataclass(frozen=True)
class ForeignKey:
    """Represents a single-column foreign key reference."""
    name: str
    table: str
    column: str
    referenced_table: str
    referenced_column: str
    on_update: str = ""
    on_delete: str = ""


@dataclass(frozen=True)
class Schema:
    """Snapshot of a database's structure, produced once per extraction."""
    database: str
    tables: Tuple[Table, ...] = ()
    views: Tuple[View, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()
    generated_at: datetime = field(default_factory=datetime.now)

    def get_table(self, name: str) -> Optional[Table]:
        """Find a table by name."""
        for table in self.tables:
            if table.name == name:
                return table
        return None

    @property
    def column_count(self) -> int:
        return sum(len(t.columns) for t in self.tables)
