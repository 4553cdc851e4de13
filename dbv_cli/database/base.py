"""Abstract base class for schema extraction."""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from typing import Any, List, Optional, Sequence

from ..errors import ExtractionFailed
from .executors import QueryExecutor
from .filters import SchemaConfig
from .models import Column, ForeignKey, Schema, Table, View

logger = logging.getLogger(__name__)


class SchemaExtractor(ABC):
    """Abstract base class for schema extraction.

    Subclasses implement the backend-specific steps. ``extract_schema``
    runs them in a fixed order: tables (with columns and primary keys),
    then views when enabled, then foreign keys. Any failure aborts the
    whole extraction with ``ExtractionFailed``.
    """

    # Override in subclasses
    DATABASE: str = ""
    DEFAULT_SCHEMA: str = ""

    def __init__(self, executor: QueryExecutor):
        self.executor = executor

    def _query(self, step: str, sql: str, params: Sequence[Any] = (), name: Optional[str] = None) -> List[tuple]:
        """Run one introspection query, wrapping failures with the step name."""
        try:
            return self.executor.query(sql, params)
        except Exception as e:
            raise ExtractionFailed(step, e, name=name) from e

    @abstractmethod
    def get_tables(self, config: SchemaConfig) -> List[Table]:
        """Get the retained base tables with columns and primary keys."""
        pass

    @abstractmethod
    def get_columns(self, table: str) -> List[Column]:
        """Get columns of a table or view in ordinal order."""
        pass

    @abstractmethod
    def get_primary_keys(self, table: str) -> List[str]:
        """Get primary key column names in key order."""
        pass

    @abstractmethod
    def get_views(self, config: SchemaConfig) -> List[View]:
        """Get the retained views with their columns."""
        pass

    @abstractmethod
    def get_foreign_keys(self, config: SchemaConfig, tables: List[Table]) -> List[ForeignKey]:
        """Get the retained foreign keys.

        Args:
            config: Filter configuration
            tables: Tables already retained by ``get_tables``
        """
        pass

    def build_table(self, name: str, table_type: str, comment: str = "") -> Table:
        """Assemble a Table from its columns and primary keys.

        Columns named in the primary key are flagged as key columns. A key
        naming a column the table does not have aborts the extraction.
        """
        columns = self.get_columns(name)
        primary_keys = self.get_primary_keys(name)

        column_names = {c.name for c in columns}
        missing = [pk for pk in primary_keys if pk not in column_names]
        if missing:
            raise ExtractionFailed(
                "primary_keys",
                ValueError(f"primary key references unknown column(s): {', '.join(missing)}"),
                name=name,
            )

        pk_set = set(primary_keys)
        columns = [replace(c, is_primary_key=c.name in pk_set) for c in columns]

        return Table(
            name=name,
            schema=self.DEFAULT_SCHEMA,
            type=table_type,
            columns=tuple(columns),
            primary_keys=tuple(primary_keys),
            comment=comment or "",
        )

    def extract_schema(self, config: Optional[SchemaConfig] = None) -> Schema:
        """Extract the full schema.

        Args:
            config: Filter configuration (defaults to no filters, no views)

        Returns:
            Schema snapshot
        """
        config = config or SchemaConfig()

        tables = self.get_tables(config)
        logger.debug("Extracted %d table(s) from %s", len(tables), self.DATABASE)

        views: List[View] = []
        if config.include_views:
            views = self.get_views(config)
            logger.debug("Extracted %d view(s) from %s", len(views), self.DATABASE)

        foreign_keys = self.get_foreign_keys(config, tables)
        logger.debug("Extracted %d foreign key(s) from %s", len(foreign_keys), self.DATABASE)

        return Schema(
            database=self.DATABASE,
            tables=tuple(tables),
            views=tuple(views),
            foreign_keys=tuple(foreign_keys),
            generated_at=datetime.now(),
        )


def optional_int(value) -> Optional[int]:
    """Convert a nullable integer metadata field, keeping NULL as None."""
    if value is None:
        return None
    return int(value)


def optional_str(value) -> Optional[str]:
    """Convert a nullable text metadata field, keeping NULL as None."""
    if value is None:
        return None
    return str(value)
