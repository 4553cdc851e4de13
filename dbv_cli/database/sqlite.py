"""SQLite schema extractor, built on sqlite_master and PRAGMA functions."""

import logging
from typing import Dict, List

from ..errors import ExtractionFailed
from .base import SchemaExtractor, optional_str
from .filters import SchemaConfig
from .models import BASE_TABLE, Column, ForeignKey, Table, View

logger = logging.getLogger(__name__)


# Names starting with "sqlite_" are reserved for SQLite's internal tables
TABLES_SQL = """
    SELECT name
    FROM sqlite_master
    WHERE type = 'table'
      AND substr(name, 1, 7) != 'sqlite_'
    ORDER BY name
"""

VIEWS_SQL = """
    SELECT name, COALESCE(sql, '')
    FROM sqlite_master
    WHERE type = 'view'
      AND substr(name, 1, 7) != 'sqlite_'
    ORDER BY name
"""

# Table-valued forms of PRAGMA table_info / foreign_key_list accept bound parameters
TABLE_INFO_SQL = """
    SELECT cid, name, type, "notnull", dflt_value, pk
    FROM pragma_table_info(?)
    ORDER BY cid
"""

FOREIGN_KEY_LIST_SQL = """
    SELECT id, seq, "table", "from", "to", on_update, on_delete
    FROM pragma_foreign_key_list(?)
    ORDER BY id, seq
"""


def synthesize_foreign_key_name(table: str, column: str) -> str:
    """SQLite does not name foreign keys; build a stable name instead."""
    return f"fk_{table}_{column}"


class SQLiteExtractor(SchemaExtractor):
    """Extracts the schema of a SQLite database file."""

    DATABASE = "sqlite"
    DEFAULT_SCHEMA = "main"

    def get_tables(self, config: SchemaConfig) -> List[Table]:
        rows = self._query("tables", TABLES_SQL)

        tables = []
        for (name,) in rows:
            if not config.allows(name):
                logger.debug("Skipping filtered table %s", name)
                continue
            tables.append(self.build_table(name, BASE_TABLE))
        return tables

    def _table_info(self, step: str, table: str) -> List[tuple]:
        return self._query(step, TABLE_INFO_SQL, (table,), name=table)

    def get_columns(self, table: str) -> List[Column]:
        """Get columns from PRAGMA table_info.

        ``notnull`` and ``pk`` are integer flags. SQLite reports no length,
        precision or scale separately, so those stay unset.
        """
        columns = []
        for _cid, name, col_type, not_null, default_value, pk in self._table_info("columns", table):
            columns.append(Column(
                name=name,
                type=col_type or "",
                is_nullable=(not_null == 0),
                default_value=optional_str(default_value),
                is_primary_key=(pk != 0),
            ))
        return columns

    def get_primary_keys(self, table: str) -> List[str]:
        """Derive primary keys from the pk flag of PRAGMA table_info."""
        return [row[1] for row in self._table_info("primary_keys", table) if row[5] != 0]

    def get_views(self, config: SchemaConfig) -> List[View]:
        rows = self._query("views", VIEWS_SQL)

        views = []
        for name, definition in rows:
            if not config.allows(name):
                logger.debug("Skipping filtered view %s", name)
                continue
            views.append(View(
                name=name,
                schema=self.DEFAULT_SCHEMA,
                definition=definition,
                columns=tuple(self.get_columns(name)),
            ))
        return views

    def _referenced_key_columns(self, table: str) -> List[str]:
        """Primary key columns of a parent table in key declaration order.

        The pk flag holds the 1-based position within the key, which is the
        order an implicit ``REFERENCES parent`` is matched in.
        """
        rows = self._table_info("foreign_keys", table)
        return [row[1] for row in sorted((r for r in rows if r[5] != 0), key=lambda r: r[5])]

    def get_foreign_keys(self, config: SchemaConfig, tables: List[Table]) -> List[ForeignKey]:
        """Get foreign keys with one PRAGMA foreign_key_list call per retained table."""
        parent_keys: Dict[str, List[str]] = {}

        foreign_keys = []
        for table in tables:
            rows = self._query("foreign_keys", FOREIGN_KEY_LIST_SQL, (table.name,), name=table.name)

            for _id, seq, ref_table, column, ref_column, on_update, on_delete in rows:
                if not config.allows_foreign_key(table.name, ref_table):
                    continue

                if ref_column is None:
                    # REFERENCES parent with no column list targets the parent's primary key
                    if ref_table not in parent_keys:
                        parent_keys[ref_table] = self._referenced_key_columns(ref_table)
                    key_columns = parent_keys[ref_table]
                    if seq >= len(key_columns):
                        raise ExtractionFailed(
                            "foreign_keys",
                            ValueError(f"cannot resolve referenced column of {table.name}.{column} in {ref_table}"),
                            name=table.name,
                        )
                    ref_column = key_columns[seq]

                foreign_keys.append(ForeignKey(
                    name=synthesize_foreign_key_name(table.name, column),
                    table=table.name,
                    column=column,
                    referenced_table=ref_table,
                    referenced_column=ref_column,
                    on_update=on_update or "",
                    on_delete=on_delete or "",
                ))
        return foreign_keys
