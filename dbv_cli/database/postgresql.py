"""PostgreSQL schema extractor, built on information_schema views and pg_constraint."""

import logging
from typing import List

from .base import SchemaExtractor, optional_int, optional_str
from .filters import SchemaConfig
from .models import Column, ForeignKey, Table, View

logger = logging.getLogger(__name__)


TABLES_SQL = """
    SELECT
        t.table_name,
        t.table_type,
        COALESCE(obj_description(
            (quote_ident(t.table_schema) || '.' || quote_ident(t.table_name))::regclass,
            'pg_class'
        ), '') AS comment
    FROM information_schema.tables t
    WHERE t.table_schema = %s
      AND t.table_type = 'BASE TABLE'
    ORDER BY t.table_name
"""

COLUMNS_SQL = """
    SELECT
        c.column_name,
        c.data_type,
        c.character_maximum_length,
        c.numeric_precision,
        c.numeric_scale,
        c.is_nullable = 'YES' AS is_nullable,
        c.column_default,
        COALESCE(col_description(
            (quote_ident(c.table_schema) || '.' || quote_ident(c.table_name))::regclass,
            c.ordinal_position
        ), '') AS comment
    FROM information_schema.columns c
    WHERE c.table_schema = %s
      AND c.table_name = %s
    ORDER BY c.ordinal_position
"""

PRIMARY_KEYS_SQL = """
    SELECT kcu.column_name
    FROM information_schema.table_constraints tc
    JOIN information_schema.key_column_usage kcu
      ON tc.constraint_name = kcu.constraint_name
      AND tc.constraint_schema = kcu.constraint_schema
      AND tc.table_name = kcu.table_name
    WHERE tc.table_schema = %s
      AND tc.table_name = %s
      AND tc.constraint_type = 'PRIMARY KEY'
    ORDER BY kcu.ordinal_position
"""

VIEWS_SQL = """
    SELECT
        v.table_name,
        COALESCE(v.view_definition, '') AS definition,
        COALESCE(obj_description(
            (quote_ident(v.table_schema) || '.' || quote_ident(v.table_name))::regclass,
            'pg_class'
        ), '') AS comment
    FROM information_schema.views v
    WHERE v.table_schema = %s
    ORDER BY v.table_name
"""

# Constraint names are only unique per table, so keys are read from
# pg_constraint, where each row carries its own table and column pairs
FOREIGN_KEYS_SQL = """
    SELECT
        con.conname,
        src.relname AS table_name,
        att.attname AS column_name,
        ref.relname AS referenced_table,
        ratt.attname AS referenced_column,
        con.confupdtype,
        con.confdeltype
    FROM pg_catalog.pg_constraint con
    JOIN pg_catalog.pg_class src ON src.oid = con.conrelid
    JOIN pg_catalog.pg_namespace ns ON ns.oid = src.relnamespace
    JOIN pg_catalog.pg_class ref ON ref.oid = con.confrelid
    CROSS JOIN LATERAL unnest(con.conkey, con.confkey)
        WITH ORDINALITY AS k(attnum, ref_attnum, position)
    JOIN pg_catalog.pg_attribute att
      ON att.attrelid = con.conrelid AND att.attnum = k.attnum
    JOIN pg_catalog.pg_attribute ratt
      ON ratt.attrelid = con.confrelid AND ratt.attnum = k.ref_attnum
    WHERE con.contype = 'f'
      AND ns.nspname = %s
    ORDER BY src.relname, con.conname, k.position
"""

# pg_constraint action codes, spelled as information_schema reports them
REFERENTIAL_ACTIONS = {
    "a": "NO ACTION",
    "r": "RESTRICT",
    "c": "CASCADE",
    "n": "SET NULL",
    "d": "SET DEFAULT",
}


class PostgreSQLExtractor(SchemaExtractor):
    """Extracts a PostgreSQL schema from the ``public`` namespace."""

    DATABASE = "postgresql"
    DEFAULT_SCHEMA = "public"

    def get_tables(self, config: SchemaConfig) -> List[Table]:
        rows = self._query("tables", TABLES_SQL, (self.DEFAULT_SCHEMA,))

        tables = []
        for name, table_type, comment in rows:
            if not config.allows(name):
                logger.debug("Skipping filtered table %s", name)
                continue
            tables.append(self.build_table(name, table_type, comment))
        return tables

    def get_columns(self, table: str) -> List[Column]:
        rows = self._query("columns", COLUMNS_SQL, (self.DEFAULT_SCHEMA, table), name=table)

        columns = []
        for row in rows:
            columns.append(Column(
                name=row[0],
                type=row[1],
                length=optional_int(row[2]),
                precision=optional_int(row[3]),
                scale=optional_int(row[4]),
                is_nullable=bool(row[5]),
                default_value=optional_str(row[6]),
                comment=row[7] or "",
            ))
        return columns

    def get_primary_keys(self, table: str) -> List[str]:
        rows = self._query("primary_keys", PRIMARY_KEYS_SQL, (self.DEFAULT_SCHEMA, table), name=table)
        return [row[0] for row in rows]

    def get_views(self, config: SchemaConfig) -> List[View]:
        rows = self._query("views", VIEWS_SQL, (self.DEFAULT_SCHEMA,))

        views = []
        for name, definition, comment in rows:
            if not config.allows(name):
                logger.debug("Skipping filtered view %s", name)
                continue
            views.append(View(
                name=name,
                schema=self.DEFAULT_SCHEMA,
                definition=definition,
                columns=tuple(self.get_columns(name)),
                comment=comment or "",
            ))
        return views

    def get_foreign_keys(self, config: SchemaConfig, tables: List[Table]) -> List[ForeignKey]:
        """Get foreign keys in one pass over pg_constraint, one row per column pair."""
        rows = self._query("foreign_keys", FOREIGN_KEYS_SQL, (self.DEFAULT_SCHEMA,))

        foreign_keys = []
        for name, table, column, ref_table, ref_column, on_update, on_delete in rows:
            if not config.allows_foreign_key(table, ref_table):
                continue
            foreign_keys.append(ForeignKey(
                name=name,
                table=table,
                column=column,
                referenced_table=ref_table,
                referenced_column=ref_column,
                on_update=REFERENTIAL_ACTIONS.get(on_update, on_update or ""),
                on_delete=REFERENTIAL_ACTIONS.get(on_delete, on_delete or ""),
            ))
        return foreign_keys
