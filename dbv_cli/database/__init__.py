"""Database introspection module for dbv.

This module extracts a vendor-neutral schema model, with specific
extractors for PostgreSQL (information_schema) and SQLite (PRAGMA).
"""

from .models import Column, Table, View, ForeignKey, Schema
from .filters import SchemaConfig, should_include, should_include_foreign_key, parse_table_list
from .connector import (
    BackendFamily,
    ConnectionDescriptor,
    parse_database_url,
    get_extractor,
    extract_schema,
)
from .executors import QueryExecutor, SQLiteExecutor, PostgresExecutor, open_executor
from .base import SchemaExtractor
from .postgresql import PostgreSQLExtractor
from .sqlite import SQLiteExtractor
from .type_mappers import TypeMapper, MermaidTypeMapper, PlantUMLTypeMapper, GraphvizTypeMapper

__all__ = [
    # Data models
    "Column",
    "Table",
    "View",
    "ForeignKey",
    "Schema",
    # Filtering
    "SchemaConfig",
    "should_include",
    "should_include_foreign_key",
    "parse_table_list",
    # Dispatch
    "BackendFamily",
    "ConnectionDescriptor",
    "parse_database_url",
    "get_extractor",
    "extract_schema",
    # Executors
    "QueryExecutor",
    "SQLiteExecutor",
    "PostgresExecutor",
    "open_executor",
    # Extractors
    "SchemaExtractor",
    "PostgreSQLExtractor",
    "SQLiteExtractor",
    # Type mappers
    "TypeMapper",
    "MermaidTypeMapper",
    "PlantUMLTypeMapper",
    "GraphvizTypeMapper",
]
