"""Query executors: thin adapters over the real database drivers.

Extractors only talk to a ``QueryExecutor``. Every call runs one statement,
drains it completely and closes the cursor before returning, so no result
set is ever open while another query runs.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any, List, Protocol, Sequence

from .connector import BackendFamily, ConnectionDescriptor

logger = logging.getLogger(__name__)


class QueryExecutor(Protocol):
    """Runs parameterized introspection queries."""

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        ...

    def close(self) -> None:
        ...


class SQLiteExecutor:
    """Executor for SQLite database files, opened read-only."""

    def __init__(self, database_path: str):
        self.database_path = database_path
        self._connection = None

    def connect(self):
        """Open the database file read-only. A missing file is an error."""
        if self._connection is not None:
            return self._connection

        uri = Path(self.database_path).resolve().as_uri() + "?mode=ro"
        self._connection = sqlite3.connect(uri, uri=True)
        return self._connection

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        conn = self.connect()
        logger.debug("sqlite query: %s params=%s", " ".join(sql.split()), tuple(params))
        cursor = conn.cursor()
        try:
            cursor.execute(sql, tuple(params))
            return cursor.fetchall()
        finally:
            cursor.close()

    def close(self):
        """Close the SQLite connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class PostgresExecutor:
    """Executor for PostgreSQL, using psycopg2 in a read-only session."""

    def __init__(self, dsn: str):
        self.dsn = dsn
        self._connection = None

    def connect(self):
        """Connect to PostgreSQL."""
        if self._connection is not None:
            return self._connection

        try:
            import psycopg2
        except ImportError:
            raise ImportError(
                "psycopg2 is required for PostgreSQL connections. "
                "Install it with: pip install psycopg2-binary"
            )

        self._connection = psycopg2.connect(self.dsn)
        self._connection.set_session(readonly=True, autocommit=True)
        return self._connection

    def query(self, sql: str, params: Sequence[Any] = ()) -> List[tuple]:
        conn = self.connect()
        logger.debug("postgres query: %s params=%s", " ".join(sql.split()), tuple(params))
        cursor = conn.cursor()
        try:
            cursor.execute(sql, tuple(params))
            return cursor.fetchall()
        finally:
            cursor.close()

    def close(self):
        """Close the PostgreSQL connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def open_executor(descriptor: ConnectionDescriptor):
    """Create the executor matching the descriptor's backend family."""
    if descriptor.family == BackendFamily.POSTGRESQL:
        return PostgresExecutor(descriptor.target)
    elif descriptor.family == BackendFamily.SQLITE:
        return SQLiteExecutor(descriptor.target)
    raise ValueError(f"No executor for backend family: {descriptor.family}")
