"""Test fixtures package."""

from .mock_executor import MockQueryExecutor, create_mock_postgres_executor

__all__ = [
    "MockQueryExecutor",
    "create_mock_postgres_executor",
]
