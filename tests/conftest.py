"""Shared pytest fixtures for dbv tests."""

import sqlite3
from datetime import datetime

import pytest

from dbv_cli.database.models import Column, ForeignKey, Schema, Table, View
from tests.fixtures.mock_executor import MockQueryExecutor, create_mock_postgres_executor


GENERATED_AT = datetime(2024, 1, 15, 9, 30, 0)


@pytest.fixture
def mock_executor():
    """Create an empty MockQueryExecutor for each test."""
    return MockQueryExecutor()


@pytest.fixture
def postgres_executor():
    """Mock executor preloaded with PostgreSQL catalog responses."""
    return create_mock_postgres_executor()


@pytest.fixture
def users_schema():
    """A single users table: id int PK, email varchar(255) NOT NULL."""
    return Schema(
        database="postgresql",
        tables=(
            Table(
                name="users",
                schema="public",
                columns=(
                    Column(name="id", type="integer", precision=32, scale=0, is_nullable=False, is_primary_key=True),
                    Column(name="email", type="varchar", length=255, is_nullable=False),
                ),
                primary_keys=("id",),
            ),
        ),
        generated_at=GENERATED_AT,
    )


@pytest.fixture
def shop_schema():
    """users and orders tables, one foreign key and one view."""
    return Schema(
        database="postgresql",
        tables=(
            Table(
                name="users",
                schema="public",
                columns=(
                    Column(name="id", type="integer", is_nullable=False, is_primary_key=True),
                    Column(name="name", type="text", is_nullable=True),
                    Column(name="created_at", type="timestamp", is_nullable=False),
                ),
                primary_keys=("id",),
            ),
            Table(
                name="orders",
                schema="public",
                columns=(
                    Column(name="id", type="integer", is_nullable=False, is_primary_key=True),
                    Column(name="user_id", type="integer", is_nullable=False),
                    Column(name="total", type="numeric", precision=10, scale=2, is_nullable=True),
                ),
                primary_keys=("id",),
            ),
        ),
        views=(
            View(
                name="active_users",
                schema="public",
                definition="SELECT id, name FROM users",
                columns=(
                    Column(name="id", type="integer", is_nullable=False),
                    Column(name="name", type="text"),
                ),
            ),
        ),
        foreign_keys=(
            ForeignKey(
                name="orders_user_id_fkey",
                table="orders",
                column="user_id",
                referenced_table="users",
                referenced_column="id",
                on_update="NO ACTION",
                on_delete="CASCADE",
            ),
        ),
        generated_at=GENERATED_AT,
    )


@pytest.fixture
def empty_schema():
    return Schema(database="sqlite", generated_at=GENERATED_AT)


SQLITE_DDL = """
CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email VARCHAR(255) NOT NULL,
    name TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    total DECIMAL(10,2),
    status TEXT DEFAULT 'new'
);
CREATE TABLE order_items (
    order_id INTEGER NOT NULL,
    line_no INTEGER NOT NULL,
    sku TEXT,
    PRIMARY KEY (order_id, line_no),
    FOREIGN KEY (order_id) REFERENCES orders
);
CREATE TABLE audit_log (
    id INTEGER PRIMARY KEY,
    message TEXT
);
CREATE VIEW active_users AS SELECT id, email FROM users;
INSERT INTO users (email) VALUES ('a@example.com');
"""


@pytest.fixture
def sqlite_db_path(tmp_path):
    """Create an on-disk SQLite database with a small shop schema.

    Tables: audit_log, order_items, orders, users (plus the internal
    sqlite_sequence created by AUTOINCREMENT) and the view active_users.
    """
    path = tmp_path / "shop.db"
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(SQLITE_DDL)
        conn.commit()
    finally:
        conn.close()
    return path
