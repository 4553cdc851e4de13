"""Tests for the PostgreSQL catalog-query extractor."""

import pytest

from dbv_cli.database.filters import SchemaConfig
from dbv_cli.database.postgresql import PostgreSQLExtractor
from dbv_cli.errors import ExtractionFailed


class TestTables:
    """Test table and column extraction."""

    def test_tables_in_backend_order(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()

        assert [t.name for t in schema.tables] == ["audit_log", "orders", "users"]
        assert all(t.schema == "public" for t in schema.tables)
        assert all(t.type == "BASE TABLE" for t in schema.tables)
        assert schema.get_table("orders").comment == "Customer orders"

    def test_columns_keep_ordinal_order(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()
        users = schema.get_table("users")

        assert [c.name for c in users.columns] == ["id", "email", "name"]

    def test_optional_fields_keep_absence(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()
        users = schema.get_table("users")

        email = users.get_column("email")
        assert email.type == "character varying"
        assert email.length == 255
        assert email.precision is None
        assert email.scale is None
        assert email.comment == "Login email"

        user_id = users.get_column("id")
        assert user_id.length is None
        assert user_id.precision == 32
        # A reported scale of 0 is kept, not treated as absent
        assert user_id.scale == 0
        assert user_id.default_value == "nextval('users_id_seq'::regclass)"

        assert users.get_column("name").default_value is None

    def test_nullability(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()
        users = schema.get_table("users")

        assert users.get_column("email").is_nullable is False
        assert users.get_column("name").is_nullable is True

    def test_primary_keys_flag_columns(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()

        for table in schema.tables:
            assert table.primary_keys == ("id",)
            assert set(table.primary_keys) <= {c.name for c in table.columns}
            assert table.get_column("id").is_primary_key is True
            assert [c.name for c in table.columns if c.is_primary_key] == ["id"]

    def test_unique_flag_is_never_populated(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()

        assert not any(c.is_unique for t in schema.tables for c in t.columns)

    def test_include_and_exclude(self, postgres_executor):
        config = SchemaConfig(include_tables=("users", "orders"), exclude_tables=("orders",))
        schema = PostgreSQLExtractor(postgres_executor).extract_schema(config)

        assert [t.name for t in schema.tables] == ["users"]

    def test_filtered_tables_are_not_introspected(self, postgres_executor):
        config = SchemaConfig(include_tables=("users",))
        PostgreSQLExtractor(postgres_executor).extract_schema(config)

        introspected = {
            call["params"][1]
            for call in postgres_executor.get_call_history()
            if len(call["params"]) == 2
        }
        assert introspected == {"users"}


class TestViews:
    """Test view extraction."""

    def test_views_skipped_by_default(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()

        assert schema.views == ()
        assert not any("information_schema.views" in c["sql"] for c in postgres_executor.get_call_history())

    def test_views_included(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema(SchemaConfig(include_views=True))

        assert len(schema.views) == 1
        view = schema.views[0]
        assert view.name == "active_users"
        assert view.schema == "public"
        assert view.definition == " SELECT users.id, users.email FROM users;"
        assert view.comment == "Users with a login"
        assert [c.name for c in view.columns] == ["id", "email"]
        assert not any(c.is_primary_key for c in view.columns)

    def test_views_follow_filters(self, postgres_executor):
        config = SchemaConfig(include_views=True, exclude_tables=("ACTIVE_USERS",))
        schema = PostgreSQLExtractor(postgres_executor).extract_schema(config)

        assert schema.views == ()


class TestForeignKeys:
    """Test foreign key extraction and relaxed filtering."""

    def test_foreign_keys(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()

        assert [fk.name for fk in schema.foreign_keys] == ["audit_log_user_id_fkey", "orders_user_id_fkey"]
        fk = schema.foreign_keys[1]
        assert fk.table == "orders"
        assert fk.column == "user_id"
        assert fk.referenced_table == "users"
        assert fk.referenced_column == "id"
        assert fk.on_update == "NO ACTION"
        assert fk.on_delete == "CASCADE"

    def test_action_codes_are_spelled_out(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema()
        fk = schema.foreign_keys[0]

        assert fk.on_update == "NO ACTION"
        assert fk.on_delete == "SET NULL"

    def test_same_constraint_name_on_two_tables(self, mock_executor):
        """Constraint names only need to be unique per table."""
        mock_executor.add_response(r"FROM pg_catalog\.pg_constraint", [
            ("fk_parent", "a", "parent_id", "parent_a", "id", "a", "c"),
            ("fk_parent", "b", "parent_id", "parent_b", "id", "a", "r"),
        ])

        schema = PostgreSQLExtractor(mock_executor).extract_schema()

        assert [(fk.table, fk.referenced_table) for fk in schema.foreign_keys] == [
            ("a", "parent_a"),
            ("b", "parent_b"),
        ]
        assert [fk.on_delete for fk in schema.foreign_keys] == ["CASCADE", "RESTRICT"]

    def test_foreign_key_query_joins_on_owning_table(self, mock_executor):
        PostgreSQLExtractor(mock_executor).extract_schema()
        sql = " ".join(mock_executor.get_call_history()[-1]["sql"].split())

        # Column pairs come from the constraint's own table, not a name match
        assert "src.oid = con.conrelid" in sql
        assert "att.attrelid = con.conrelid" in sql
        assert "ratt.attrelid = con.confrelid" in sql
        assert "constraint_name" not in sql

    def test_referenced_side_keeps_key(self, postgres_executor):
        """With only users included, keys pointing at users are kept."""
        schema = PostgreSQLExtractor(postgres_executor).extract_schema(SchemaConfig(include_tables=("users",)))

        assert [t.name for t in schema.tables] == ["users"]
        assert {fk.table for fk in schema.foreign_keys} == {"orders", "audit_log"}

    def test_excluded_side_drops_key(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema(SchemaConfig(exclude_tables=("audit_log",)))

        assert [fk.name for fk in schema.foreign_keys] == ["orders_user_id_fkey"]

    def test_excluded_referenced_table_drops_all_keys(self, postgres_executor):
        schema = PostgreSQLExtractor(postgres_executor).extract_schema(SchemaConfig(exclude_tables=("users",)))

        assert schema.foreign_keys == ()


class TestStepOrder:
    """Test that steps run in the required order."""

    def test_query_sequence(self, postgres_executor):
        PostgreSQLExtractor(postgres_executor).extract_schema(SchemaConfig(include_views=True))
        history = postgres_executor.get_call_history()

        assert "information_schema.tables" in history[0]["sql"]
        assert "information_schema.columns" in history[1]["sql"]
        assert history[1]["params"] == ("public", "audit_log")
        assert "PRIMARY KEY" in history[2]["sql"]
        assert "pg_constraint" in history[-1]["sql"]

        view_index = next(i for i, c in enumerate(history) if "information_schema.views" in c["sql"])
        pk_indexes = [i for i, c in enumerate(history) if "PRIMARY KEY" in c["sql"]]
        assert max(pk_indexes) < view_index < len(history) - 1


class TestFailures:
    """Test that failures abort extraction with context."""

    def test_query_error_is_wrapped(self, postgres_executor):
        cause = RuntimeError("connection reset")
        postgres_executor.add_error(r"information_schema\.columns", cause, params=("public", "orders"))

        with pytest.raises(ExtractionFailed) as exc_info:
            PostgreSQLExtractor(postgres_executor).extract_schema()

        error = exc_info.value
        assert error.step == "columns"
        assert error.name == "orders"
        assert error.cause is cause
        assert error.__cause__ is cause
        assert "connection reset" in str(error)

    def test_foreign_key_step_failure(self, mock_executor):
        mock_executor.add_error(r"pg_constraint", RuntimeError("permission denied"))

        with pytest.raises(ExtractionFailed) as exc_info:
            PostgreSQLExtractor(mock_executor).extract_schema()

        assert exc_info.value.step == "foreign_keys"
        assert exc_info.value.name is None

    def test_primary_key_on_unknown_column(self, mock_executor):
        mock_executor.add_response(r"information_schema\.tables", [("users", "BASE TABLE", "")])
        mock_executor.add_response(r"information_schema\.columns", [
            ("id", "integer", None, 32, 0, False, None, ""),
        ])
        mock_executor.add_response(r"PRIMARY KEY", [("user_uuid",)])

        with pytest.raises(ExtractionFailed) as exc_info:
            PostgreSQLExtractor(mock_executor).extract_schema()

        assert exc_info.value.step == "primary_keys"
        assert exc_info.value.name == "users"
        assert "user_uuid" in str(exc_info.value)

    def test_empty_database(self, mock_executor):
        schema = PostgreSQLExtractor(mock_executor).extract_schema(SchemaConfig(include_views=True))

        assert schema.database == "postgresql"
        assert schema.tables == ()
        assert schema.views == ()
        assert schema.foreign_keys == ()
