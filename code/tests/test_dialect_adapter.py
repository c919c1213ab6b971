"""
Unit tests for the Dialect Adapter.
"""

import pytest

from query_designer.batch.utilities.governance.dialect_adapter import (
    DIALECT_PROFILES,
    build_explain_query,
    list_dialects,
    parse_version,
    resolve_dialect,
)
from query_designer.batch.utilities.governance.errors import UnsupportedDialectError

QUERY = "SELECT * FROM t;"


class TestBuildExplainQuery:
    """Tests for dialect-specific explain syntax."""

    def test_postgresql(self):
        """Test the analyzing, buffer-reporting JSON explain prefix."""
        result = build_explain_query("PostgreSQL", QUERY)
        assert result == "EXPLAIN (ANALYZE, BUFFERS, FORMAT JSON)\n" + QUERY

    def test_mysql(self):
        """Test the JSON explain prefix."""
        assert build_explain_query("MySQL", QUERY) == "EXPLAIN FORMAT=JSON\n" + QUERY

    def test_sqlite(self):
        """Test the query-plan-only explain prefix."""
        result = build_explain_query("SQLite", QUERY)
        assert result.startswith("EXPLAIN QUERY PLAN")
        assert result == "EXPLAIN QUERY PLAN\n" + QUERY

    def test_sqlserver_prefixes_statistics(self):
        """Test that SQL Server prefixes directives without wrapping."""
        result = build_explain_query("SQL Server", QUERY)
        assert result == "SET STATISTICS IO ON;\nSET STATISTICS TIME ON;\n" + QUERY

    def test_query_inserted_unmodified(self):
        """Test that braces and whitespace in the query are preserved."""
        query = "SELECT '{not a placeholder}'  AS x\nFROM t;"
        assert build_explain_query("postgres", query).endswith("\n" + query)

    @pytest.mark.parametrize("dialect", ["Oracle", "db2", "", None])
    def test_unknown_dialect_raises(self, dialect):
        """Test that unknown dialects are refused rather than guessed."""
        with pytest.raises(UnsupportedDialectError):
            build_explain_query(dialect, QUERY)

    def test_old_version_raises(self):
        """Test that versions older than the explain syntax are refused."""
        with pytest.raises(UnsupportedDialectError) as exc_info:
            build_explain_query("MySQL", QUERY, version="5.5")
        assert "5.5" in str(exc_info.value)

    def test_supported_version_passes(self):
        """Test that a supported version builds the query."""
        assert build_explain_query("MySQL", QUERY, version="8.0.32").startswith("EXPLAIN")

    def test_unparseable_version_is_not_checked(self):
        """Test that non-numeric versions do not block generation."""
        assert build_explain_query("PostgreSQL", QUERY, version="latest").startswith("EXPLAIN")


class TestResolveDialect:
    """Tests for dialect lookup."""

    @pytest.mark.parametrize(
        "alias,expected",
        [
            ("postgres", "postgresql"),
            ("PG", "postgresql"),
            ("MariaDB", "mysql"),
            ("sqlite3", "sqlite"),
            ("mssql", "sqlserver"),
            ("  SQL   Server ", "sqlserver"),
        ],
    )
    def test_aliases(self, alias, expected):
        """Test that aliases resolve case-insensitively."""
        assert resolve_dialect(alias).name == expected

    def test_error_carries_dialect(self):
        """Test that the error reports the rejected dialect."""
        with pytest.raises(UnsupportedDialectError) as exc_info:
            resolve_dialect("Oracle")
        assert exc_info.value.dialect == "Oracle"

    def test_list_dialects(self):
        """Test that every profile is listed."""
        names = {profile.name for profile in list_dialects()}
        assert names == set(DIALECT_PROFILES)
        assert names == {"postgresql", "mysql", "sqlite", "sqlserver"}


class TestParseVersion:
    """Tests for version parsing."""

    @pytest.mark.parametrize(
        "version,expected",
        [("8.0", (8, 0)), ("15", (15,)), ("v9.6.1", (9, 6, 1)), ("latest", None), (None, None)],
    )
    def test_parse_version(self, version, expected):
        assert parse_version(version) == expected
