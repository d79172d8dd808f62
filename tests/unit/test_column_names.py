"""Unit tests for CREATE TABLE column name extraction."""

from __future__ import annotations

import pytest

from sqlite_decoder.domain.services import (
    extract_column_definitions,
    extract_column_names,
    is_rowid_alias,
)


@pytest.mark.unit
class TestExtractColumnNames:
    """Tests for the comma-split column name scan."""

    def test_simple_table(self) -> None:
        assert extract_column_names("CREATE TABLE t(id INTEGER, name TEXT)") == ["id", "name"]

    def test_whitespace_and_newlines(self) -> None:
        sql = "CREATE TABLE users (\n    id INTEGER PRIMARY KEY,\n    email TEXT NOT NULL\n)"
        assert extract_column_names(sql) == ["id", "email"]

    @pytest.mark.parametrize(
        "sql",
        [
            'CREATE TABLE t("id" INTEGER, "name" TEXT)',
            "CREATE TABLE t([id] INTEGER, [name] TEXT)",
            "CREATE TABLE t(`id` INTEGER, `name` TEXT)",
        ],
    )
    def test_quoted_names(self, sql: str) -> None:
        """Quote and bracket characters are stripped from the name."""
        assert extract_column_names(sql) == ["id", "name"]

    def test_untyped_columns(self) -> None:
        assert extract_column_names("CREATE TABLE t(a, b, c)") == ["a", "b", "c"]

    def test_empty_parts_skipped(self) -> None:
        assert extract_column_names("CREATE TABLE t(a, , b,)") == ["a", "b"]

    def test_no_parentheses(self) -> None:
        assert extract_column_names("CREATE TABLE t") == []
        assert extract_column_names("") == []

    def test_nested_parentheses_split_naively(self) -> None:
        """Commas inside a type argument list produce a spurious name."""
        sql = "CREATE TABLE t(id INTEGER, price DECIMAL(10,2))"
        assert extract_column_names(sql) == ["id", "price", "2)"]

    def test_table_constraint_becomes_a_name(self) -> None:
        sql = "CREATE TABLE t(a INTEGER, b TEXT, PRIMARY KEY (a))"
        assert extract_column_names(sql) == ["a", "b", "PRIMARY"]


@pytest.mark.unit
class TestExtractColumnDefinitions:
    """Tests for (name, declaration) pairs."""

    def test_declarations(self) -> None:
        sql = "CREATE TABLE t(id INTEGER PRIMARY KEY, name TEXT NOT NULL, x)"
        assert extract_column_definitions(sql) == [
            ("id", "INTEGER PRIMARY KEY"),
            ("name", "TEXT NOT NULL"),
            ("x", ""),
        ]


@pytest.mark.unit
class TestIsRowidAlias:
    """Tests for INTEGER PRIMARY KEY detection."""

    @pytest.mark.parametrize(
        "declaration",
        [
            "INTEGER PRIMARY KEY",
            "integer primary key",
            "INTEGER PRIMARY KEY ASC",
            "INTEGER  PRIMARY KEY AUTOINCREMENT",
            "INTEGER NOT NULL PRIMARY KEY",
            "INTEGER CONSTRAINT pk PRIMARY KEY",
            "INTEGER UNIQUE PRIMARY KEY ON CONFLICT ABORT",
        ],
    )
    def test_aliases(self, declaration: str) -> None:
        assert is_rowid_alias(declaration)

    @pytest.mark.parametrize(
        "declaration",
        [
            "INT PRIMARY KEY",
            "INTEGER",
            "INTEGER PRIMARY KEY DESC",
            "INTEGER NOT NULL PRIMARY KEY DESC",
            "INTEGER NOT NULL",
            "TEXT PRIMARY KEY",
            "TEXT NOT NULL PRIMARY KEY",
            "",
        ],
    )
    def test_not_aliases(self, declaration: str) -> None:
        assert not is_rowid_alias(declaration)
