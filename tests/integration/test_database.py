"""Integration tests for Database against files written by SQLite itself."""

from __future__ import annotations

import io
import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

import pytest
import structlog

from sqlite_decoder import (
    Database,
    DatabaseFileNotFoundError,
    DatabaseIOError,
    InvalidHeaderError,
    InvalidPageSizeError,
    QueryStatus,
    TextEncoding,
    ValueKind,
    open_database,
)
from sqlite_decoder.domain.value_objects import PageType
from sqlite_decoder.infrastructure.config import Config, QueryConfig
from sqlite_decoder.infrastructure.logging import setup_logging
from sqlite_decoder.infrastructure.metrics import MetricsRegistry


def column(result, name: str) -> list[object]:
    return [row[name].value for row in result.rows]


@pytest.mark.integration
class TestDatabase:
    """End-to-end decoding of real database files."""

    def test_two_row_table(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        with Database.open(two_row_db, metrics=metrics_registry) as db:
            assert db.page_size == 4096
            assert db.page_count == 2
            assert db.list_tables() == ["t"]

            result = db.query_table("t")

        assert result.status is QueryStatus.OK
        assert result.columns == ["id", "name"]
        assert column(result, "_rowid_") == [1, 2]
        assert column(result, "id") == [1, 2]
        assert column(result, "name") == ["alice", "bob"]

    def test_open_database_shorthand(self, two_row_db: Path) -> None:
        with open_database(two_row_db) as db:
            assert db.path == two_row_db
            assert db.text_encoding is TextEncoding.UTF8

    def test_open_metrics(self, two_row_db: Path, temp_dir: Path, metrics_registry: MetricsRegistry) -> None:
        Database.open(two_row_db, metrics=metrics_registry).close()
        with pytest.raises(DatabaseFileNotFoundError):
            Database.open(temp_dir / "nope.db", metrics=metrics_registry)

        opened = metrics_registry.databases_opened_total
        assert opened.labels(status="ok")._value.get() == 1
        assert opened.labels(status="file_not_found")._value.get() == 1

    def test_tables_and_schema(
        self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry
    ) -> None:
        path = make_database(
            """
            CREATE TABLE users(id INTEGER PRIMARY KEY, email TEXT);
            CREATE INDEX users_email ON users(email);
            CREATE VIEW emails AS SELECT email FROM users;
            CREATE TABLE posts(id INTEGER PRIMARY KEY, user_id INTEGER, title TEXT);
            INSERT INTO users(email) VALUES ('a@example.com'), ('b@example.com');
            INSERT INTO posts(user_id, title) VALUES (2, 'hello');
            """
        )

        with Database.open(path, metrics=metrics_registry) as db:
            assert db.list_tables() == ["users", "posts"]
            tables = {t.name: t for t in db.tables()}
            users = db.query_table("users")
            posts = db.query_table("posts")

        assert tables["posts"].sql.startswith("CREATE TABLE posts")
        assert column(users, "id") == [1, 2]
        assert column(users, "email") == ["a@example.com", "b@example.com"]
        assert posts.rows[0]["user_id"].value == 2
        assert posts.rows[0]["title"].value == "hello"

    def test_view_is_not_a_table(self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry) -> None:
        path = make_database("CREATE TABLE t(x); CREATE VIEW v AS SELECT x FROM t;")

        with Database.open(path, metrics=metrics_registry) as db:
            assert db.query_table("v").status is QueryStatus.NOT_FOUND

    def test_unknown_table_as_empty(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        config = Config(query=QueryConfig(report_not_found=False))

        with Database.open(two_row_db, config, metrics_registry) as db:
            result = db.query_table("nope")

        assert result.status is QueryStatus.OK
        assert result.rows == []

    def test_text_is_exact(self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry) -> None:
        """Text round-trips byte for byte, including non-ASCII and empty strings."""
        texts = ["", "héllo wörld", "日本語", "emoji 🎉", "x" * 300]
        inserts = "".join(f"INSERT INTO t VALUES ('{s}');" for s in texts)
        path = make_database("CREATE TABLE t(s TEXT);" + inserts)

        with Database.open(path, metrics=metrics_registry) as db:
            assert column(db.query_table("t"), "s") == texts

    @pytest.mark.parametrize(
        ("encoding", "expected"),
        [("UTF-16le", TextEncoding.UTF16LE), ("UTF-16be", TextEncoding.UTF16BE)],
    )
    def test_utf16_database(
        self,
        encoding: str,
        expected: TextEncoding,
        make_database: Callable[..., Path],
        metrics_registry: MetricsRegistry,
    ) -> None:
        path = make_database(
            "CREATE TABLE t(name TEXT); INSERT INTO t VALUES ('ünïcode');",
            encoding=encoding,
        )

        with Database.open(path, metrics=metrics_registry) as db:
            assert db.text_encoding is expected
            assert db.list_tables() == ["t"]
            assert column(db.query_table("t"), "name") == ["ünïcode"]

    @pytest.mark.parametrize("page_size", [512, 1024, 65536])
    def test_page_sizes(
        self,
        page_size: int,
        make_database: Callable[..., Path],
        metrics_registry: MetricsRegistry,
    ) -> None:
        path = make_database(
            "CREATE TABLE t(a INTEGER, b TEXT); INSERT INTO t VALUES (7, 'seven');",
            page_size=page_size,
        )

        with Database.open(path, metrics=metrics_registry) as db:
            assert db.page_size == page_size
            assert db.header.raw_page_size == (1 if page_size == 65536 else page_size)
            result = db.query_table("t")

        assert column(result, "b") == ["seven"]

    def test_integer_widths(self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry) -> None:
        """Integers up to 32 bits decode; wider ones are left undecoded."""
        numbers = [0, 1, -1, 127, -128, 300, -300, 70000, -8388608, 2**31 - 1, -(2**31)]
        inserts = "".join(f"INSERT INTO t VALUES ({n});" for n in numbers)
        path = make_database(
            "CREATE TABLE t(n INTEGER);" + inserts + f"INSERT INTO t VALUES ({2**40});"
        )

        with Database.open(path, metrics=metrics_registry) as db:
            result = db.query_table("t")

        assert column(result, "n")[:-1] == numbers
        assert result.rows[-1]["n"].kind is ValueKind.UNDECODED

    def test_mixed_storage_classes(self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry) -> None:
        path = make_database(
            "CREATE TABLE t(a, b, c, d);"
            "INSERT INTO t VALUES (NULL, 2.5, x'deadbeef', 'tail');"
        )

        with Database.open(path, metrics=metrics_registry) as db:
            row = db.query_table("t").rows[0]

        assert row["a"].is_null
        assert row["b"].kind is ValueKind.UNDECODED
        assert row["b"].length == 8
        assert row["c"].kind is ValueKind.UNDECODED
        assert row["c"].length == 4
        assert row["d"].value == "tail"

    def test_multi_page_table(self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry) -> None:
        """A table that outgrows one leaf has an interior root and yields no rows."""
        inserts = "".join(f"INSERT INTO t VALUES ({i}, '{'v' * 40}');" for i in range(100))
        path = make_database("CREATE TABLE t(id INTEGER, v TEXT);" + inserts, page_size=512)

        with Database.open(path, metrics=metrics_registry) as db:
            table = db.tables()[0]
            assert db.describe_page(table.root_page).type is PageType.INTERIOR_TABLE
            result = db.query_table("t")

        assert result.status is QueryStatus.UNSUPPORTED_PAGE_TYPE
        assert result.success
        assert result.rows == []

    def test_corrupted_root_page_type(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        data = bytearray(two_row_db.read_bytes())
        data[4096] = 0x0A
        two_row_db.write_bytes(bytes(data))

        with Database.open(two_row_db, metrics=metrics_registry) as db:
            result = db.query_table("t")

        assert result.status is QueryStatus.UNSUPPORTED_PAGE_TYPE
        assert result.rows == []

    def test_truncated_file(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        """A file cut inside the table's root page reports an IO error."""
        two_row_db.write_bytes(two_row_db.read_bytes()[:5000])

        with Database.open(two_row_db, metrics=metrics_registry) as db:
            assert db.list_tables() == ["t"]
            result = db.query_table("t")

        assert result.status is QueryStatus.IO_ERROR
        assert not result.success

    def test_root_page_far_past_end_of_file(
        self, make_database: Callable[..., Path], metrics_registry: MetricsRegistry
    ) -> None:
        """A corrupted 64-bit root page number is reported, not raised."""
        path = make_database(
            "CREATE TABLE t(x); INSERT INTO t VALUES (1);"
            "PRAGMA writable_schema = ON;"
            f"UPDATE sqlite_master SET rootpage = {2**62} WHERE name = 't';"
        )

        with Database.open(path, metrics=metrics_registry) as db:
            assert db.tables()[0].root_page == 2**62
            result = db.query_table("t")

        assert result.status is QueryStatus.IO_ERROR
        assert result.rows == []

    @pytest.mark.parametrize(
        "declaration",
        ["INTEGER NOT NULL PRIMARY KEY", "INTEGER CONSTRAINT pk PRIMARY KEY"],
    )
    def test_rowid_alias_with_constraints(
        self,
        declaration: str,
        make_database: Callable[..., Path],
        metrics_registry: MetricsRegistry,
    ) -> None:
        """Constraints before PRIMARY KEY still make the column a rowid alias."""
        path = make_database(
            f"CREATE TABLE u(id {declaration}, e TEXT);"
            "INSERT INTO u(e) VALUES ('x'); INSERT INTO u(e) VALUES ('y');"
        )

        with Database.open(path, metrics=metrics_registry) as db:
            result = db.query_table("u")

        assert column(result, "id") == [1, 2]
        assert column(result, "e") == ["x", "y"]

    def test_close_is_logged(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        stream = io.StringIO()
        setup_logging(level="INFO", log_format="json", stream=stream)
        try:
            Database.open(two_row_db, metrics=metrics_registry).close()
        finally:
            structlog.reset_defaults()

        events = [json.loads(line) for line in stream.getvalue().strip().splitlines()]
        closed = [e for e in events if e["event"] == "database_closed"]
        assert len(closed) == 1
        assert closed[0]["path"] == str(two_row_db)

    def test_concurrent_queries(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        with Database.open(two_row_db, metrics=metrics_registry) as db:
            with ThreadPoolExecutor(max_workers=4) as pool:
                results = list(pool.map(db.query_table, ["t"] * 16))

        assert all(column(r, "name") == ["alice", "bob"] for r in results)


@pytest.mark.integration
class TestOpenFailures:
    """Files that cannot be opened never produce a handle."""

    def test_missing(self, temp_dir: Path, metrics_registry: MetricsRegistry) -> None:
        with pytest.raises(DatabaseFileNotFoundError):
            Database.open(temp_dir / "missing.db", metrics=metrics_registry)

    def test_short(self, temp_dir: Path, metrics_registry: MetricsRegistry) -> None:
        path = temp_dir / "short.db"
        path.write_bytes(b"SQLite format 3\x00")

        with pytest.raises(DatabaseIOError):
            Database.open(path, metrics=metrics_registry)

    def test_not_sqlite(self, temp_dir: Path, metrics_registry: MetricsRegistry) -> None:
        path = temp_dir / "text.db"
        path.write_text("hello " * 100)

        with pytest.raises(InvalidHeaderError):
            Database.open(path, metrics=metrics_registry)

    def test_bad_page_size(self, two_row_db: Path, metrics_registry: MetricsRegistry) -> None:
        data = bytearray(two_row_db.read_bytes())
        data[16:18] = (1000).to_bytes(2, "big")
        two_row_db.write_bytes(bytes(data))

        with pytest.raises(InvalidPageSizeError):
            Database.open(two_row_db, metrics=metrics_registry)
