"""
tests/test_utils.py
Unit tests for drizzlegen.utils: escaping, literal rendering, the import
collector, the timer and atomic file writes.
"""

from __future__ import annotations

import pathlib

import pytest

from drizzlegen.utils import (
    ImportCollector,
    Timer,
    escape,
    format_list_literal,
    format_ref_list,
    lower_first,
    quote,
    raw_sql,
    render_literal,
    write_file,
)


class TestEscaping:
    def test_single_quote(self) -> None:
        assert escape("it's") == "it\\'s"
        assert quote("it's") == "'it\\'s'"

    def test_backslash_escaped_first(self) -> None:
        assert escape("a\\b") == "a\\\\b"

    def test_backtick_template(self) -> None:
        assert escape("a`b", "`") == "a\\`b"
        assert escape("${x}", "`") == "\\${x}"

    def test_single_quote_untouched_in_template(self) -> None:
        assert raw_sql("DATE('now')") == "sql`DATE('now')`"


class TestLiterals:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("active", '"active"'),
            (0, "0"),
            (2.5, "2.5"),
            (3.0, "3"),
            (True, "true"),
            (False, "false"),
            (["tag1", "tag2"], '["tag1", "tag2"]'),
            ([1, 2], "[1, 2]"),
        ],
    )
    def test_render_literal(self, value, expected: str) -> None:
        assert render_literal(value) == expected

    def test_format_list_literal(self) -> None:
        assert format_list_literal(["USER", "ADMIN"]) == "['USER', 'ADMIN']"

    def test_format_ref_list(self) -> None:
        assert format_ref_list("UserRole", ["userId", "roleId"]) == "UserRole.userId, UserRole.roleId"

    def test_lower_first(self) -> None:
        assert lower_first("PostTag") == "postTag"
        assert lower_first("") == ""


class TestImportCollector:
    def test_empty(self) -> None:
        assert ImportCollector("drizzle-orm/pg-core").render() == ""

    def test_sorted_and_deduplicated(self) -> None:
        imports = ImportCollector("drizzle-orm/pg-core")
        for name in ("text", "pgTable", "serial", "text", "foreignKey"):
            imports.add_native(name)
        imports.add_drizzle("sql")
        imports.add_drizzle("defineRelations")
        imports.add_drizzle("sql")

        assert imports.render() == (
            "import { defineRelations, sql } from 'drizzle-orm'\n"
            "import { foreignKey, pgTable, serial, text } from 'drizzle-orm/pg-core'"
        )

    def test_shared_line_omitted_when_empty(self) -> None:
        imports = ImportCollector("drizzle-orm/mysql-core")
        imports.add_native("mysqlTable")
        assert imports.render() == "import { mysqlTable } from 'drizzle-orm/mysql-core'"

    def test_instances_are_independent(self) -> None:
        first = ImportCollector("drizzle-orm/pg-core")
        second = ImportCollector("drizzle-orm/pg-core")
        first.add_native("text")
        assert second.native == set()


class TestTimer:
    def test_elapsed_recorded(self) -> None:
        with Timer("noop") as t:
            pass
        assert t.elapsed >= 0.0
        assert "noop" in repr(t)


class TestWriteFile:
    def test_atomic_write_creates_parents(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "drizzle" / "schema.ts"
        written = write_file(target, "export {}\n")
        assert written == len("export {}\n")
        assert target.read_text(encoding="utf-8") == "export {}\n"
        assert [p.name for p in target.parent.iterdir()] == ["schema.ts"]

    def test_overwrites(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "schema.ts"
        target.write_text("old", encoding="utf-8")
        write_file(target, "new", atomic=False)
        assert target.read_text(encoding="utf-8") == "new"
