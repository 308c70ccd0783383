# File: drizzlegen/utils.py
"""
drizzlegen - Utility Functions & Helpers
=========================================
String escaping, literal formatting, import collection, timing and file I/O
helpers used throughout the generation pipeline.

- ``escape`` / ``quote`` produce safely-quoted fragments for identifiers and
  string literals embedded in generated TypeScript.
- ``render_literal`` renders default values (strings, numbers, booleans,
  arrays) in JavaScript literal syntax.
- ``ImportCollector`` accumulates the symbols one generation run references
  and renders the sorted import statements.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import shutil
import tempfile
import time
from pathlib import Path
from typing import Any, Iterable, List, Optional, Set

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("drizzlegen.utils")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TAB: str = "\t"
DRIZZLE_MODULE: str = "drizzle-orm"


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def escape(value: str, quote: str = "'") -> str:
    """
    Escape *value* for embedding between *quote* characters.

    Backslashes and the quote character are backslash-escaped.  For template
    literals (backtick quoting) ``${`` is escaped too, so the text is never
    interpolated.

    Examples:
        >>> escape("it's")
        "it\\\\'s"
        >>> escape("a`b", "`")
        'a\\\\`b'
    """
    escaped: str = value.replace("\\", "\\\\").replace(quote, "\\" + quote)
    if quote == "`":
        escaped = escaped.replace("${", "\\${")
    return escaped


def quote(value: str) -> str:
    """Wrap *value* in single quotes, escaping internals."""
    return f"'{escape(value)}'"


def raw_sql(expression: str) -> str:
    """Render *expression* as a Drizzle ``sql`...``` tagged template."""
    return f"sql`{escape(expression, '`')}`"


# ---------------------------------------------------------------------------
# Literal formatting
# ---------------------------------------------------------------------------


def render_literal(value: Any) -> str:
    """
    Render a Python value in JavaScript literal syntax.

    Examples:
        >>> render_literal("active")
        '"active"'
        >>> render_literal(True)
        'true'
        >>> render_literal(2.0)
        '2'
        >>> render_literal(["a", "b"])
        '["a", "b"]'
    """
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render_literal(item) for item in value) + "]"
    return json.dumps(value, ensure_ascii=False)


def format_list_literal(items: Iterable[str]) -> str:
    """Format a single-quoted TypeScript array literal, e.g. ``['A', 'B']``."""
    return "[" + ", ".join(quote(item) for item in items) + "]"


def format_ref_list(table: str, columns: Iterable[str]) -> str:
    """``Post``, ``["userId"]`` → ``Post.userId``."""
    return ", ".join(f"{table}.{col}" for col in columns)


@functools.lru_cache(maxsize=None)
def lower_first(name: str) -> str:
    """
    Lower-case the first character only.

    Examples:
        >>> lower_first("PostTag")
        'postTag'
    """
    if not name:
        return ""
    return name[0].lower() + name[1:]


# ---------------------------------------------------------------------------
# Import statement collector
# ---------------------------------------------------------------------------


class ImportCollector:
    """
    Accumulates the symbols referenced by one generation run.

    Two independent sets are kept: ``native`` for the dialect module
    (column builders, ``foreignKey``, ``pgTable`` ...) and ``drizzle`` for
    the shared runtime (``sql``, ``defineRelations``).
    """

    __slots__ = ("native_module", "native", "drizzle")

    def __init__(self, native_module: str) -> None:
        self.native_module: str = native_module
        self.native: Set[str] = set()
        self.drizzle: Set[str] = set()

    def add_native(self, name: str) -> None:
        self.native.add(name)

    def add_drizzle(self, name: str) -> None:
        self.drizzle.add(name)

    @staticmethod
    def _render_line(names: Set[str], module: str) -> Optional[str]:
        if not names:
            return None
        return f"import {{ {', '.join(sorted(names))} }} from '{module}'"

    def render(self) -> str:
        """
        Render the import block: the shared-runtime line, then the dialect
        line.  An empty set omits its line; both empty yields ``""``.
        """
        lines: List[str] = [
            line
            for line in (
                self._render_line(self.drizzle, DRIZZLE_MODULE),
                self._render_line(self.native, self.native_module),
            )
            if line is not None
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"<ImportCollector {self.native_module}: "
            f"{len(self.native)} native, {len(self.drizzle)} shared>"
        )


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Simple context-manager timer for profiling generation steps.

    Usage:
        with Timer("generate postgresql") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*, creating parent directories.

    When *atomic* is True, writes to a temporary file first then renames, so
    readers never observe a partially written schema.

    Returns the number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    encoded: bytes = content.encode("utf-8")

    if atomic:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            shutil.move(tmp_path, str(path))
        except Exception:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "TAB",
    "DRIZZLE_MODULE",
    "escape",
    "quote",
    "raw_sql",
    "render_literal",
    "format_list_literal",
    "format_ref_list",
    "lower_first",
    "ImportCollector",
    "Timer",
    "write_file",
]
