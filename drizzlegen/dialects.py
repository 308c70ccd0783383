# File: drizzlegen/dialects.py
"""
drizzlegen - Dialect Descriptors
=================================
One immutable ``DialectSpec`` per target backend.  The orchestrator is
generic; everything that differs between PostgreSQL, MySQL, SQLite and
SQL Server lives in the lookup tables below:

    - scalar type → Drizzle column builder (and its options)
    - scalar types the dialect cannot represent
    - how enums, scalar lists and auto-increment columns are expressed
    - the native idioms used by the default translator
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

from drizzlegen.models import DatabaseDialect, ScalarType
from drizzlegen.utils import quote

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("drizzlegen.dialects")


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ColumnBuilder:
    """A Drizzle column constructor, e.g. ``varchar`` with ``{ length: 191 }``."""

    symbol: str
    options: Optional[str] = None

    def render(self, column_name: str) -> str:
        args: str = quote(column_name)
        if self.options:
            args = f"{args}, {self.options}"
        return f"{self.symbol}({args})"


class EnumStyle(str, Enum):
    """How a dialect declares enum columns."""

    # Top-level ``pgEnum`` declaration, columns call the enum constant.
    DECLARED = "declared"
    # Enum builder inlined in the column: ``mysqlEnum('col', [...])``.
    INLINE = "inline"
    # String column restricted by an ``enum`` option.
    OPTION = "option"


class NowStyle(str, Enum):
    MODIFIER = "modifier"
    RAW = "raw"


@dataclass(frozen=True)
class DialectSpec:
    """Everything the generic generator needs to know about one backend."""

    dialect: DatabaseDialect
    label: str
    native_module: str
    table_function: str
    column_types: Mapping[ScalarType, ColumnBuilder]
    unsupported: Mapping[ScalarType, str] = field(default_factory=dict)

    # Enums
    enum_style: EnumStyle = EnumStyle.OPTION
    enum_symbol: str = "text"

    # Column shape
    supports_scalar_lists: bool = False
    serial_types: Mapping[ScalarType, ColumnBuilder] = field(default_factory=dict)

    # Defaults
    supports_array_defaults: bool = True
    now_style: NowStyle = NowStyle.RAW
    now_expression: str = "CURRENT_TIMESTAMP"
    autoincrement_modifier: Optional[str] = None
    dbgenerated_fallback: str = "gen_random_uuid()"
    uuid_expression: Optional[str] = None

    def unsupported_message(self, tag: ScalarType) -> str:
        return f"Drizzle ORM doesn't support {self.unsupported[tag]} data type for {self.label}"

    def __repr__(self) -> str:
        return f"<DialectSpec {self.dialect.value} ({self.native_module})>"


_DECIMAL: ColumnBuilder = ColumnBuilder("decimal", "{ precision: 65, scale: 30 }")
_BIGINT: ColumnBuilder = ColumnBuilder("bigint", "{ mode: 'bigint' }")


# ---------------------------------------------------------------------------
# PostgreSQL
# ---------------------------------------------------------------------------

POSTGRESQL: DialectSpec = DialectSpec(
    dialect=DatabaseDialect.POSTGRESQL,
    label="PostgreSQL",
    native_module="drizzle-orm/pg-core",
    table_function="pgTable",
    column_types={
        ScalarType.BIGINT: _BIGINT,
        ScalarType.BOOLEAN: ColumnBuilder("boolean"),
        ScalarType.DATETIME: ColumnBuilder("timestamp", "{ precision: 3 }"),
        ScalarType.DECIMAL: _DECIMAL,
        ScalarType.FLOAT: ColumnBuilder("doublePrecision"),
        ScalarType.JSON: ColumnBuilder("jsonb"),
        ScalarType.STRING: ColumnBuilder("text"),
        ScalarType.INT: ColumnBuilder("integer"),
    },
    unsupported={ScalarType.BYTES: "binary"},
    enum_style=EnumStyle.DECLARED,
    enum_symbol="pgEnum",
    supports_scalar_lists=True,
    serial_types={
        ScalarType.INT: ColumnBuilder("serial"),
        ScalarType.BIGINT: ColumnBuilder("bigserial", "{ mode: 'bigint' }"),
    },
    now_style=NowStyle.MODIFIER,
    now_expression="defaultNow",
    autoincrement_modifier=None,
    dbgenerated_fallback="gen_random_uuid()",
)

# ---------------------------------------------------------------------------
# MySQL
# ---------------------------------------------------------------------------

MYSQL: DialectSpec = DialectSpec(
    dialect=DatabaseDialect.MYSQL,
    label="MySQL",
    native_module="drizzle-orm/mysql-core",
    table_function="mysqlTable",
    column_types={
        ScalarType.BIGINT: _BIGINT,
        ScalarType.BOOLEAN: ColumnBuilder("boolean"),
        ScalarType.DATETIME: ColumnBuilder("datetime", "{ fsp: 3 }"),
        ScalarType.DECIMAL: _DECIMAL,
        ScalarType.FLOAT: ColumnBuilder("double"),
        ScalarType.JSON: ColumnBuilder("json"),
        ScalarType.STRING: ColumnBuilder("varchar", "{ length: 191 }"),
        ScalarType.INT: ColumnBuilder("int"),
    },
    unsupported={ScalarType.BYTES: "binary"},
    enum_style=EnumStyle.INLINE,
    enum_symbol="mysqlEnum",
    now_style=NowStyle.RAW,
    now_expression="CURRENT_TIMESTAMP",
    autoincrement_modifier=".autoincrement()",
    dbgenerated_fallback="UUID()",
)

# ---------------------------------------------------------------------------
# SQLite: integers, dates and decimals collapse onto two storage classes
# ---------------------------------------------------------------------------

SQLITE: DialectSpec = DialectSpec(
    dialect=DatabaseDialect.SQLITE,
    label="SQLite",
    native_module="drizzle-orm/sqlite-core",
    table_function="sqliteTable",
    column_types={
        ScalarType.BIGINT: ColumnBuilder("int"),
        ScalarType.BOOLEAN: ColumnBuilder("int", "{ mode: 'boolean' }"),
        ScalarType.BYTES: ColumnBuilder("blob", "{ mode: 'buffer' }"),
        ScalarType.DATETIME: ColumnBuilder("numeric"),
        ScalarType.DECIMAL: ColumnBuilder("numeric"),
        ScalarType.FLOAT: ColumnBuilder("real"),
        ScalarType.JSON: ColumnBuilder("text", "{ mode: 'json' }"),
        ScalarType.STRING: ColumnBuilder("text"),
        ScalarType.INT: ColumnBuilder("int"),
    },
    enum_style=EnumStyle.OPTION,
    enum_symbol="text",
    now_style=NowStyle.RAW,
    now_expression="DATE('now')",
    # INTEGER PRIMARY KEY already aliases the rowid
    autoincrement_modifier=None,
    dbgenerated_fallback="lower(hex(randomblob(16)))",
)

# ---------------------------------------------------------------------------
# SQL Server
# ---------------------------------------------------------------------------

MSSQL: DialectSpec = DialectSpec(
    dialect=DatabaseDialect.MSSQL,
    label="MSSQL",
    native_module="drizzle-orm/mssql-core",
    table_function="mssqlTable",
    column_types={
        ScalarType.BIGINT: _BIGINT,
        ScalarType.BOOLEAN: ColumnBuilder("bit"),
        ScalarType.BYTES: ColumnBuilder("varbinary"),
        ScalarType.DATETIME: ColumnBuilder("datetime", "{ mode: 'date' }"),
        ScalarType.DECIMAL: _DECIMAL,
        ScalarType.FLOAT: ColumnBuilder("float"),
        ScalarType.STRING: ColumnBuilder("varchar"),
        ScalarType.INT: ColumnBuilder("int"),
    },
    unsupported={ScalarType.JSON: "JSON"},
    enum_style=EnumStyle.OPTION,
    enum_symbol="varchar",
    supports_array_defaults=False,
    now_style=NowStyle.MODIFIER,
    now_expression="defaultGetDate",
    autoincrement_modifier=".identity({ seed: 1, increment: 1 })",
    dbgenerated_fallback="NEWID()",
    uuid_expression="NEWSEQUENTIALID()",
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

DIALECTS: Dict[DatabaseDialect, DialectSpec] = {
    spec.dialect: spec for spec in (POSTGRESQL, MYSQL, SQLITE, MSSQL)
}


def get_dialect(dialect: Union[DatabaseDialect, str]) -> DialectSpec:
    """
    Resolve a dialect enum member or name (``"postgresql"``, ``"mysql"`` ...)
    to its descriptor.

    Raises:
        ValueError: If the name is not a known dialect.
    """
    try:
        key: DatabaseDialect = DatabaseDialect(dialect)
    except ValueError as exc:
        choices: str = ", ".join(d.value for d in DatabaseDialect)
        raise ValueError(f"Unknown dialect '{dialect}'. Expected one of: {choices}.") from exc
    return DIALECTS[key]


__all__: List[str] = [
    "ColumnBuilder",
    "EnumStyle",
    "NowStyle",
    "DialectSpec",
    "POSTGRESQL",
    "MYSQL",
    "SQLITE",
    "MSSQL",
    "DIALECTS",
    "get_dialect",
]
