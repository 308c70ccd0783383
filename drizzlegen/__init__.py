# File: drizzlegen/__init__.py
"""
drizzlegen - Drizzle ORM Schema Generator
==========================================

Translates a dialect-neutral relational schema (the Prisma DMMF datamodel)
into Drizzle ORM schema source for PostgreSQL, MySQL, SQLite and SQL Server.

Architecture overview::

    ┌──────────────┐     ┌─────────────────┐     ┌──────────────┐
    │  CLI / Entry │────▶│ SchemaGenerator │────▶│  DialectSpec │
    │   (cli.py)   │     │ (generator.py)  │     │ (dialects.py)│
    └──────────────┘     └────────┬────────┘     └──────────────┘
                                  │
         ┌──────────────┬─────────┼──────────┬───────────────┐
         ▼              ▼         ▼          ▼               ▼
    ┌───────────┐ ┌──────────┐ ┌────────┐ ┌───────────┐ ┌────────────┐
    │type_mapper│ │ defaults │ │indexes │ │ relations │ │many_to_many│
    └───────────┘ └──────────┘ └────────┘ └───────────┘ └────────────┘

Usage::

    # As a library
    from drizzlegen import Datamodel, generate_schema
    source = generate_schema(Datamodel.model_validate(dmmf["datamodel"]), "mysql")

    # From the command line
    python -m drizzlegen --schema dmmf.json --output ./drizzle/schema.ts -v
"""

from __future__ import annotations

__version__: str = "1.0.0"
__license__: str = "MIT"

from drizzlegen.errors import (
    GeneratorError,
    MalformedRelationError,
    UnsupportedConstructError,
)
from drizzlegen.generator import (
    SchemaGenerator,
    generate_mssql_schema,
    generate_mysql_schema,
    generate_pg_schema,
    generate_schema,
    generate_sqlite_schema,
    load_schema_file,
    parse_raw_schema,
)
from drizzlegen.models import (
    DatabaseDialect,
    Datamodel,
    EnumDefinition,
    FieldInfo,
    FieldKind,
    GeneratedFile,
    GenerationConfig,
    GeneratorDefault,
    IndexInfo,
    ModelInfo,
    ScalarType,
)

__all__ = [
    "__version__",
    # Errors
    "GeneratorError",
    "UnsupportedConstructError",
    "MalformedRelationError",
    # Models
    "DatabaseDialect",
    "Datamodel",
    "EnumDefinition",
    "FieldInfo",
    "FieldKind",
    "GeneratedFile",
    "GenerationConfig",
    "GeneratorDefault",
    "IndexInfo",
    "ModelInfo",
    "ScalarType",
    # Generation
    "SchemaGenerator",
    "generate_schema",
    "generate_pg_schema",
    "generate_mysql_schema",
    "generate_sqlite_schema",
    "generate_mssql_schema",
    "load_schema_file",
    "parse_raw_schema",
]
