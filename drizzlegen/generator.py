# File: drizzlegen/generator.py
"""
drizzlegen - Schema Loading & Generation Pipeline
==================================================
Connects every phase together:

    Schema Input → Clone → Many-to-Many Expansion → Tables → Relations → Imports

``SchemaGenerator`` is the single orchestrator for all four dialects; what
differs between them is carried by the ``DialectSpec`` it is built with.

Workflow::

    1. Load a DMMF dump from a JSON/YAML file (or accept a ``Datamodel``).
    2. Parse into ``Datamodel`` + ``GenerationConfig`` (models.py).
    3. Deep-copy the models and append the synthesized junction models.
    4. Render PostgreSQL enum declarations, then one table per model.
    5. Render the relation graph.
    6. Render the import block last, once every symbol has been observed.

A run either returns the complete schema text or raises; it never produces
partial output.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from drizzlegen.defaults import add_column_modifiers
from drizzlegen.dialects import DialectSpec, EnumStyle, get_dialect
from drizzlegen.indexes import assemble_table_extras
from drizzlegen.many_to_many import expand_many_to_many
from drizzlegen.models import (
    DatabaseDialect,
    Datamodel,
    EnumDefinition,
    FieldInfo,
    GenerationConfig,
    ModelInfo,
)
from drizzlegen.relations import render_relation_graph
from drizzlegen.type_mapper import map_column_type
from drizzlegen.utils import (
    TAB,
    ImportCollector,
    Timer,
    escape,
    format_list_literal,
    quote,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("drizzlegen.generator")


# ---------------------------------------------------------------------------
# DMMF document loading
# ---------------------------------------------------------------------------

# Formats tried for each suffix, in order.
_DOCUMENT_FORMATS: Dict[str, Tuple[str, ...]] = {
    ".json": ("JSON",),
    ".yaml": ("YAML",),
    ".yml": ("YAML",),
}
_FALLBACK_FORMATS: Tuple[str, ...] = ("JSON", "YAML")


def _decode_document(text: str, fmt: str, path: Path) -> Dict[str, Any]:
    try:
        data: Any = json.loads(text) if fmt == "JSON" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ValueError(f"Invalid {fmt} in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Expected a {fmt} mapping at top level, got {type(data).__name__}.")
    return data


def load_schema_file(path: Path) -> Dict[str, Any]:
    """
    Read a DMMF document (JSON or YAML) into its top-level mapping.

    The suffix picks the format; any other suffix is tried as JSON first,
    then as YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be decoded into a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Schema path is not a file: {path}")

    formats: Tuple[str, ...] = _DOCUMENT_FORMATS.get(path.suffix.lower(), _FALLBACK_FORMATS)
    text: str = path.read_text(encoding="utf-8")

    for fmt in formats[:-1]:
        try:
            return _decode_document(text, fmt, path)
        except ValueError as exc:
            logger.debug("%s is not %s (%s), trying next format.", path.name, fmt, exc)
    return _decode_document(text, formats[-1], path)


def _locate_datamodel(raw: Mapping[str, Any]) -> Optional[Any]:
    """
    Find the datamodel section in any of the shapes a DMMF arrives in:

        - ``{"dmmf": {"datamodel": {...}}}``    (generator options)
        - ``{"datamodel": {...}}``              (a DMMF dump)
        - ``{"models": [...], ...}``            (a bare datamodel)
    """
    if isinstance(raw.get("dmmf"), dict):
        return raw["dmmf"].get("datamodel")
    if "datamodel" in raw:
        return raw["datamodel"]
    if "models" in raw:
        return {key: raw[key] for key in ("models", "enums", "indexes") if key in raw}
    return None


def parse_raw_schema(raw: Dict[str, Any]) -> Tuple[Datamodel, GenerationConfig]:
    """
    Validate a decoded DMMF document into a ``Datamodel`` plus the
    ``GenerationConfig`` read from its optional ``config`` (or
    ``generator``) section.

    Raises:
        ValueError: If the data model is missing or fails validation.
    """
    model_data: Optional[Any] = _locate_datamodel(raw)
    if not isinstance(model_data, dict):
        raise ValueError(
            "Cannot find a datamodel in input. "
            "Expected top-level key: 'datamodel', 'dmmf' or 'models'."
        )

    config_data: Any = next((raw[key] for key in ("config", "generator") if key in raw), None)
    if config_data is None:
        logger.info("No generation config found in input, using defaults.")
        config_data = {}

    try:
        datamodel: Datamodel = Datamodel.model_validate(model_data)
    except ValidationError as exc:
        raise ValueError(f"Datamodel validation failed: {exc}") from exc

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    return datamodel, config


# ---------------------------------------------------------------------------
# SchemaGenerator
# ---------------------------------------------------------------------------


class SchemaGenerator:
    """
    Render a ``Datamodel`` as a Drizzle ORM schema module for one dialect.

    Usage::

        gen = SchemaGenerator("mysql")
        source = gen.generate(datamodel)

    The generator holds no per-run state: each ``generate`` call works on
    its own copy of the models and its own ``ImportCollector``, so one
    instance can be reused and two runs on the same input are identical.
    """

    def __init__(self, dialect: Union[DatabaseDialect, str, DialectSpec]) -> None:
        self.spec: DialectSpec = (
            dialect if isinstance(dialect, DialectSpec) else get_dialect(dialect)
        )

    def __repr__(self) -> str:
        return f"<SchemaGenerator {self.spec.dialect.value}>"

    # -- Public API ----------------------------------------------------------

    def generate(self, datamodel: Datamodel) -> str:
        """
        Return the complete schema source, or ``""`` when there are no
        tables to emit.

        Raises:
            UnsupportedConstructError: A type or default has no
                representation on the dialect.
            MalformedRelationError: A relation carries an unknown delete
                action.
            GeneratorError: An enum field names an unknown enum.
        """
        with Timer(f"generate {self.spec.dialect.value}") as timer:
            imports: ImportCollector = ImportCollector(self.spec.native_module)

            models: List[ModelInfo] = [m.model_copy(deep=True) for m in datamodel.models]
            models.extend(expand_many_to_many(models))

            enums: Dict[str, EnumDefinition] = {e.name: e for e in datamodel.enums}

            tables: List[str] = []
            emitted: List[ModelInfo] = []
            for model in models:
                table: Optional[str] = self.render_table(model, datamodel, enums, imports)
                if table is None:
                    continue
                tables.append(table)
                emitted.append(model)

            if not tables:
                logger.info("No tables to generate for %s.", self.spec.label)
                return ""

            enum_block: List[str] = self.render_enums(datamodel.enums, imports)
            relations: str = render_relation_graph(emitted, imports)

            blocks: List[str] = [imports.render(), *enum_block, *tables, relations]
            output: str = "\n\n".join(block for block in blocks if block)

        logger.info(
            "Generated %d table(s) for %s in %.3fs.",
            len(tables),
            self.spec.label,
            timer.elapsed,
        )
        return output

    # -- Blocks --------------------------------------------------------------

    def render_enums(
        self, enums: List[EnumDefinition], imports: ImportCollector
    ) -> List[str]:
        """Top-level enum declarations, for dialects that declare them."""
        if self.spec.enum_style != EnumStyle.DECLARED or not enums:
            return []

        imports.add_native(self.spec.enum_symbol)
        return [
            f"export const {enum_def.name} = {self.spec.enum_symbol}("
            f"{quote(enum_def.storage_name)}, {format_list_literal(enum_def.storage_values)})"
            for enum_def in enums
        ]

    def render_column(
        self,
        field: FieldInfo,
        enums: Mapping[str, EnumDefinition],
        imports: ImportCollector,
    ) -> Optional[str]:
        column: Optional[str] = map_column_type(field, self.spec, imports, enums)
        if column is None:
            return None
        return f"{TAB}{field.name}: {add_column_modifiers(field, column, self.spec, imports)}"

    def render_table(
        self,
        model: ModelInfo,
        datamodel: Datamodel,
        enums: Mapping[str, EnumDefinition],
        imports: ImportCollector,
    ) -> Optional[str]:
        """
        Render one ``export const <Model> = <table>(...)`` declaration, or
        ``None`` for a model without fields.
        """
        if not model.fields:
            logger.debug("Skipping model '%s': no fields.", model.name)
            return None

        columns: List[str] = [
            column
            for column in (self.render_column(f, enums, imports) for f in model.fields)
            if column is not None
        ]
        extras: List[str] = assemble_table_extras(model, datamodel.indexes, imports)

        imports.add_native(self.spec.table_function)

        body: str = (
            f"export const {model.name} = {self.spec.table_function}("
            f"'{escape(model.storage_name)}', {{\n" + ",\n".join(columns) + "\n}"
        )
        if extras:
            body += f", ({model.name}) => [\n{TAB}" + f",\n{TAB}".join(extras) + "\n]"
        body += ");"

        logger.debug(
            "Table '%s': %d column(s), %d extra(s).", model.name, len(columns), len(extras)
        )
        return body


# ---------------------------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------------------------


def generate_schema(
    datamodel: Datamodel, dialect: Union[DatabaseDialect, str] = DatabaseDialect.POSTGRESQL
) -> str:
    """Render *datamodel* for *dialect*."""
    return SchemaGenerator(dialect).generate(datamodel)


def generate_pg_schema(datamodel: Datamodel) -> str:
    return generate_schema(datamodel, DatabaseDialect.POSTGRESQL)


def generate_mysql_schema(datamodel: Datamodel) -> str:
    return generate_schema(datamodel, DatabaseDialect.MYSQL)


def generate_sqlite_schema(datamodel: Datamodel) -> str:
    return generate_schema(datamodel, DatabaseDialect.SQLITE)


def generate_mssql_schema(datamodel: Datamodel) -> str:
    return generate_schema(datamodel, DatabaseDialect.MSSQL)


__all__: List[str] = [
    "load_schema_file",
    "parse_raw_schema",
    "SchemaGenerator",
    "generate_schema",
    "generate_pg_schema",
    "generate_mysql_schema",
    "generate_sqlite_schema",
    "generate_mssql_schema",
]

logger.debug("drizzlegen.generator loaded.")
