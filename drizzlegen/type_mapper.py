# File: drizzlegen/type_mapper.py
"""
drizzlegen - Type Mapper
=========================
Pure lookup from a field's type to the Drizzle column builder of the target
dialect, registering the builder symbol in the run's import set.

Unsupported types fail fast with ``UnsupportedConstructError``: emitting an
incompatible column would only surface when the database is created.
"""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional

from drizzlegen.dialects import ColumnBuilder, DialectSpec, EnumStyle
from drizzlegen.errors import GeneratorError, UnsupportedConstructError
from drizzlegen.models import EnumDefinition, FieldInfo, FieldKind, ScalarType
from drizzlegen.utils import ImportCollector, format_list_literal, quote

logger: logging.Logger = logging.getLogger("drizzlegen.type_mapper")


def map_scalar_type(
    field: FieldInfo,
    spec: DialectSpec,
    imports: ImportCollector,
) -> str:
    """
    Map a scalar field to its column builder call.

    An auto-incrementing integer on a dialect with serial types (PostgreSQL)
    becomes the serial builder itself; the default translator then emits no
    modifier for it.
    """
    tag: Optional[ScalarType] = ScalarType.lookup(field.type)
    if tag is None:
        raise UnsupportedConstructError(
            f"Unknown scalar type '{field.type}' on field '{field.name}' for {spec.label}",
            dialect=spec.dialect.value,
            construct=field.type,
        )
    if tag in spec.unsupported:
        raise UnsupportedConstructError(
            spec.unsupported_message(tag),
            dialect=spec.dialect.value,
            construct=tag.value,
        )

    builder: ColumnBuilder = spec.column_types[tag]
    if field.generator_name == "autoincrement" and tag in spec.serial_types:
        builder = spec.serial_types[tag]

    imports.add_native(builder.symbol)
    return builder.render(field.storage_name)


def map_enum_type(
    field: FieldInfo,
    spec: DialectSpec,
    imports: ImportCollector,
    enums: Mapping[str, EnumDefinition],
) -> str:
    """Map an enum field according to the dialect's enum style."""
    enum_def: Optional[EnumDefinition] = enums.get(field.type)
    if enum_def is None:
        raise GeneratorError(
            f"Field '{field.name}' references unknown enum '{field.type}'"
        )

    if spec.enum_style == EnumStyle.DECLARED:
        # The enum constant is declared once at the top of the file.
        return f"{enum_def.name}({quote(field.storage_name)})"

    imports.add_native(spec.enum_symbol)
    values: str = format_list_literal(enum_def.storage_values)
    if spec.enum_style == EnumStyle.INLINE:
        return f"{spec.enum_symbol}({quote(field.storage_name)}, {values})"
    return f"{spec.enum_symbol}({quote(field.storage_name)}, {{ enum: {values} }})"


def map_column_type(
    field: FieldInfo,
    spec: DialectSpec,
    imports: ImportCollector,
    enums: Mapping[str, EnumDefinition],
) -> Optional[str]:
    """
    Return the column declaration fragment for *field*, or ``None`` for
    relation fields, which have no column of their own.

    Raises:
        UnsupportedConstructError: The type has no representation on the
            dialect.
        GeneratorError: An enum field names an enum that does not exist.
    """
    if field.kind == FieldKind.OBJECT:
        return None

    if field.kind == FieldKind.SCALAR:
        column: str = map_scalar_type(field, spec, imports)
    elif field.kind == FieldKind.ENUM:
        column = map_enum_type(field, spec, imports, enums)
    else:
        raise UnsupportedConstructError(
            f"Field '{field.name}' has unsupported type '{field.type}' for {spec.label}",
            dialect=spec.dialect.value,
            construct=field.type,
        )

    if field.is_list and spec.supports_scalar_lists:
        column += ".array()"
    return column


__all__: List[str] = [
    "map_scalar_type",
    "map_enum_type",
    "map_column_type",
]
