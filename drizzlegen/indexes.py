# File: drizzlegen/indexes.py
"""
drizzlegen - Index/Key Assembler
=================================
Collects the entries of a table's extra-config callback, in order:

    1. foreign keys
    2. plain indexes          index('<name>').on(...)
    3. unique indexes         uniqueIndex('<name>').on(...)
    4. composite primary key  primaryKey({ name, columns })
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from drizzlegen.models import IndexInfo, ModelInfo
from drizzlegen.relations import derive_foreign_keys
from drizzlegen.utils import TAB, ImportCollector, escape, format_ref_list

logger: logging.Logger = logging.getLogger("drizzlegen.indexes")

MODEL_DECLARED_INDEX_TYPES = frozenset({"id", "unique"})


def _index_builder(symbol: str, name: str, table: str, fields: Sequence[str]) -> str:
    return f"{symbol}('{escape(name)}')\n{TAB * 2}.on({format_ref_list(table, fields)})"


def render_plain_indexes(
    model: ModelInfo,
    indexes: Sequence[IndexInfo],
    imports: ImportCollector,
) -> List[str]:
    """
    Entries of the global index list that belong to *model*, rendered as
    ``index(...)``.  ``id`` and ``unique`` entries are skipped; the model
    already declares them as its primary key and unique indexes.
    """
    rendered: List[str] = []
    for idx in indexes:
        if idx.model != model.name:
            continue
        if idx.type in MODEL_DECLARED_INDEX_TYPES:
            logger.debug("Skipping %s index on %s: declared on the model.", idx.type, model.name)
            continue
        fields: List[str] = idx.field_names
        name: str = idx.name or idx.db_name or f"{model.name}_{'_'.join(fields)}_idx"
        imports.add_native("index")
        rendered.append(_index_builder("index", name, model.name, fields))
    return rendered


def render_unique_indexes(model: ModelInfo, imports: ImportCollector) -> List[str]:
    rendered: List[str] = []
    for unique in model.unique_indexes:
        name: str = unique.name or f"{model.name}_{'_'.join(unique.fields)}_key"
        imports.add_native("uniqueIndex")
        rendered.append(_index_builder("uniqueIndex", name, model.name, unique.fields))
    return rendered


def render_primary_key(model: ModelInfo, imports: ImportCollector) -> Optional[str]:
    pk = model.primary_key
    if pk is None or len(pk.fields) < 2:
        return None

    imports.add_native("primaryKey")
    name: str = pk.name or f"{model.name}_cpk"
    return (
        f"primaryKey({{\n"
        f"{TAB * 2}name: '{escape(name)}',\n"
        f"{TAB * 2}columns: [{format_ref_list(model.name, pk.fields)}]\n"
        f"{TAB}}})"
    )


def assemble_table_extras(
    model: ModelInfo,
    indexes: Sequence[IndexInfo],
    imports: ImportCollector,
) -> List[str]:
    """All extra-config entries of *model*, in emission order."""
    extras: List[str] = derive_foreign_keys(model, imports)
    extras.extend(render_plain_indexes(model, indexes, imports))
    extras.extend(render_unique_indexes(model, imports))

    primary_key: Optional[str] = render_primary_key(model, imports)
    if primary_key is not None:
        extras.append(primary_key)
    return extras


__all__: List[str] = [
    "render_plain_indexes",
    "render_unique_indexes",
    "render_primary_key",
    "assemble_table_extras",
]
