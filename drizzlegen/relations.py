# File: drizzlegen/relations.py
"""
drizzlegen - Relation Deriver & Relation-Graph Emitter
=======================================================
Two views of the same relation fields:

- ``derive_foreign_keys`` renders one ``foreignKey({...})`` builder per
  owning relation field, placed in the table's extra-config callback.
- ``render_relation_graph`` renders the ``defineRelations`` declaration
  used by Drizzle's relational query builder, with one descriptor per
  relation field of every table.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from drizzlegen.errors import MalformedRelationError
from drizzlegen.models import FieldInfo, ModelInfo, ReferentialAction
from drizzlegen.utils import TAB, ImportCollector, escape, format_ref_list

logger: logging.Logger = logging.getLogger("drizzlegen.relations")

# ``None`` means the clause is omitted.
DELETE_ACTIONS: Dict[Optional[str], Optional[str]] = {
    None: "cascade",
    ReferentialAction.CASCADE.value: "cascade",
    ReferentialAction.SET_NULL.value: "set null",
    ReferentialAction.SET_DEFAULT.value: "set default",
    ReferentialAction.RESTRICT.value: "restrict",
    ReferentialAction.NO_ACTION.value: None,
}


# ---------------------------------------------------------------------------
# Foreign keys
# ---------------------------------------------------------------------------


def foreign_key_name(model: ModelInfo, field: FieldInfo) -> str:
    return f"{model.storage_name}_{field.storage_name}_fkey"


def resolve_delete_action(fkey_name: str, action: Optional[str]) -> Optional[str]:
    """
    Map a relation ``onDelete`` tag to its Drizzle spelling.

    Raises:
        MalformedRelationError: For tags outside the known set.
    """
    if action not in DELETE_ACTIONS:
        raise MalformedRelationError(
            f"Unknown delete action on relation {fkey_name}: {action}",
            relation=fkey_name,
            action=action,
        )
    return DELETE_ACTIONS[action]


def render_foreign_key(model: ModelInfo, field: FieldInfo, imports: ImportCollector) -> str:
    name: str = foreign_key_name(model, field)
    on_delete: Optional[str] = resolve_delete_action(name, field.relation_on_delete)

    imports.add_native("foreignKey")

    columns: str = format_ref_list(model.name, field.relation_from_fields or [])
    foreign_columns: str = format_ref_list(field.type, field.relation_to_fields or [])
    delete_clause: str = f".onDelete('{on_delete}')" if on_delete else ""

    return (
        f"foreignKey({{\n"
        f"{TAB * 2}name: '{escape(name)}',\n"
        f"{TAB * 2}columns: [{columns}],\n"
        f"{TAB * 2}foreignColumns: [{foreign_columns}]\n"
        f"{TAB}}}){delete_clause}.onUpdate('cascade')"
    )


def derive_foreign_keys(model: ModelInfo, imports: ImportCollector) -> List[str]:
    """Foreign-key builders for every owning relation field of *model*."""
    return [
        render_foreign_key(model, field, imports)
        for field in model.relation_fields
        if field.relation_from_fields
    ]


# ---------------------------------------------------------------------------
# Relation graph
# ---------------------------------------------------------------------------


def _ref(table: str, columns: Sequence[str], through: Optional[Sequence[str]] = None) -> str:
    """``r.Post.userId``; several columns render as an array."""
    refs: List[str] = [f"r.{table}.{col}" for col in columns]
    if through is not None:
        refs = [f"{ref}.through({hop})" for ref, hop in zip(refs, through)]
    if len(refs) == 1:
        return refs[0]
    return "[" + ", ".join(refs) + "]"


def _descriptor(field: FieldInfo, cardinality: str, source: str, target: str) -> str:
    return (
        f"{TAB * 2}{field.name}: r.{cardinality}.{field.type}({{\n"
        f"{TAB * 3}from: {source},\n"
        f"{TAB * 3}to: {target}\n"
        f"{TAB * 2}}})"
    )


def _find_owning_pair(
    model: ModelInfo, field: FieldInfo, by_name: Dict[str, ModelInfo]
) -> Optional[FieldInfo]:
    related: Optional[ModelInfo] = by_name.get(field.type)
    if related is None:
        return None
    for candidate in related.fields:
        if (
            candidate is not field
            and candidate.type == model.name
            and candidate.relation_name == field.relation_name
            and candidate.relation_from_fields
            and candidate.relation_to_fields
        ):
            return candidate
    return None


def _find_junction(field: FieldInfo, models: Sequence[ModelInfo]) -> Optional[ModelInfo]:
    for candidate in models:
        if candidate.junction_for is not None and candidate.junction_for == field.relation_name:
            return candidate
    return None


def _junction_descriptor(
    model: ModelInfo,
    field: FieldInfo,
    junction: ModelInfo,
    by_name: Dict[str, ModelInfo],
) -> Optional[str]:
    """``through`` descriptor for one side of an implicit many-to-many."""
    sides: List[FieldInfo] = junction.relation_fields
    if len(sides) != 2:
        return None

    if field.type == model.name:
        # Self relation: the first declared field of the pair is side A.
        pair: List[FieldInfo] = [
            f for f in model.relation_fields if f.relation_name == field.relation_name
        ]
        own_index: int = 0 if pair and pair[0] is field else 1
    else:
        own_index = 0 if sides[0].type == model.name else 1

    own_side: FieldInfo = sides[own_index]
    other_side: FieldInfo = sides[1 - own_index]
    related: Optional[ModelInfo] = by_name.get(field.type)
    if related is None:
        return None

    junction_ref: str = f"r.{junction.name}"
    source: str = _ref(
        model.name,
        own_side.relation_to_fields or [],
        [f"{junction_ref}.{col}" for col in own_side.relation_from_fields or []],
    )
    target: str = _ref(
        related.name,
        other_side.relation_to_fields or [],
        [f"{junction_ref}.{col}" for col in other_side.relation_from_fields or []],
    )
    return _descriptor(field, "many", source, target)


def render_relation_descriptor(
    model: ModelInfo,
    field: FieldInfo,
    models: Sequence[ModelInfo],
    by_name: Dict[str, ModelInfo],
) -> str:
    """Render one relation-graph entry for *field* of *model*."""
    if field.relation_from_fields:
        return _descriptor(
            field,
            "one",
            _ref(model.name, field.relation_from_fields),
            _ref(field.type, field.relation_to_fields or []),
        )

    pair: Optional[FieldInfo] = _find_owning_pair(model, field, by_name)
    if pair is not None:
        # Same columns as the owning side, seen from this table.
        return _descriptor(
            field,
            "many",
            _ref(model.name, pair.relation_to_fields or []),
            _ref(field.type, pair.relation_from_fields or []),
        )

    junction: Optional[ModelInfo] = _find_junction(field, models)
    if junction is not None:
        rendered: Optional[str] = _junction_descriptor(model, field, junction, by_name)
        if rendered is not None:
            return rendered

    logger.debug(
        "No owning side found for %s.%s; emitting bare many() descriptor.",
        model.name,
        field.name,
    )
    return f"{TAB * 2}{field.name}: r.many.{field.type}()"


def render_relation_graph(models: Sequence[ModelInfo], imports: ImportCollector) -> str:
    """
    Render ``export const relations = defineRelations({...}, (r) => ({...}));``
    for every table with relation fields, or ``""`` when there are none.
    """
    by_name: Dict[str, ModelInfo] = {m.name: m for m in models}
    blocks: List[str] = []
    tables: List[str] = []

    for model in models:
        fields: List[FieldInfo] = model.relation_fields
        if not fields:
            continue
        tables.append(model.name)
        descriptors: List[str] = [
            render_relation_descriptor(model, f, models, by_name) for f in fields
        ]
        blocks.append(f"{TAB}{model.name}: {{\n" + ",\n".join(descriptors) + f"\n{TAB}}}")

    if not blocks:
        return ""

    imports.add_drizzle("defineRelations")
    return (
        f"export const relations = defineRelations({{ {', '.join(tables)} }}, (r) => ({{\n"
        + ",\n".join(blocks)
        + "\n}));"
    )


__all__: List[str] = [
    "DELETE_ACTIONS",
    "foreign_key_name",
    "resolve_delete_action",
    "render_foreign_key",
    "derive_foreign_keys",
    "render_relation_descriptor",
    "render_relation_graph",
]
