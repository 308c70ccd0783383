# File: drizzlegen/many_to_many.py
"""
drizzlegen - Many-to-Many Expander
===================================
Implicit many-to-many relations (two list relation fields sharing a relation
name, neither owning columns) have no table of their own in the source
schema.  The expander synthesizes one junction model per relation name:

    _<RelationName>
        A   → id of the side whose model name sorts first
        B   → id of the other side
        PRIMARY KEY (A, B)

The junction is an ordinary ``ModelInfo`` and flows through type mapping,
foreign keys and indexing like any declared model.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from drizzlegen.errors import UnsupportedConstructError
from drizzlegen.models import (
    FieldInfo,
    FieldKind,
    ModelInfo,
    PrimaryKeyInfo,
    ReferentialAction,
)
from drizzlegen.utils import lower_first

logger: logging.Logger = logging.getLogger("drizzlegen.many_to_many")

Side = Tuple[ModelInfo, FieldInfo]


def _is_implicit_side(field: FieldInfo) -> bool:
    return (
        field.is_relation
        and field.is_list
        and bool(field.relation_name)
        and not field.relation_from_fields
        and not field.relation_to_fields
    )


def find_implicit_pairs(models: Sequence[ModelInfo]) -> Dict[str, Tuple[Side, Side]]:
    """
    Group implicit list relation fields by relation name and keep the
    groups that form a valid pair: exactly two fields, each pointing at the
    other's model.  Pairs are returned with side A first.
    """
    groups: Dict[str, List[Side]] = {}
    for model in models:
        for field in model.fields:
            if _is_implicit_side(field):
                groups.setdefault(field.relation_name or "", []).append((model, field))

    pairs: Dict[str, Tuple[Side, Side]] = {}
    for relation_name, sides in groups.items():
        if len(sides) != 2:
            logger.debug(
                "Relation '%s' has %d implicit list sides; not a many-to-many pair.",
                relation_name,
                len(sides),
            )
            continue
        first, second = sides
        if first[1].type != second[0].name or second[1].type != first[0].name:
            continue
        # Self relations keep declaration order.
        if second[0].name < first[0].name:
            first, second = second, first
        pairs[relation_name] = (first, second)
    return pairs


def _single_id(model: ModelInfo, relation_name: str) -> FieldInfo:
    ids: List[FieldInfo] = model.id_fields
    if len(ids) != 1:
        raise UnsupportedConstructError(
            f"Implicit many-to-many relation '{relation_name}' requires model "
            f"'{model.name}' to have a single id field",
            construct="many-to-many",
        )
    return ids[0]


def build_junction_model(relation_name: str, side_a: Side, side_b: Side) -> ModelInfo:
    """Synthesize the ``_<RelationName>`` junction model for one pair."""
    model_a: ModelInfo = side_a[0]
    model_b: ModelInfo = side_b[0]
    id_a: FieldInfo = _single_id(model_a, relation_name)
    id_b: FieldInfo = _single_id(model_b, relation_name)

    name_a: str = lower_first(model_a.name)
    name_b: str = lower_first(model_b.name)
    if name_a == name_b:
        name_a, name_b = f"{name_a}A", f"{name_b}B"

    fields: List[FieldInfo] = [
        FieldInfo(name="A", kind=id_a.kind, type=id_a.type, is_required=True),
        FieldInfo(name="B", kind=id_b.kind, type=id_b.type, is_required=True),
    ]
    for rel_field_name, column, model, id_field in (
        (name_a, "A", model_a, id_a),
        (name_b, "B", model_b, id_b),
    ):
        fields.append(
            FieldInfo(
                name=rel_field_name,
                db_name=column,
                kind=FieldKind.OBJECT,
                type=model.name,
                is_required=True,
                relation_name=relation_name,
                relation_from_fields=[column],
                relation_to_fields=[id_field.name],
                relation_on_delete=ReferentialAction.CASCADE.value,
            )
        )

    junction_name: str = f"_{relation_name}"
    return ModelInfo(
        name=junction_name,
        fields=fields,
        primary_key=PrimaryKeyInfo(name=f"{junction_name}_AB_pkey", fields=["A", "B"]),
        junction_for=relation_name,
    )


def expand_many_to_many(models: List[ModelInfo]) -> List[ModelInfo]:
    """
    Return the junction models for every implicit many-to-many pair in
    *models*, one per relation name, in first-seen order.

    Raises:
        UnsupportedConstructError: A side has no single id field.
    """
    existing: Dict[str, ModelInfo] = {m.name: m for m in models}
    junctions: List[ModelInfo] = []

    for relation_name, (side_a, side_b) in find_implicit_pairs(models).items():
        junction: ModelInfo = build_junction_model(relation_name, side_a, side_b)
        clash: Optional[ModelInfo] = existing.get(junction.name)
        if clash is not None:
            logger.debug("Junction '%s' already declared; skipping.", junction.name)
            continue
        logger.debug(
            "Synthesized junction '%s' for %s <-> %s.",
            junction.name,
            side_a[0].name,
            side_b[0].name,
        )
        junctions.append(junction)
        existing[junction.name] = junction

    return junctions


__all__: List[str] = [
    "find_implicit_pairs",
    "build_junction_model",
    "expand_many_to_many",
]
