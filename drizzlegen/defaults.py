# File: drizzlegen/defaults.py
"""
drizzlegen - Default Translator & Column Modifiers
===================================================
Default values are resolved by an ordered rule list: the first rule whose
predicate matches renders the modifier.  Dialect differences live in the
``DialectSpec`` each renderer receives, so the rule order itself is the same
for every backend:

    1. literal scalar          → .default("x")
    2. literal list            → .default(["a", "b"])   (not on MSSQL)
    3. now()                   → .defaultNow() / .defaultGetDate() / sql`...`
    4. autoincrement()         → .identity(...) / .autoincrement() / nothing
    5. dbgenerated("expr")     → .default(sql`expr`)
    6. uuid(), uuid(4) ...     → .default(sql`NEWSEQUENTIALID()`)  (MSSQL only)
    7. any other generator     → .default(sql`name(args)`)

Column modifiers are always appended as notNull → primaryKey → unique →
default.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from drizzlegen.dialects import DialectSpec, NowStyle
from drizzlegen.errors import UnsupportedConstructError
from drizzlegen.models import FieldInfo, GeneratorDefault
from drizzlegen.utils import ImportCollector, raw_sql, render_literal

logger: logging.Logger = logging.getLogger("drizzlegen.defaults")

_UUID_RE: re.Pattern[str] = re.compile(r"^uuid\([0-9]*\)$")


# ---------------------------------------------------------------------------
# Rule definition
# ---------------------------------------------------------------------------

Predicate = Callable[[Any, DialectSpec], bool]
Renderer = Callable[[FieldInfo, Any, DialectSpec, ImportCollector], Optional[str]]


@dataclass(frozen=True)
class DefaultRule:
    """One predicate/render pair of the default translator."""

    name: str
    matches: Predicate
    render: Renderer


def _generator_named(name: str) -> Predicate:
    def _matches(value: Any, spec: DialectSpec) -> bool:
        return isinstance(value, GeneratorDefault) and value.name == name

    return _matches


def _sql_default(expression: str, imports: ImportCollector) -> str:
    imports.add_drizzle("sql")
    return f".default({raw_sql(expression)})"


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------


def _render_scalar(field: FieldInfo, value: Any, spec: DialectSpec, imports: ImportCollector) -> str:
    return f".default({render_literal(value)})"


def _render_list(field: FieldInfo, value: Any, spec: DialectSpec, imports: ImportCollector) -> str:
    if not spec.supports_array_defaults:
        raise UnsupportedConstructError(
            f"{spec.label} doesn't support array defaults (field '{field.name}')",
            dialect=spec.dialect.value,
            construct="array default",
        )
    return f".default({render_literal(value)})"


def _render_now(field: FieldInfo, value: Any, spec: DialectSpec, imports: ImportCollector) -> str:
    if spec.now_style == NowStyle.MODIFIER:
        return f".{spec.now_expression}()"
    return _sql_default(spec.now_expression, imports)


def _render_autoincrement(
    field: FieldInfo, value: Any, spec: DialectSpec, imports: ImportCollector
) -> Optional[str]:
    # None when the dialect handles it at type level or implicitly.
    return spec.autoincrement_modifier


def _render_dbgenerated(
    field: FieldInfo, value: GeneratorDefault, spec: DialectSpec, imports: ImportCollector
) -> str:
    expression: Any = value.args[0] if value.args else None
    if expression:
        return _sql_default(str(expression), imports)
    return _sql_default(spec.dbgenerated_fallback, imports)


def _render_uuid(
    field: FieldInfo, value: GeneratorDefault, spec: DialectSpec, imports: ImportCollector
) -> str:
    return _sql_default(spec.uuid_expression or "", imports)


def _js_string(arg: Any) -> str:
    """Text of *arg* as JavaScript's ``String()`` would produce it."""
    if isinstance(arg, str):
        return arg
    if isinstance(arg, (list, tuple)):
        return ",".join(_js_string(item) for item in arg)
    return render_literal(arg)


def _render_generic(
    field: FieldInfo, value: GeneratorDefault, spec: DialectSpec, imports: ImportCollector
) -> str:
    if value.args:
        call: str = f"{value.name}({', '.join(_js_string(arg) for arg in value.args)})"
    elif value.name.endswith(")"):
        call = value.name
    else:
        call = f"{value.name}()"
    return _sql_default(call, imports)


# ---------------------------------------------------------------------------
# Ordered rule table
# ---------------------------------------------------------------------------

DEFAULT_RULES: Tuple[DefaultRule, ...] = (
    DefaultRule(
        "literal",
        lambda value, spec: isinstance(value, (str, int, float, bool)),
        _render_scalar,
    ),
    DefaultRule(
        "list",
        lambda value, spec: isinstance(value, list),
        _render_list,
    ),
    DefaultRule("now", _generator_named("now"), _render_now),
    DefaultRule("autoincrement", _generator_named("autoincrement"), _render_autoincrement),
    DefaultRule("dbgenerated", _generator_named("dbgenerated"), _render_dbgenerated),
    DefaultRule(
        "uuid",
        lambda value, spec: (
            spec.uuid_expression is not None
            and isinstance(value, GeneratorDefault)
            and _UUID_RE.match(value.name) is not None
        ),
        _render_uuid,
    ),
    DefaultRule(
        "generator",
        lambda value, spec: isinstance(value, GeneratorDefault),
        _render_generic,
    ),
)


def translate_default(
    field: FieldInfo,
    spec: DialectSpec,
    imports: ImportCollector,
) -> Optional[str]:
    """
    Render the default modifier of *field* on the dialect, or ``None`` when
    the field has no default or the dialect needs no modifier for it.

    Raises:
        UnsupportedConstructError: The default shape cannot be expressed.
    """
    value: Any = field.default
    if value is None:
        return None

    for rule in DEFAULT_RULES:
        if rule.matches(value, spec):
            logger.debug("Field '%s': default rule '%s'.", field.name, rule.name)
            return rule.render(field, value, spec, imports)

    return None


def add_column_modifiers(
    field: FieldInfo,
    column: str,
    spec: DialectSpec,
    imports: ImportCollector,
) -> str:
    """Append ``.notNull()``, ``.primaryKey()``, ``.unique()`` and the default."""
    parts: List[str] = [column]
    if field.is_required:
        parts.append(".notNull()")
    if field.is_id:
        parts.append(".primaryKey()")
    if field.is_unique:
        parts.append(".unique()")

    default: Optional[str] = translate_default(field, spec, imports)
    if default:
        parts.append(default)

    return "".join(parts)


__all__: List[str] = [
    "DefaultRule",
    "DEFAULT_RULES",
    "translate_default",
    "add_column_modifiers",
]
