# File: drizzlegen/models.py
"""
drizzlegen - Core Data Models
==============================
Pydantic V2 models describing the dialect-neutral relational schema (the
Prisma DMMF ``datamodel``) and the generation configuration.  These models
are the single source of truth for the pipeline:

    Schema Loading → Many-to-Many Expansion → Table Rendering → Output

Every model accepts the camelCase keys of a raw DMMF dump (``dbName``,
``isList``, ``relationFromFields`` ...) as aliases, and the snake_case
attribute names when built from Python.  DMMF keys the generator has no use
for (``isReadOnly``, ``hasDefaultValue`` ...) are ignored.
"""

from __future__ import annotations

import hashlib
import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("drizzlegen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ScalarType(str, Enum):
    """Scalar type tags of the source schema."""

    INT = "Int"
    BIGINT = "BigInt"
    BOOLEAN = "Boolean"
    BYTES = "Bytes"
    DATETIME = "DateTime"
    DECIMAL = "Decimal"
    FLOAT = "Float"
    JSON = "Json"
    STRING = "String"

    @classmethod
    def lookup(cls, tag: str) -> Optional["ScalarType"]:
        """Case-insensitive tag lookup; ``None`` for unknown tags."""
        return _SCALAR_BY_LOWER.get(tag.lower())


_SCALAR_BY_LOWER: Dict[str, ScalarType] = {t.value.lower(): t for t in ScalarType}


class FieldKind(str, Enum):
    """What a field describes: a column, an enum column, or a relation."""

    SCALAR = "scalar"
    ENUM = "enum"
    OBJECT = "object"
    UNSUPPORTED = "unsupported"


class ReferentialAction(str, Enum):
    """Relation ``onDelete`` tags understood by the generator."""

    CASCADE = "Cascade"
    SET_NULL = "SetNull"
    SET_DEFAULT = "SetDefault"
    RESTRICT = "Restrict"
    NO_ACTION = "NoAction"


class DatabaseDialect(str, Enum):
    """Target database dialects."""

    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"
    MSSQL = "mssql"


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    alias_generator=to_camel,
    use_enum_values=False,
    extra="ignore",
)


# ---------------------------------------------------------------------------
# Field-level primitives
# ---------------------------------------------------------------------------


class GeneratorDefault(BaseModel):
    """A function-style default such as ``now()`` or ``dbgenerated("...")``."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Generator name.")
    args: List[Any] = Field(default_factory=list, description="Generator arguments.")

    def __repr__(self) -> str:
        return f"<GeneratorDefault {self.name}({', '.join(map(str, self.args))})>"


DefaultValue = Union[
    GeneratorDefault,
    List[Any],
    StrictBool,
    StrictInt,
    StrictFloat,
    StrictStr,
]


class FieldInfo(BaseModel):
    """
    A single field of a model: a scalar column, an enum column or one side
    of a relation.

    Relation fields (``kind == "object"``) carry ``type`` = the related model
    name.  The side holding ``relation_from_fields`` owns the foreign key.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)
    db_name: Optional[str] = Field(default=None, description="Storage name override.")
    kind: FieldKind = Field(default=FieldKind.SCALAR)
    type: str = Field(..., min_length=1, description="Scalar tag, enum or model name.")
    is_list: bool = False
    is_required: bool = False
    is_unique: bool = False
    is_id: bool = False
    default: Optional[DefaultValue] = None

    # -- Relation-only attributes -------------------------------------------
    relation_name: Optional[str] = None
    relation_from_fields: Optional[List[str]] = None
    relation_to_fields: Optional[List[str]] = None
    relation_on_delete: Optional[str] = None

    @property
    def storage_name(self) -> str:
        return self.db_name or self.name

    @property
    def is_relation(self) -> bool:
        return self.kind == FieldKind.OBJECT

    @property
    def is_owning(self) -> bool:
        """True when this relation side holds the local foreign-key columns."""
        return self.is_relation and bool(self.relation_from_fields)

    @property
    def generator_name(self) -> Optional[str]:
        if isinstance(self.default, GeneratorDefault):
            return self.default.name
        return None

    def __repr__(self) -> str:
        flags: str = "".join(
            f" {flag}"
            for flag, on in (("ID", self.is_id), ("UNIQUE", self.is_unique), ("LIST", self.is_list))
            if on
        )
        return f"<Field {self.name} {self.kind.value}:{self.type}{flags}>"


# ---------------------------------------------------------------------------
# Keys & indexes
# ---------------------------------------------------------------------------


class PrimaryKeyInfo(BaseModel):
    """Model-level (possibly composite) primary key."""

    model_config = _SHARED_CONFIG

    name: Optional[str] = None
    fields: List[str] = Field(..., min_length=1)


class UniqueIndexInfo(BaseModel):
    """Model-level unique constraint over one or more fields."""

    model_config = _SHARED_CONFIG

    name: Optional[str] = None
    fields: List[str] = Field(..., min_length=1)


class IndexField(BaseModel):
    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)


class IndexInfo(BaseModel):
    """
    Entry of the global index list.  ``type`` is ``normal``, ``fulltext``,
    ``unique`` or ``id``; the last two duplicate what the model already
    declares.
    """

    model_config = _SHARED_CONFIG

    model: str = Field(..., min_length=1, description="Owning model name.")
    type: str = Field(default="normal")
    name: Optional[str] = None
    db_name: Optional[str] = None
    fields: List[IndexField] = Field(default_factory=list)

    @field_validator("fields", mode="before")
    @classmethod
    def _coerce_field_names(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class EnumValue(BaseModel):
    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)
    db_name: Optional[str] = None

    @property
    def storage_name(self) -> str:
        return self.db_name or self.name


class EnumDefinition(BaseModel):
    """Represents a schema-level enum type."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Enum type name.")
    db_name: Optional[str] = None
    values: List[EnumValue] = Field(default_factory=list)

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_value_names(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @property
    def storage_name(self) -> str:
        return self.db_name or self.name

    @property
    def storage_values(self) -> List[str]:
        return [v.storage_name for v in self.values]


# ---------------------------------------------------------------------------
# Model (table)
# ---------------------------------------------------------------------------


class ModelInfo(BaseModel):
    """
    Complete representation of a single model / table.

    Invariant: field names are unique within a model.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1)
    db_name: Optional[str] = None
    fields: List[FieldInfo] = Field(default_factory=list)
    primary_key: Optional[PrimaryKeyInfo] = None
    unique_indexes: List[UniqueIndexInfo] = Field(default_factory=list)

    # Relation name this model implements when it is a synthesized junction.
    junction_for: Optional[str] = Field(default=None, exclude=True)

    @model_validator(mode="after")
    def _validate_unique_field_names(self) -> "ModelInfo":
        names: List[str] = [f.name for f in self.fields]
        if len(names) != len(set(names)):
            dupes: List[str] = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate field names in model '{self.name}': {dupes}")
        return self

    @property
    def storage_name(self) -> str:
        return self.db_name or self.name

    @property
    def relation_fields(self) -> List[FieldInfo]:
        return [f for f in self.fields if f.is_relation]

    @property
    def id_fields(self) -> List[FieldInfo]:
        """Fields forming the primary key, by flag or by model-level key."""
        flagged: List[FieldInfo] = [f for f in self.fields if f.is_id]
        if flagged or self.primary_key is None:
            return flagged
        return [f for name in self.primary_key.fields for f in self.fields if f.name == name]

    def get_field(self, name: str) -> Optional[FieldInfo]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def __repr__(self) -> str:
        return (
            f"<Model {self.name} "
            f"({len(self.fields)} fields, {len(self.relation_fields)} relations)>"
        )


# ---------------------------------------------------------------------------
# Datamodel (top-level container)
# ---------------------------------------------------------------------------


class Datamodel(BaseModel):
    """The root model: every model, enum and index of the source schema."""

    model_config = _SHARED_CONFIG

    models: List[ModelInfo] = Field(default_factory=list)
    enums: List[EnumDefinition] = Field(default_factory=list)
    indexes: List[IndexInfo] = Field(default_factory=list)

    def get_model(self, name: str) -> Optional[ModelInfo]:
        for m in self.models:
            if m.name == name:
                return m
        return None

    def get_enum(self, name: str) -> Optional[EnumDefinition]:
        for e in self.enums:
            if e.name == name:
                return e
        return None

    def __repr__(self) -> str:
        return (
            f"<Datamodel {len(self.models)} models, {len(self.enums)} enums, "
            f"{len(self.indexes)} indexes>"
        )


# ---------------------------------------------------------------------------
# Generation configuration & result
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """Settings for one generation run (read from the schema file or CLI)."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        validate_assignment=True,
        extra="forbid",
    )

    dialect: DatabaseDialect = Field(
        default=DatabaseDialect.POSTGRESQL,
        description="Target database backend.",
    )
    output: str = Field(
        default="./drizzle/schema.ts",
        min_length=1,
        description="Path of the generated schema file.",
    )
    overwrite_existing: bool = Field(
        default=True,
        description="Replace the output file when it already exists.",
    )

    @field_validator("dialect", mode="before")
    @classmethod
    def _normalise_dialect(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _DIALECT_ALIASES.get(v.lower(), v.lower())
        return v


_DIALECT_ALIASES: Dict[str, str] = {
    "pg": "postgresql",
    "postgres": "postgresql",
    "sqlserver": "mssql",
}


class GeneratedFile(BaseModel):
    """The rendered schema source plus a few metrics for reporting."""

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., min_length=1)
    content: str
    line_count: int = Field(default=0, ge=0)
    size_bytes: int = Field(default=0, ge=0)
    checksum: Optional[str] = None

    @model_validator(mode="after")
    def _compute_metrics(self) -> "GeneratedFile":
        self.line_count = self.content.count("\n") + (1 if self.content else 0)
        encoded: bytes = self.content.encode("utf-8")
        self.size_bytes = len(encoded)
        self.checksum = hashlib.sha256(encoded).hexdigest()
        return self


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ScalarType",
    "FieldKind",
    "ReferentialAction",
    "DatabaseDialect",
    "GeneratorDefault",
    "DefaultValue",
    "FieldInfo",
    "PrimaryKeyInfo",
    "UniqueIndexInfo",
    "IndexField",
    "IndexInfo",
    "EnumValue",
    "EnumDefinition",
    "ModelInfo",
    "Datamodel",
    "GenerationConfig",
    "GeneratedFile",
]

logger.debug("drizzlegen.models loaded, %d public symbols.", len(__all__))
