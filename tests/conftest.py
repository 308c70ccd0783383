"""
tests/conftest.py
Shared fixtures for the drizzlegen test suite.

Model fixtures are plain DMMF-shaped dictionaries (camelCase keys, the same
shape ``prisma generate`` hands to a generator) so the tests exercise the
Pydantic aliasing as well.  ``build_datamodel`` turns them into a validated
``Datamodel``.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional

import pytest

from drizzlegen.models import Datamodel


# ---------------------------------------------------------------------------
# DMMF builders
# ---------------------------------------------------------------------------


def dmmf_field(name: str, type_: str, kind: str = "scalar", **overrides: Any) -> Dict[str, Any]:
    """A DMMF field dict with the flags Prisma always sets."""
    field: Dict[str, Any] = {
        "name": name,
        "kind": kind,
        "isList": False,
        "isRequired": True,
        "isUnique": False,
        "isId": False,
        "isReadOnly": False,
        "hasDefaultValue": False,
        "type": type_,
        "isGenerated": False,
        "isUpdatedAt": False,
    }
    field.update(overrides)
    return field


def autoincrement_id(name: str = "id") -> Dict[str, Any]:
    return dmmf_field(
        name,
        "Int",
        isId=True,
        hasDefaultValue=True,
        default={"name": "autoincrement", "args": []},
    )


def dmmf_model(name: str, fields: List[Dict[str, Any]], **overrides: Any) -> Dict[str, Any]:
    model: Dict[str, Any] = {
        "name": name,
        "dbName": None,
        "fields": fields,
        "primaryKey": None,
        "uniqueFields": [],
        "uniqueIndexes": [],
        "isGenerated": False,
    }
    model.update(overrides)
    return model


def with_field(model: Dict[str, Any], name: str, **overrides: Any) -> Dict[str, Any]:
    """Copy of *model* with the field called *name* updated."""
    result: Dict[str, Any] = copy.deepcopy(model)
    for field in result["fields"]:
        if field["name"] == name:
            field.update(overrides)
    return result


# ---------------------------------------------------------------------------
# Model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def simple_user_model() -> Dict[str, Any]:
    """User with an autoincrement id, a unique email and a createdAt timestamp."""
    return dmmf_model(
        "User",
        [
            autoincrement_id(),
            dmmf_field("email", "String", isUnique=True),
            dmmf_field("name", "String", isRequired=False),
            dmmf_field(
                "createdAt",
                "DateTime",
                hasDefaultValue=True,
                default={"name": "now", "args": []},
            ),
        ],
    )


@pytest.fixture()
def post_model() -> Dict[str, Any]:
    """Post owning a many-to-one relation to User via userId."""
    return dmmf_model(
        "Post",
        [
            autoincrement_id(),
            dmmf_field("title", "String"),
            dmmf_field("userId", "Int", isReadOnly=True),
            dmmf_field(
                "user",
                "User",
                kind="object",
                relationName="PostToUser",
                relationFromFields=["userId"],
                relationToFields=["id"],
            ),
        ],
    )


@pytest.fixture()
def user_model_with_posts(simple_user_model: Dict[str, Any]) -> Dict[str, Any]:
    model: Dict[str, Any] = copy.deepcopy(simple_user_model)
    model["fields"].append(
        dmmf_field(
            "posts",
            "Post",
            kind="object",
            isList=True,
            relationName="PostToUser",
            relationFromFields=[],
            relationToFields=[],
        )
    )
    return model


@pytest.fixture()
def user_role_model() -> Dict[str, Any]:
    """Composite primary key over (userId, roleId)."""
    return dmmf_model(
        "UserRole",
        [
            dmmf_field("userId", "Int"),
            dmmf_field("roleId", "Int"),
            dmmf_field(
                "assignedAt",
                "DateTime",
                hasDefaultValue=True,
                default={"name": "now", "args": []},
            ),
        ],
        primaryKey={"name": None, "fields": ["userId", "roleId"]},
    )


@pytest.fixture()
def product_model() -> Dict[str, Any]:
    return dmmf_model(
        "Product",
        [
            autoincrement_id(),
            dmmf_field("sku", "String"),
            dmmf_field("name", "String"),
        ],
        uniqueIndexes=[{"name": "Product_sku_key", "fields": ["sku"]}],
    )


@pytest.fixture()
def role_enum() -> Dict[str, Any]:
    return {
        "name": "Role",
        "values": [
            {"name": "USER", "dbName": None},
            {"name": "ADMIN", "dbName": None},
            {"name": "MODERATOR", "dbName": None},
        ],
        "dbName": None,
    }


@pytest.fixture()
def user_with_role_model() -> Dict[str, Any]:
    return dmmf_model(
        "User",
        [
            autoincrement_id(),
            dmmf_field("email", "String", isUnique=True),
            dmmf_field("role", "Role", kind="enum", hasDefaultValue=True, default="USER"),
        ],
    )


@pytest.fixture()
def all_types_model() -> Dict[str, Any]:
    """One required column per scalar type except Bytes."""
    return dmmf_model(
        "AllTypes",
        [
            autoincrement_id(),
            dmmf_field("bigIntField", "BigInt"),
            dmmf_field("boolField", "Boolean"),
            dmmf_field("dateField", "DateTime"),
            dmmf_field("decimalField", "Decimal"),
            dmmf_field("floatField", "Float"),
            dmmf_field("jsonField", "Json"),
            dmmf_field("stringField", "String"),
        ],
    )


@pytest.fixture()
def post_tag_models() -> List[Dict[str, Any]]:
    """Implicit many-to-many between Post and Tag."""
    post: Dict[str, Any] = dmmf_model(
        "Post",
        [
            autoincrement_id(),
            dmmf_field("title", "String"),
            dmmf_field(
                "tags",
                "Tag",
                kind="object",
                isList=True,
                relationName="PostToTag",
                relationFromFields=[],
                relationToFields=[],
            ),
        ],
    )
    tag: Dict[str, Any] = dmmf_model(
        "Tag",
        [
            autoincrement_id(),
            dmmf_field("label", "String", isUnique=True),
            dmmf_field(
                "posts",
                "Post",
                kind="object",
                isList=True,
                relationName="PostToTag",
                relationFromFields=[],
                relationToFields=[],
            ),
        ],
    )
    return [post, tag]


# ---------------------------------------------------------------------------
# Datamodel factory
# ---------------------------------------------------------------------------


@pytest.fixture()
def build_datamodel() -> Callable[..., Datamodel]:
    """Return a factory building a validated ``Datamodel`` from DMMF dicts."""

    def _build(
        models: List[Dict[str, Any]],
        enums: Optional[List[Dict[str, Any]]] = None,
        indexes: Optional[List[Dict[str, Any]]] = None,
    ) -> Datamodel:
        return Datamodel.model_validate(
            {
                "models": copy.deepcopy(models),
                "enums": copy.deepcopy(enums or []),
                "types": [],
                "indexes": copy.deepcopy(indexes or []),
            }
        )

    return _build
