# File: drizzlegen/errors.py
"""
drizzlegen - Generator Errors
==============================
Typed exceptions raised by the translation engine.  A generation run never
returns partial output: the first error aborts the run and propagates to the
caller (the CLI maps it to an exit code).
"""

from __future__ import annotations

from typing import List, Optional


class GeneratorError(Exception):
    """Base class for every error raised while generating a schema."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __str__(self) -> str:
        return self.message


class UnsupportedConstructError(GeneratorError):
    """A column type or default has no valid representation on the dialect."""

    def __init__(
        self,
        message: str,
        *,
        dialect: Optional[str] = None,
        construct: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.dialect: Optional[str] = dialect
        self.construct: Optional[str] = construct


class MalformedRelationError(GeneratorError):
    """Relation metadata carries a value outside the known enumeration."""

    def __init__(
        self,
        message: str,
        *,
        relation: Optional[str] = None,
        action: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.relation: Optional[str] = relation
        self.action: Optional[str] = action


__all__: List[str] = [
    "GeneratorError",
    "UnsupportedConstructError",
    "MalformedRelationError",
]
