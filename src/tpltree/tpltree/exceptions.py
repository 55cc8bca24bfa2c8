"""tpltree exceptions

Structural failures of a template or data record. Validation failures from
``check`` callables are not exceptions; they are counted by check_render().
"""

from __future__ import annotations

from typing import Any


class TplTreeError(Exception):
    """Base exception for all tpltree errors."""

    pass


class TemplateStructureError(TplTreeError):
    """Raised when a template tree is malformed in a way no other error covers."""

    pass


class ContradictoryType(TplTreeError):
    """Raised when one field name is declared with two different types."""

    def __init__(self, field: str, type_a: str, type_b: str):
        self.field = field
        self.type_a = type_a
        self.type_b = type_b
        super().__init__(f"Contradictory types for '{field}': {type_a} and {type_b}")


class MissingContent(TplTreeError):
    """Raised when an array/object/if/unless expression has no content tree."""

    def __init__(self, key: Any, kind: str):
        self.key = key
        self.kind = kind
        super().__init__(f"No 'content' provided for {kind} '{key}'")


class UnknownKind(TplTreeError):
    """Raised when an expression kind is not in the registry."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__(f"Unknown expression type: {kind}")


class InvalidDataKey(TplTreeError):
    """Raised when a data key is neither a field name nor a loop marker."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Data key must be a field name or loop marker, but was: {key!r}")


class MissingData(TplTreeError):
    """Raised when an expression resolves to no value and has no default."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"No data supplied for: {key}")
