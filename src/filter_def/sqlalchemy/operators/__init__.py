"""
Built-in SQLAlchemy operators.

``DEFAULT_SQLA_REGISTRY`` is shared by every filter that does not pass
its own registry.  Use :func:`build_default_sqla_registry` (or
``DEFAULT_SQLA_REGISTRY.copy()``) to customise operators without
affecting other filters.
"""

from __future__ import annotations

from ..strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry
from .null import IsNotNullOperator, IsNullOperator
from .set import InArrayOperator
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
)
from .string import ContainsOperator, IContainsOperator

BUILTIN_SQLA_OPERATORS: tuple[type[SQLAlchemyOperator], ...] = (
    EqualOperator,
    NotEqualOperator,
    GreaterThanOperator,
    GreaterEqualOperator,
    LessThanOperator,
    LessEqualOperator,
    InArrayOperator,
    ContainsOperator,
    IContainsOperator,
    IsNullOperator,
    IsNotNullOperator,
)


def build_default_sqla_registry() -> SQLAlchemyOperatorRegistry:
    """Create a registry with every built-in SQLAlchemy operator."""
    return SQLAlchemyOperatorRegistry(op() for op in BUILTIN_SQLA_OPERATORS)


DEFAULT_SQLA_REGISTRY: SQLAlchemyOperatorRegistry = build_default_sqla_registry()

__all__ = [
    "BUILTIN_SQLA_OPERATORS",
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
]
