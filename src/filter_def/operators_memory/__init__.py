"""
Built-in in-memory operators.

:func:`build_default_registry` returns a fresh registry holding one
instance of every operator below::

    registry = build_default_registry()
    registry.register(MyEqualOperator())  # override a built-in
"""

from __future__ import annotations

from ..evaluator import MemoryOperator, MemoryOperatorRegistry
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

BUILTIN_OPERATORS: tuple[type[MemoryOperator], ...] = (
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


def build_default_registry() -> MemoryOperatorRegistry:
    """Create a registry with every built-in in-memory operator."""
    return MemoryOperatorRegistry(op() for op in BUILTIN_OPERATORS)


__all__ = [
    "BUILTIN_OPERATORS",
    "build_default_registry",
]
