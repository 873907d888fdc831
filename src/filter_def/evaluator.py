"""
In-memory operator evaluation.

A :class:`MemoryOperator` compares the value read from an entity with
the value supplied in the filter input.  Operators never raise on data
mismatches; they return ``False``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .kinds import FilterOperator
from .registry import Operator, OperatorRegistry


class MemoryOperator(Operator, ABC):
    """Strategy interface for in-memory operator evaluation."""

    @abstractmethod
    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        """
        Args:
            field_value: The value resolved from the entity (``None`` when
                the field is missing).
            filter_value: The value supplied in the filter input.

        Returns:
            True if the entity passes the filter.
        """
        ...


class MemoryOperatorRegistry(OperatorRegistry[MemoryOperator]):
    """
    Registry of :class:`MemoryOperator` instances.

    Usage::

        registry = MemoryOperatorRegistry([EqualOperator()])
        registry.evaluate(FilterOperator.EQ, "active", "active")  # True
    """

    backend = "in-memory evaluation"

    def evaluate(
        self, name: FilterOperator, field_value: Any, filter_value: Any
    ) -> bool:
        return self.require(name).evaluate(field_value, filter_value)
