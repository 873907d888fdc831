"""Null check operators: isNull, isNotNull.

The filter value selects the direction of the check: ``True`` asks for
null (or missing) fields, ``False`` for present ones.
"""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..kinds import FilterOperator


class IsNullOperator(MemoryOperator):
    name = FilterOperator.IS_NULL

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return (field_value is None) is bool(filter_value)


class IsNotNullOperator(MemoryOperator):
    name = FilterOperator.IS_NOT_NULL

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return (field_value is not None) is bool(filter_value)
