"""Standard comparison operators: eq, neq, gt, gte, lt, lte."""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any, ClassVar

from ..evaluator import MemoryOperator
from ..kinds import FilterOperator
from ..utils import strict_equals, to_number


class EqualOperator(MemoryOperator):
    name = FilterOperator.EQ

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return strict_equals(field_value, filter_value)


class NotEqualOperator(MemoryOperator):
    name = FilterOperator.NEQ

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return not strict_equals(field_value, filter_value)


class _OrderingOperator(MemoryOperator):
    """
    Compares numeric coercions of both values.

    NaN never compares true, so values without a numeric form are
    rejected instead of raising.
    """

    compare: ClassVar[Callable[[float, float], bool]]

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return self.compare(to_number(field_value), to_number(filter_value))


class GreaterThanOperator(_OrderingOperator):
    name = FilterOperator.GT
    compare = staticmethod(operator.gt)


class GreaterEqualOperator(_OrderingOperator):
    name = FilterOperator.GTE
    compare = staticmethod(operator.ge)


class LessThanOperator(_OrderingOperator):
    name = FilterOperator.LT
    compare = staticmethod(operator.lt)


class LessEqualOperator(_OrderingOperator):
    name = FilterOperator.LTE
    compare = staticmethod(operator.le)
