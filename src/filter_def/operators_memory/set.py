"""Set operators: inArray."""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..kinds import FilterOperator
from ..utils import contains_strict, require_collection


class InArrayOperator(MemoryOperator):
    """
    Passes when the field value is one of the filter values.

    A filter value that is not a collection is a caller error and raises
    :class:`~filter_def.exceptions.FilterInputError`.
    """

    name = FilterOperator.IN_ARRAY

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return contains_strict(require_collection(filter_value), field_value)
