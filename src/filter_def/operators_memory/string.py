"""String operators: contains, icontains.

Both sides are compared through their ``str()`` form, so numbers and
other values can be searched too.  A missing or ``None`` field reads as
``"None"``; combine with ``isNotNull`` to exclude such entities.
"""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator
from ..kinds import FilterOperator


class ContainsOperator(MemoryOperator):
    name = FilterOperator.CONTAINS

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return str(filter_value) in str(field_value)


class IContainsOperator(MemoryOperator):
    """Case-insensitive substring match using ``str.casefold``."""

    name = FilterOperator.ICONTAINS

    def evaluate(self, field_value: Any, filter_value: Any) -> bool:
        return str(filter_value).casefold() in str(field_value).casefold()
