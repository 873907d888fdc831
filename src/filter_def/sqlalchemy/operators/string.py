"""Substring operators rendered as ``LIKE``.

Wildcards in the input are escaped, so ``%`` and ``_`` match literally
as they do in memory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from ...kinds import FilterOperator
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class ContainsOperator(SQLAlchemyOperator):
    name = FilterOperator.CONTAINS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", column.contains(str(value), autoescape=True))


class IContainsOperator(SQLAlchemyOperator):
    """``lower(column) LIKE lower(pattern)``."""

    name = FilterOperator.ICONTAINS

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast(
            "ColumnElement[bool]", column.icontains(str(value), autoescape=True)
        )
