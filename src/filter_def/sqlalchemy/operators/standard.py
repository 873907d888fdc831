"""Comparison operators rendered as native SQL comparisons."""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, ClassVar, cast

from ...kinds import FilterOperator
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class _ComparisonOperator(SQLAlchemyOperator):
    compare: ClassVar[Callable[[Any, Any], Any]]

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return cast("ColumnElement[bool]", self.compare(column, value))


class EqualOperator(_ComparisonOperator):
    name = FilterOperator.EQ
    compare = staticmethod(operator.eq)


class NotEqualOperator(_ComparisonOperator):
    name = FilterOperator.NEQ
    compare = staticmethod(operator.ne)


class GreaterThanOperator(_ComparisonOperator):
    name = FilterOperator.GT
    compare = staticmethod(operator.gt)


class GreaterEqualOperator(_ComparisonOperator):
    name = FilterOperator.GTE
    compare = staticmethod(operator.ge)


class LessThanOperator(_ComparisonOperator):
    name = FilterOperator.LT
    compare = staticmethod(operator.lt)


class LessEqualOperator(_ComparisonOperator):
    name = FilterOperator.LTE
    compare = staticmethod(operator.le)
