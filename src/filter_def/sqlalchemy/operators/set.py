"""Membership operator rendered as ``IN``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from ...kinds import FilterOperator
from ...utils import require_collection
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


class InArrayOperator(SQLAlchemyOperator):
    name = FilterOperator.IN_ARRAY

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        values = list(require_collection(value))
        return cast("ColumnElement[bool]", column.in_(values))
