"""Null checks rendered as ``IS NULL`` / ``IS NOT NULL``, chosen by the flag."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from ...kinds import FilterOperator
from ..strategy import SQLAlchemyOperator

if TYPE_CHECKING:
    from sqlalchemy.sql.elements import ColumnElement


def _null_check(column: Any, want_null: bool) -> ColumnElement[bool]:
    if want_null:
        return cast("ColumnElement[bool]", column.is_(None))
    return cast("ColumnElement[bool]", column.is_not(None))


class IsNullOperator(SQLAlchemyOperator):
    name = FilterOperator.IS_NULL

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return _null_check(column, bool(value))


class IsNotNullOperator(SQLAlchemyOperator):
    name = FilterOperator.IS_NOT_NULL

    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        return _null_check(column, not value)
