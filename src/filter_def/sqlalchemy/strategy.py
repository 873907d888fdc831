"""
SQLAlchemy operator strategies.

A :class:`SQLAlchemyOperator` turns a column and a filter input value
into a ``ColumnElement[bool]`` fragment.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..registry import Operator, OperatorRegistry

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from ..kinds import FilterOperator


class SQLAlchemyOperator(Operator, ABC):
    """Strategy interface for compiling an operator into a SQL condition."""

    @abstractmethod
    def apply(self, column: Any, value: Any) -> ColumnElement[bool]:
        """
        Args:
            column: A ``Column``, selectable column or instrumented attribute.
            value: The filter input value.
        """
        ...


class SQLAlchemyOperatorRegistry(OperatorRegistry[SQLAlchemyOperator]):
    """Registry of :class:`SQLAlchemyOperator` instances."""

    backend = "SQLAlchemy"

    def apply(
        self, name: FilterOperator, column: Any, value: Any
    ) -> ColumnElement[bool]:
        return self.require(name).apply(column, value)
