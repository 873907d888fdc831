"""
SQLAlchemy query-condition filters.

The same filter definitions used in memory compile to ``WHERE`` clause
fragments for a table, ORM model, aliased entity or any selectable::

    users = Table("users", metadata, Column("name", String), ...)

    user_filter = sqlalchemy_filter(users).define(
        {
            "name": eq(),
            "emailContains": contains("email", case_insensitive=True),
            "olderThan": gt("age"),
        }
    )

    stmt = user_filter.where(select(users), {"olderThan": 30})

Unlike the in-memory backend, an input that activates no filter yields
``None`` (no condition) rather than an always-true clause.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import and_, or_
from sqlalchemy import inspect as sa_inspect

from ..ast import FilterField, PrimitiveFilter, parse_filter_def
from ..compiler import CompiledFilter, CompileStrategy, compile_filter_def
from ..exceptions import FieldNotFoundError, UnknownFilterKindError
from ..inputs import build_input_model, input_values
from ..kinds import FilterKind
from ..validation import ensure_valid
from .operators import DEFAULT_SQLA_REGISTRY

if TYPE_CHECKING:
    from pydantic import BaseModel
    from sqlalchemy.sql.elements import ColumnElement

    from .strategy import SQLAlchemyOperatorRegistry

logger = logging.getLogger("filter_def.sqlalchemy")

#: ``(filter_value) -> ColumnElement[bool] | None``
ConditionBuilder = Callable[[Any], "ColumnElement[bool] | None"]

S = TypeVar("S")


# ---------------------------------------------------------------------------
# Column resolution
# ---------------------------------------------------------------------------


def descriptor_name(descriptor: Any) -> str:
    """Human readable name of a table, model or selectable."""
    for attr in ("name", "__name__"):
        value = getattr(descriptor, attr, None)
        if isinstance(value, str):
            return value
    return type(descriptor).__name__


def resolve_columns(descriptor: Any) -> dict[str, Any]:
    """
    Return ``{key: column}`` for a table descriptor.

    Tables, aliases, subqueries and other selectables expose their
    columns through ``.c``.  ORM classes and ``aliased()`` entities are
    inspected, yielding instrumented attributes bound to that entity.

    Raises:
        TypeError: If *descriptor* exposes no columns.
    """
    if not isinstance(descriptor, type):
        columns = getattr(descriptor, "c", None)
        if columns is not None and hasattr(columns, "keys"):
            return {key: columns[key] for key in columns.keys()}

    mapper = getattr(sa_inspect(descriptor, raiseerr=False), "mapper", None)
    if mapper is None:
        raise TypeError(
            "Expected a Table, selectable, ORM model or aliased entity, "
            f"got {type(descriptor).__name__}"
        )
    return {attr.key: getattr(descriptor, attr.key) for attr in mapper.column_attrs}


def column_python_type(column: Any) -> Any:
    """The Python type of a column, or ``Any`` when the type has none."""
    try:
        return column.type.python_type
    except (AttributeError, NotImplementedError):
        return Any


# ---------------------------------------------------------------------------
# Compilation strategy
# ---------------------------------------------------------------------------


class SQLAlchemyCompileStrategy(CompileStrategy[ConditionBuilder]):
    """Builds condition builders producing ``ColumnElement[bool]`` fragments."""

    backend = "sqlalchemy"

    def __init__(
        self,
        descriptor: Any,
        columns: Mapping[str, Any],
        registry: SQLAlchemyOperatorRegistry,
    ) -> None:
        self._descriptor = descriptor
        self._columns = columns
        self._registry = registry

    def compile_primitive(
        self, field: str, filter_field: PrimitiveFilter
    ) -> ConditionBuilder:
        column = self._columns.get(field)
        if column is None:
            raise FieldNotFoundError(
                field, descriptor_name(self._descriptor), sorted(self._columns)
            )
        apply = self._registry.require(filter_field.operator).apply
        return lambda value: apply(column, value)

    def combine(
        self, kind: FilterKind, checkers: Sequence[ConditionBuilder]
    ) -> ConditionBuilder:
        join: Callable[..., ColumnElement[bool]]
        if kind is FilterKind.AND:
            join = and_
        elif kind is FilterKind.OR:
            join = or_
        else:
            raise UnknownFilterKindError(str(kind), ["and", "or"])
        builders = tuple(checkers)

        def build(value: Any) -> ColumnElement[bool] | None:
            fragments = [f for b in builders if (f := b(value)) is not None]
            if not fragments:
                return None
            if len(fragments) == 1:
                return fragments[0]
            return join(*fragments)

        return build

    def compile_custom(self, name: str, func: Callable[..., Any]) -> ConditionBuilder:
        descriptor = self._descriptor
        return lambda value: func(descriptor, value)


# ---------------------------------------------------------------------------
# Filter factory
# ---------------------------------------------------------------------------


class SQLAlchemyFilter:
    """
    A compiled SQLAlchemy filter definition.

    Calling it with a filter input returns the combined ``WHERE``
    condition, or ``None`` when no filter is active.
    """

    def __init__(
        self,
        descriptor: Any,
        definition: Mapping[str, FilterField],
        compiled: tuple[CompiledFilter[ConditionBuilder], ...],
        columns: Mapping[str, Any],
    ) -> None:
        self.descriptor = descriptor
        self._definition = dict(definition)
        self._compiled = compiled
        self._columns = dict(columns)

    @property
    def definition(self) -> dict[str, FilterField]:
        return dict(self._definition)

    @property
    def filter_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self._compiled)

    def __call__(self, filter_input: Any = None) -> ColumnElement[bool] | None:
        if filter_input is None:
            return None

        values = input_values(filter_input)
        fragments: list[ColumnElement[bool]] = []
        for compiled in self._compiled:
            value = values.get(compiled.name)
            if value is None:
                continue
            fragment = compiled.checker(value)
            if fragment is not None:
                fragments.append(fragment)

        if not fragments:
            return None
        if len(fragments) == 1:
            return fragments[0]
        return and_(*fragments)

    def where(self, stmt: S, filter_input: Any = None) -> S:
        """Apply the condition to a statement; unchanged when there is none."""
        condition = self(filter_input)
        if condition is None:
            return stmt
        return stmt.where(condition)  # type: ignore[attr-defined,no-any-return]

    def input_model(self, model_name: str | None = None) -> type[BaseModel]:
        """Build a pydantic model of the accepted filter input from column types."""
        columns = self._columns
        return build_input_model(
            model_name or f"{descriptor_name(self.descriptor)}FilterInput",
            self._definition,
            lambda field: column_python_type(columns[field])
            if field in columns
            else Any,
        )

    def __repr__(self) -> str:
        return (
            f"SQLAlchemyFilter(table={descriptor_name(self.descriptor)!r}, "
            f"filters={list(self.filter_names)!r})"
        )


class SQLAlchemyFilterBuilder:
    """Entry point returned by :func:`sqlalchemy_filter`."""

    def __init__(
        self,
        descriptor: Any,
        *,
        registry: SQLAlchemyOperatorRegistry | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.columns = resolve_columns(descriptor)
        self._registry = registry if registry is not None else DEFAULT_SQLA_REGISTRY

    def define(self, filter_def: Mapping[str, Any]) -> SQLAlchemyFilter:
        """
        Validate and compile a filter definition against the descriptor's columns.

        Raises:
            InvalidFilterDefError: If the definition has any violation.
            FieldNotFoundError: If a field does not name a column.
        """
        name = descriptor_name(self.descriptor)
        shape = {key: column_python_type(col) for key, col in self.columns.items()}
        ensure_valid(filter_def, shape, model_name=name)
        definition = parse_filter_def(filter_def)
        compiled = compile_filter_def(
            definition,
            SQLAlchemyCompileStrategy(self.descriptor, self.columns, self._registry),
        )
        logger.debug(
            "Defined SQLAlchemy filter for %s with %d filter(s)", name, len(compiled)
        )
        return SQLAlchemyFilter(self.descriptor, definition, compiled, self.columns)


def sqlalchemy_filter(
    descriptor: Any,
    *,
    registry: SQLAlchemyOperatorRegistry | None = None,
) -> SQLAlchemyFilterBuilder:
    """
    Start a SQLAlchemy filter definition for a table descriptor.

    Args:
        descriptor: A ``Table``, ORM model class, ``aliased()`` entity or
            any selectable exposing ``.c``.
        registry: Operator registry; defaults to ``DEFAULT_SQLA_REGISTRY``.
    """
    return SQLAlchemyFilterBuilder(descriptor, registry=registry)
