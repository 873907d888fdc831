"""
Compile a filter definition into an ordered list of checkers.

The walk over the definition is shared by every backend; what a
"checker" is depends on the :class:`CompileStrategy`:

- the in-memory strategy builds ``(entity, value) -> bool`` predicates,
- the SQLAlchemy strategy builds ``(value) -> ColumnElement[bool] | None``
  condition builders.

Field references are resolved once, here, at definition time.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .ast import (
    BooleanFilter,
    FilterField,
    PrimitiveFilter,
    is_custom_filter,
    resolve_field,
)
from .exceptions import UnknownFilterKindError
from .kinds import FilterKind

logger = logging.getLogger("filter_def.compiler")

C = TypeVar("C")


@dataclass(frozen=True)
class CompiledFilter(Generic[C]):
    """A filter name paired with its pre-compiled checker."""

    name: str
    checker: C


class CompileStrategy(ABC, Generic[C]):
    """
    Backend-specific checker construction.

    Each backend implements the three ways a filter field can compile:
    a primitive comparison, a boolean combination of primitive checkers,
    and a custom callable.
    """

    #: Short backend name used in log messages.
    backend: str = "unknown"

    @abstractmethod
    def compile_primitive(self, field: str, filter_field: PrimitiveFilter) -> C:
        """Build the checker of a primitive filter against *field*."""
        ...

    @abstractmethod
    def combine(self, kind: FilterKind, checkers: Sequence[C]) -> C:
        """Combine condition checkers of a boolean group (AND / OR)."""
        ...

    @abstractmethod
    def compile_custom(self, name: str, func: Callable[..., Any]) -> C:
        """Wrap a custom filter callable as a checker."""
        ...


def compile_filter_field(
    name: str,
    filter_field: FilterField,
    strategy: CompileStrategy[C],
) -> C:
    """Compile a single (already parsed) filter field."""
    if isinstance(filter_field, BooleanFilter):
        # Conditions of a group never fall back to the filter name.
        checkers = [
            strategy.compile_primitive(resolve_field(name, c), c)
            for c in filter_field.conditions
        ]
        return strategy.combine(filter_field.kind, checkers)

    if isinstance(filter_field, PrimitiveFilter):
        return strategy.compile_primitive(
            resolve_field(name, filter_field), filter_field
        )

    if is_custom_filter(filter_field):
        return strategy.compile_custom(name, filter_field)

    raise UnknownFilterKindError(
        str(getattr(filter_field, "kind", filter_field)),
        [k.value for k in FilterKind],
    )


def compile_filter_def(
    filter_def: Mapping[str, FilterField],
    strategy: CompileStrategy[C],
) -> tuple[CompiledFilter[C], ...]:
    """
    Pre-compile every filter of a definition, in insertion order.

    Compilation is pure: the same definition and strategy always yield
    equivalent checkers, and nothing is mutated.
    """
    compiled = tuple(
        CompiledFilter(name, compile_filter_field(name, field, strategy))
        for name, field in filter_def.items()
    )
    logger.debug(
        "Compiled %d filter(s) for %s backend: %s",
        len(compiled),
        strategy.backend,
        ", ".join(c.name for c in compiled),
    )
    return compiled
