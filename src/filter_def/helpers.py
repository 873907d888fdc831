"""List helpers built on an :class:`~filter_def.memory.InMemoryFilter`."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .memory import InMemoryFilter

E = TypeVar("E")


@dataclass(frozen=True)
class FilterHelpers(Generic[E]):
    """
    ``filter`` / ``find`` / ``find_index`` / ``some`` / ``every`` bound to
    one filter definition.

    Usage::

        helpers = make_filter_helpers(user_filter)
        adults = helpers.filter(users, {"olderThan": 17})
        first_admin = helpers.find(users, {"role": "admin"})
    """

    where: InMemoryFilter[E]

    def filter(self, entities: Iterable[E], filter_input: Any = None) -> list[E]:
        predicate = self.where(filter_input)
        return [entity for entity in entities if predicate(entity)]

    def find(self, entities: Iterable[E], filter_input: Any = None) -> E | None:
        predicate = self.where(filter_input)
        return next((entity for entity in entities if predicate(entity)), None)

    def find_index(self, entities: Iterable[E], filter_input: Any = None) -> int:
        """Index of the first match, or ``-1``."""
        predicate = self.where(filter_input)
        return next(
            (index for index, entity in enumerate(entities) if predicate(entity)), -1
        )

    def some(self, entities: Iterable[E], filter_input: Any = None) -> bool:
        predicate: Callable[[E], bool] = self.where(filter_input)
        return any(predicate(entity) for entity in entities)

    def every(self, entities: Iterable[E], filter_input: Any = None) -> bool:
        """True when every entity matches; vacuously true for no entities."""
        predicate = self.where(filter_input)
        return all(predicate(entity) for entity in entities)


def make_filter_helpers(where: InMemoryFilter[E]) -> FilterHelpers[E]:
    """Create the list helpers for an in-memory filter."""
    return FilterHelpers(where)
