"""
Operator registries shared by every backend.

An operator is a small strategy object keyed by a
:class:`~filter_def.kinds.FilterOperator`.  Each backend defines its own
operator interface (``evaluate`` in memory, ``apply`` for SQLAlchemy) on
top of :class:`Operator`, and a registry subclass of
:class:`OperatorRegistry` to hold them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, ClassVar, Generic, TypeVar

from .kinds import FilterOperator


class Operator:
    """Base of backend operator strategies."""

    #: Registry key of the operator.
    name: ClassVar[FilterOperator]


O = TypeVar("O", bound=Operator)
R = TypeVar("R", bound="OperatorRegistry[Any]")


class OperatorRegistry(Generic[O]):
    """
    Mutable mapping of :class:`FilterOperator` to operator instances.

    Registering an operator under an existing key replaces it, which is
    how built-in behaviour is overridden.
    """

    #: Backend label used in error messages.
    backend: ClassVar[str] = "backend"

    def __init__(self, operators: Iterable[O] = ()) -> None:
        self._operators: dict[FilterOperator, O] = {}
        self.register_all(*operators)

    def register(self, operator: O) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: O) -> None:
        for operator in operators:
            self.register(operator)

    def unregister(self, name: FilterOperator) -> None:
        """Remove an operator; unknown names are ignored."""
        self._operators.pop(name, None)

    def get(self, name: FilterOperator) -> O | None:
        return self._operators.get(name)

    def require(self, name: FilterOperator) -> O:
        """
        Return the operator registered under *name*.

        Raises:
            ValueError: If no operator is registered for *name*.
        """
        try:
            return self._operators[name]
        except KeyError:
            label = getattr(name, "value", name)
            raise ValueError(
                f"Unsupported operator for {self.backend}: {label}"
            ) from None

    def has(self, name: FilterOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators)

    def copy(self: R) -> R:
        """Return an independent registry holding the same operators."""
        clone = type(self)()
        clone._operators.update(self._operators)
        return clone

    def __contains__(self, name: object) -> bool:
        return name in self._operators

    def __iter__(self) -> Iterator[O]:
        return iter(self._operators.values())

    def __len__(self) -> int:
        return len(self._operators)
