"""
In-memory filters.

Declare the entity shape once, then a filter definition::

    @dataclass
    class User:
        name: str
        email: str
        age: int

    user_filter = in_memory_filter(User).define(
        {
            "name": eq(),
            "emailContains": contains("email"),
            "olderThan": gt("age"),
        }
    )

The resulting :class:`InMemoryFilter` turns a filter input into a
predicate usable with ``filter()``, ``next()``, ``any()`` and ``all()``::

    where = user_filter({"emailContains": "@example.com", "olderThan": 30})
    adults = [u for u in users if where(u)]
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .ast import FilterField, PrimitiveFilter, parse_filter_def
from .compiler import CompiledFilter, CompileStrategy, compile_filter_def
from .exceptions import UnknownFilterKindError
from .inputs import build_input_model, input_values
from .kinds import FilterKind
from .operators_memory import build_default_registry
from .validation import ensure_valid, field_annotation

if TYPE_CHECKING:
    from pydantic import BaseModel

    from .evaluator import MemoryOperatorRegistry

logger = logging.getLogger("filter_def.memory")

E = TypeVar("E")

#: ``(entity, filter_value) -> bool``
Checker = Callable[[Any, Any], bool]


# ---------------------------------------------------------------------------
# Field access
# ---------------------------------------------------------------------------


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def compile_field_getter(field_path: str) -> Callable[[Any], Any]:
    """
    Build an accessor for a (dot-separated) field path.

    Mappings are read with ``.get()``, other objects with ``getattr``.
    Missing fields and ``None`` intermediates resolve to ``None``.
    """
    parts = tuple(field_path.split("."))
    if len(parts) == 1:
        key = parts[0]
        return lambda entity: _get(entity, key)

    def get_path(entity: Any) -> Any:
        value = entity
        for part in parts:
            if value is None:
                return None
            value = _get(value, part)
        return value

    return get_path


# ---------------------------------------------------------------------------
# Compilation strategy
# ---------------------------------------------------------------------------


class MemoryCompileStrategy(CompileStrategy[Checker]):
    """Builds boolean predicates evaluated against live entities."""

    backend = "memory"

    def __init__(self, registry: MemoryOperatorRegistry) -> None:
        self._registry = registry

    def compile_primitive(self, field: str, filter_field: PrimitiveFilter) -> Checker:
        evaluate = self._registry.require(filter_field.operator).evaluate
        get = compile_field_getter(field)

        def check(entity: Any, filter_value: Any) -> bool:
            return evaluate(get(entity), filter_value)

        return check

    def combine(self, kind: FilterKind, checkers: Sequence[Checker]) -> Checker:
        conditions = tuple(checkers)

        if kind is FilterKind.AND:

            def check_all(entity: Any, filter_value: Any) -> bool:
                return all(c(entity, filter_value) for c in conditions)

            return check_all

        if kind is FilterKind.OR:

            def check_any(entity: Any, filter_value: Any) -> bool:
                return any(c(entity, filter_value) for c in conditions)

            return check_any

        raise UnknownFilterKindError(str(kind), ["and", "or"])

    def compile_custom(self, name: str, func: Callable[..., Any]) -> Checker:
        return func


# ---------------------------------------------------------------------------
# Filter factory
# ---------------------------------------------------------------------------


def _match_all(_entity: Any) -> bool:
    return True


class InMemoryFilter(Generic[E]):
    """
    A compiled in-memory filter definition.

    Calling it with a filter input returns ``(entity) -> bool``.  Every
    filter whose input value is present must pass (AND); filters whose
    value is missing or ``None`` are skipped.  Without any input the
    predicate accepts every entity.
    """

    def __init__(
        self,
        definition: Mapping[str, FilterField],
        compiled: tuple[CompiledFilter[Checker], ...],
        *,
        entity: Any = None,
    ) -> None:
        self._definition = dict(definition)
        self._compiled = compiled
        self._entity = entity

    @property
    def definition(self) -> dict[str, FilterField]:
        """A copy of the parsed filter definition."""
        return dict(self._definition)

    @property
    def filter_names(self) -> tuple[str, ...]:
        return tuple(c.name for c in self._compiled)

    def __call__(self, filter_input: Any = None) -> Callable[[E], bool]:
        if filter_input is None:
            return _match_all

        values = input_values(filter_input)
        active = tuple(
            (c.checker, values[c.name])
            for c in self._compiled
            if values.get(c.name) is not None
        )
        if not active:
            return _match_all

        def predicate(entity: E) -> bool:
            for checker, filter_value in active:
                if not checker(entity, filter_value):
                    return False
            return True

        return predicate

    def input_model(self, model_name: str | None = None) -> type[BaseModel]:
        """
        Build a pydantic model of the accepted filter input.

        Field types follow the entity shape when one was given.
        """
        entity_name = getattr(self._entity, "__name__", "Entity")
        return build_input_model(
            model_name or f"{entity_name}FilterInput",
            self._definition,
            lambda field: field_annotation(self._entity, field),
        )

    def __repr__(self) -> str:
        return f"InMemoryFilter(filters={list(self.filter_names)!r})"


class InMemoryFilterBuilder(Generic[E]):
    """Entry point returned by :func:`in_memory_filter`."""

    def __init__(
        self,
        entity: Any = None,
        *,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self.entity = entity
        self._registry = registry if registry is not None else build_default_registry()

    def define(self, filter_def: Mapping[str, Any]) -> InMemoryFilter[E]:
        """
        Validate and compile a filter definition.

        Raises:
            InvalidFilterDefError: If the definition has any violation.
        """
        ensure_valid(filter_def, self.entity)
        definition = parse_filter_def(filter_def)
        compiled = compile_filter_def(
            definition, MemoryCompileStrategy(self._registry)
        )
        logger.debug(
            "Defined in-memory filter for %s with %d filter(s)",
            getattr(self.entity, "__name__", self.entity),
            len(compiled),
        )
        return InMemoryFilter(definition, compiled, entity=self.entity)


def in_memory_filter(
    entity: Any = None,
    *,
    registry: MemoryOperatorRegistry | None = None,
) -> InMemoryFilterBuilder[Any]:
    """
    Start an in-memory filter definition for an entity shape.

    Args:
        entity: Entity shape used to validate fields and type inputs
            (pydantic model, dataclass, annotated class, ``{name: type}``
            mapping or collection of field names).  ``None`` skips field
            existence checks.
        registry: Operator registry; defaults to a fresh
            :func:`~filter_def.operators_memory.build_default_registry`.
    """
    return InMemoryFilterBuilder(entity, registry=registry)
