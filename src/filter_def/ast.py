"""
Filter field definitions.

A filter definition maps a filter name to one of:

- a :class:`PrimitiveFilter` (``eq``, ``contains``, ``gt``, ...),
- a :class:`BooleanFilter` grouping primitive conditions with AND / OR,
- a custom callable, used verbatim by the backend.

Definitions can be written with the helper constructors::

    user_filters = {
        "name": eq(),
        "olderThan": gt("age"),
        "search": or_(contains("name", case_insensitive=True), contains("email")),
    }

or in the equivalent dict form::

    user_filters = {
        "name": {"kind": "eq"},
        "olderThan": {"kind": "gt", "field": "age"},
    }
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from .kinds import BOOLEAN_KINDS, PRIMITIVE_KINDS, FilterKind, FilterOperator

_KIND_VALUES: dict[str, FilterKind] = {k.value: k for k in FilterKind}


def _coerce_kind(kind: Any) -> Any:
    """Map a kind string to :class:`FilterKind`, leaving unknown values as-is."""
    if isinstance(kind, FilterKind):
        return kind
    if isinstance(kind, str) and kind in _KIND_VALUES:
        return _KIND_VALUES[kind]
    return kind


@dataclass(frozen=True)
class PrimitiveFilter:
    """
    A single comparison against one entity field.

    When ``field`` is ``None`` the filter name is used as the field name.
    ``case_insensitive`` only applies to ``contains``.
    """

    kind: FilterKind
    field: str | None = None
    case_insensitive: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _coerce_kind(self.kind))

    @property
    def operator(self) -> FilterOperator:
        """The backend operator key this filter compiles to."""
        if self.kind is FilterKind.CONTAINS and self.case_insensitive:
            return FilterOperator.ICONTAINS
        return FilterOperator(FilterKind(self.kind).value)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": _kind_value(self.kind)}
        if self.field is not None:
            data["field"] = self.field
        if self.case_insensitive:
            data["caseInsensitive"] = True
        return data


@dataclass(frozen=True)
class BooleanFilter:
    """
    An AND / OR group of primitive conditions.

    The single input value of the group is broadcast to every condition.
    Each condition must name its field explicitly.
    """

    kind: FilterKind
    conditions: tuple[PrimitiveFilter, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", _coerce_kind(self.kind))
        if not isinstance(self.conditions, tuple):
            object.__setattr__(self, "conditions", tuple(self.conditions))

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": _kind_value(self.kind),
            "conditions": [c.to_dict() for c in self.conditions],
        }


CustomFilter = Callable[..., Any]
FilterField = Union[PrimitiveFilter, BooleanFilter, CustomFilter]


def _kind_value(kind: Any) -> Any:
    return kind.value if isinstance(kind, FilterKind) else kind


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def eq(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.EQ, field)


def neq(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.NEQ, field)


def contains(
    field: str | None = None, *, case_insensitive: bool = False
) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.CONTAINS, field, case_insensitive)


def in_array(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.IN_ARRAY, field)


def is_null(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.IS_NULL, field)


def is_not_null(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.IS_NOT_NULL, field)


def gt(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.GT, field)


def gte(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.GTE, field)


def lt(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.LT, field)


def lte(field: str | None = None) -> PrimitiveFilter:
    return PrimitiveFilter(FilterKind.LTE, field)


def and_(*conditions: PrimitiveFilter) -> BooleanFilter:
    return BooleanFilter(FilterKind.AND, conditions)


def or_(*conditions: PrimitiveFilter) -> BooleanFilter:
    return BooleanFilter(FilterKind.OR, conditions)


# ---------------------------------------------------------------------------
# Classification / parsing
# ---------------------------------------------------------------------------


def is_custom_filter(filter_field: Any) -> bool:
    """True for callables that are not filter dataclasses or dicts."""
    return callable(filter_field) and not isinstance(
        filter_field, PrimitiveFilter | BooleanFilter | Mapping | type
    )


def is_boolean_kind(kind: Any) -> bool:
    return _coerce_kind(kind) in BOOLEAN_KINDS


def is_primitive_kind(kind: Any) -> bool:
    return _coerce_kind(kind) in PRIMITIVE_KINDS


def resolve_field(name: str, filter_field: PrimitiveFilter) -> str:
    """Return the explicit field, falling back to the filter name."""
    return filter_field.field if filter_field.field is not None else name


def _parse_primitive(raw: Mapping[str, Any]) -> PrimitiveFilter:
    case_insensitive = raw.get("caseInsensitive", raw.get("case_insensitive", False))
    return PrimitiveFilter(
        kind=raw["kind"],
        field=raw.get("field"),
        case_insensitive=bool(case_insensitive),
    )


def parse_filter_field(raw: Any) -> FilterField:
    """
    Normalise a filter field to its dataclass (or custom callable) form.

    Expects a definition that already passed
    :func:`~filter_def.validation.validate_filter_def`.

    Raises:
        TypeError: If *raw* is not a recognised filter field shape.
    """
    if isinstance(raw, PrimitiveFilter | BooleanFilter):
        return raw
    if is_custom_filter(raw):
        return raw  # type: ignore[no-any-return]
    if isinstance(raw, Mapping):
        if is_boolean_kind(raw.get("kind")):
            return BooleanFilter(
                kind=raw["kind"],
                conditions=tuple(
                    c if isinstance(c, PrimitiveFilter) else _parse_primitive(c)
                    for c in raw.get("conditions", ())
                ),
            )
        return _parse_primitive(raw)
    raise TypeError(f"Unsupported filter field: {raw!r}")


def parse_filter_def(raw: Mapping[str, Any]) -> dict[str, FilterField]:
    """Parse every field of a filter definition, preserving insertion order."""
    return {name: parse_filter_field(value) for name, value in raw.items()}
