"""
Runtime validation of filter definitions.

Filter definitions are checked once, before compilation.  Validation
never raises: :func:`validate_filter_def` returns every problem it finds
as a :class:`FilterViolation`, and :func:`ensure_valid` turns a non-empty
result into an :class:`~filter_def.exceptions.InvalidFilterDefError`.

Entity shapes are introspected with :func:`entity_fields`, which
understands pydantic models, dataclasses, annotated classes
(``TypedDict``, ``NamedTuple``, plain classes) and explicit
``{name: type}`` mappings or collections of field names.
"""

from __future__ import annotations

import dataclasses
import datetime
import decimal
import logging
import types
import typing
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Any

from .ast import (
    BooleanFilter,
    PrimitiveFilter,
    is_boolean_kind,
    is_custom_filter,
    is_primitive_kind,
)
from .exceptions import (
    FieldNotFoundError,
    FilterDefError,
    InvalidFilterDefError,
    UnknownFilterKindError,
)
from .kinds import FilterKind

logger = logging.getLogger("filter_def.validation")

_VALID_KINDS: list[str] = [k.value for k in FilterKind]

_SCALAR_TYPES: frozenset[type] = frozenset(
    {
        str,
        bytes,
        int,
        float,
        bool,
        complex,
        decimal.Decimal,
        datetime.date,
        datetime.datetime,
        datetime.time,
        datetime.timedelta,
    }
)


@dataclass(frozen=True)
class FilterViolation:
    """One problem found in a filter definition."""

    name: str
    reason: str
    path: str | None = None
    error: FilterDefError | None = None

    def __str__(self) -> str:
        where = f"{self.name}.{self.path}" if self.path else self.name
        return f"{where}: {self.reason}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "reason": self.reason,
            "path": self.path,
        }
        if self.error is not None:
            data["details"] = self.error.to_dict()
        return data


# ---------------------------------------------------------------------------
# Entity shape introspection
# ---------------------------------------------------------------------------


def _type_hints(shape: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(shape)
    except (NameError, TypeError):
        # Unresolvable forward references: fall back to the raw annotations.
        return dict(getattr(shape, "__annotations__", {}))


def entity_fields(shape: Any) -> dict[str, Any] | None:
    """
    Return ``{field_name: annotation}`` for an entity shape.

    Returns ``None`` when the shape is unknown, in which case field
    existence cannot be checked.
    """
    if shape is None:
        return None
    if isinstance(shape, Mapping):
        return dict(shape)
    if isinstance(shape, Collection) and not isinstance(shape, str | bytes):
        return {name: Any for name in shape}
    if not isinstance(shape, type) or shape in _SCALAR_TYPES:
        return None

    model_fields = getattr(shape, "model_fields", None)
    if isinstance(model_fields, Mapping):
        return {name: info.annotation for name, info in model_fields.items()}

    if dataclasses.is_dataclass(shape):
        hints = _type_hints(shape)
        return {f.name: hints.get(f.name, Any) for f in dataclasses.fields(shape)}

    hints = _type_hints(shape)
    return hints or None


def unwrap_optional(annotation: Any) -> Any:
    """Strip ``Optional[...]`` / ``X | None`` from an annotation."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def field_annotation(shape: Any, field_path: str) -> Any:
    """
    Return the annotation of a (dotted) field path, or ``Any`` when unknown.
    """
    fields = entity_fields(shape)
    annotation: Any = Any
    for part in field_path.split("."):
        if fields is None or part not in fields:
            return Any
        annotation = fields[part]
        fields = entity_fields(unwrap_optional(annotation))
    return annotation


def _check_field_path(
    name: str,
    field_path: str,
    fields: dict[str, Any],
    model_name: str,
    path: str | None,
) -> FilterViolation | None:
    if field_path in fields:
        return None

    current = fields
    owner = model_name
    parts = field_path.split(".")
    for idx, part in enumerate(parts):
        if part not in current:
            error = FieldNotFoundError(
                part, owner, sorted(current), full_path=field_path
            )
            reason = f"field '{field_path}' does not exist on '{model_name}'"
            if error.suggestions:
                reason += f" (did you mean: {', '.join(error.suggestions)}?)"
            return FilterViolation(name, reason, path, error)

        annotation = unwrap_optional(current[part])
        nested = entity_fields(annotation)
        if nested is None:
            if annotation in _SCALAR_TYPES and idx < len(parts) - 1:
                return FilterViolation(
                    name,
                    f"cannot traverse '{part}' in '{field_path}': "
                    f"it is a {annotation.__name__} field",
                    path,
                )
            return None
        current = nested
        owner = getattr(annotation, "__name__", part)
    return None


# ---------------------------------------------------------------------------
# Definition validation
# ---------------------------------------------------------------------------


def _kind_of(raw: Any) -> Any:
    if isinstance(raw, PrimitiveFilter | BooleanFilter):
        return raw.kind.value if isinstance(raw.kind, FilterKind) else raw.kind
    if isinstance(raw, Mapping):
        return raw.get("kind")
    return None


def _shape_mismatch(raw: Any, kind: Any) -> str | None:
    if isinstance(raw, PrimitiveFilter) and is_boolean_kind(kind):
        return f"'{kind}' must be declared as a BooleanFilter with conditions"
    if isinstance(raw, BooleanFilter) and not is_boolean_kind(kind):
        return f"a BooleanFilter must have kind 'and' or 'or', not '{kind}'"
    return None


def _unknown_kind(name: str, kind: Any, path: str | None) -> FilterViolation:
    if kind is None:
        return FilterViolation(name, "missing 'kind'", path)
    error = UnknownFilterKindError(str(kind), _VALID_KINDS)
    reason = f"unknown kind '{kind}'"
    if error.suggestions:
        reason += f" (did you mean: {', '.join(error.suggestions)}?)"
    return FilterViolation(name, reason, path, error)


def _collect_primitive_errors(
    name: str,
    raw: Any,
    violations: list[FilterViolation],
    *,
    path: str | None,
    require_field: bool,
    fields: dict[str, Any] | None,
    model_name: str,
) -> None:
    kind = _kind_of(raw)
    if isinstance(raw, PrimitiveFilter):
        field_value: Any = raw.field
        case_insensitive = raw.case_insensitive
    else:
        field_value = raw.get("field")
        case_insensitive = raw.get("caseInsensitive", raw.get("case_insensitive"))

    if field_value is None:
        if require_field:
            violations.append(
                FilterViolation(
                    name,
                    "conditions of boolean filters must specify a 'field'",
                    path,
                )
            )
            return
        field_value = name
    elif not isinstance(field_value, str) or not field_value:
        violations.append(
            FilterViolation(name, "'field' must be a non-empty string", path)
        )
        return

    if case_insensitive and kind != FilterKind.CONTAINS:
        violations.append(
            FilterViolation(
                name,
                f"'caseInsensitive' is only supported by 'contains', not '{kind}'",
                path,
            )
        )

    if fields is not None:
        violation = _check_field_path(name, field_value, fields, model_name, path)
        if violation is not None:
            violations.append(violation)


def _collect_boolean_errors(
    name: str,
    raw: Any,
    violations: list[FilterViolation],
    *,
    fields: dict[str, Any] | None,
    model_name: str,
) -> None:
    kind = _kind_of(raw)
    conditions = raw.conditions if isinstance(raw, BooleanFilter) else raw.get(
        "conditions"
    )
    if not isinstance(conditions, list | tuple):
        violations.append(
            FilterViolation(name, f"'{kind}' filter requires a 'conditions' list")
        )
        return
    if not conditions:
        violations.append(
            FilterViolation(name, f"'{kind}' filter requires at least one condition")
        )
        return

    for idx, condition in enumerate(conditions):
        path = f"conditions[{idx}]"
        if not isinstance(condition, PrimitiveFilter | Mapping):
            violations.append(
                FilterViolation(
                    name,
                    f"expected a primitive filter, got {type(condition).__name__}",
                    path,
                )
            )
            continue
        condition_kind = _kind_of(condition)
        if is_boolean_kind(condition_kind):
            violations.append(
                FilterViolation(name, "boolean filters cannot be nested", path)
            )
            continue
        if not is_primitive_kind(condition_kind):
            violations.append(_unknown_kind(name, condition_kind, path))
            continue
        _collect_primitive_errors(
            name,
            condition,
            violations,
            path=path,
            require_field=True,
            fields=fields,
            model_name=model_name,
        )


def validate_filter_def(
    filter_def: Mapping[str, Any],
    entity: Any = None,
    *,
    model_name: str | None = None,
) -> list[FilterViolation]:
    """
    Validate a filter definition and return every violation found.

    Args:
        filter_def: Mapping of filter name to filter field (dataclass,
            dict form, or custom callable).
        entity: Optional entity shape used to check that fields exist.
            See :func:`entity_fields`.
        model_name: Name used in messages; defaults to the shape's name.

    Returns:
        An empty list when the definition is valid.
    """
    violations: list[FilterViolation] = []
    if not isinstance(filter_def, Mapping):
        return [
            FilterViolation(
                "<root>",
                f"expected a mapping of filters, got {type(filter_def).__name__}",
            )
        ]

    fields = entity_fields(entity)
    label = model_name or getattr(entity, "__name__", None) or "entity"

    for name, raw in filter_def.items():
        if not isinstance(name, str) or not name:
            violations.append(
                FilterViolation(str(name), "filter names must be non-empty strings")
            )
            continue
        if is_custom_filter(raw):
            continue
        if not isinstance(raw, PrimitiveFilter | BooleanFilter | Mapping):
            violations.append(
                FilterViolation(
                    name,
                    "expected a filter definition or a callable, "
                    f"got {type(raw).__name__}",
                )
            )
            continue

        kind = _kind_of(raw)
        mismatch = _shape_mismatch(raw, kind)
        if mismatch is not None:
            violations.append(FilterViolation(name, mismatch))
            continue
        if is_boolean_kind(kind):
            _collect_boolean_errors(
                name, raw, violations, fields=fields, model_name=label
            )
        elif is_primitive_kind(kind):
            _collect_primitive_errors(
                name,
                raw,
                violations,
                path=None,
                require_field=False,
                fields=fields,
                model_name=label,
            )
        else:
            violations.append(_unknown_kind(name, kind, None))

    return violations


def ensure_valid(
    filter_def: Mapping[str, Any],
    entity: Any = None,
    *,
    model_name: str | None = None,
) -> None:
    """
    Fail fast when a filter definition has violations.

    Raises:
        InvalidFilterDefError: Listing every violation.
    """
    violations = validate_filter_def(filter_def, entity, model_name=model_name)
    if violations:
        logger.warning(
            "Rejected filter definition with %d violation(s): %s",
            len(violations),
            "; ".join(str(v) for v in violations),
        )
        raise InvalidFilterDefError(violations)
