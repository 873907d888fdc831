"""
Filter input typing.

Each filter kind expects a specific input type:

========================  =====================================
kind                      input
========================  =====================================
eq, neq, gt, gte, lt, lte the target field's type
contains                  ``str``
inArray                   ``list[<field type>]``
isNull, isNotNull         ``bool``
and, or                   the input of the first condition
custom                    annotation of the second parameter
========================  =====================================

:func:`build_input_model` turns a filter definition into a pydantic
model with one optional field per filter, and :func:`input_values`
reads filter values back out of a mapping or such a model.
"""

from __future__ import annotations

import inspect
import keyword
import typing
from collections.abc import Callable, Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, create_model

from .ast import BooleanFilter, FilterField, PrimitiveFilter, resolve_field
from .exceptions import FilterInputError, UnknownFilterKindError
from .kinds import FilterKind
from .validation import unwrap_optional

FieldTypeResolver = Callable[[str], Any]


def custom_input_type(func: Callable[..., Any]) -> Any:
    """Return the annotation of a custom filter's input parameter."""
    try:
        params = list(inspect.signature(func).parameters.values())
    except (TypeError, ValueError):
        return Any
    if len(params) < 2:
        return Any

    param = params[1]
    annotation = param.annotation
    if annotation is inspect.Parameter.empty:
        return Any
    if isinstance(annotation, str):
        try:
            annotation = typing.get_type_hints(func).get(param.name, Any)
        except (NameError, TypeError):
            return Any
    return annotation


def _primitive_input_type(
    name: str, filter_field: PrimitiveFilter, field_type: FieldTypeResolver
) -> Any:
    kind = filter_field.kind
    target = unwrap_optional(field_type(resolve_field(name, filter_field)))

    if kind in (FilterKind.EQ, FilterKind.NEQ):
        return target
    if kind in (FilterKind.GT, FilterKind.GTE, FilterKind.LT, FilterKind.LTE):
        return target
    if kind is FilterKind.CONTAINS:
        return str
    if kind is FilterKind.IN_ARRAY:
        return list[target]  # type: ignore[valid-type]
    if kind in (FilterKind.IS_NULL, FilterKind.IS_NOT_NULL):
        return bool
    raise UnknownFilterKindError(str(kind), [k.value for k in FilterKind])


def input_type_for(
    name: str, filter_field: FilterField, field_type: FieldTypeResolver
) -> Any:
    """Return the expected input type of one filter field."""
    if isinstance(filter_field, BooleanFilter):
        # The single input is broadcast to every condition.
        first = filter_field.conditions[0]
        return _primitive_input_type(name, first, field_type)
    if isinstance(filter_field, PrimitiveFilter):
        return _primitive_input_type(name, filter_field, field_type)
    return custom_input_type(filter_field)


def _is_attribute_name(name: str) -> bool:
    return (
        name.isidentifier()
        and not name.startswith(("_", "model_"))
        and not keyword.iskeyword(name)
        and not hasattr(BaseModel, name)
    )


def _model_field_names(names: list[str]) -> dict[str, str]:
    """Map filter names to model attribute names, unique within the model."""
    taken = {name for name in names if _is_attribute_name(name)}
    result: dict[str, str] = {}
    for index, name in enumerate(names):
        if _is_attribute_name(name):
            result[name] = name
            continue
        candidate = f"filter_{index}"
        while candidate in taken:
            candidate += "_"
        taken.add(candidate)
        result[name] = candidate
    return result


def build_input_model(
    model_name: str,
    filter_def: Mapping[str, FilterField],
    field_type: FieldTypeResolver,
) -> type[BaseModel]:
    """
    Build a pydantic model describing the input of a filter definition.

    Every field is optional and defaults to ``None`` (filter disabled).
    Filter names that cannot be attribute names (not identifiers, or
    clashing with ``BaseModel`` members) get a generated attribute and
    are exposed through their alias.
    """
    attribute_names = _model_field_names(list(filter_def))
    fields: dict[str, Any] = {}
    for name, filter_field in filter_def.items():
        annotation = input_type_for(name, filter_field, field_type)
        fields[attribute_names[name]] = (
            Optional[annotation],  # noqa: UP045
            Field(default=None, alias=name),
        )
    return create_model(  # type: ignore[call-overload,no-any-return]
        model_name,
        __config__=ConfigDict(populate_by_name=True, arbitrary_types_allowed=True),
        **fields,
    )


def input_values(filter_input: Any) -> Mapping[str, Any]:
    """
    Return filter input values keyed by filter name.

    Accepts a mapping or a pydantic model instance (for example one built
    from :func:`build_input_model`).

    Raises:
        FilterInputError: For any other input type.
    """
    if isinstance(filter_input, Mapping):
        return filter_input
    if isinstance(filter_input, BaseModel):
        return {
            info.alias or key: getattr(filter_input, key)
            for key, info in type(filter_input).model_fields.items()
        }
    raise FilterInputError(
        "Filter input must be a mapping or a pydantic model, "
        f"got {type(filter_input).__name__}"
    )
