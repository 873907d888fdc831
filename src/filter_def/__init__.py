"""
filter_def: declare filters once, evaluate them in memory or compile
them to SQLAlchemy ``WHERE`` conditions.

The SQLAlchemy backend lives in :mod:`filter_def.sqlalchemy` and is not
imported here.
"""

from __future__ import annotations

from .ast import (
    BooleanFilter,
    CustomFilter,
    FilterField,
    PrimitiveFilter,
    and_,
    contains,
    eq,
    gt,
    gte,
    in_array,
    is_custom_filter,
    is_not_null,
    is_null,
    lt,
    lte,
    neq,
    or_,
    parse_filter_def,
    parse_filter_field,
)
from .compiler import CompiledFilter, CompileStrategy, compile_filter_def
from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .exceptions import (
    FieldNotFoundError,
    FilterDefError,
    FilterInputError,
    InvalidFilterDefError,
    UnknownFilterKindError,
)
from .helpers import FilterHelpers, make_filter_helpers
from .inputs import build_input_model, input_type_for, input_values
from .kinds import FilterKind, FilterOperator
from .memory import InMemoryFilter, InMemoryFilterBuilder, in_memory_filter
from .operators_memory import build_default_registry
from .registry import Operator, OperatorRegistry
from .validation import FilterViolation, ensure_valid, validate_filter_def

__all__ = [
    # Kinds
    "FilterKind",
    "FilterOperator",
    # Definitions
    "PrimitiveFilter",
    "BooleanFilter",
    "CustomFilter",
    "FilterField",
    "eq",
    "neq",
    "contains",
    "in_array",
    "is_null",
    "is_not_null",
    "gt",
    "gte",
    "lt",
    "lte",
    "and_",
    "or_",
    "is_custom_filter",
    "parse_filter_def",
    "parse_filter_field",
    # Validation
    "FilterViolation",
    "validate_filter_def",
    "ensure_valid",
    # Compilation
    "CompiledFilter",
    "CompileStrategy",
    "compile_filter_def",
    # Operators
    "Operator",
    "OperatorRegistry",
    # In-memory
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    "InMemoryFilter",
    "InMemoryFilterBuilder",
    "in_memory_filter",
    "FilterHelpers",
    "make_filter_helpers",
    # Inputs
    "build_input_model",
    "input_type_for",
    "input_values",
    # Exceptions
    "FilterDefError",
    "UnknownFilterKindError",
    "FieldNotFoundError",
    "InvalidFilterDefError",
    "FilterInputError",
]
