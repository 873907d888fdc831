"""SQLAlchemy backend: compile filter definitions to ``WHERE`` conditions."""

from __future__ import annotations

from .filter import (
    SQLAlchemyCompileStrategy,
    SQLAlchemyFilter,
    SQLAlchemyFilterBuilder,
    resolve_columns,
    sqlalchemy_filter,
)
from .operators import (
    BUILTIN_SQLA_OPERATORS,
    DEFAULT_SQLA_REGISTRY,
    build_default_sqla_registry,
)
from .strategy import SQLAlchemyOperator, SQLAlchemyOperatorRegistry

__all__ = [
    # Factory
    "sqlalchemy_filter",
    "SQLAlchemyFilter",
    "SQLAlchemyFilterBuilder",
    "SQLAlchemyCompileStrategy",
    "resolve_columns",
    # Operators
    "SQLAlchemyOperator",
    "SQLAlchemyOperatorRegistry",
    "BUILTIN_SQLA_OPERATORS",
    "DEFAULT_SQLA_REGISTRY",
    "build_default_sqla_registry",
]
