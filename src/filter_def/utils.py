"""
Shared value helpers for filter evaluation.

These are pure-Python helpers with no backend dependencies.
"""

from __future__ import annotations

import datetime
import decimal
import math
import numbers
from collections.abc import Collection, Mapping
from typing import Any

from .exceptions import FilterInputError

NAN = math.nan

# ---------------------------------------------------------------------------
# Equality
# ---------------------------------------------------------------------------


def strict_equals(left: Any, right: Any) -> bool:
    """
    Equality that never treats a ``bool`` as equal to a number.

    ``True == 1`` holds in Python; a filter on ``True`` must not match an
    entity whose value is ``1``.
    """
    if isinstance(left, bool) is not isinstance(right, bool):
        return False
    return bool(left == right)


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------


def _real_to_float(value: Any) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf
    except (TypeError, ValueError):
        return NAN


def to_number(value: Any) -> float:
    """
    Coerce *value* to a float for ordering comparisons.

    Dates and datetimes share one unit (POSIX seconds; a ``date`` is its
    midnight) so they compare with each other.  Returns NaN when no
    numeric representation exists, so that every comparison against it
    is false.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, decimal.Decimal):
        return NAN if value.is_nan() else _real_to_float(value)
    if isinstance(value, numbers.Real):
        return _real_to_float(value)
    if isinstance(value, datetime.date):
        if not isinstance(value, datetime.datetime):
            value = datetime.datetime.combine(value, datetime.time())
        try:
            return value.timestamp()
        except (OverflowError, OSError, ValueError):
            return NAN
    if isinstance(value, datetime.timedelta):
        return value.total_seconds()
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return NAN
    return NAN


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------


def require_collection(
    value: Any, *, filter_name: str | None = None
) -> Collection[Any]:
    """
    Return *value* if it is a non-string collection.

    Raises:
        FilterInputError: For strings, bytes, mappings and scalars.
    """
    if isinstance(value, str | bytes | Mapping) or not isinstance(value, Collection):
        where = f" for filter '{filter_name}'" if filter_name else ""
        raise FilterInputError(
            f"'inArray' expects a list, tuple or set of values{where}, "
            f"got {type(value).__name__}",
            filter_name=filter_name,
        )
    return value


def contains_strict(values: Collection[Any], item: Any) -> bool:
    """Membership test using :func:`strict_equals`."""
    return any(strict_equals(item, candidate) for candidate in values)
