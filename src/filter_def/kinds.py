from enum import Enum


class FilterKind(str, Enum):
    """Kinds a declared filter field may have."""

    # Primitive
    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    IN_ARRAY = "inArray"
    IS_NULL = "isNull"
    IS_NOT_NULL = "isNotNull"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"

    # Boolean groups
    AND = "and"
    OR = "or"


PRIMITIVE_KINDS: frozenset[FilterKind] = frozenset(
    {
        FilterKind.EQ,
        FilterKind.NEQ,
        FilterKind.CONTAINS,
        FilterKind.IN_ARRAY,
        FilterKind.IS_NULL,
        FilterKind.IS_NOT_NULL,
        FilterKind.GT,
        FilterKind.GTE,
        FilterKind.LT,
        FilterKind.LTE,
    }
)
BOOLEAN_KINDS: frozenset[FilterKind] = frozenset({FilterKind.AND, FilterKind.OR})


class FilterOperator(str, Enum):
    """Operator keys used by backend registries.

    Mirrors the primitive kinds, with ``contains`` split into a
    case-sensitive and a case-insensitive variant.
    """

    EQ = "eq"
    NEQ = "neq"
    CONTAINS = "contains"
    ICONTAINS = "icontains"
    IN_ARRAY = "inArray"
    IS_NULL = "isNull"
    IS_NOT_NULL = "isNotNull"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
