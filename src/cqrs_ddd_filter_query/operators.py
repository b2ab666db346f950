from enum import Enum


class FieldType(str, Enum):
    """Value types a filterable field can declare."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


class FilterOperator(str, Enum):
    """Supported comparison operators inside an operator object."""

    # Equality
    EQ = "$eq"
    NE = "$ne"

    # Ordering (number and date only)
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"

    # Set membership
    IN = "$in"
    NIN = "$nin"

    # Array fields
    CONTAINS = "$contains"
    OVERLAP = "$overlap"

    # Full-text search (string only)
    FULLTEXT = "$fulltext"


class LogicalOperator(str, Enum):
    """Combinators composing nested filter documents."""

    AND = "$and"
    OR = "$or"
    NOT = "$not"


LOGICAL_KEYS: frozenset[str] = frozenset(m.value for m in LogicalOperator)
OPERATOR_KEYS: frozenset[str] = frozenset(m.value for m in FilterOperator)
