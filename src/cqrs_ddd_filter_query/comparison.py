"""
Operator-set resolution and per-field value validation.

A field value is one of three shapes: a bare value of the field's type
(implicit ``$eq``), ``None``, or an operator object such as
``{"$gte": 18, "$lte": 65}``. The legal operators and their operand rules
are resolved once per field when the schema is built.
"""

from __future__ import annotations

from collections.abc import Mapping
from difflib import get_close_matches
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple, NoReturn

from .exceptions import FilterValidationError
from .operators import OPERATOR_KEYS, FieldType, FilterOperator
from .violations import FilterViolation, LimitName, ViolationKind, child_path

if TYPE_CHECKING:
    from collections.abc import Callable

    from .fields import FieldDeclaration


class OperandRule(NamedTuple):
    """Shape of the operand an operator accepts."""

    is_list: bool
    nullable: bool


_OPERAND_RULES: dict[FilterOperator, OperandRule] = {
    FilterOperator.EQ: OperandRule(is_list=False, nullable=True),
    FilterOperator.NE: OperandRule(is_list=False, nullable=True),
    FilterOperator.GT: OperandRule(is_list=False, nullable=False),
    FilterOperator.GTE: OperandRule(is_list=False, nullable=False),
    FilterOperator.LT: OperandRule(is_list=False, nullable=False),
    FilterOperator.LTE: OperandRule(is_list=False, nullable=False),
    FilterOperator.IN: OperandRule(is_list=True, nullable=True),
    FilterOperator.NIN: OperandRule(is_list=True, nullable=True),
    FilterOperator.CONTAINS: OperandRule(is_list=True, nullable=False),
    FilterOperator.OVERLAP: OperandRule(is_list=True, nullable=False),
    FilterOperator.FULLTEXT: OperandRule(is_list=False, nullable=False),
}

_ORDERED_TYPES = frozenset({FieldType.NUMBER, FieldType.DATE})


def resolve_operators(
    field_type: FieldType,
    *,
    array: bool = False,
    fulltext: bool = False,
) -> frozenset[FilterOperator]:
    """Return the operators legal for a field of *field_type*."""
    ops = {
        FilterOperator.EQ,
        FilterOperator.NE,
        FilterOperator.IN,
        FilterOperator.NIN,
    }
    if field_type in _ORDERED_TYPES:
        ops |= {
            FilterOperator.GT,
            FilterOperator.GTE,
            FilterOperator.LT,
            FilterOperator.LTE,
        }
    if array:
        ops |= {FilterOperator.CONTAINS, FilterOperator.OVERLAP}
    if fulltext and field_type is FieldType.STRING:
        ops.add(FilterOperator.FULLTEXT)
    return frozenset(ops)


# ---------------------------------------------------------------------------
# Field value shapes
# ---------------------------------------------------------------------------


class FieldValueShape(Enum):
    BARE = "bare"
    NULL = "null"
    OPERATOR_MAP = "operator_map"


def field_value_shape(value: Any) -> FieldValueShape:
    if value is None:
        return FieldValueShape.NULL
    if isinstance(value, Mapping):
        return FieldValueShape.OPERATOR_MAP
    return FieldValueShape.BARE


def operator_pairs(value: Any) -> list[tuple[FilterOperator, Any]]:
    """Decompose a validated field value into ``(operator, operand)`` pairs.

    A bare value or ``None`` is an implicit ``$eq``.
    """
    if field_value_shape(value) is not FieldValueShape.OPERATOR_MAP:
        return [(FilterOperator.EQ, value)]
    return [
        (FilterOperator(key), operand)
        for key, operand in value.items()
        if key in OPERATOR_KEYS
    ]


def _type_name(value: Any) -> str:
    return "null" if value is None else type(value).__name__


class FieldValueValidator:
    """Validates the value of one registered field."""

    def __init__(
        self,
        declaration: FieldDeclaration,
        is_value: Callable[[Any], bool],
        max_array_length: int,
    ) -> None:
        self.declaration = declaration
        self.operators = resolve_operators(
            declaration.type,
            array=declaration.array,
            fulltext=declaration.fulltext,
        )
        self._rules = {op.value: _OPERAND_RULES[op] for op in self.operators}
        self._is_value = is_value
        self._max_array_length = max_array_length

    @property
    def field(self) -> str:
        return self.declaration.field

    @property
    def type_name(self) -> str:
        return self.declaration.type.value

    def validate(self, value: Any, path: str) -> None:
        """Raise :class:`FilterValidationError` on the first invalid part."""
        shape = field_value_shape(value)
        if shape is FieldValueShape.NULL:
            return
        if shape is FieldValueShape.BARE:
            self._check_value(value, path, nullable=False)
            return
        for key, operand in value.items():
            op_path = child_path(path, str(key))
            rule = self._rules.get(key) if isinstance(key, str) else None
            if rule is None:
                self._reject_operator(key, op_path)
            if rule.is_list:
                self._check_list(key, operand, op_path, nullable=rule.nullable)
            else:
                self._check_value(operand, op_path, nullable=rule.nullable)

    # -- internals -----------------------------------------------------------

    def _check_value(self, value: Any, path: str, *, nullable: bool) -> None:
        if value is None and nullable:
            return
        if value is None or not self._is_value(value):
            raise FilterValidationError(
                FilterViolation(
                    kind=ViolationKind.TYPE_MISMATCH,
                    path=path,
                    key=self.field,
                    message=(
                        f"Expected {self.type_name} value for field "
                        f"'{self.field}', got {_type_name(value)}"
                    ),
                )
            )

    def _check_list(self, op: str, operand: Any, path: str, *, nullable: bool) -> None:
        if not isinstance(operand, list | tuple):
            raise FilterValidationError(
                FilterViolation(
                    kind=ViolationKind.TYPE_MISMATCH,
                    path=path,
                    key=self.field,
                    message=(
                        f"Operator '{op}' on field '{self.field}' expects a list, "
                        f"got {_type_name(operand)}"
                    ),
                )
            )
        if len(operand) > self._max_array_length:
            raise FilterValidationError(
                FilterViolation(
                    kind=ViolationKind.LIMIT_EXCEEDED,
                    path=path,
                    key=self.field,
                    limit=LimitName.ARRAY_LENGTH,
                    limit_value=self._max_array_length,
                    message=(
                        f"Operator '{op}' cannot have more than "
                        f"{self._max_array_length} items"
                    ),
                )
            )
        for idx, item in enumerate(operand):
            self._check_value(item, child_path(path, idx), nullable=nullable)

    def _reject_operator(self, key: Any, path: str) -> NoReturn:
        legal = sorted(op.value for op in self.operators)
        if isinstance(key, str) and key in OPERATOR_KEYS:
            message = (
                f"Operator '{key}' is not allowed for {self.type_name} "
                f"field '{self.field}'"
            )
        else:
            message = f"Unknown operator {key!r} for field '{self.field}'"
        suggestions = (
            tuple(get_close_matches(key, legal, n=3, cutoff=0.6))
            if isinstance(key, str)
            else ()
        )
        if suggestions:
            message += f". Did you mean: {', '.join(suggestions)}?"
        message += f" Allowed operators: {', '.join(legal)}"
        raise FilterValidationError(
            FilterViolation(
                kind=ViolationKind.OPERATOR_NOT_ALLOWED,
                path=path,
                key=str(key),
                message=message,
                suggestions=suggestions,
            )
        )
