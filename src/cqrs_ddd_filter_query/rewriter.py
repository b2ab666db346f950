"""FilterRewriter — maps accepted filter field names onto the output shape."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .comparison import operator_pairs
from .fields import ReplacementCallbackArgs
from .operators import LogicalOperator
from .utils import set_nested_value

if TYPE_CHECKING:
    from .fields import FieldRegistry, ReplacementCallback


class FilterRewriter:
    """Apply field replacements to an already validated filter document.

    - dotted-path replacements nest the original value under the path,
    - callback replacements are called once per ``(operator, value)`` pair
      and their results merged into the current level, in order,
    - other fields are copied unchanged.
    """

    def __init__(self, registry: FieldRegistry) -> None:
        self._paths: dict[str, str] = {}
        self._callbacks: dict[str, ReplacementCallback] = {}
        for declaration in registry:
            if declaration.replacement_path is not None:
                self._paths[declaration.field] = declaration.replacement_path
            elif declaration.replacement_callback is not None:
                self._callbacks[declaration.field] = declaration.replacement_callback

    def rewrite(self, document: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for key, value in document.items():
            if key in (LogicalOperator.AND, LogicalOperator.OR):
                result[key] = [self.rewrite(item) for item in value]
            elif key == LogicalOperator.NOT:
                result[key] = self.rewrite(value)
            elif key in self._callbacks:
                callback = self._callbacks[key]
                for operator, operand in operator_pairs(value):
                    result.update(
                        callback(ReplacementCallbackArgs(key, operator, operand))
                    )
            elif key in self._paths:
                set_nested_value(result, self._paths[key], _detach(value))
            else:
                result[key] = _detach(value)
        return result


def _detach(value: Any) -> Any:
    # Operator objects are copied so later paths never write into the input.
    return dict(value) if isinstance(value, Mapping) else value
