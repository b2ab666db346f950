"""
FilterQuerySchema — recursive, whitelist-only validation of filter documents.

A filter document maps registered field names to values or operator
objects, and may combine sub-documents with ``$and``, ``$or`` and
``$not``. Each nesting level is checked by a :class:`FilterLevelValidator`;
validators for deeper levels are created on first use and cached by depth.
Below ``max_depth`` combinators are allowed, at ``max_depth`` only field
conditions are.

Validation is fail-fast: the first violation in document order is raised
(or returned by :meth:`FilterQuerySchema.check`).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from difflib import get_close_matches
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, NoReturn

from .comparison import FieldValueValidator
from .exceptions import FilterValidationError
from .operators import LOGICAL_KEYS, LogicalOperator
from .result import ParseResult
from .rewriter import FilterRewriter
from .violations import (
    ROOT_PATH,
    FilterViolation,
    LimitName,
    ViolationKind,
    child_path,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from .fields import FieldRegistry
    from .limits import FilterLimits
    from .operators import FieldType

logger = logging.getLogger(__name__)


def _reject(violation: FilterViolation) -> NoReturn:
    raise FilterValidationError(violation)


class FilterLevelValidator:
    """Validates a filter document found at one nesting depth."""

    def __init__(self, schema: FilterQuerySchema, depth: int) -> None:
        self._schema = schema
        self.depth = depth
        self.allows_combinators = depth < schema.limits.max_depth

    def validate(self, document: Any, path: str) -> None:
        if not isinstance(document, Mapping):
            _reject(
                FilterViolation(
                    kind=ViolationKind.MALFORMED_DOCUMENT,
                    path=path,
                    message=(
                        f"Filter must be an object, got {type(document).__name__}"
                    ),
                )
            )

        conditions = 0
        for key, value in document.items():
            key_path = child_path(path, str(key))
            if key in LOGICAL_KEYS:
                self._validate_combinator(LogicalOperator(key), value, key_path)
                continue
            field_validator = (
                self._schema.field_validators.get(key)
                if isinstance(key, str)
                else None
            )
            if field_validator is None:
                self._reject_key(key, key_path)
            field_validator.validate(value, key_path)
            conditions += 1

        max_conditions = self._schema.limits.max_conditions
        if conditions > max_conditions:
            _reject(
                FilterViolation(
                    kind=ViolationKind.LIMIT_EXCEEDED,
                    path=path,
                    limit=LimitName.CONDITIONS,
                    limit_value=max_conditions,
                    message=(
                        f"Filter cannot have more than {max_conditions} "
                        f"field conditions"
                    ),
                )
            )

    # -- combinators ---------------------------------------------------------

    def _validate_combinator(
        self, op: LogicalOperator, value: Any, path: str
    ) -> None:
        if not self.allows_combinators:
            max_depth = self._schema.limits.max_depth
            _reject(
                FilterViolation(
                    kind=ViolationKind.LIMIT_EXCEEDED,
                    path=path,
                    key=op.value,
                    limit=LimitName.DEPTH,
                    limit_value=max_depth,
                    message=f"Filter cannot be nested more than {max_depth} levels",
                )
            )

        nested = self._schema.level(self.depth + 1)
        if op is LogicalOperator.NOT:
            if not isinstance(value, Mapping):
                self._reject_malformed(op, "an object", value, path)
            nested.validate(value, path)
            return

        if not isinstance(value, list | tuple):
            self._reject_malformed(op, "a list", value, path)
        max_branches = self._schema.limits.max_or_branches
        if op is LogicalOperator.OR and len(value) > max_branches:
            _reject(
                FilterViolation(
                    kind=ViolationKind.LIMIT_EXCEEDED,
                    path=path,
                    key=op.value,
                    limit=LimitName.OR_BRANCHES,
                    limit_value=max_branches,
                    message=f"$or cannot have more than {max_branches} branches",
                )
            )
        for idx, item in enumerate(value):
            item_path = child_path(path, idx)
            if not isinstance(item, Mapping):
                self._reject_malformed(op, "a list of objects", item, item_path)
            nested.validate(item, item_path)

    # -- rejections ----------------------------------------------------------

    def _reject_key(self, key: Any, path: str) -> NoReturn:
        allowed = list(self._schema.field_validators)
        if self.allows_combinators:
            allowed += sorted(LOGICAL_KEYS)
        suggestions = (
            tuple(get_close_matches(key, allowed, n=3, cutoff=0.6))
            if isinstance(key, str)
            else ()
        )
        message = f"Field {key!r} is not filterable"
        if suggestions:
            message += f". Did you mean: {', '.join(suggestions)}?"
        _reject(
            FilterViolation(
                kind=ViolationKind.UNREGISTERED_KEY,
                path=path,
                key=str(key),
                message=message,
                suggestions=suggestions,
            )
        )

    @staticmethod
    def _reject_malformed(
        op: LogicalOperator, expected: str, value: Any, path: str
    ) -> NoReturn:
        _reject(
            FilterViolation(
                kind=ViolationKind.MALFORMED_COMBINATOR,
                path=path,
                key=op.value,
                message=f"{op.value} expects {expected}, got {type(value).__name__}",
            )
        )


class FilterQuerySchema:
    """
    Immutable validator for filter documents.

    Built by :class:`~cqrs_ddd_filter_query.builder.FilterQuerySchemaBuilder`.

    - ``parse(document)`` — validate, rewrite, raise on rejection
    - ``safe_parse(document)`` — same, returning a :class:`ParseResult`
    - ``parse_json(text)`` / ``safe_parse_json(text)`` — decode JSON first
    - ``check(document, level)`` — first violation or ``None``
    """

    def __init__(
        self,
        registry: FieldRegistry,
        limits: FilterLimits,
        primitive_validators: Mapping[FieldType, Callable[[Any], bool]],
    ) -> None:
        self._limits = limits
        validators: dict[str, FieldValueValidator] = {
            declaration.field: FieldValueValidator(
                declaration,
                primitive_validators[declaration.type],
                limits.max_array_length,
            )
            for declaration in registry
        }
        self._field_validators = MappingProxyType(validators)
        self._levels: dict[int, FilterLevelValidator] = {}
        self._rewriter = (
            FilterRewriter(registry) if registry.has_replacements else None
        )

    @property
    def limits(self) -> FilterLimits:
        return self._limits

    @property
    def field_validators(self) -> Mapping[str, FieldValueValidator]:
        """Read-only view of the per-field value validators."""
        return self._field_validators

    @property
    def field_names(self) -> list[str]:
        return list(self._field_validators)

    @property
    def rewrites(self) -> bool:
        """Whether accepted documents go through field replacement."""
        return self._rewriter is not None

    def level(self, depth: int) -> FilterLevelValidator:
        """Return the validator for *depth*, creating it on first use."""
        if not 0 <= depth <= self.limits.max_depth:
            raise ValueError(
                f"Depth {depth} outside 0..{self.limits.max_depth}"
            )
        validator = self._levels.get(depth)
        if validator is None:
            logger.debug("Creating filter level validator for depth %d", depth)
            validator = FilterLevelValidator(self, depth)
            self._levels[depth] = validator
        return validator

    # -- validation ----------------------------------------------------------

    def validate(self, document: Any, level: int = 0) -> None:
        """Raise :class:`FilterValidationError` if *document* is rejected."""
        try:
            self.level(level).validate(document, ROOT_PATH)
        except FilterValidationError as exc:
            logger.debug(
                "Rejected filter document (%s at %s)",
                exc.violation.kind.value,
                exc.violation.path,
            )
            raise

    def check(self, document: Any, level: int = 0) -> FilterViolation | None:
        """Return the first violation in *document*, or ``None`` if accepted."""
        try:
            self.validate(document, level)
        except FilterValidationError as exc:
            return exc.violation
        return None

    def parse(self, document: Any) -> dict[str, Any]:
        """Validate *document* and return the output filter.

        Raises:
            FilterValidationError: On the first violation found.
        """
        self.validate(document)
        if self._rewriter is not None:
            return self._rewriter.rewrite(document)
        return document if isinstance(document, dict) else dict(document)

    def safe_parse(self, document: Any) -> ParseResult:
        """Like :meth:`parse`, but report rejection in the result."""
        try:
            return ParseResult.ok(self.parse(document))
        except FilterValidationError as exc:
            return ParseResult.failure(*exc.violations)

    def parse_json(self, text: str | bytes) -> dict[str, Any]:
        """Decode a JSON object and :meth:`parse` it."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FilterValidationError(
                FilterViolation(
                    kind=ViolationKind.MALFORMED_DOCUMENT,
                    path=ROOT_PATH,
                    message=f"Invalid JSON: {exc}",
                )
            ) from exc
        if not isinstance(data, dict):
            _reject(
                FilterViolation(
                    kind=ViolationKind.MALFORMED_DOCUMENT,
                    path=ROOT_PATH,
                    message="Top-level JSON value must be an object",
                )
            )
        return self.parse(data)

    def safe_parse_json(self, text: str | bytes) -> ParseResult:
        try:
            return ParseResult.ok(self.parse_json(text))
        except FilterValidationError as exc:
            return ParseResult.failure(*exc.violations)
