"""Whitelist-driven validation and rewriting of untrusted filter query documents."""

from __future__ import annotations

from .builder import FilterQuerySchemaBuilder
from .comparison import FieldValueValidator, resolve_operators
from .exceptions import (
    EntityBindingError,
    FieldDeclarationError,
    FieldNotFoundError,
    FilterQueryError,
    FilterValidationError,
    RelationshipTraversalError,
)
from .fields import FieldDeclaration, FieldRegistry, ReplacementCallbackArgs
from .limits import FilterLimits
from .operators import FieldType, FilterOperator, LogicalOperator
from .primitives import DEFAULT_PRIMITIVE_VALIDATORS
from .result import ParseResult
from .rewriter import FilterRewriter
from .schema import FilterLevelValidator, FilterQuerySchema
from .utils import set_nested_value
from .violations import FilterViolation, LimitName, ViolationKind

__all__ = [
    # Builder / schema
    "FilterQuerySchemaBuilder",
    "FilterQuerySchema",
    "FilterLevelValidator",
    "FilterRewriter",
    "FieldValueValidator",
    "resolve_operators",
    # Declarations / configuration
    "FieldDeclaration",
    "FieldRegistry",
    "FieldType",
    "FilterLimits",
    "FilterOperator",
    "LogicalOperator",
    "ReplacementCallbackArgs",
    "DEFAULT_PRIMITIVE_VALIDATORS",
    # Results
    "ParseResult",
    "FilterViolation",
    "ViolationKind",
    "LimitName",
    # Exceptions
    "FilterQueryError",
    "FilterValidationError",
    "FieldDeclarationError",
    "EntityBindingError",
    "FieldNotFoundError",
    "RelationshipTraversalError",
    # Utilities
    "set_nested_value",
]
