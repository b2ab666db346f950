"""
Fluent builder for filter query schemas.

Example::

    schema = (
        FilterQuerySchemaBuilder({"max_depth": 3})
        .add_field("id", "number")
        .add_field("name", "string", fulltext=True)
        .add_field("roles", "string", array=True)
        .add_field("authorName", "string", replacement="author.name")
        .build()
    )

    schema.parse({"authorName": "John", "id": {"$in": [1, 2]}})
    # → {"author": {"name": "John"}, "id": {"$in": [1, 2]}}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from .entity import resolve_entity_path
from .exceptions import FieldDeclarationError
from .fields import FieldDeclaration, FieldRegistry
from .limits import FilterLimits
from .primitives import resolve_primitive_validators
from .schema import FilterQuerySchema

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .fields import ReplacementCallback
    from .operators import FieldType

logger = logging.getLogger(__name__)


class FilterQuerySchemaBuilder:
    """
    Collects field declarations and limits, then builds a
    :class:`FilterQuerySchema`.

    Declaring the same field name twice keeps the last declaration.
    ``build()`` snapshots the declarations, so adding fields afterwards does
    not affect schemas already built.
    """

    def __init__(
        self,
        limits: FilterLimits | Mapping[str, Any] | None = None,
        *,
        entity: type | None = None,
        primitive_validators: Mapping[FieldType | str, Callable[[Any], bool]]
        | None = None,
    ) -> None:
        """
        Initialize the builder.

        Args:
            limits: ``FilterLimits`` or a partial mapping of limit overrides
                (snake_case or camelCase keys); unset limits keep defaults.
            entity: Optional entity class the declared fields are checked
                against.
            primitive_validators: Per-type value predicates replacing the
                defaults from :mod:`cqrs_ddd_filter_query.primitives`.

        Raises:
            pydantic.ValidationError: If *limits* holds unknown keys or
                negative values.
        """
        self._limits = (
            limits
            if isinstance(limits, FilterLimits)
            else FilterLimits.model_validate(limits or {})
        )
        self._entity = entity
        self._primitive_validators = resolve_primitive_validators(
            primitive_validators
        )
        self._registry = FieldRegistry()

    @property
    def limits(self) -> FilterLimits:
        return self._limits

    # -- declarations --------------------------------------------------------

    def add_field(
        self,
        field: str,
        type: FieldType | str,
        *,
        array: bool = False,
        fulltext: bool = False,
        replacement: str | ReplacementCallback | None = None,
    ) -> FilterQuerySchemaBuilder:
        """Declare a filterable field and return ``self`` for chaining.

        Raises:
            FieldDeclarationError: If the declaration is invalid, e.g.
                ``fulltext`` on a non-string field or an empty path segment.
            FieldNotFoundError: If bound to an entity that lacks the field
                or the replacement path.
        """
        try:
            declaration = FieldDeclaration(
                field=field,
                type=type,
                array=array,
                fulltext=fulltext,
                replacement=replacement,
            )
        except PydanticValidationError as exc:
            messages = "; ".join(e["msg"] for e in exc.errors())
            raise FieldDeclarationError(
                f"Invalid declaration for field {field!r}: {messages}"
            ) from exc
        return self.add_declaration(declaration)

    def add_declaration(
        self, declaration: FieldDeclaration
    ) -> FilterQuerySchemaBuilder:
        """Register an already constructed declaration."""
        if self._entity is not None:
            _check_entity(self._entity, declaration)
        self._registry.register(declaration)
        return self

    # -- build ---------------------------------------------------------------

    def build(self) -> FilterQuerySchema:
        """Return an immutable schema for the fields declared so far."""
        logger.debug(
            "Building filter query schema with %d field(s): %s",
            len(self._registry),
            self._limits,
        )
        return FilterQuerySchema(
            self._registry.copy(),
            self._limits,
            self._primitive_validators,
        )


def _check_entity(entity: type, declaration: FieldDeclaration) -> None:
    if declaration.replacement_callback is not None:
        return
    replacement = declaration.replacement_path
    resolve_entity_path(
        entity,
        replacement or declaration.field,
        declared_field=declaration.field,
        via_replacement=replacement is not None,
    )
