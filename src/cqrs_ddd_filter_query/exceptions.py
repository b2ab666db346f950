"""
Filter query exception hierarchy.

All exceptions inherit from ``FilterQueryError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .violations import FilterViolation


class FilterQueryError(Exception):
    """Base exception for all filter query errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class FilterValidationError(FilterQueryError):
    """Raised when a filter document is rejected.

    Carries the first :class:`FilterViolation` found plus structured
    errors: ``{path: [messages]}``.
    """

    def __init__(self, violation: FilterViolation) -> None:
        self.violation = violation
        self.errors: dict[str, list[str]] = {violation.path: [violation.message]}
        super().__init__(f"{violation.path}: {violation.message}")

    @property
    def violations(self) -> list[FilterViolation]:
        return [self.violation]

    def to_dict(self) -> dict[str, Any]:
        return self.violation.to_dict()


class FieldDeclarationError(FilterQueryError):
    """Raised when a field declaration cannot be registered."""


class EntityBindingError(FieldDeclarationError):
    """
    A declaration does not fit the entity the builder is bound to.

    Records which filter field was being declared, whether its own name or
    its replacement path was checked, and the dotted path on the entity.
    """

    code = "ENTITY_BINDING_ERROR"

    def __init__(
        self,
        message: str,
        *,
        entity_name: str,
        path: str,
        declared_field: str | None = None,
        via_replacement: bool = False,
    ) -> None:
        self.entity_name = entity_name
        self.path = path
        self.declared_field = declared_field or path
        self.via_replacement = via_replacement
        super().__init__(f"{self._context()}: {message}")

    @property
    def checked(self) -> str:
        return "replacement" if self.via_replacement else "field"

    def _context(self) -> str:
        if self.via_replacement:
            return (
                f"Filter field '{self.declared_field}' replacement "
                f"'{self.path}' on '{self.entity_name}'"
            )
        return f"Filter field '{self.declared_field}' on '{self.entity_name}'"

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "field": self.declared_field,
            "checked": self.checked,
            "path": self.path,
            "entity": self.entity_name,
            "message": str(self),
        }


class FieldNotFoundError(EntityBindingError):
    """
    A path segment is not an attribute of the entity it is looked up on.

    Example error message::

        Filter field 'authorName' replacement 'author.nmae' on 'Post':
        'nmae' is not an attribute of 'User'. Did you mean: name?
        Available: id, name, profile
    """

    code = "FIELD_NOT_FOUND"

    def __init__(
        self,
        attribute: str,
        owner_name: str,
        available: list[str],
        *,
        entity_name: str | None = None,
        path: str | None = None,
        declared_field: str | None = None,
        via_replacement: bool = False,
    ) -> None:
        self.attribute = attribute
        self.owner_name = owner_name
        self.available = sorted(available)
        self.suggestions = get_close_matches(attribute, available, n=3, cutoff=0.6)

        message = f"'{attribute}' is not an attribute of '{owner_name}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        preview = ", ".join(self.available[:15])
        if len(self.available) > 15:
            preview += ", ..."
        message += f"\nAvailable: {preview or '(none)'}"
        super().__init__(
            message,
            entity_name=entity_name or owner_name,
            path=path or attribute,
            declared_field=declared_field,
            via_replacement=via_replacement,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            attribute=self.attribute,
            owner=self.owner_name,
            suggestions=self.suggestions,
            available=self.available,
        )
        return data


class RelationshipTraversalError(EntityBindingError):
    """
    A path continues past an attribute that is not a nested entity,
    e.g. ``title.length`` where ``title`` is a ``str``.
    """

    code = "RELATIONSHIP_TRAVERSAL_ERROR"

    def __init__(
        self,
        attribute: str,
        owner_name: str,
        *,
        entity_name: str | None = None,
        path: str | None = None,
        declared_field: str | None = None,
        via_replacement: bool = False,
    ) -> None:
        self.attribute = attribute
        self.owner_name = owner_name
        super().__init__(
            f"'{attribute}' of '{owner_name}' is not a nested entity "
            f"and cannot be traversed.",
            entity_name=entity_name or owner_name,
            path=path or attribute,
            declared_field=declared_field,
            via_replacement=via_replacement,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(attribute=self.attribute, owner=self.owner_name)
        return data
