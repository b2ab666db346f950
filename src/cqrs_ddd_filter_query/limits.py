"""FilterLimits — structural bounds applied to every filter document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FilterLimits(BaseModel):
    """Complexity limits guarding against oversized or deeply nested filters.

    Accepts snake_case names or their camelCase aliases, so a configuration
    block such as ``{"maxDepth": 3, "maxOrBranches": 2}`` can be validated
    directly::

        limits = FilterLimits.model_validate({"maxDepth": 3})
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    max_depth: int = Field(default=5, ge=0)
    """Maximum nesting of ``$and`` / ``$or`` / ``$not`` below the root."""

    max_conditions: int = Field(default=20, ge=0)
    """Maximum field conditions in one filter object (combinators excluded)."""

    max_or_branches: int = Field(default=5, ge=0)
    """Maximum branches of any ``$or`` at any level."""

    max_array_length: int = Field(default=100, ge=0)
    """Maximum length of ``$in``, ``$nin``, ``$contains`` and ``$overlap``."""
