"""FieldDeclaration and FieldRegistry — the per-resource filterable whitelist."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .operators import FieldType, FilterOperator


class ReplacementCallbackArgs(NamedTuple):
    """Arguments handed to a callback replacement.

    ``value`` is the operand of ``operator``: a single value, a list (for
    ``$in``, ``$nin``, ``$contains``, ``$overlap``) or ``None``.
    """

    field: str
    operator: FilterOperator
    value: Any


ReplacementCallback = Callable[[ReplacementCallbackArgs], Mapping[str, Any]]


class FieldDeclaration(BaseModel):
    """One whitelisted field: its type, capabilities and output rewrite.

    ``replacement`` is either a dotted path (``"author.name"``) the field is
    nested under in the output, or a callable producing a partial output
    document for each operator used on the field.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    field: str = Field(min_length=1)
    type: FieldType
    array: bool = False
    fulltext: bool = False
    replacement: str | ReplacementCallback | None = None

    @field_validator("replacement")
    @classmethod
    def _check_path(cls, value: Any) -> Any:
        if isinstance(value, str) and not all(value.split(".")):
            raise ValueError(f"Invalid replacement path {value!r}: empty segment")
        return value

    @model_validator(mode="after")
    def _check_fulltext(self) -> FieldDeclaration:
        if self.fulltext and self.type is not FieldType.STRING:
            raise ValueError(
                f"fulltext is only supported for string fields, "
                f"got {self.type.value!r} for field {self.field!r}"
            )
        return self

    @property
    def replacement_path(self) -> str | None:
        return self.replacement if isinstance(self.replacement, str) else None

    @property
    def replacement_callback(self) -> ReplacementCallback | None:
        if self.replacement is None or isinstance(self.replacement, str):
            return None
        return self.replacement

    @property
    def has_replacement(self) -> bool:
        return self.replacement is not None


class FieldRegistry:
    """Ordered, key-unique mapping of field name to declaration.

    Registering a name twice replaces the earlier declaration.
    """

    def __init__(self, declarations: Mapping[str, FieldDeclaration] | None = None):
        self._fields: dict[str, FieldDeclaration] = dict(declarations or {})

    def register(self, declaration: FieldDeclaration) -> None:
        self._fields[declaration.field] = declaration

    def get(self, name: str) -> FieldDeclaration | None:
        return self._fields.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._fields)

    @property
    def has_replacements(self) -> bool:
        return any(d.has_replacement for d in self._fields.values())

    def copy(self) -> FieldRegistry:
        return FieldRegistry(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[FieldDeclaration]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)
