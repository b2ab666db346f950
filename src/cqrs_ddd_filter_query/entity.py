"""
Entity binding: check declared fields against an entity's annotations.

When a schema builder is bound to an entity class (a dataclass, a pydantic
model or any annotated class), plain field names must be attributes of the
entity and dotted replacement paths must resolve through nested entities::

    class Author(BaseModel):
        name: str

    class Post(BaseModel):
        title: str
        author: Author | None

    resolve_entity_path(Post, "author.name")  # → str
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Collection
from typing import Any, ClassVar

from pydantic import BaseModel

from .exceptions import FieldNotFoundError, RelationshipTraversalError


def entity_fields(entity: Any) -> dict[str, Any]:
    """Return ``{attribute: annotation}`` for *entity*, or ``{}``."""
    if not isinstance(entity, type):
        return {}
    if issubclass(entity, BaseModel):
        return {name: info.annotation for name, info in entity.model_fields.items()}
    if dataclasses.is_dataclass(entity):
        hints = typing.get_type_hints(entity)
        return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(entity)}
    return {
        name: hint
        for name, hint in typing.get_type_hints(entity).items()
        if typing.get_origin(hint) is not ClassVar and not name.startswith("_")
    }


def unwrap_annotation(annotation: Any) -> Any:
    """Strip ``Optional`` and collection wrappers: ``list[Tag] | None`` → ``Tag``."""
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        return unwrap_annotation(args[0]) if len(args) == 1 else annotation
    if origin is typing.Annotated:
        return unwrap_annotation(typing.get_args(annotation)[0])
    if (
        isinstance(origin, type)
        and issubclass(origin, Collection)
        and not issubclass(origin, str | bytes)
    ):
        args = typing.get_args(annotation)
        if args:
            return unwrap_annotation(args[-1] if issubclass(origin, dict) else args[0])
    return annotation


def resolve_entity_path(
    entity: type,
    path: str,
    *,
    declared_field: str | None = None,
    via_replacement: bool = False,
) -> Any:
    """Return the unwrapped annotation at dotted *path* on *entity*.

    *declared_field* and *via_replacement* only enrich error reports.

    Raises:
        FieldNotFoundError: A path segment is not an attribute.
        RelationshipTraversalError: The path continues past a scalar.
    """
    context: dict[str, Any] = {
        "entity_name": _name(entity),
        "path": path,
        "declared_field": declared_field,
        "via_replacement": via_replacement,
    }
    current: Any = entity
    parent: Any = None
    parent_part: str | None = None
    for part in path.split("."):
        fields = entity_fields(current)
        if not fields and parent_part is not None:
            raise RelationshipTraversalError(parent_part, _name(parent), **context)
        if part not in fields:
            raise FieldNotFoundError(
                part, _name(current), list(fields), **context
            )
        parent, parent_part = current, part
        current = unwrap_annotation(fields[part])
    return current


def _name(entity: Any) -> str:
    return getattr(entity, "__name__", repr(entity))
