"""FilterViolation — structured description of a rejected filter document."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

ROOT_PATH = "<root>"


class ViolationKind(str, Enum):
    """Why a filter document was rejected."""

    UNREGISTERED_KEY = "unregistered_key"
    TYPE_MISMATCH = "type_mismatch"
    OPERATOR_NOT_ALLOWED = "operator_not_allowed"
    LIMIT_EXCEEDED = "limit_exceeded"
    MALFORMED_COMBINATOR = "malformed_combinator"
    MALFORMED_DOCUMENT = "malformed_document"


class LimitName(str, Enum):
    """Structural limits enforced while validating a filter document."""

    DEPTH = "depth"
    CONDITIONS = "conditions"
    OR_BRANCHES = "or_branches"
    ARRAY_LENGTH = "array_length"


def _no_suggestions() -> tuple[str, ...]:
    return ()


@dataclass(frozen=True)
class FilterViolation:
    """A single validation failure.

    ``path`` locates the offending node, e.g. ``<root>.$or[1].age.$in``.
    ``limit`` and ``limit_value`` are only set for
    :attr:`ViolationKind.LIMIT_EXCEEDED`.
    """

    kind: ViolationKind
    path: str
    message: str
    key: str | None = None
    limit: LimitName | None = None
    limit_value: int | None = None
    suggestions: tuple[str, ...] = field(default_factory=_no_suggestions)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "error": self.kind.value.upper(),
            "message": self.message,
            "path": self.path,
        }
        if self.key is not None:
            data["key"] = self.key
        if self.limit is not None:
            data["limit"] = self.limit.value
            data["limit_value"] = self.limit_value
        if self.suggestions:
            data["suggestions"] = list(self.suggestions)
        return data


def child_path(path: str, key: str | int) -> str:
    """Extend *path* with a mapping key or a sequence index."""
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}"
