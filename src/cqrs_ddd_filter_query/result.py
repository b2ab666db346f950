"""ParseResult — non-throwing outcome of parsing a filter document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .violations import FilterViolation


def default_violations_factory() -> list[FilterViolation]:
    return []


@dataclass(frozen=True)
class ParseResult:
    """Either the parsed (possibly rewritten) document or its violations.

    Usage::

        result = schema.safe_parse({"age": {"$gte": 18}})
        if result:
            repository.find(result.data)
        else:
            return problem(result.errors)
    """

    data: dict[str, Any] | None = None
    violations: list[FilterViolation] = field(
        default_factory=default_violations_factory
    )

    @property
    def success(self) -> bool:
        return len(self.violations) == 0

    @property
    def errors(self) -> dict[str, list[str]]:
        """Violation messages keyed by document path."""
        errors: dict[str, list[str]] = {}
        for violation in self.violations:
            errors.setdefault(violation.path, []).append(violation.message)
        return errors

    # ── Factory methods ──────────────────────────────────────────

    @classmethod
    def ok(cls, data: dict[str, Any]) -> ParseResult:
        return cls(data=data)

    @classmethod
    def failure(cls, *violations: FilterViolation) -> ParseResult:
        return cls(violations=list(violations))

    def __bool__(self) -> bool:
        return self.success
