"""
Default primitive value validators, one predicate per :class:`FieldType`.

These decide whether a single literal is acceptable for a declared field
type. The schema builder accepts overrides per type.
"""

from __future__ import annotations

import datetime
import math
import re
from typing import TYPE_CHECKING, Any

from .operators import FieldType

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

# ---------------------------------------------------------------------------
# ISO-8601 grammar
# ---------------------------------------------------------------------------

_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Date-time with optional seconds/fraction and an optional "Z" or ±HH:MM
# offset; no offset is the local form.
_DATETIME_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T"
    r"([01]\d|2[0-3]):([0-5]\d)(?::([0-5]\d)(?:\.\d+)?)?"
    r"(Z|[+-](?:[01]\d|2[0-3]):?[0-5]\d)?$"
)


def _is_calendar_date(year: str, month: str, day: str) -> bool:
    try:
        datetime.date(int(year), int(month), int(day))
    except ValueError:
        return False
    return True


def is_iso_date(value: str) -> bool:
    """Return ``True`` for a ``YYYY-MM-DD`` string naming a real date."""
    m = _DATE_RE.match(value)
    return m is not None and _is_calendar_date(*m.groups())


def is_iso_datetime(value: str) -> bool:
    """Return ``True`` for an ISO-8601 date-time, with or without offset."""
    m = _DATETIME_RE.match(value)
    return m is not None and _is_calendar_date(m.group(1), m.group(2), m.group(3))


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_number(value: Any) -> bool:
    """Integers and finite floats; ``bool`` is not a number here."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_date(value: Any) -> bool:
    """Date/datetime objects, ISO date-time strings and date-only strings."""
    if isinstance(value, datetime.date):
        return True
    if isinstance(value, str):
        return is_iso_datetime(value) or is_iso_date(value)
    return False


DEFAULT_PRIMITIVE_VALIDATORS: dict[FieldType, Callable[[Any], bool]] = {
    FieldType.STRING: is_string,
    FieldType.NUMBER: is_number,
    FieldType.BOOLEAN: is_boolean,
    FieldType.DATE: is_date,
}


def resolve_primitive_validators(
    overrides: Mapping[FieldType | str, Callable[[Any], bool]] | None = None,
) -> dict[FieldType, Callable[[Any], bool]]:
    """Merge per-type *overrides* over the defaults."""
    validators = dict(DEFAULT_PRIMITIVE_VALIDATORS)
    for field_type, predicate in (overrides or {}).items():
        validators[FieldType(field_type)] = predicate
    return validators
