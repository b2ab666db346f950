"""
Shared utility functions for the filter query package.

These are pure-Python helpers with no infrastructure dependencies.
"""

from __future__ import annotations

from typing import Any


def set_nested_value(target: dict[str, Any], path: str, value: Any) -> None:
    """
    Set *value* at a dot-separated *path* in *target*, in place.

    Missing intermediate objects are created; an intermediate holding a
    non-dict value (including ``None``) is replaced by a new dict. Sibling
    keys along the path are preserved.

    Example::

        doc = {"author": {"age": 30}}
        set_nested_value(doc, "author.name", "John")
        # → {"author": {"age": 30, "name": "John"}}
    """
    *parents, leaf = path.split(".")
    current = target
    for part in parents:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[leaf] = value
