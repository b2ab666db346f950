"""Shared fixtures for filter query tests."""

from __future__ import annotations

from typing import Any

import pytest

from cqrs_ddd_filter_query import FilterQuerySchemaBuilder


def build_user_builder(
    limits: dict[str, Any] | None = None,
) -> FilterQuerySchemaBuilder:
    return (
        FilterQuerySchemaBuilder(limits)
        .add_field("id", "number")
        .add_field("name", "string", fulltext=True)
        .add_field("age", "number")
        .add_field("isActive", "boolean")
        .add_field("roles", "string", array=True)
        .add_field("createdAt", "date")
    )


@pytest.fixture
def user_builder():
    """Factory for a builder declaring the user fields, with optional limits."""
    return build_user_builder


@pytest.fixture
def user_schema():
    """User schema with default limits."""
    return build_user_builder().build()
