"""Tests for FilterQuerySchemaBuilder and FilterLimits."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cqrs_ddd_filter_query import (
    FieldDeclaration,
    FieldDeclarationError,
    FieldType,
    FilterLimits,
    FilterQuerySchemaBuilder,
    ViolationKind,
)

# -- limits ------------------------------------------------------------------


def test_default_limits() -> None:
    limits = FilterQuerySchemaBuilder().limits
    assert limits == FilterLimits(
        max_depth=5, max_conditions=20, max_or_branches=5, max_array_length=100
    )


def test_partial_limits_keep_defaults() -> None:
    limits = FilterQuerySchemaBuilder({"max_depth": 2}).limits
    assert limits.max_depth == 2
    assert limits.max_conditions == 20


def test_camel_case_limits() -> None:
    limits = FilterQuerySchemaBuilder({"maxDepth": 3, "maxOrBranches": 2}).limits
    assert limits.max_depth == 3
    assert limits.max_or_branches == 2


def test_limits_instance_used_as_is() -> None:
    limits = FilterLimits(max_conditions=1)
    assert FilterQuerySchemaBuilder(limits).limits is limits


@pytest.mark.parametrize(
    "limits",
    [{"max_depth": -1}, {"maxArrayLength": -5}, {"max_nesting": 2}],
)
def test_invalid_limits_rejected(limits) -> None:
    with pytest.raises(ValidationError):
        FilterQuerySchemaBuilder(limits)


def test_limits_are_frozen() -> None:
    limits = FilterLimits()
    with pytest.raises(ValidationError):
        limits.max_depth = 1


# -- declarations ------------------------------------------------------------


def test_add_field_chains() -> None:
    builder = FilterQuerySchemaBuilder()
    assert builder.add_field("name", "string") is builder


def test_field_names_in_declaration_order() -> None:
    schema = (
        FilterQuerySchemaBuilder()
        .add_field("b", "string")
        .add_field("a", FieldType.NUMBER)
        .build()
    )
    assert schema.field_names == ["b", "a"]


def test_last_declaration_wins() -> None:
    schema = (
        FilterQuerySchemaBuilder()
        .add_field("age", "string")
        .add_field("age", "number")
        .build()
    )

    assert schema.safe_parse({"age": 1}).success
    violation = schema.check({"age": "1"})
    assert violation is not None
    assert violation.kind is ViolationKind.TYPE_MISMATCH


def test_build_snapshots_declarations() -> None:
    builder = FilterQuerySchemaBuilder().add_field("name", "string")
    schema = builder.build()
    builder.add_field("age", "number")

    assert not schema.safe_parse({"age": 1}).success
    assert builder.build().safe_parse({"age": 1}).success


def test_add_declaration() -> None:
    declaration = FieldDeclaration(field="tags", type="string", array=True)
    schema = FilterQuerySchemaBuilder().add_declaration(declaration).build()
    assert schema.safe_parse({"tags": {"$overlap": ["a"]}}).success


@pytest.mark.parametrize(
    "kwargs",
    [
        {"field": "", "type": "string"},
        {"field": "age", "type": "integer"},
        {"field": "age", "type": "number", "fulltext": True},
        {"field": "x", "type": "string", "replacement": "author..name"},
        {"field": "x", "type": "string", "replacement": ".name"},
        {"field": "x", "type": "string", "replacement": 42},
    ],
)
def test_invalid_declarations(kwargs) -> None:
    field = kwargs.pop("field")
    field_type = kwargs.pop("type")
    with pytest.raises(FieldDeclarationError) as exc_info:
        FilterQuerySchemaBuilder().add_field(field, field_type, **kwargs)
    assert isinstance(exc_info.value.__cause__, ValidationError)


def test_declaration_error_to_dict() -> None:
    with pytest.raises(FieldDeclarationError) as exc_info:
        FilterQuerySchemaBuilder().add_field("age", "number", fulltext=True)
    assert exc_info.value.to_dict()["error"] == "FieldDeclarationError"
    assert "fulltext" in exc_info.value.to_dict()["message"]


# -- primitive validators ----------------------------------------------------


def test_primitive_validator_override() -> None:
    schema = (
        FilterQuerySchemaBuilder(
            primitive_validators={"number": lambda v: isinstance(v, int)}
        )
        .add_field("count", "number")
        .build()
    )

    assert schema.safe_parse({"count": 3}).success
    assert not schema.safe_parse({"count": 3.5}).success


def test_primitive_override_applies_to_operands() -> None:
    schema = (
        FilterQuerySchemaBuilder(
            primitive_validators={FieldType.STRING: lambda v: v in {"a", "b"}}
        )
        .add_field("code", "string")
        .build()
    )

    assert schema.safe_parse({"code": {"$in": ["a", "b"]}}).success
    assert not schema.safe_parse({"code": {"$in": ["a", "c"]}}).success


# -- logging -----------------------------------------------------------------


def test_build_and_rejection_logged_at_debug(caplog) -> None:
    caplog.set_level("DEBUG", logger="cqrs_ddd_filter_query")
    schema = FilterQuerySchemaBuilder().add_field("name", "string").build()
    schema.safe_parse({"nope": 1})

    messages = [r.getMessage() for r in caplog.records]
    assert any("Building filter query schema" in m for m in messages)
    assert any("Rejected filter document" in m for m in messages)
    assert all(r.levelname == "DEBUG" for r in caplog.records)
