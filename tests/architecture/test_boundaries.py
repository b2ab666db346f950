from pytest_archon import archrule


def test_leaf_modules_independence() -> None:
    """
    Declarations, limits and primitives are the foundation.
    They must not depend on validation, rewriting or the builder.
    """
    (
        archrule("leaf_modules_are_independent")
        .match("cqrs_ddd_filter_query.operators")
        .match("cqrs_ddd_filter_query.violations")
        .match("cqrs_ddd_filter_query.limits")
        .match("cqrs_ddd_filter_query.primitives")
        .match("cqrs_ddd_filter_query.fields")
        .match("cqrs_ddd_filter_query.utils")
        .should_not_import("cqrs_ddd_filter_query.schema*")
        .should_not_import("cqrs_ddd_filter_query.rewriter*")
        .should_not_import("cqrs_ddd_filter_query.builder*")
        .check("cqrs_ddd_filter_query", only_direct_imports=True)
    )


def test_rewriter_layering() -> None:
    """
    The rewriter only runs on accepted documents.
    It must not depend on the validator or the builder.
    """
    (
        archrule("rewriter_layering")
        .match("cqrs_ddd_filter_query.rewriter")
        .should_not_import("cqrs_ddd_filter_query.schema*")
        .should_not_import("cqrs_ddd_filter_query.builder*")
        .check("cqrs_ddd_filter_query", only_direct_imports=True)
    )


def test_schema_does_not_import_builder() -> None:
    """
    The schema is built by the builder, never the other way round.
    """
    (
        archrule("schema_layering")
        .match("cqrs_ddd_filter_query.schema")
        .match("cqrs_ddd_filter_query.comparison")
        .should_not_import("cqrs_ddd_filter_query.builder*")
        .should_not_import("cqrs_ddd_filter_query.entity*")
        .check("cqrs_ddd_filter_query", only_direct_imports=True)
    )
