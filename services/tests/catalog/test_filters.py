"""Tests for structured catalog filter construction."""

import pytest

from rollcall.catalog.filters import (
    CatalogFilter,
    FilterPredicate,
    InvalidFilterError,
    entity_refs_filter,
    user_filter,
)
from rollcall.catalog.model import EntityReference


class TestUserFilter:
    def test_kind_only_when_no_annotations(self):
        query = user_filter({})
        assert query.clauses == ((FilterPredicate("kind", "user"),),)

    def test_annotations_are_anded_in_one_clause(self):
        query = user_filter({"example.com/email": "a@example.com", "example.com/sub": "123"})
        assert len(query.clauses) == 1
        assert query.clauses[0] == (
            FilterPredicate("kind", "user"),
            FilterPredicate("metadata.annotations.example.com/email", "a@example.com"),
            FilterPredicate("metadata.annotations.example.com/sub", "123"),
        )

    @pytest.mark.parametrize(
        "key",
        ["", "email,kind=group", "kind=group", "email name", "-leading-dash", "a\nb"],
    )
    def test_rejects_unsafe_keys(self, key):
        with pytest.raises(InvalidFilterError, match="Invalid annotation key"):
            user_filter({key: "value"})

    def test_value_with_comma_is_kept_verbatim(self):
        query = user_filter({"name": "Doe, Jane"})
        assert query.clauses[0][1] == FilterPredicate("metadata.annotations.name", "Doe, Jane")

    def test_rejects_non_string_value(self):
        with pytest.raises(InvalidFilterError, match="must be a string"):
            user_filter({"email": 42})

    def test_value_with_equals_is_allowed(self):
        query = user_filter({"example.com/token": "abc=="})
        assert query.clauses[0][1].value == "abc=="


class TestEntityRefsFilter:
    def test_one_clause_per_ref(self):
        query = entity_refs_filter(
            [
                EntityReference("user", "default", "alice"),
                EntityReference("group", "ops", "sre"),
            ]
        )
        assert query.clauses == (
            (
                FilterPredicate("kind", "user"),
                FilterPredicate("metadata.namespace", "default"),
                FilterPredicate("metadata.name", "alice"),
            ),
            (
                FilterPredicate("kind", "group"),
                FilterPredicate("metadata.namespace", "ops"),
                FilterPredicate("metadata.name", "sre"),
            ),
        )

    def test_duplicate_refs_collapse(self):
        alice = EntityReference("user", "default", "alice")
        query = entity_refs_filter([alice, EntityReference("User", "Default", "Alice"), alice])
        assert len(query.clauses) == 1

    def test_empty(self):
        query = entity_refs_filter([])
        assert query == CatalogFilter()
        assert query.is_empty()
