"""Structured catalog query filters.

A CatalogFilter is a tuple of clauses that are OR-ed together; each clause is
a tuple of (path, value) predicates that are AND-ed. Filters are built from
typed input here and only rendered to a wire format by the catalog client,
so annotation keys never get spliced into a query string unchecked.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from rollcall.catalog.model import EntityReference

KIND_PATH = "kind"
NAMESPACE_PATH = "metadata.namespace"
NAME_PATH = "metadata.name"
ANNOTATION_PATH_PREFIX = "metadata.annotations."

_ANNOTATION_KEY_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._/-]*")


class InvalidFilterError(ValueError):
    """Raised when filter input cannot be represented safely."""


@dataclass(frozen=True)
class FilterPredicate:
    """Exact-match constraint on one attribute path."""

    path: str
    value: str


FilterClause = tuple[FilterPredicate, ...]


@dataclass(frozen=True)
class CatalogFilter:
    """OR of AND-clauses. An empty filter matches nothing."""

    clauses: tuple[FilterClause, ...] = ()

    def is_empty(self) -> bool:
        return not self.clauses


def _annotation_predicate(key: str, value: str) -> FilterPredicate:
    if not isinstance(key, str) or not _ANNOTATION_KEY_RE.fullmatch(key):
        raise InvalidFilterError(f"Invalid annotation key: {key!r}")
    if not isinstance(value, str):
        raise InvalidFilterError(f"Annotation {key!r} value must be a string")
    return FilterPredicate(path=f"{ANNOTATION_PATH_PREFIX}{key}", value=value)


def user_filter(annotations: Mapping[str, str]) -> CatalogFilter:
    """Single clause matching users whose annotations equal every given value.

    Raises:
        InvalidFilterError: If a key is outside the annotation key alphabet
            or a value is not a string.
    """
    predicates = [FilterPredicate(path=KIND_PATH, value="user")]
    for key, value in annotations.items():
        predicates.append(_annotation_predicate(key, value))
    return CatalogFilter(clauses=(tuple(predicates),))


def entity_refs_filter(refs: Iterable[EntityReference]) -> CatalogFilter:
    """One exact-match clause per distinct reference."""
    clauses: dict[EntityReference, FilterClause] = {}
    for ref in refs:
        if ref in clauses:
            continue
        clauses[ref] = (
            FilterPredicate(path=KIND_PATH, value=ref.kind),
            FilterPredicate(path=NAMESPACE_PATH, value=ref.namespace),
            FilterPredicate(path=NAME_PATH, value=ref.name),
        )
    return CatalogFilter(clauses=tuple(clauses.values()))
