"""In-process entity catalog.

Evaluates CatalogFilter values against a fixed list of entities, with the
same case-insensitive exact matching the catalog API uses. Intended for
local development and tests.
"""

from collections.abc import Iterable
from typing import Any

from rollcall.catalog.filters import ANNOTATION_PATH_PREFIX, CatalogFilter, FilterClause
from rollcall.catalog.model import CatalogEntity


def _lookup(entity: CatalogEntity, path: str) -> Any:
    # Annotation keys may themselves contain dots (e.g. "example.com/email")
    if path.startswith(ANNOTATION_PATH_PREFIX):
        return entity.metadata.annotations.get(path.removeprefix(ANNOTATION_PATH_PREFIX))

    node: Any = entity.model_dump(by_alias=True)
    for part in path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
    return node


def _matches_clause(entity: CatalogEntity, clause: FilterClause) -> bool:
    for predicate in clause:
        actual = _lookup(entity, predicate.path)
        if not isinstance(actual, str) or actual.lower() != predicate.value.lower():
            return False
    return True


class InMemoryEntityCatalog:
    """EntityCatalog over a fixed set of entities.

    Every call is recorded in ``calls`` as a (filter, token) pair.
    """

    def __init__(self, entities: Iterable[CatalogEntity | dict[str, Any]] = ()):
        self.entities: list[CatalogEntity] = [
            e if isinstance(e, CatalogEntity) else CatalogEntity.model_validate(e)
            for e in entities
        ]
        self.calls: list[tuple[CatalogFilter, str]] = []

    async def get_entities(self, filter: CatalogFilter, token: str) -> list[CatalogEntity]:
        self.calls.append((filter, token))
        return [
            entity
            for entity in self.entities
            if any(_matches_clause(entity, clause) for clause in filter.clauses)
        ]
