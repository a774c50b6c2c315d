"""
Entity catalog protocol for Rollcall.

Defines the EntityCatalog Protocol that catalog backends must satisfy.
"""

from typing import Protocol, runtime_checkable

from rollcall.catalog.filters import CatalogFilter
from rollcall.catalog.model import CatalogEntity


@runtime_checkable
class EntityCatalog(Protocol):
    """Read-only query interface to the entity catalog.

    Implementations must satisfy this interface structurally (duck typing),
    no inheritance required. Transport and authorization failures are raised
    as-is; callers do not expect them to be wrapped.
    """

    async def get_entities(self, filter: CatalogFilter, token: str) -> list[CatalogEntity]:
        """Return all entities matching the filter.

        Args:
            filter: OR of AND-clauses over attribute paths. An empty filter
                matches nothing.
            token: Bearer credential for this call. Empty means unauthenticated.

        Returns:
            Matching entities, in catalog order.
        """
        ...
