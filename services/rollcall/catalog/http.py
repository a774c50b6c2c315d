"""HTTP entity catalog client.

Queries ``GET {base_url}/entities`` with one ``filter`` query parameter per
OR-clause. Each parameter holds the clause's predicates as
``path=value,path=value``; httpx takes care of URL encoding.

HTTP errors are not wrapped: non-2xx responses raise httpx.HTTPStatusError
and connection problems raise httpx.RequestError.
"""

from typing import Any

import httpx

from rollcall.catalog.filters import CatalogFilter, FilterClause, InvalidFilterError
from rollcall.catalog.model import CatalogEntity
from rollcall.logging_config import get_logger

logger = get_logger(__name__)


def render_clause(clause: FilterClause) -> str:
    """Render one AND-clause as a catalog ``filter`` parameter value.

    Raises:
        InvalidFilterError: If a value contains ``,``, which the wire format
            uses to separate predicates.
    """
    for predicate in clause:
        if "," in predicate.value:
            raise InvalidFilterError(f"Filter value for {predicate.path!r} may not contain ','")
    return ",".join(f"{p.path}={p.value}" for p in clause)


class HttpEntityCatalog:
    """EntityCatalog backed by the catalog REST API.

    A fresh httpx client is opened per query and closed before returning,
    so no connections outlive a call.
    """

    def __init__(self, base_url: str, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self, token: str) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def get_entities(self, filter: CatalogFilter, token: str) -> list[CatalogEntity]:
        if filter.is_empty():
            # An empty filter parameter list would mean "everything" to the API
            return []

        params = [("filter", render_clause(clause)) for clause in filter.clauses]

        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout) as client:
            response = await client.get("/entities", params=params, headers=self._headers(token))
            response.raise_for_status()
            body = response.json()

        items = self._items(body)
        logger.debug("Catalog query", clauses=len(params), results=len(items))
        return [CatalogEntity.model_validate(item) for item in items]

    @staticmethod
    def _items(body: Any) -> list[Any]:
        if isinstance(body, dict):
            return list(body.get("items") or [])
        if isinstance(body, list):
            return body
        raise ValueError(f"Unexpected catalog response type: {type(body).__name__}")
