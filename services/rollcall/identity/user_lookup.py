"""Unique user lookup by annotation values."""

from collections.abc import Mapping

from rollcall.auth.tokens import ServiceTokenIssuer
from rollcall.catalog.filters import user_filter
from rollcall.catalog.model import UserEntity
from rollcall.catalog.protocol import EntityCatalog
from rollcall.identity.diagnostics import NULL_LOGGER, StructuredLogger
from rollcall.identity.errors import ConflictError, NotFoundError


class UserLookupResolver:
    """Finds the single user entity whose annotations match a query.

    Zero matches and multiple matches are different failures: an unknown
    identity and ambiguous catalog data need different remediation, so
    neither is ever resolved by picking a result.
    """

    def __init__(
        self,
        catalog: EntityCatalog,
        token_issuer: ServiceTokenIssuer,
        logger: StructuredLogger | None = None,
    ):
        self.catalog = catalog
        self.token_issuer = token_issuer
        self.logger = logger or NULL_LOGGER

    async def find_user(self, annotations: Mapping[str, str]) -> UserEntity:
        """Look up a user by annotation key/value pairs (all must match).

        Args:
            annotations: e.g. ``{"example.com/email": "alice@example.com"}``.

        Returns:
            The matching user entity.

        Raises:
            InvalidFilterError: If an annotation key or value is not representable.
            NotFoundError: If no user matches.
            ConflictError: If more than one user matches.
        """
        query = user_filter(annotations)

        service_token = await self.token_issuer.get_token()
        items = await self.catalog.get_entities(query, service_token.token)

        if len(items) > 1:
            self.logger.warning(
                "User lookup matched multiple entities",
                annotations=dict(annotations),
                matches=[str(e.ref) for e in items],
            )
            raise ConflictError("User lookup resulted in multiple matches", len(items))
        if not items:
            raise NotFoundError("User not found")

        return UserEntity.model_validate(items[0].model_dump(by_alias=True))
