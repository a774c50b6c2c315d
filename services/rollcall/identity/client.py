"""Catalog identity client.

Entry point for sign-in flows: finds the catalog user behind an external
identity and resolves the entity claims to put in its token.
"""

from collections.abc import Mapping, Sequence

from rollcall import config
from rollcall.auth import create_token_issuer
from rollcall.auth.tokens import ServiceTokenIssuer
from rollcall.catalog import create_entity_catalog
from rollcall.catalog.model import UserEntity
from rollcall.catalog.protocol import EntityCatalog
from rollcall.config import Settings
from rollcall.identity.diagnostics import StructuredLogger
from rollcall.identity.membership import MembershipClaimResolver, MembershipResult
from rollcall.identity.user_lookup import UserLookupResolver
from rollcall.logging_config import configure_logging, get_logger


class CatalogIdentityClient:
    """Reads identity data out of the catalog. Holds no per-call state."""

    def __init__(
        self,
        catalog: EntityCatalog,
        token_issuer: ServiceTokenIssuer,
        logger: StructuredLogger | None = None,
    ):
        self._users = UserLookupResolver(catalog, token_issuer, logger)
        self._membership = MembershipClaimResolver(catalog, token_issuer, logger)

    async def find_user(self, annotations: Mapping[str, str]) -> UserEntity:
        """Look up a single user by annotations.

        Raises NotFoundError or ConflictError if zero or multiple users match.
        """
        return await self._users.find_user(annotations)

    async def resolve_catalog_membership(
        self,
        entity_refs: Sequence[str],
        logger: StructuredLogger | None = None,
    ) -> MembershipResult:
        """Return the given refs plus their direct catalog memberships.

        The result can be used as-is as the entity claims of a user token.
        """
        return await self._membership.resolve_membership(entity_refs, logger)


def create_identity_client(
    settings: Settings | None = None, logger: StructuredLogger | None = None
) -> CatalogIdentityClient:
    """Wire the HTTP catalog and configured token issuer into a client.

    Without explicit settings this is the process entry point: the global
    settings are used and logging is configured from their ``log_level``
    and ``json_logs``. The client logs under ``app_name`` unless a logger
    is given.
    """
    if settings is None:
        settings = config.settings
        configure_logging(json_logs=settings.json_logs, log_level=settings.log_level)

    return CatalogIdentityClient(
        catalog=create_entity_catalog(settings.catalog),
        token_issuer=create_token_issuer(settings.service_auth),
        logger=logger or get_logger(settings.app_name),
    )
