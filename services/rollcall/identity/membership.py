"""Membership claim resolution.

Turns the entity references an identity provider asserted for a principal
into the set of canonical references to embed in its token: the references
themselves plus every entity they are directly a member of. Only one hop of
``memberOf`` is followed.
"""

from collections.abc import Iterable, Sequence

from rollcall.auth.tokens import ServiceTokenIssuer
from rollcall.catalog.filters import entity_refs_filter
from rollcall.catalog.model import (
    DEFAULT_KIND,
    DEFAULT_NAMESPACE,
    RELATION_MEMBER_OF,
    EntityReference,
    MalformedReference,
    parse_entity_ref,
    stringify_entity_ref,
)
from rollcall.catalog.protocol import EntityCatalog
from rollcall.identity.diagnostics import NULL_LOGGER, StructuredLogger
from rollcall.identity.refset import OrderedRefSet

MembershipResult = list[str]


class MembershipClaimResolver:
    """Expands raw entity references with their direct group memberships."""

    def __init__(
        self,
        catalog: EntityCatalog,
        token_issuer: ServiceTokenIssuer,
        logger: StructuredLogger | None = None,
    ):
        self.catalog = catalog
        self.token_issuer = token_issuer
        self.logger = logger or NULL_LOGGER

    def normalize(
        self, raw_refs: Iterable[str], logger: StructuredLogger | None = None
    ) -> list[EntityReference]:
        """Parse raw references, dropping (and logging) the malformed ones.

        Order is preserved and duplicates are kept.
        """
        log = logger or self.logger
        parsed: list[EntityReference] = []
        for raw in raw_refs:
            result = parse_entity_ref(
                raw, default_kind=DEFAULT_KIND, default_namespace=DEFAULT_NAMESPACE
            )
            if isinstance(result, MalformedReference):
                log.warning(
                    "Failed to parse entity ref, ignoring",
                    ref=result.raw,
                    reason=result.reason,
                )
                continue
            parsed.append(result)
        return parsed

    async def resolve_membership(
        self,
        raw_refs: Sequence[str],
        logger: StructuredLogger | None = None,
    ) -> MembershipResult:
        """Resolve raw references to canonical refs plus direct memberships.

        Malformed references are dropped and references missing from the
        catalog are kept as given; neither fails the call. Catalog and
        credential errors propagate unchanged.

        Args:
            raw_refs: ``[kind:][namespace/]name`` strings, any case.
            logger: Overrides the resolver's logger for this call.

        Returns:
            Unique canonical reference strings: parsed inputs first, then
            membership targets, each in first-seen order.
        """
        log = logger or self.logger
        parsed = self.normalize(raw_refs, log)

        service_token = await self.token_issuer.get_token()

        if not parsed:
            log.debug("No valid entity refs to resolve, skipping catalog query")
            return []

        requested = OrderedRefSet(parsed)
        entities = await self.catalog.get_entities(
            entity_refs_filter(requested), service_token.token
        )

        if len(entities) != len(requested):
            found = {stringify_entity_ref(entity.ref) for entity in entities}
            missing = [ref for ref in requested.canonical() if ref not in found]
            if missing:
                log.debug("Entities not found for refs", refs=missing)

        member_of = [
            target
            for entity in entities
            for target in entity.relation_targets(RELATION_MEMBER_OF)
        ]

        claims = OrderedRefSet(parsed)
        claims.update(member_of)
        result = claims.canonical()

        log.debug("Found catalog membership", refs=result)
        return result
