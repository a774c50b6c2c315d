"""
Identity resolution against the entity catalog.

Unique user lookup and membership claim resolution for sign-in flows.
"""

from rollcall.identity.client import CatalogIdentityClient, create_identity_client
from rollcall.identity.errors import ConflictError, IdentityResolutionError, NotFoundError
from rollcall.identity.membership import MembershipClaimResolver, MembershipResult
from rollcall.identity.user_lookup import UserLookupResolver

__all__ = [
    "CatalogIdentityClient",
    "ConflictError",
    "IdentityResolutionError",
    "MembershipClaimResolver",
    "MembershipResult",
    "NotFoundError",
    "UserLookupResolver",
    "create_identity_client",
]
