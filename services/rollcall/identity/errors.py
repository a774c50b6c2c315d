"""Typed failures for unique-match lookups.

Transport and credential failures are not represented here; they reach the
caller as whatever the catalog or token issuer raised.
"""


class IdentityResolutionError(Exception):
    """Base exception for lookups that did not resolve to exactly one entity."""


class NotFoundError(IdentityResolutionError):
    """Raised when a unique lookup matched no entity."""


class ConflictError(IdentityResolutionError):
    """Raised when a unique lookup matched more than one entity."""

    def __init__(self, message: str, match_count: int) -> None:
        self.match_count = match_count
        super().__init__(message)
