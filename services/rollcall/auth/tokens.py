"""Service tokens for authenticating catalog calls.

Every catalog call asks the issuer for a credential; issuers do not cache.
Server tokens are short-lived HS256 JWTs signed with a shared secret that
the catalog backend also holds.
"""

import base64
import binascii
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Protocol, runtime_checkable

import jwt

from rollcall.logging_config import get_logger

logger = get_logger(__name__)

SERVER_TOKEN_ALGORITHM = "HS256"


@dataclass(frozen=True)
class ServiceToken:
    """A bearer credential. An empty token means unauthenticated."""

    token: str
    expires_at: datetime | None = None


@runtime_checkable
class ServiceTokenIssuer(Protocol):
    """Source of service credentials."""

    async def get_token(self) -> ServiceToken:
        """Return a credential for a single outbound call."""
        ...


class NoopTokenIssuer:
    """Issues empty tokens, for catalogs that do not require auth."""

    async def get_token(self) -> ServiceToken:
        return ServiceToken(token="")


class StaticTokenIssuer:
    """Issues one fixed, externally managed bearer token."""

    def __init__(self, token: str):
        if not token:
            raise ValueError("Static service auth requires a token")
        self._token = token

    async def get_token(self) -> ServiceToken:
        return ServiceToken(token=self._token)


def decode_secret(secret: str) -> bytes:
    """Decode a base64 shared secret."""
    try:
        key = base64.b64decode(secret, validate=True)
    except binascii.Error as e:
        raise ValueError("Service auth secret is not valid base64") from e
    if not key:
        raise ValueError("Service auth secret is empty")
    return key


class ServerTokenIssuer:
    """Signs a fresh server JWT on every call."""

    def __init__(self, secret: str, subject: str = "backstage-server", ttl_seconds: int = 3600):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._key = decode_secret(secret)
        self.subject = subject
        self.ttl_seconds = ttl_seconds

    async def get_token(self) -> ServiceToken:
        now = int(time.time())
        exp = now + self.ttl_seconds
        payload = {"sub": self.subject, "iat": now, "exp": exp}
        token = jwt.encode(payload, self._key, algorithm=SERVER_TOKEN_ALGORITHM)
        logger.debug("Server token issued", subject=self.subject, expires_in=self.ttl_seconds)
        return ServiceToken(token=token, expires_at=datetime.fromtimestamp(exp, UTC))

    def authenticate(self, token: str) -> dict[str, Any]:
        """Verify a server token signed with the same secret.

        Returns:
            The decoded claims.

        Raises:
            jwt.InvalidTokenError: If the signature, expiry or required
                claims do not check out.
        """
        return jwt.decode(
            token,
            self._key,
            algorithms=[SERVER_TOKEN_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
