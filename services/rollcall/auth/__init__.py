"""
Service authentication for outbound catalog calls.

Provides create_token_issuer() to build the issuer selected in configuration.
"""

from rollcall.auth.tokens import (
    NoopTokenIssuer,
    ServerTokenIssuer,
    ServiceTokenIssuer,
    StaticTokenIssuer,
)
from rollcall.config import ServiceAuthConfig, ServiceAuthMode
from rollcall.logging_config import get_logger

logger = get_logger(__name__)


def create_token_issuer(config: ServiceAuthConfig) -> ServiceTokenIssuer:
    """Build the token issuer for the configured auth mode."""
    match config.mode:
        case ServiceAuthMode.NONE:
            issuer: ServiceTokenIssuer = NoopTokenIssuer()

        case ServiceAuthMode.STATIC:
            issuer = StaticTokenIssuer(config.static_token)

        case ServiceAuthMode.JWT:
            if not config.secret:
                raise ValueError("service_auth.secret is required for jwt mode")
            issuer = ServerTokenIssuer(
                secret=config.secret,
                subject=config.subject,
                ttl_seconds=config.token_ttl_seconds,
            )

    logger.info("Service token issuer configured", mode=str(config.mode))
    return issuer
