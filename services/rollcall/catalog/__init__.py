"""
Entity catalog access for Rollcall.

Provides create_entity_catalog() to build the configured catalog client.
"""

from rollcall.catalog.http import HttpEntityCatalog
from rollcall.catalog.protocol import EntityCatalog
from rollcall.config import CatalogConfig
from rollcall.logging_config import get_logger

logger = get_logger(__name__)


def create_entity_catalog(config: CatalogConfig) -> EntityCatalog:
    """Build the HTTP catalog client from configuration."""
    logger.info("Catalog client configured", base_url=config.base_url)
    return HttpEntityCatalog(base_url=config.base_url, timeout=config.timeout_seconds)
