"""Infrastructure layer - settings and the Shopify Admin API client."""

from shopcatalog.infrastructure.admin_client import ShopifyAdminClient
from shopcatalog.infrastructure.config import Settings, settings

__all__ = [
    "Settings",
    "ShopifyAdminClient",
    "settings",
]
