"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Catalog settings loaded from environment variables."""

    # Shopify Admin API
    shopify_shop: str = Field(
        default="",
        description="Shop domain, e.g. my-store.myshopify.com",
    )
    shopify_access_token: str = Field(
        default="",
        description="Offline Admin API access token",
    )
    shopify_api_version: str = "2025-07"
    shopify_request_timeout: float = 30.0

    # Pagination
    variant_page_size: int = Field(default=250, ge=1, le=250)
    search_variants_first: int = Field(default=25, ge=1, le=250)
    locations_page_size: int = Field(default=100, ge=1, le=250)

    # Product creation
    creation_poll_interval: float = Field(default=1.5, gt=0)
    creation_poll_timeout: float = Field(default=120.0, gt=0)
    sync_variant_threshold: int = 10

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
