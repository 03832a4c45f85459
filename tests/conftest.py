"""Pytest configuration and fixtures for catalog tests."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from shopcatalog.catalog.service import CatalogService
from shopcatalog.infrastructure.admin_client import ShopifyAdminClient
from shopcatalog.infrastructure.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fake credentials."""
    return Settings(
        shopify_shop="test-store.myshopify.com",
        shopify_access_token="shpat_test",
        creation_poll_interval=1.5,
        creation_poll_timeout=120.0,
    )


@pytest.fixture
def mock_client() -> MagicMock:
    """Create a mock Admin API client.

    Script responses with ``mock_client.execute.side_effect = [...]``.
    """
    client = MagicMock(spec=ShopifyAdminClient)
    client.execute = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def catalog(mock_client: MagicMock, test_settings: Settings) -> CatalogService:
    """Create a CatalogService over the mock client."""
    return CatalogService(client=mock_client, config=test_settings)


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Clock and sleep pair for polling tests."""
    return FakeClock()


# ============================================================================
# Response builders
# ============================================================================


def make_variant_node(
    variant_id: int = 1,
    price: str = "19.99",
    sku: str | None = None,
    available: bool = True,
    inventory: int | None = 5,
    options: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Create a ProductVariant node."""
    return {
        "id": f"gid://shopify/ProductVariant/{variant_id}",
        "title": " / ".join((options or {"Title": "Default Title"}).values()),
        "price": price,
        "sku": sku,
        "availableForSale": available,
        "inventoryQuantity": inventory,
        "selectedOptions": [
            {"name": name, "value": value}
            for name, value in (options or {"Title": "Default Title"}).items()
        ],
    }


def make_connection(
    nodes: list[dict[str, Any]],
    has_next_page: bool = False,
    end_cursor: str | None = None,
) -> dict[str, Any]:
    """Create a GraphQL connection object."""
    return {
        "nodes": nodes,
        "pageInfo": {"hasNextPage": has_next_page, "endCursor": end_cursor},
    }


def make_image_media(url: str, alt: str | None = None) -> dict[str, Any]:
    """Create an IMAGE media entry."""
    return {
        "mediaContentType": "IMAGE",
        "alt": alt,
        "preview": {"image": {"url": url, "altText": alt}},
        "image": {"url": url, "altText": alt},
    }


def make_video_media(preview_url: str | None) -> dict[str, Any]:
    """Create a VIDEO media entry with an optional preview."""
    return {
        "mediaContentType": "VIDEO",
        "alt": None,
        "preview": {"image": {"url": preview_url, "altText": None}} if preview_url else None,
    }


def make_product_node(
    product_id: int = 42,
    title: str = "Wool Socks",
    variants: list[dict[str, Any]] | None = None,
    min_price: str = "19.99",
    max_price: str = "24.99",
    currency: str = "USD",
    featured_media: dict[str, Any] | None = None,
    media: list[dict[str, Any]] | None = None,
    variants_has_next: bool = False,
    variants_end_cursor: str | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Create a Product node as returned by the product queries."""
    node = {
        "id": f"gid://shopify/Product/{product_id}",
        "title": title,
        "description": "Warm socks",
        "handle": "wool-socks",
        "productType": "Socks",
        "vendor": "Acme",
        "tags": ["winter", "wool"],
        "updatedAt": "2025-01-15T10:00:00Z",
        "featuredMedia": featured_media,
        "media": {"nodes": media or []},
        "priceRangeV2": {
            "minVariantPrice": {"amount": min_price, "currencyCode": currency},
            "maxVariantPrice": {"amount": max_price, "currencyCode": currency},
        },
        "variantsCount": {"count": len(variants or [])},
        "variants": make_connection(
            variants if variants is not None else [make_variant_node()],
            has_next_page=variants_has_next,
            end_cursor=variants_end_cursor,
        ),
    }
    node.update(overrides)
    return node


def make_product_set_response(
    product_id: str | None = None,
    operation: dict[str, Any] | None = None,
    user_errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create a productSet mutation payload."""
    return {
        "productSet": {
            "product": {"id": product_id} if product_id else None,
            "productSetOperation": operation,
            "userErrors": user_errors or [],
        }
    }


def make_operation(
    status: str,
    product_id: str | None = None,
    operation_id: str = "gid://shopify/ProductSetOperation/7",
    user_errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Create a ProductSetOperation object."""
    return {
        "id": operation_id,
        "status": status,
        "product": {"id": product_id} if product_id else None,
        "userErrors": user_errors or [],
    }


def make_operation_response(status: str, product_id: str | None = None, **kwargs: Any) -> dict[str, Any]:
    """Create a productOperation query payload."""
    return {"productOperation": make_operation(status, product_id, **kwargs)}
