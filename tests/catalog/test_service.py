"""Tests for the catalog service."""

from unittest.mock import AsyncMock

import pytest

from shopcatalog.catalog.queries import (
    LOCATIONS_QUERY,
    PRODUCT_DETAIL_QUERY,
    PRODUCT_VARIANTS_QUERY,
    SHOP_QUERY,
)
from shopcatalog.catalog.service import CatalogService
from shopcatalog.domain.exceptions import (
    ConfigurationError,
    CreateRequestInvalidError,
    PaginationStalledError,
    ProductNotFoundError,
    TransportError,
    UnsupportedIdentifierError,
)
from shopcatalog.domain.models import CreateProductRequest, SearchRequest
from shopcatalog.infrastructure.config import Settings
from tests.conftest import (
    make_connection,
    make_product_node,
    make_product_set_response,
    make_variant_node,
)


class TestConstruction:
    """Tests for service construction."""

    def test_from_settings_requires_credentials(self) -> None:
        """Missing credentials fail at construction."""
        with pytest.raises(ConfigurationError) as exc_info:
            CatalogService.from_settings(Settings(shopify_shop="", shopify_access_token=""))
        assert exc_info.value.details["missing"] == ["shopify_shop", "shopify_access_token"]

    def test_from_settings(self, test_settings) -> None:
        """The client is built from settings."""
        service = CatalogService.from_settings(test_settings)
        assert service.client.base_url == (
            "https://test-store.myshopify.com/admin/api/2025-07"
        )
        assert service.orchestrator.timeout == 120.0

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self, mock_client, test_settings) -> None:
        """Leaving the context closes the client."""
        async with CatalogService(mock_client, test_settings) as service:
            assert service.client is mock_client
        mock_client.close.assert_awaited_once()


class TestSearch:
    """Tests for product search."""

    @pytest.mark.asyncio
    async def test_search_normalizes_page(self, catalog, mock_client) -> None:
        """Raw product nodes become unified products."""
        mock_client.execute.side_effect = [
            {"productsCount": {"count": 1}},
            {"products": make_connection([make_product_node(product_id=42)], False, "c1")},
        ]

        page = await catalog.search(SearchRequest(query="socks", limit=5))

        assert [p.id for p in page.items] == ["42"]
        assert page.meta.total == 1
        assert page.meta.has_next is False
        variables = mock_client.execute.call_args.args[1]
        assert variables["query"] == "socks inventory_total:>0"
        assert variables["sortKey"] == "RELEVANCE"
        assert variables["variantsFirst"] == 25

    @pytest.mark.asyncio
    async def test_search_past_end(self, catalog, mock_client) -> None:
        """Searching past the last page returns an empty page."""
        mock_client.execute.side_effect = [
            {"productsCount": {"count": 0}},
            {"products": make_connection([], False, None)},
        ]

        page = await catalog.search(SearchRequest(page=2))

        assert page.items == []
        assert page.meta.has_next is False
        assert page.meta.has_prev is True


class TestGetProduct:
    """Tests for product lookup."""

    @pytest.mark.asyncio
    async def test_lookup_by_numeric_id(self, catalog, mock_client) -> None:
        """Numeric ids are converted to global ids."""
        mock_client.execute.side_effect = [{"product": make_product_node(product_id=42)}]

        product = await catalog.get_product("42")

        assert product.id == "42"
        mock_client.execute.assert_awaited_once_with(
            PRODUCT_DETAIL_QUERY,
            {"id": "gid://shopify/Product/42", "variantsFirst": 250},
        )

    @pytest.mark.asyncio
    async def test_variant_overflow(self, catalog, mock_client) -> None:
        """A product with 300 variants needs one overflow fetch."""
        first_page = [make_variant_node(variant_id=i) for i in range(1, 251)]
        overflow = [make_variant_node(variant_id=i) for i in range(251, 301)]
        mock_client.execute.side_effect = [
            {
                "product": make_product_node(
                    product_id=42,
                    variants=first_page,
                    variants_has_next=True,
                    variants_end_cursor="v250",
                )
            },
            {"product": {"variants": make_connection(overflow, False, "v300")}},
        ]

        product = await catalog.get_product("gid://shopify/Product/42")

        assert len(product.variants) == 300
        assert [v.id for v in product.variants] == [str(i) for i in range(1, 301)]
        assert mock_client.execute.call_count == 2
        overflow_call = mock_client.execute.call_args_list[1]
        assert overflow_call.args == (
            PRODUCT_VARIANTS_QUERY,
            {"id": "gid://shopify/Product/42", "first": 250, "after": "v250"},
        )

    @pytest.mark.asyncio
    async def test_variant_next_page_without_cursor(self, catalog, mock_client) -> None:
        """A next variant page without a cursor raises instead of restarting."""
        mock_client.execute.side_effect = [
            {
                "product": make_product_node(
                    product_id=42,
                    variants=[make_variant_node(variant_id=i) for i in (1, 2, 3)],
                    variants_has_next=True,
                    variants_end_cursor=None,
                )
            },
            {"product": {"variants": make_connection([make_variant_node(variant_id=1)], True, "c1")}},
            {"product": {"variants": make_connection([make_variant_node(variant_id=4)], False, None)}},
        ]

        with pytest.raises(PaginationStalledError) as exc_info:
            await catalog.get_product("42")

        assert exc_info.value.details == {"connection": "product.variants", "cursor": None}
        assert mock_client.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_not_found(self, catalog, mock_client) -> None:
        """A missing product raises ProductNotFoundError."""
        mock_client.execute.side_effect = [{"product": None}]

        with pytest.raises(ProductNotFoundError) as exc_info:
            await catalog.get_product("42")

        assert exc_info.value.details["product_id"] == "42"

    @pytest.mark.asyncio
    async def test_handle_unsupported(self, catalog, mock_client) -> None:
        """Handles are refused without calling the backend."""
        with pytest.raises(UnsupportedIdentifierError):
            await catalog.get_product("wool-socks")

        mock_client.execute.assert_not_called()


class TestListLocations:
    """Tests for location listing."""

    @pytest.mark.asyncio
    async def test_list_locations(self, catalog, mock_client) -> None:
        """Locations are returned with local ids."""
        mock_client.execute.side_effect = [
            {
                "locations": make_connection(
                    [
                        {
                            "id": "gid://shopify/Location/1",
                            "name": "Warehouse",
                            "isActive": True,
                            "fulfillsOnlineOrders": True,
                        },
                        {
                            "id": "gid://shopify/Location/2",
                            "name": "Pop-up",
                            "isActive": False,
                            "fulfillsOnlineOrders": False,
                        },
                    ]
                )
            }
        ]

        locations = await catalog.list_locations()

        assert [(loc.id, loc.name, loc.is_active) for loc in locations] == [
            ("1", "Warehouse", True),
            ("2", "Pop-up", False),
        ]
        assert mock_client.execute.call_args.args == (
            LOCATIONS_QUERY,
            {"first": 100, "after": None},
        )


class TestCreateProduct:
    """Tests for product creation."""

    @pytest.mark.asyncio
    async def test_returns_local_id(self, catalog, mock_client) -> None:
        """The created product's local id is returned."""
        mock_client.execute.side_effect = [
            make_product_set_response("gid://shopify/Product/42"),
        ]
        request = CreateProductRequest(
            title="T",
            options=[{"name": "Size", "values": [{"name": "S"}]}],
            variants=[{"option_values": [{"option_name": "Size", "name": "S"}], "price": 10}],
        )

        assert await catalog.create_product(request) == "42"

    @pytest.mark.asyncio
    async def test_invalid_request_not_submitted(self, catalog, mock_client) -> None:
        """Invalid requests never reach the backend."""
        request = CreateProductRequest(
            title="T",
            options=[{"name": "Size", "values": [{"name": "S"}]}],
            variants=[
                {"option_values": [{"option_name": "Size", "name": "S"}], "price": 10},
                {"option_values": [{"option_name": "Size", "name": "S"}], "price": 12},
            ],
        )

        with pytest.raises(CreateRequestInvalidError):
            await catalog.create_product(request)

        mock_client.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_timeout_passed_to_orchestrator(self, catalog) -> None:
        """A per-call timeout reaches the orchestrator."""
        catalog.orchestrator.create = AsyncMock(return_value="gid://shopify/Product/9")

        product_id = await catalog.create_product(CreateProductRequest(title="Gift"), timeout=5.0)

        assert product_id == "9"
        catalog.orchestrator.create.assert_awaited_once()
        assert catalog.orchestrator.create.call_args.kwargs == {"timeout": 5.0}


class TestCheckHealth:
    """Tests for the health check."""

    @pytest.mark.asyncio
    async def test_healthy(self, catalog, mock_client) -> None:
        """Shop data means healthy."""
        mock_client.execute.return_value = {"shop": {"id": "gid://shopify/Shop/1", "name": "Test"}}

        health = await catalog.check_health()

        assert health.status == "healthy"
        assert health.message is None
        mock_client.execute.assert_awaited_once_with(SHOP_QUERY)

    @pytest.mark.asyncio
    async def test_warning_on_empty_data(self, catalog, mock_client) -> None:
        """An empty response is a warning."""
        mock_client.execute.return_value = {}

        health = await catalog.check_health()

        assert health.status == "warning"
        assert health.message == "No data returned from Shopify API"

    @pytest.mark.asyncio
    async def test_error_never_raises(self, catalog, mock_client) -> None:
        """Errors are reported, not raised."""
        mock_client.execute.side_effect = TransportError("Shopify API returned HTTP 401 for shop", 401)

        health = await catalog.check_health()

        assert health.status == "error"
        assert health.message == "Shopify API returned HTTP 401 for shop"

    @pytest.mark.asyncio
    async def test_unexpected_error_never_raises(self, catalog, mock_client) -> None:
        """Unexpected exceptions are reported too."""
        mock_client.execute.side_effect = RuntimeError("boom")

        health = await catalog.check_health()

        assert health.status == "error"
        assert health.message == "boom"
