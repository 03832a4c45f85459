"""Shopify Admin API client.

Thin GraphQL client for the Shopify Admin API. Owns the HTTP session and
the offline access token; turns every network, HTTP or GraphQL-level
failure into a ``TransportError``. Nothing is retried here.
"""

import re
from typing import Any

import httpx
import structlog

from shopcatalog.domain.exceptions import ConfigurationError, TransportError
from shopcatalog.infrastructure.config import Settings

logger = structlog.get_logger()

_OPERATION_NAME = re.compile(r"\b(?:query|mutation)\s+(\w+)")


def operation_name(document: str) -> str:
    """Extract the operation name from a GraphQL document."""
    match = _OPERATION_NAME.search(document)
    return match.group(1) if match else "anonymous"


def format_graphql_errors(errors: list[dict[str, Any]]) -> str:
    """Join GraphQL error messages into one string."""
    return "; ".join(str(e.get("message", "Unknown error")) for e in errors)


class ShopifyAdminClient:
    """HTTP client for the Shopify Admin GraphQL API.

    One instance is shared by every catalog call. The access token is an
    offline token, so the client holds no per-call session state.
    """

    def __init__(
        self,
        shop: str,
        access_token: str,
        api_version: str = "2025-07",
        timeout: float = 30.0,
    ) -> None:
        """Initialize the API client.

        Args:
            shop: Shop domain (``my-store.myshopify.com``).
            access_token: Admin API access token.
            api_version: Admin API version.
            timeout: Request timeout in seconds.

        Raises:
            ConfigurationError: If the shop or the access token is missing.
        """
        missing = [
            name
            for name, value in (("shopify_shop", shop), ("shopify_access_token", access_token))
            if not value or not value.strip()
        ]
        if missing:
            raise ConfigurationError(missing)

        self.shop = re.sub(r"^https?://", "", shop.strip()).rstrip("/")
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self.base_url = f"https://{self.shop}/admin/api/{api_version}"
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ShopifyAdminClient":
        """Create a client from application settings."""
        return cls(
            shop=settings.shopify_shop,
            access_token=settings.shopify_access_token,
            api_version=settings.shopify_api_version,
            timeout=settings.shopify_request_timeout,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={
                    "X-Shopify-Access-Token": self.access_token,
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL query or mutation.

        Args:
            document: GraphQL document.
            variables: Operation variables.

        Returns:
            The ``data`` object of the response (empty when absent).

        Raises:
            TransportError: On network, HTTP or GraphQL errors.
        """
        client = await self._get_client()
        operation = operation_name(document)

        logger.debug("Sending GraphQL request", operation=operation)

        try:
            response = await client.post(
                "/graphql.json",
                json={"query": document, "variables": variables or {}},
            )
        except httpx.TimeoutException as e:
            logger.error("GraphQL request timeout", operation=operation, error=str(e))
            raise TransportError(
                f"Request timed out: {operation}",
                status_code=504,
            ) from e
        except httpx.RequestError as e:
            logger.error("GraphQL request failed", operation=operation, error=str(e))
            raise TransportError(f"Request failed: {str(e)}") from e

        if response.status_code >= 400:
            logger.error(
                "GraphQL request rejected",
                operation=operation,
                status_code=response.status_code,
            )
            raise TransportError(
                f"Shopify API returned HTTP {response.status_code} for {operation}",
                status_code=response.status_code,
                details={"body": response.text[:500]},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(
                f"Invalid JSON in response to {operation}",
                status_code=response.status_code,
            ) from e

        errors = payload.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [{"message": str(errors)}]
            logger.error("GraphQL errors", operation=operation, errors=errors)
            raise TransportError(
                f"GraphQL errors in {operation}: {format_graphql_errors(errors)}",
                status_code=response.status_code,
                details={"errors": errors},
            )

        return payload.get("data") or {}
