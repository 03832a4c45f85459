"""Shopify catalog access layer and MCP server."""

__version__ = "0.1.0"
