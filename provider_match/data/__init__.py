"""Data-tier access for provider matching."""

from .radius_search import (
    RADIUS_SEARCH_FUNCTION,
    RadiusSearchClient,
    RadiusSearchDataSource,
    RpcError,
    RpcResponse,
    adapt_provider_row,
    adapt_provider_rows,
)

__all__ = [
    "RADIUS_SEARCH_FUNCTION",
    "RadiusSearchClient",
    "RadiusSearchDataSource",
    "RpcError",
    "RpcResponse",
    "adapt_provider_row",
    "adapt_provider_rows",
]
