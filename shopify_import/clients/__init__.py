"""GraphQL clients for the Shopify Admin API."""

from .base import APIError, AuthenticationError, GraphQLResult, NotFoundError, RateLimitError
from .shopify import MutationResult, ProductLookup, ShopifyClient, VariantLookup

__all__ = [
    "ShopifyClient",
    "GraphQLResult",
    "MutationResult",
    "ProductLookup",
    "VariantLookup",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
    "NotFoundError",
]
