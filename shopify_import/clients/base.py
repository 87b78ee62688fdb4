"""Base GraphQL client over a single HTTP connection."""

import logging
from typing import Any, Dict, List, Optional
import httpx
from pydantic import BaseModel, Field

from ..config import ShopifyConfig


logger = logging.getLogger(__name__)


class APIError(Exception):
    """Transport-level failure: the request did not produce a usable response."""
    pass


class RateLimitError(APIError):
    """Rate limit exceeded."""
    pass


class NotFoundError(APIError):
    """Endpoint not found."""
    pass


class AuthenticationError(APIError):
    """Authentication failed."""
    pass


class GraphQLResult(BaseModel):
    """Parsed GraphQL response: data, or an application-level error list."""

    data: Dict[str, Any] = Field(default_factory=dict)
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error_messages(self) -> List[str]:
        return [str(error.get("message", error)) for error in self.errors]


class BaseClient:
    """GraphQL client. All remote calls funnel through ``execute``."""

    def __init__(self, config: ShopifyConfig, http_client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self.client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(config.timeout))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    @property
    def endpoint(self) -> str:
        return self.config.graphql_url

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests."""
        return {
            "X-Shopify-Access-Token": self.config.access_token,
            "Content-Type": "application/json",
            "User-Agent": "Shopify-Import/1.0.0",
        }

    def _handle_response_errors(self, response: httpx.Response) -> None:
        """Handle common HTTP errors."""
        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed ({response.status_code}) - check SHOPIFY_ADMIN_TOKEN"
            )
        elif response.status_code == 404:
            raise NotFoundError(f"GraphQL endpoint not found: {self.endpoint}")
        elif response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            if retry_after:
                raise RateLimitError(f"Rate limit exceeded. Retry after {retry_after} seconds")
            raise RateLimitError("Rate limit exceeded")
        elif response.status_code >= 500:
            raise APIError(f"Server error: {response.status_code} - {response.text}")
        elif not response.is_success:
            raise APIError(f"API error: {response.status_code} - {response.text}")

    async def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> GraphQLResult:
        """Submit a GraphQL document.

        Returns a GraphQLResult; a response with an ``errors`` array is an
        error result even though the HTTP call succeeded. Transport failures
        raise APIError.
        """
        payload = {"query": document, "variables": variables or {}}
        logger.debug("POST %s variables=%s", self.endpoint, payload["variables"])

        try:
            response = await self.client.post(self.endpoint, headers=self._get_headers(), json=payload)
        except httpx.TimeoutException as e:
            raise APIError(f"Request timed out after {self.config.timeout}s") from e
        except httpx.HTTPError as e:
            raise APIError(f"Connection failed: {e}") from e

        self._handle_response_errors(response)

        try:
            body = response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON response: {response.text[:200]}") from e

        if not isinstance(body, dict):
            raise APIError(f"Unexpected response shape: {type(body).__name__}")

        result = GraphQLResult(data=body.get("data") or {}, errors=body.get("errors") or [])
        if not result.ok:
            logger.warning("GraphQL errors: %s", result.error_messages())
        return result
