"""
Shared test fixtures.

HTTP is stubbed with httpx.MockTransport; responses are registered per
GraphQL operation name and every request is recorded.
"""

import io
import json
import re
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest
from rich.console import Console

from shopify_import.clients import ShopifyClient
from shopify_import.config import ShopifyConfig


_OPERATION_RE = re.compile(r"^\s*(?:query|mutation)\s+(\w+)")


# ===================
# GRAPHQL STUB
# ===================

Responder = Union[Dict[str, Any], httpx.Response, Exception, Callable[[Dict[str, Any]], Any]]


class GraphQLStub:
    """Routes GraphQL requests by operation name and records them."""

    def __init__(self):
        self.responses: Dict[str, List[Responder]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []

    def on(self, operation: str, *responses: Responder) -> "GraphQLStub":
        """Queue responses for an operation; the last one repeats."""
        self.responses.setdefault(operation, []).extend(responses)
        return self

    def operations(self) -> List[str]:
        return [call["operation"] for call in self.calls]

    def calls_for(self, operation: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["operation"] == operation]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        match = _OPERATION_RE.match(body["query"])
        operation = match.group(1) if match else "anonymous"
        variables = body.get("variables") or {}

        self.requests.append(request)
        self.calls.append({"operation": operation, "variables": variables})

        queue = self.responses.get(operation)
        if not queue:
            raise AssertionError(f"Unexpected GraphQL operation: {operation}")
        responder = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(responder, Exception):
            raise responder
        if callable(responder):
            responder = responder(variables)
        if isinstance(responder, httpx.Response):
            return responder
        return httpx.Response(200, json=responder)


def data(**payload: Any) -> Dict[str, Any]:
    """Wrap a payload as a successful GraphQL response body."""
    return {"data": payload}


def user_errors(operation: str, *messages: str, field: Optional[List[str]] = None) -> Dict[str, Any]:
    """Mutation response carrying user errors."""
    return data(**{
        operation: {
            "product": None,
            "userErrors": [{"field": field, "message": message} for message in messages],
        }
    })


# ===================
# FIXTURES
# ===================

@pytest.fixture
def shopify_config() -> ShopifyConfig:
    return ShopifyConfig(store="test-shop", access_token="shpat_test", api_version="2024-10")


@pytest.fixture
def stub() -> GraphQLStub:
    return GraphQLStub()


@pytest.fixture
def make_client(shopify_config, stub) -> Callable[..., ShopifyClient]:
    def factory(config: Optional[ShopifyConfig] = None) -> ShopifyClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(stub.handler))
        return ShopifyClient(config or shopify_config, http_client=http_client)

    return factory


@pytest.fixture
def console() -> Console:
    """Quiet console that records output for assertions."""
    return Console(record=True, width=200, file=io.StringIO())


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def fake_sleep(sleeps):
    async def _sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return _sleep
