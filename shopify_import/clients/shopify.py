"""Shopify Admin GraphQL operations used by the importer."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from ..config import RemoteProductRef
from .base import BaseClient, GraphQLResult


PRODUCT_BY_HANDLE_QUERY = """
query productByHandle($handle: String!) {
  productByHandle(handle: $handle) { id handle }
}
"""

FIRST_VARIANT_QUERY = """
query getFirstVariant($id: ID!) {
  node(id: $id) { ... on Product { variants(first: 1) { nodes { id } } } }
}
"""

PRODUCT_CREATE_MUTATION = """
mutation productCreate($product: ProductCreateInput!, $media: [CreateMediaInput!]) {
  productCreate(product: $product, media: $media) {
    product { id handle title variants(first: 1) { nodes { id } } }
    userErrors { field message }
  }
}
"""

PRODUCT_UPDATE_MUTATION = """
mutation productUpdate($input: ProductInput!) {
  productUpdate(input: $input) {
    product { id handle }
    userErrors { field message }
  }
}
"""

PRODUCT_CREATE_MEDIA_MUTATION = """
mutation productCreateMedia($productId: ID!, $media: [CreateMediaInput!]!) {
  productCreateMedia(productId: $productId, media: $media) {
    media { ... on MediaImage { id image { url } } ... on Model3d { id } }
    userErrors { field message }
  }
}
"""

VARIANTS_BULK_UPDATE_MUTATION = """
mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
  productVariantsBulkUpdate(productId: $productId, variants: $variants) {
    product { id }
    productVariants { id title price sku barcode }
    userErrors { field message }
  }
}
"""

# Keys handled by dedicated mutations, never sent with productUpdate
_UPDATE_EXCLUDED_KEYS = ("variants", "images", "media")


def _join_messages(errors: List[Dict[str, Any]]) -> str:
    return "; ".join(str(error.get("message", error)) for error in errors)


class MutationResult(BaseModel):
    """Outcome of a mutation: its payload plus both error lists."""

    payload: Dict[str, Any] = Field(default_factory=dict)
    user_errors: List[Dict[str, Any]] = Field(default_factory=list)
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.user_errors and not self.errors

    def describe_errors(self) -> str:
        messages = [_join_messages(self.errors)] if self.errors else []
        for user_error in self.user_errors:
            field = user_error.get("field")
            message = user_error.get("message", "")
            if field:
                field_path = ".".join(str(part) for part in field) if isinstance(field, list) else str(field)
                messages.append(f"{field_path}: {message}")
            else:
                messages.append(str(message))
        return "; ".join(messages)

    @classmethod
    def from_result(cls, result: GraphQLResult, field: str) -> "MutationResult":
        payload = result.data.get(field) or {}
        return cls(
            payload=payload,
            user_errors=payload.get("userErrors") or [],
            errors=result.errors,
        )


class ProductLookup(BaseModel):
    """Result of a product lookup; ``product`` is None on a miss."""

    product: Optional[RemoteProductRef] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def describe_errors(self) -> str:
        return _join_messages(self.errors)


class VariantLookup(BaseModel):
    """Result of a primary-variant lookup; ``variant_id`` is None on a miss."""

    variant_id: Optional[str] = None
    errors: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def describe_errors(self) -> str:
        return _join_messages(self.errors)


class ShopifyClient(BaseClient):
    """GraphQL client for the Shopify Admin API."""

    async def find_product_by_handle(self, handle: str) -> ProductLookup:
        """Look up a product by handle."""
        result = await self.execute(PRODUCT_BY_HANDLE_QUERY, {"handle": handle})
        product = result.data.get("productByHandle")
        ref = None
        if product and product.get("id"):
            ref = RemoteProductRef(id=product["id"], handle=product.get("handle"))
        return ProductLookup(product=ref, errors=result.errors)

    async def get_first_variant_id(self, product_id: str) -> VariantLookup:
        """Get the id of a product's primary variant."""
        result = await self.execute(FIRST_VARIANT_QUERY, {"id": product_id})
        node = result.data.get("node") or {}
        nodes = (node.get("variants") or {}).get("nodes") or []
        variant_id = nodes[0].get("id") if nodes else None
        return VariantLookup(variant_id=variant_id or None, errors=result.errors)

    async def create_product(
        self,
        product_input: Dict[str, Any],
        media: Optional[List[Dict[str, str]]] = None
    ) -> MutationResult:
        """Create a product, optionally with media."""
        variables: Dict[str, Any] = {"product": product_input}
        if media:
            variables["media"] = media

        result = await self.execute(PRODUCT_CREATE_MUTATION, variables)
        return MutationResult.from_result(result, "productCreate")

    async def update_product(self, product_id: str, product_input: Dict[str, Any]) -> MutationResult:
        """Update product-level fields.

        Variant and media keys are dropped from the input even if a caller
        passes them; those go through their own mutations.
        """
        input_data = {"id": product_id, **product_input}
        for key in _UPDATE_EXCLUDED_KEYS:
            input_data.pop(key, None)

        result = await self.execute(PRODUCT_UPDATE_MUTATION, {"input": input_data})
        return MutationResult.from_result(result, "productUpdate")

    async def create_media(self, product_id: str, media: List[Dict[str, str]]) -> MutationResult:
        """Attach media to an existing product."""
        if not media:
            return MutationResult()

        result = await self.execute(
            PRODUCT_CREATE_MEDIA_MUTATION,
            {"productId": product_id, "media": media}
        )
        return MutationResult.from_result(result, "productCreateMedia")

    async def bulk_update_variants(self, product_id: str, variants: List[Dict[str, Any]]) -> MutationResult:
        """Update one or more variants of a product."""
        if not variants:
            return MutationResult()

        result = await self.execute(
            VARIANTS_BULK_UPDATE_MUTATION,
            {"productId": product_id, "variants": variants}
        )
        return MutationResult.from_result(result, "productVariantsBulkUpdate")


def created_product(result: MutationResult) -> Optional[RemoteProductRef]:
    """Extract the created product reference from a productCreate result."""
    product = result.payload.get("product")
    if product and product.get("id"):
        return RemoteProductRef(id=product["id"], handle=product.get("handle"))
    return None


def created_variant_id(result: MutationResult) -> Optional[str]:
    """Primary variant id from a productCreate result."""
    product = result.payload.get("product") or {}
    nodes = (product.get("variants") or {}).get("nodes") or []
    if nodes and nodes[0].get("id"):
        return nodes[0]["id"]
    return None
