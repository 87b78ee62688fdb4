"""Configuration models and settings for Shopify product imports."""

import os
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_API_VERSION = "2024-10"


class ConfigError(Exception):
    """Required configuration is missing or invalid."""
    pass


class ShopifyConfig(BaseModel):
    """Shopify Admin GraphQL API configuration."""

    model_config = ConfigDict(frozen=True)

    store: str
    access_token: str
    api_version: str = DEFAULT_API_VERSION
    timeout: float = 30.0

    @property
    def shop_domain(self) -> str:
        """Full myshopify host, accepting either a bare shop name or a host."""
        store = self.store.strip().rstrip("/")
        for prefix in ("https://", "http://"):
            if store.startswith(prefix):
                store = store[len(prefix):]
        if "." in store:
            return store
        return f"{store}.myshopify.com"

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"


class ImportConfig(BaseModel):
    """Main application configuration."""

    model_config = ConfigDict(frozen=True)

    shopify: ShopifyConfig

    # Pacing between rows (seconds)
    row_delay: float = Field(default=0.7, ge=0.0, le=60.0)
    error_delay: float = Field(default=2.0, ge=0.0, le=300.0)

    # Processing options
    limit: Optional[int] = Field(default=None, ge=1)
    dry_run: bool = False


# ---------------------------------------------------------------------------
# Import records
# ---------------------------------------------------------------------------

class Metafield(BaseModel):
    """A namespaced custom attribute attached to a product."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    key: str
    value: str
    type: str


class MediaRef(BaseModel):
    """An image to attach to a product by URL."""

    model_config = ConfigDict(frozen=True)

    original_source: str
    media_content_type: str = "IMAGE"

    def to_input(self) -> Dict[str, str]:
        """Shape as a CreateMediaInput."""
        return {
            "mediaContentType": self.media_content_type,
            "originalSource": self.original_source,
        }


class VariantData(BaseModel):
    """Fields for the primary variant. Price is kept as a string."""

    model_config = ConfigDict(frozen=True)

    price: Optional[str] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None

    @property
    def has_updates(self) -> bool:
        return any(value is not None for value in (self.price, self.sku, self.barcode))

    def to_bulk_input(self, variant_id: str) -> Dict[str, Any]:
        """Build a ProductVariantsBulkInput carrying only the supplied fields."""
        payload: Dict[str, Any] = {"id": variant_id}
        if self.price is not None:
            payload["price"] = self.price
        if self.barcode is not None:
            payload["barcode"] = self.barcode
        if self.sku is not None:
            payload["inventoryItem"] = {"sku": self.sku}
        return payload


class Identity(BaseModel):
    """Hints used to locate an existing product."""

    model_config = ConfigDict(frozen=True)

    handle: Optional[str] = None
    remote_id: Optional[str] = None


class ImportRecord(BaseModel):
    """One spreadsheet row, mapped and ready for import."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    description_html: str = ""
    product_type: str = ""
    vendor: str = ""
    tags: List[str] = Field(default_factory=list)
    metafield: Optional[Metafield] = None
    media: List[MediaRef] = Field(default_factory=list)
    variant: VariantData = Field(default_factory=VariantData)
    identity: Identity = Field(default_factory=Identity)

    def product_input(self) -> Dict[str, Any]:
        """Product-level fields only; variant and media have their own mutations."""
        payload: Dict[str, Any] = {
            "title": self.title,
            "descriptionHtml": self.description_html,
            "productType": self.product_type,
            "vendor": self.vendor,
            "tags": list(self.tags),
        }
        if self.metafield is not None:
            payload["metafields"] = [self.metafield.model_dump()]
        return payload

    def media_inputs(self) -> List[Dict[str, str]]:
        return [ref.to_input() for ref in self.media]


class RemoteProductRef(BaseModel):
    """Identifier and handle of a product as returned by Shopify."""

    id: str
    handle: Optional[str] = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class RowOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    ERRORED = "errored"


class RowResult(BaseModel):
    """Result of importing a single row."""

    row_number: int = 0
    title: str = ""
    outcome: RowOutcome
    product_id: Optional[str] = None
    error: Optional[str] = None
    problems: List[str] = Field(default_factory=list)

    @property
    def has_problems(self) -> bool:
        return bool(self.problems)


class ProcessingStats(BaseModel):
    """Statistics for a processing run."""

    total_rows: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errored: int = 0
    with_problems: int = 0

    def add_result(self, result: RowResult) -> None:
        """Add a row result to the statistics."""
        if result.outcome == RowOutcome.CREATED:
            self.created += 1
        elif result.outcome == RowOutcome.UPDATED:
            self.updated += 1
        elif result.outcome == RowOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errored += 1

        if result.has_problems:
            self.with_problems += 1


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def load_config_from_env(require_credentials: bool = True, **overrides: Any) -> ImportConfig:
    """Load configuration from environment variables (and a .env file).

    Keyword overrides replace the environment-derived ImportConfig fields;
    ``None`` values are ignored.
    """
    from dotenv import find_dotenv, load_dotenv
    load_dotenv(find_dotenv(usecwd=True))

    store = os.getenv("SHOPIFY_STORE", "").strip()
    token = os.getenv("SHOPIFY_ADMIN_TOKEN", "").strip()
    if require_credentials and (not store or not token):
        raise ConfigError("set SHOPIFY_STORE and SHOPIFY_ADMIN_TOKEN in the environment or .env")

    shopify_config = ShopifyConfig(
        store=store,
        access_token=token,
        api_version=os.getenv("SHOPIFY_API_VERSION", "").strip() or DEFAULT_API_VERSION,
    )

    values: Dict[str, Any] = {
        "row_delay": _env_float("SHOPIFY_ROW_DELAY", 0.7),
        "error_delay": _env_float("SHOPIFY_ERROR_DELAY", 2.0),
    }
    values.update({key: value for key, value in overrides.items() if value is not None})

    return ImportConfig(shopify=shopify_config, **values)
