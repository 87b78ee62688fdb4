"""Spreadsheet row to ImportRecord mapping."""

from typing import Any, Dict, List, Mapping, Optional, Tuple
import pandas as pd

from .config import Identity, ImportRecord, MediaRef, Metafield, VariantData


# Canonical field -> accepted column headers, in priority order
FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": ("Title", "title"),
    "description_html": ("BodyHtml", "body_html", "body"),
    "product_type": ("ProductType", "productType", "product_type"),
    "vendor": ("Vendor", "vendor"),
    "tags": ("Tags", "tags"),
    "metafield_namespace": ("MetafieldNS", "metafieldNS"),
    "metafield_key": ("MetafieldKey", "metafieldKey"),
    "metafield_value": ("MetafieldValue", "metafieldValue"),
    "metafield_type": ("MetafieldType", "metafieldType"),
    "images": ("ImageURLs", "imageURLs", "Images", "images"),
    "price": ("Price", "price", "Cost", "cost"),
    "sku": ("SKU", "sku"),
    "barcode": ("Barcode", "barcode"),
    "handle": ("Handle", "handle"),
    "remote_id": ("ShopifyID", "shopifyId", "shopifyID"),
}

TAG_DELIMITER = ","
MEDIA_DELIMITER = ";"
PRODUCT_GID_PREFIX = "gid://shopify/Product/"


def clean_value(value: Any) -> str:
    """Stringify and trim a cell value; empty cells become ''."""
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""

    # Numeric cells come back as floats; keep 123.0 as "123"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    return str(value).strip()


def resolve_field(row: Mapping[str, Any], field: str) -> Optional[str]:
    """Return the first non-empty value among the field's aliases, or None."""
    for alias in FIELD_ALIASES[field]:
        if alias not in row:
            continue
        cleaned = clean_value(row[alias])
        if cleaned:
            return cleaned
    return None


def split_list(raw: Optional[str], delimiter: str) -> List[str]:
    """Split on delimiter, trim each element, drop empties, keep order."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(delimiter) if part.strip()]


def normalize_product_id(raw: Optional[str]) -> Optional[str]:
    """Expand a bare numeric product id to a Shopify GID."""
    if raw and raw.isdigit():
        return f"{PRODUCT_GID_PREFIX}{raw}"
    return raw


def display_title(row: Mapping[str, Any]) -> str:
    """Title used in progress output, even for rows that will be skipped."""
    return resolve_field(row, "title") or "(no title)"


def build_record(row: Mapping[str, Any]) -> Optional[ImportRecord]:
    """Map a spreadsheet row to an ImportRecord.

    Returns None when the row has no title; callers treat that as a skip.
    """
    title = resolve_field(row, "title")
    if not title:
        return None

    metafield = None
    metafield_parts = {
        "namespace": resolve_field(row, "metafield_namespace"),
        "key": resolve_field(row, "metafield_key"),
        "value": resolve_field(row, "metafield_value"),
        "type": resolve_field(row, "metafield_type"),
    }
    if all(metafield_parts.values()):
        metafield = Metafield(**metafield_parts)

    media = [
        MediaRef(original_source=url)
        for url in split_list(resolve_field(row, "images"), MEDIA_DELIMITER)
    ]

    return ImportRecord(
        title=title,
        description_html=resolve_field(row, "description_html") or "",
        product_type=resolve_field(row, "product_type") or "",
        vendor=resolve_field(row, "vendor") or "",
        tags=split_list(resolve_field(row, "tags"), TAG_DELIMITER),
        metafield=metafield,
        media=media,
        variant=VariantData(
            price=resolve_field(row, "price"),
            sku=resolve_field(row, "sku"),
            barcode=resolve_field(row, "barcode"),
        ),
        identity=Identity(
            handle=resolve_field(row, "handle"),
            remote_id=normalize_product_id(resolve_field(row, "remote_id")),
        ),
    )
