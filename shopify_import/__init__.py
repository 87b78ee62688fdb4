"""
Shopify Spreadsheet Product Importer

A CLI tool that reads the first sheet of a spreadsheet and creates or
updates products through the Shopify Admin GraphQL API:
- Product fields, tags and an optional metafield
- Product media from image URLs
- Price, SKU and barcode on the primary variant

Existing products are matched by Shopify ID or handle; anything else is
created.
"""

__version__ = "1.0.0"
__author__ = "Shopify Import Tool"

from .config import ImportConfig, ImportRecord, ShopifyConfig

__all__ = ["ImportConfig", "ImportRecord", "ShopifyConfig"]
