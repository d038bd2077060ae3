"""
Shopify integration modules.

Modules:
    api_client - REST client for the Shopify Admin API
    csv_exporter - Product export to Shopify CSV format
    images - Image URL validation for import
    variants - Size/color variant expansion
    sync - Product push to a connected store
"""

from .api_client import ShopifyAPIClient, normalize_shop
from .csv_exporter import (
    ExportResult,
    ShopifyCSVExporter,
    SHOPIFY_FIELDNAMES,
)
from .images import ImageValidator
from .sync import ShopifyProductSync, SyncResults

__all__ = [
    # API Client
    'ShopifyAPIClient',
    'normalize_shop',
    # CSV Export
    'ExportResult',
    'ShopifyCSVExporter',
    'SHOPIFY_FIELDNAMES',
    'ImageValidator',
    # Sync
    'ShopifyProductSync',
    'SyncResults',
]
