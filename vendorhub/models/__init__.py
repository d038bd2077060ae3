"""
Catalog data models.

This module contains pure data classes with no business logic.
"""

from .product import CatalogProduct, ProductVariant, VendorInfo

__all__ = ['CatalogProduct', 'ProductVariant', 'VendorInfo']
