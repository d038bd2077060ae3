"""HTTP route groups mounted by vendorhub.api.app."""

from . import admin, auth, health, products, shopify

__all__ = ['admin', 'auth', 'health', 'products', 'shopify']
