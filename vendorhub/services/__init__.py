"""
Application services.

Modules:
    security    - Password hashing and session tokens
    accounts    - Registration, login, profile and admin flags
    products    - Vendor product CRUD with the listing cache
    reporting   - Admin statistics and CSV exports
    integration - Shopify connection and product sync
"""

from .products import ProductService

__all__ = ['ProductService']
