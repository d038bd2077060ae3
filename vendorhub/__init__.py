"""
Vendor Marketplace Back Office

Modules:
    common    - Shared utilities (config loader, logging, CSV utils, cache, errors)
    models    - Catalog data models (CatalogProduct, VendorInfo)
    db        - SQLAlchemy models, sessions and the migration log
    shopify   - Shopify CSV export, API client and product sync
    services  - Account, product, reporting and integration operations
    api       - FastAPI application and routes
"""

__version__ = "0.3.0"
