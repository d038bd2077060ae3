"""
HTTP API (FastAPI).

Modules:
    app          - Application factory and error handlers
    dependencies - Session, cache and authentication dependencies
    schemas      - Request bodies
    routes       - auth, products, admin, shopify, health
"""

from .app import create_app

__all__ = ['create_app']
