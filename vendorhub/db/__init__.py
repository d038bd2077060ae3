"""
Persistence: ORM models, engine/session helpers and the migration log.
"""

from .migrations import MIGRATIONS, current_version, run_migrations
from .models import Base, Product, ShopifyConnection, User
from .session import create_db_engine, make_session_factory, session_scope

__all__ = [
    'Base',
    'User',
    'Product',
    'ShopifyConnection',
    'MIGRATIONS',
    'run_migrations',
    'current_version',
    'create_db_engine',
    'make_session_factory',
    'session_scope',
]
