"""
Schema Migrations

A single linear log of schema changes. Each migration has a version number
and is applied at most once, in order; applied versions are recorded in the
schema_version table. New schema changes are appended to MIGRATIONS, never
edited in place.

Usage:
    from vendorhub.db.migrations import run_migrations
    applied = run_migrations(engine)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Set, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

VERSION_TABLE = "schema_version"


@dataclass(frozen=True)
class Migration:
    """One step of the migration log."""
    version: int
    description: str
    statements: Tuple[str, ...]


MIGRATIONS: List[Migration] = [
    Migration(1, "create users and products", (
        """
        CREATE TABLE users (
            id VARCHAR(36) PRIMARY KEY,
            email VARCHAR(255) NOT NULL UNIQUE,
            password_hash VARCHAR(255) NOT NULL,
            display_name VARCHAR(255) NOT NULL,
            business_name VARCHAR(255),
            business_address TEXT,
            phone_number VARCHAR(64),
            is_admin BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL
        )
        """,
        "CREATE INDEX ix_users_email ON users (email)",
        """
        CREATE TABLE products (
            id VARCHAR(36) PRIMARY KEY,
            vendor_id VARCHAR(36) NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            category VARCHAR(255) NOT NULL,
            description TEXT NOT NULL,
            price FLOAT NOT NULL,
            quantity INTEGER NOT NULL,
            delivery BOOLEAN NOT NULL DEFAULT FALSE,
            pickup VARCHAR(255),
            images TEXT NOT NULL DEFAULT '[]',
            created_at TIMESTAMP WITH TIME ZONE NOT NULL,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL
        )
        """,
        "CREATE INDEX ix_products_vendor_id ON products (vendor_id)",
    )),
    Migration(2, "add vendor verification documents", (
        "ALTER TABLE users ADD COLUMN national_id_document TEXT",
        "ALTER TABLE users ADD COLUMN business_registration_document TEXT",
        "ALTER TABLE users ADD COLUMN legal_declaration BOOLEAN NOT NULL DEFAULT FALSE",
    )),
    Migration(3, "add product sizes and colors", (
        "ALTER TABLE products ADD COLUMN sizes TEXT",
        "ALTER TABLE products ADD COLUMN colors TEXT",
    )),
    Migration(4, "add product status, sku and shopify sync state", (
        "ALTER TABLE products ADD COLUMN status VARCHAR(32) NOT NULL DEFAULT 'active'",
        "ALTER TABLE products ADD COLUMN sku VARCHAR(64)",
        "ALTER TABLE products ADD COLUMN shopify_product_id VARCHAR(64)",
        "ALTER TABLE products ADD COLUMN last_synced_at TIMESTAMP WITH TIME ZONE",
    )),
    Migration(5, "create shopify connections", (
        """
        CREATE TABLE shopify_connections (
            id VARCHAR(36) PRIMARY KEY,
            user_id VARCHAR(36) NOT NULL UNIQUE REFERENCES users (id) ON DELETE CASCADE,
            shop_url VARCHAR(255) NOT NULL,
            access_token TEXT NOT NULL,
            store_name VARCHAR(255),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            last_sync_at TIMESTAMP WITH TIME ZONE,
            created_at TIMESTAMP WITH TIME ZONE NOT NULL,
            updated_at TIMESTAMP WITH TIME ZONE NOT NULL
        )
        """,
    )),
    Migration(6, "add vendor documents_verified flag", (
        "ALTER TABLE users ADD COLUMN documents_verified BOOLEAN NOT NULL DEFAULT FALSE",
    )),
    Migration(7, "add product review state for shopify sync", (
        "ALTER TABLE products ADD COLUMN is_verified BOOLEAN NOT NULL DEFAULT FALSE",
        "ALTER TABLE products ADD COLUMN is_approved_for_shopify BOOLEAN NOT NULL DEFAULT FALSE",
        "ALTER TABLE products ADD COLUMN admin_notes TEXT",
    )),
]


def check_log(migrations: List[Migration]) -> None:
    """Versions must be 1..N without gaps or duplicates."""
    versions = [m.version for m in migrations]
    if versions != list(range(1, len(versions) + 1)):
        raise ValueError(f"Migration versions must be 1..N in order, got {versions}")


def _ensure_version_table(conn: Connection) -> None:
    conn.execute(text(
        f"CREATE TABLE IF NOT EXISTS {VERSION_TABLE} ("
        " version INTEGER PRIMARY KEY,"
        " description VARCHAR(255) NOT NULL,"
        " applied_at TIMESTAMP WITH TIME ZONE NOT NULL)"
    ))


def applied_versions(engine: Engine) -> Set[int]:
    """Versions already recorded in the schema_version table."""
    with engine.begin() as conn:
        _ensure_version_table(conn)
        rows = conn.execute(text(f"SELECT version FROM {VERSION_TABLE}"))
        return {row[0] for row in rows}


def current_version(engine: Engine) -> int:
    return max(applied_versions(engine), default=0)


def run_migrations(
    engine: Engine,
    target: Optional[int] = None,
    migrations: Optional[List[Migration]] = None,
) -> List[int]:
    """
    Apply pending migrations in order.

    Each migration runs in its own transaction together with its
    schema_version record.

    Args:
        engine: Database engine
        target: Stop after this version (default: latest)
        migrations: Migration log (default: MIGRATIONS)

    Returns:
        Versions applied by this call
    """
    migrations = MIGRATIONS if migrations is None else migrations
    check_log(migrations)

    done = applied_versions(engine)
    applied = []

    for migration in migrations:
        if migration.version in done:
            continue
        if target is not None and migration.version > target:
            break

        logger.info("Applying migration %d: %s", migration.version, migration.description)
        with engine.begin() as conn:
            for statement in migration.statements:
                conn.execute(text(statement))
            conn.execute(
                text(f"INSERT INTO {VERSION_TABLE} (version, description, applied_at) "
                     "VALUES (:version, :description, :applied_at)"),
                {
                    "version": migration.version,
                    "description": migration.description,
                    "applied_at": datetime.now(timezone.utc),
                },
            )
        applied.append(migration.version)

    if applied:
        logger.info("Schema now at version %d", applied[-1])
    else:
        logger.debug("Schema up to date")
    return applied
