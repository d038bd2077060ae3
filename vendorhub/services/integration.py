"""
Shopify store connection, product review and product sync.

Each user owns at most one ShopifyConnection record (unique user_id). Only
admins connect stores, so in practice this holds the credentials of the
marketplace store each admin manages.

Admins review vendor products before they reach the store: a product is
pushed only once it is both verified and approved for Shopify.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..common.cache import TTLCache
from ..common.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT, DEFAULT_PUBLIC_DOMAIN
from ..common.errors import NotFound, ValidationFailed
from ..db.models import Product, ShopifyConnection, User, utcnow
from ..shopify.api_client import ShopifyAPIClient, normalize_shop
from ..shopify.sync import ShopifyProductSync

logger = logging.getLogger(__name__)

# (shop, access_token) -> client; replaced in tests
ClientFactory = Callable[[str, str], ShopifyAPIClient]


def get_connection(session: Session, user: User) -> Optional[ShopifyConnection]:
    return session.scalar(select(ShopifyConnection).where(ShopifyConnection.user_id == user.id))


def connect_store(
    session: Session,
    user: User,
    shop_url: str,
    access_token: str,
    client_factory: ClientFactory,
    store_name: Optional[str] = None,
) -> ShopifyConnection:
    """
    Verify credentials against the store, then create or reactivate the
    user's connection.

    Raises:
        ValidationFailed: Missing fields, or the store rejected the credentials
    """
    if not shop_url or not access_token:
        raise ValidationFailed("Shopify store URL and access token are required")

    shop_domain = f"{normalize_shop(shop_url)}.myshopify.com"

    with client_factory(shop_domain, access_token) as client:
        if not client.test_connection():
            raise ValidationFailed(
                "Failed to connect to Shopify. Please check your store URL and access token."
            )

    connection = get_connection(session, user)
    if connection is None:
        connection = ShopifyConnection(user_id=user.id)
        session.add(connection)

    connection.shop_url = shop_domain
    connection.access_token = access_token
    connection.store_name = store_name or shop_domain
    connection.is_active = True
    connection.last_sync_at = None
    session.commit()

    logger.info("Shopify store %s connected by %s", shop_domain, user.email)
    return connection


def disconnect_store(session: Session, user: User) -> None:
    connection = get_connection(session, user)
    if connection is None:
        raise NotFound("No Shopify connection found")
    connection.is_active = False
    session.commit()
    logger.info("Shopify store %s disconnected", connection.shop_url)


def list_review_products(
    session: Session,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    status: Optional[str] = None,
    vendor_id: Optional[str] = None,
    verified: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    One page of all products with their review state, newest first.

    Args:
        session: Database session
        page: 1-based page number
        limit: Page size
        status: Only this listing status ("all" or None: any)
        vendor_id: Only this vendor's products
        verified: Only verified (True) or unverified (False) products

    Returns:
        {"products": [...], "pagination": {total, pages, currentPage, limit}}
    """
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else DEFAULT_PAGE_LIMIT

    conditions = []
    if status and status != "all":
        conditions.append(Product.status == status)
    if vendor_id:
        conditions.append(Product.vendor_id == vendor_id)
    if verified is not None:
        conditions.append(Product.is_verified == verified)

    total = session.scalar(select(func.count()).select_from(Product).where(*conditions)) or 0
    products = session.scalars(
        select(Product)
        .options(selectinload(Product.vendor))
        .where(*conditions)
        .order_by(Product.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).all()

    return {
        "products": [p.to_dict(include_vendor=True) for p in products],
        "pagination": {
            "total": total,
            "pages": math.ceil(total / limit) if total else 0,
            "currentPage": page,
            "limit": limit,
        },
    }


def review_product(
    session: Session,
    product_id: str,
    is_verified: Optional[bool] = None,
    is_approved_for_shopify: Optional[bool] = None,
    admin_notes: Optional[str] = None,
    cache: Optional[TTLCache] = None,
) -> Product:
    """
    Set a product's review flags; arguments left as None keep their value.

    Raises:
        NotFound: Unknown product
    """
    product = session.get(Product, product_id)
    if product is None:
        raise NotFound("Product not found")

    if is_verified is not None:
        product.is_verified = is_verified
    if is_approved_for_shopify is not None:
        product.is_approved_for_shopify = is_approved_for_shopify
    if admin_notes is not None:
        product.admin_notes = admin_notes
    session.commit()

    if cache is not None:
        cache.invalidate_prefix(product.vendor_id)
    logger.info("Product %s reviewed: verified=%s approved=%s",
                product_id, product.is_verified, product.is_approved_for_shopify)
    return product


def list_vendors(session: Session) -> List[Dict[str, Any]]:
    """Non-admin users with their product counts, by display name."""
    rows = session.execute(
        select(User, func.count(Product.id))
        .outerjoin(Product, Product.vendor_id == User.id)
        .where(User.is_admin.is_(False))
        .group_by(User.id)
        .order_by(User.display_name)
    ).all()
    return [dict(user.summary(), productCount=count) for user, count in rows]


def sync_products(
    session: Session,
    user: User,
    client_factory: ClientFactory,
    product_ids: Optional[List[str]] = None,
    public_domain: str = DEFAULT_PUBLIC_DOMAIN,
    cache: Optional[TTLCache] = None,
) -> Dict[str, Any]:
    """
    Push approved products to the user's connected store, one at a time.

    Only products that are both verified and approved for Shopify are sent.

    Args:
        session: Database session
        user: Admin whose connection is used
        client_factory: Builds the API client
        product_ids: Products to sync (default: all approved products)
        public_domain: Base URL uploaded image paths are served from
        cache: Listing cache; synced vendors' pages are dropped

    Returns:
        {"message", "results": {success, errors, synced}, "summary"}

    Raises:
        ValidationFailed: No active connection, or nothing approved to sync
    """
    connection = get_connection(session, user)
    if connection is None or not connection.is_active:
        raise ValidationFailed("No active Shopify connection found. Please connect to Shopify first.")

    query = (
        select(Product)
        .options(selectinload(Product.vendor))
        .where(Product.is_verified.is_(True), Product.is_approved_for_shopify.is_(True))
        .order_by(Product.created_at)
    )
    if product_ids:
        query = query.where(Product.id.in_(product_ids))
    products = session.scalars(query).all()

    if not products:
        raise ValidationFailed("No approved products found to sync")

    by_id = {p.id: p for p in products}

    with client_factory(connection.shop_url, connection.access_token) as client:
        sync = ShopifyProductSync(client, public_domain)
        results, outcomes = sync.sync_products([p.to_catalog() for p in products])

    synced_at = utcnow()
    for outcome in outcomes:
        record = by_id[outcome.product_id]
        record.shopify_product_id = outcome.shopify_id
        record.last_synced_at = synced_at
    connection.last_sync_at = synced_at
    session.commit()

    if cache is not None:
        for vendor_id in {by_id[o.product_id].vendor_id for o in outcomes}:
            cache.invalidate_prefix(vendor_id)

    return {
        "message": f"Sync completed. {results.success} products synced successfully.",
        "results": results.to_dict(),
        "summary": {
            "total": len(products),
            "success": results.success,
            "errors": len(results.errors),
        },
    }
