"""
Admin Reporting

Read-only aggregation over all users and products, plus the two CSV exports:
a flat one-row-per-product report and the Shopify bulk-import file.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from ..common.csv_utils import csv_filename, rows_to_csv
from ..common.errors import NotFound
from ..common.text_utils import parse_string_list
from ..db.models import Product, User
from ..models import CatalogProduct
from ..shopify.csv_exporter import ExportResult, ShopifyCSVExporter

logger = logging.getLogger(__name__)

PRODUCT_EXPORT_FIELDNAMES = [
    'ID', 'Name', 'Category', 'Description', 'Price', 'Quantity', 'Delivery',
    'Pickup', 'Images', 'Sizes', 'Colors', 'Status', 'Vendor Email', 'Vendor Name',
    'Created Date',
]

RECENT_LIMIT = 5


def _all_products(session: Session, vendor_id: Optional[str] = None) -> Sequence[Product]:
    query = select(Product).options(selectinload(Product.vendor)).order_by(Product.created_at.desc())
    if vendor_id is not None:
        query = query.where(Product.vendor_id == vendor_id)
    return session.scalars(query).all()


def dashboard_stats(session: Session) -> Dict[str, Any]:
    """User/product/admin counts plus the most recent users and products."""
    total_users = session.scalar(select(func.count()).select_from(User)) or 0
    total_products = session.scalar(select(func.count()).select_from(Product)) or 0
    total_admins = session.scalar(
        select(func.count()).select_from(User).where(User.is_admin.is_(True))
    ) or 0

    recent_users = session.scalars(
        select(User).order_by(User.created_at.desc()).limit(RECENT_LIMIT)
    ).all()
    recent_products = session.scalars(
        select(Product).options(selectinload(Product.vendor))
        .order_by(Product.created_at.desc()).limit(RECENT_LIMIT)
    ).all()

    return {
        "totalUsers": total_users,
        "totalProducts": total_products,
        "totalAdmins": total_admins,
        "recentUsers": [u.summary() for u in recent_users],
        "recentProducts": [p.to_dict(include_vendor=True) for p in recent_products],
    }


def list_users(session: Session) -> Dict[str, Any]:
    """Every user with their products and document flags, newest first."""
    users = session.scalars(
        select(User).options(selectinload(User.products)).order_by(User.created_at.desc())
    ).all()

    entries = []
    for user in users:
        entry = user.to_dict()
        entry["products"] = [p.to_dict() for p in user.products]
        entry["totalProducts"] = len(user.products)
        entry["hasNationalId"] = bool(user.national_id_document)
        entry["hasBusinessRegistration"] = bool(user.business_registration_document)
        entries.append(entry)

    return {
        "users": entries,
        "total": len(entries),
        "totalProducts": sum(e["totalProducts"] for e in entries),
    }


def list_products(session: Session) -> Dict[str, Any]:
    """Every product with a vendor summary and the total stock value."""
    products = _all_products(session)
    return {
        "products": [p.to_dict(include_vendor=True) for p in products],
        "total": len(products),
        "totalValue": sum((p.price or 0) * (p.quantity or 0) for p in products),
    }


def delete_user(session: Session, user_id: str) -> str:
    """
    Delete a user and (by cascade) their products and Shopify connection.

    Returns:
        The deleted user's id, for cache invalidation
    """
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    session.delete(user)
    session.commit()
    logger.info("User %s deleted", user.email)
    return user_id


def product_export_row(product: Product) -> Dict[str, Any]:
    vendor = product.vendor
    return {
        'ID': product.id,
        'Name': product.name,
        'Category': product.category,
        'Description': product.description,
        'Price': product.price,
        'Quantity': product.quantity,
        'Delivery': 'Yes' if product.delivery else 'No',
        'Pickup': product.pickup or '',
        'Images': '; '.join(parse_string_list(product.images, f"images of product {product.id}")),
        'Sizes': '; '.join(parse_string_list(product.sizes, f"sizes of product {product.id}")),
        'Colors': '; '.join(parse_string_list(product.colors, f"colors of product {product.id}")),
        'Status': product.status or 'active',
        'Vendor Email': vendor.email if vendor else '',
        'Vendor Name': (vendor.display_name or vendor.business_name or '') if vendor else '',
        'Created Date': product.created_at.date().isoformat() if product.created_at else '',
    }


def export_products_csv(session: Session) -> str:
    """Flat CSV report, one row per product."""
    rows = [product_export_row(p) for p in _all_products(session)]
    return rows_to_csv(rows, PRODUCT_EXPORT_FIELDNAMES)


def products_export_filename() -> str:
    return csv_filename("products_export")


def catalog_products(session: Session, vendor_id: Optional[str] = None) -> List[CatalogProduct]:
    return [p.to_catalog() for p in _all_products(session, vendor_id)]


def export_shopify_csv(
    session: Session,
    public_domain: str,
    vendor_id: Optional[str] = None,
) -> Tuple[str, ExportResult]:
    """Shopify bulk-import file for all products (or one vendor's), plus the batch result."""
    exporter = ShopifyCSVExporter(public_domain=public_domain)
    return exporter.export_text(catalog_products(session, vendor_id))
