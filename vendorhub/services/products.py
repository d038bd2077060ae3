"""
Product Repository

CRUD over a vendor's own listings, capped at PRODUCT_LIMIT products per
vendor. Listing pages are cached per (vendor, page, limit) and dropped after
every write by that vendor.

The cap is checked with a count followed by an insert, without a lock, so two
simultaneous creations can both pass the check.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..common.cache import TTLCache
from ..common.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_PRODUCT_STATUS,
    MAX_PRODUCT_IMAGES,
    MAX_QUANTITY,
    PRODUCT_LIMIT,
)
from ..common.errors import LimitExceeded, NotFound, ValidationFailed
from ..common.text_utils import serialize_string_list
from ..db.models import Product

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('name', 'category', 'description', 'price', 'quantity', 'delivery')
TEXT_FIELDS = ('name', 'category', 'description', 'status', 'sku')


def clean_images(images: Any) -> List[str]:
    """Keep non-blank strings, at most MAX_PRODUCT_IMAGES of them."""
    if not isinstance(images, list):
        return []
    return [img for img in images if isinstance(img, str) and img.strip()][:MAX_PRODUCT_IMAGES]


def _to_price(value: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationFailed("Price must be a number") from e
    if not math.isfinite(price):
        raise ValidationFailed("Price must be a number")
    return price


def _to_quantity(value: Any) -> int:
    try:
        quantity = int(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationFailed("Quantity must be a whole number") from e
    if abs(quantity) > MAX_QUANTITY:
        raise ValidationFailed("Quantity is too large")
    return quantity


class ProductService:
    """
    Vendor-scoped product operations.

    Usage:
        service = ProductService(session, cache)
        page = service.list_products(vendor_id, page=1, limit=10)
        product = service.create_product(vendor_id, {...})
    """

    def __init__(self, session: Session, cache: Optional[TTLCache] = None, limit: int = PRODUCT_LIMIT):
        """
        Initialize the service.

        Args:
            session: Database session (committed by each write)
            cache: Listing cache shared across requests
            limit: Maximum products per vendor
        """
        self.session = session
        self.cache = cache if cache is not None else TTLCache()
        self.limit = limit

    def count_products(self, vendor_id: str) -> int:
        return self.session.scalar(
            select(func.count()).select_from(Product).where(Product.vendor_id == vendor_id)
        ) or 0

    def list_products(
        self,
        vendor_id: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> Dict[str, Any]:
        """
        One page of the vendor's products, newest first.

        Returns:
            {"products": [...], "pagination": {total, pages, currentPage, limit}}
        """
        page = page if page and page > 0 else DEFAULT_PAGE
        limit = limit if limit and limit > 0 else DEFAULT_PAGE_LIMIT

        key = (vendor_id, page, limit)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Listing cache hit for %s", key)
            return cached

        total = self.count_products(vendor_id)
        products = self.session.scalars(
            select(Product)
            .where(Product.vendor_id == vendor_id)
            .order_by(Product.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        result = {
            "products": [p.to_dict() for p in products],
            "pagination": {
                "total": total,
                "pages": math.ceil(total / limit) if total else 0,
                "currentPage": page,
                "limit": limit,
            },
        }
        self.cache.set(key, result)
        return result

    def get_owned(self, vendor_id: str, product_id: str) -> Product:
        """
        Fetch a product owned by vendor_id.

        Raises:
            NotFound: If it does not exist or belongs to someone else
        """
        product = self.session.scalar(
            select(Product).where(Product.id == product_id, Product.vendor_id == vendor_id)
        )
        if product is None:
            raise NotFound("Product not found or access denied")
        return product

    def create_product(self, vendor_id: str, data: Dict[str, Any]) -> Product:
        """
        Create a listing for the vendor.

        Args:
            vendor_id: Owner id
            data: name, category, description, price, quantity, delivery and
                  optionally pickup, images, sizes, colors, status, sku

        Raises:
            ValidationFailed: A required field is missing or malformed
            LimitExceeded: The vendor already owns the maximum number of products
        """
        missing = [f for f in REQUIRED_FIELDS if data.get(f) is None or data.get(f) == '']
        if missing:
            raise ValidationFailed(f"Missing required fields: {', '.join(missing)}")
        if not isinstance(data['delivery'], bool):
            raise ValidationFailed("Delivery must be true or false")

        if self.count_products(vendor_id) >= self.limit:
            raise LimitExceeded(f"Product limit reached. Maximum {self.limit} products allowed per vendor.")

        product = Product(
            vendor_id=vendor_id,
            name=data['name'],
            category=data['category'],
            description=data['description'],
            price=_to_price(data['price']),
            quantity=_to_quantity(data['quantity']),
            delivery=data['delivery'],
            pickup=data.get('pickup') or None,
            images=serialize_string_list(clean_images(data.get('images'))) or "[]",
            sizes=serialize_string_list(data.get('sizes')),
            colors=serialize_string_list(data.get('colors')),
            status=data.get('status') or DEFAULT_PRODUCT_STATUS,
            sku=data.get('sku') or None,
        )
        self.session.add(product)
        self.session.commit()
        self.invalidate(vendor_id)

        logger.info("Product %s created for vendor %s", product.id, vendor_id)
        return product

    def update_product(self, vendor_id: str, product_id: str, changes: Dict[str, Any]) -> Product:
        """
        Partially update a listing; fields not given keep their values.

        Raises:
            NotFound: Missing product or not owned by the vendor
        """
        product = self.get_owned(vendor_id, product_id)

        for name in TEXT_FIELDS:
            if changes.get(name):
                setattr(product, name, changes[name])
        if changes.get('price') is not None:
            product.price = _to_price(changes['price'])
        if changes.get('quantity') is not None:
            product.quantity = _to_quantity(changes['quantity'])
        if changes.get('delivery') is not None:
            product.delivery = bool(changes['delivery'])
        if 'pickup' in changes:
            product.pickup = changes['pickup'] or None
        if 'images' in changes:
            product.images = serialize_string_list(clean_images(changes['images'])) or "[]"
        if 'sizes' in changes:
            product.sizes = serialize_string_list(changes['sizes'])
        if 'colors' in changes:
            product.colors = serialize_string_list(changes['colors'])

        self.session.commit()
        self.invalidate(vendor_id)
        return product

    def delete_product(self, vendor_id: str, product_id: str) -> None:
        """
        Delete one of the vendor's listings.

        Raises:
            NotFound: Missing product or not owned by the vendor
        """
        product = self.get_owned(vendor_id, product_id)
        self.session.delete(product)
        self.session.commit()
        self.invalidate(vendor_id)
        logger.info("Product %s deleted by vendor %s", product_id, vendor_id)

    def delete_any_product(self, product_id: str) -> None:
        """Admin delete, regardless of owner."""
        product = self.session.get(Product, product_id)
        if product is None:
            raise NotFound("Product not found")
        vendor_id = product.vendor_id
        self.session.delete(product)
        self.session.commit()
        self.invalidate(vendor_id)
        logger.info("Product %s deleted by admin", product_id)

    def invalidate(self, vendor_id: str) -> None:
        self.cache.invalidate_prefix(vendor_id)
