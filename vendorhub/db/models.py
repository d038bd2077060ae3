"""
Database models.

SQLAlchemy ORM mapping of users (vendors and admins), products and Shopify
connections. The tables themselves are created by the migration log in
vendorhub.db.migrations; keep both in step.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import declarative_base, relationship

from ..common.text_utils import parse_string_list
from ..models import CatalogProduct, VendorInfo

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=False)
    business_name = Column(String(255), nullable=True)
    business_address = Column(Text, nullable=True)
    phone_number = Column(String(64), nullable=True)
    national_id_document = Column(Text, nullable=True)
    business_registration_document = Column(Text, nullable=True)
    legal_declaration = Column(Boolean, default=False, nullable=False)
    documents_verified = Column(Boolean, default=False, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    products = relationship(
        "Product",
        back_populates="vendor",
        cascade="all, delete-orphan",
        order_by="Product.created_at.desc()",
    )
    shopify_connection = relationship(
        "ShopifyConnection",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )

    def __repr__(self):
        return f"<User email={self.email} admin={self.is_admin}>"

    def vendor_info(self) -> VendorInfo:
        return VendorInfo(
            email=self.email or "",
            display_name=self.display_name or "",
            business_name=self.business_name or "",
            business_address=self.business_address or "",
        )

    def to_dict(self) -> dict:
        """Public representation (never includes the password hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "displayName": self.display_name,
            "businessName": self.business_name,
            "businessAddress": self.business_address,
            "phoneNumber": self.phone_number,
            "nationalIdDocument": self.national_id_document,
            "businessRegistrationDocument": self.business_registration_document,
            "legalDeclaration": self.legal_declaration,
            "documentsVerified": self.documents_verified,
            "isAdmin": self.is_admin,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def summary(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "displayName": self.display_name,
            "businessName": self.business_name,
            "phoneNumber": self.phone_number,
        }


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=_new_id)
    vendor_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    delivery = Column(Boolean, default=False, nullable=False)
    pickup = Column(String(255), nullable=True)
    images = Column(Text, nullable=False, default="[]")  # JSON array of URLs
    sizes = Column(Text, nullable=True)                   # JSON array or NULL
    colors = Column(Text, nullable=True)                  # JSON array or NULL
    status = Column(String(32), nullable=False, default="active")
    sku = Column(String(64), nullable=True)
    shopify_product_id = Column(String(64), nullable=True)
    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    # Admin review; only verified and approved products are pushed to Shopify
    is_verified = Column(Boolean, default=False, nullable=False)
    is_approved_for_shopify = Column(Boolean, default=False, nullable=False)
    admin_notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    vendor = relationship("User", back_populates="products")

    def __repr__(self):
        return f"<Product id={self.id} name={self.name}>"

    def to_dict(self, include_vendor: bool = False) -> dict:
        data = {
            "id": self.id,
            "vendorId": self.vendor_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "price": self.price,
            "quantity": self.quantity,
            "delivery": self.delivery,
            "pickup": self.pickup,
            "images": parse_string_list(self.images, f"images of product {self.id}"),
            "sizes": parse_string_list(self.sizes, f"sizes of product {self.id}"),
            "colors": parse_string_list(self.colors, f"colors of product {self.id}"),
            "status": self.status,
            "sku": self.sku,
            "shopifyProductId": self.shopify_product_id,
            "lastSyncedAt": _iso(self.last_synced_at),
            "isVerified": self.is_verified,
            "isApprovedForShopify": self.is_approved_for_shopify,
            "adminNotes": self.admin_notes,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if include_vendor:
            data["vendor"] = self.vendor.summary() if self.vendor else None
        return data

    def to_catalog(self) -> CatalogProduct:
        """Catalog view used by the Shopify export and sync."""
        return CatalogProduct(
            id=self.id,
            name=self.name,
            category=self.category or "",
            description=self.description or "",
            price=self.price,
            quantity=self.quantity,
            delivery=bool(self.delivery),
            pickup=self.pickup or "",
            images=self.images,
            sizes=self.sizes,
            colors=self.colors,
            status=self.status or "active",
            sku=self.sku or "",
            vendor=self.vendor.vendor_info() if self.vendor else VendorInfo(),
            shopify_product_id=self.shopify_product_id,
            created_at=self.created_at,
        )


class ShopifyConnection(Base):
    """Shopify store credentials; at most one record per owning user."""

    __tablename__ = "shopify_connections"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    shop_url = Column(String(255), nullable=False)
    access_token = Column(Text, nullable=False)
    store_name = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    last_sync_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="shopify_connection")

    def __repr__(self):
        return f"<ShopifyConnection shop={self.shop_url} active={self.is_active}>"

    def to_dict(self) -> dict:
        """Public representation; the access token is left out."""
        return {
            "id": self.id,
            "shopifyStoreUrl": self.shop_url,
            "storeUrl": f"https://{self.shop_url}",
            "storeName": self.store_name,
            "isActive": self.is_active,
            "lastSyncAt": _iso(self.last_sync_at),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
