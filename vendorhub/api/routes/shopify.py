"""
Shopify store connection, product review and product sync (admins only).
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...common.cache import TTLCache
from ...common.config_loader import Settings
from ...common.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ...db.models import User
from ...services import integration
from ..dependencies import get_cache, get_client_factory, get_session, get_settings, require_admin
from ..schemas import ProductReviewInput, ShopifyConnectInput, SyncInput

router = APIRouter(prefix="/shopify", tags=["shopify"])


@router.post("/connect")
def connect(
    payload: ShopifyConnectInput,
    user: User = Depends(require_admin),
    session: Session = Depends(get_session),
    client_factory=Depends(get_client_factory),
):
    connection = integration.connect_store(
        session,
        user,
        shop_url=payload.shopify_store_url,
        access_token=payload.access_token,
        client_factory=client_factory,
        store_name=payload.store_name,
    )
    return {"message": "Successfully connected to Shopify", "connection": connection.to_dict()}


@router.get("/connection")
def connection(user: User = Depends(require_admin), session: Session = Depends(get_session)):
    record = integration.get_connection(session, user)
    if record is None or not record.is_active:
        return {"connected": False, "connection": None}
    return {"connected": True, "connection": record.to_dict()}


@router.delete("/disconnect")
def disconnect(user: User = Depends(require_admin), session: Session = Depends(get_session)):
    integration.disconnect_store(session, user)
    return {"message": "Disconnected from Shopify successfully"}


@router.get("/products", dependencies=[Depends(require_admin)])
def review_queue(
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    status: Optional[str] = None,
    vendor: Optional[str] = None,
    verified: Optional[bool] = None,
    session: Session = Depends(get_session),
):
    return integration.list_review_products(
        session, page=page, limit=limit, status=status, vendor_id=vendor, verified=verified
    )


@router.put("/products/{product_id}/verify", dependencies=[Depends(require_admin)])
def review_product(
    product_id: str,
    payload: ProductReviewInput,
    session: Session = Depends(get_session),
    cache: TTLCache = Depends(get_cache),
):
    product = integration.review_product(
        session,
        product_id,
        is_verified=payload.is_verified,
        is_approved_for_shopify=payload.is_approved_for_shopify,
        admin_notes=payload.admin_notes,
        cache=cache,
    )
    return {
        "message": "Product verification status updated successfully",
        "product": product.to_dict(include_vendor=True),
    }


@router.get("/vendors", dependencies=[Depends(require_admin)])
def vendors(session: Session = Depends(get_session)):
    return {"vendors": integration.list_vendors(session)}


@router.post("/sync-products")
def sync_products(
    payload: SyncInput,
    user: User = Depends(require_admin),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    cache: TTLCache = Depends(get_cache),
    client_factory=Depends(get_client_factory),
):
    return integration.sync_products(
        session,
        user,
        client_factory,
        product_ids=payload.product_ids,
        public_domain=settings.public_domain,
        cache=cache,
    )
