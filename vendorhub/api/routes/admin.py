"""
Admin-only reporting, exports and user management.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ...common.cache import TTLCache
from ...common.config_loader import Settings
from ...common.csv_utils import CSV_CONTENT_TYPE, attachment_headers
from ...services import accounts, reporting
from ...services.products import ProductService
from ...shopify.csv_exporter import ShopifyCSVExporter
from ..dependencies import get_cache, get_product_service, get_session, get_settings, require_admin
from ..schemas import MakeAdminInput, VerifyDocumentsInput

logger = logging.getLogger(__name__)

SKIPPED_HEADER = "X-Export-Skipped"

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _csv_response(content: str, filename: str) -> Response:
    return Response(content=content, media_type=CSV_CONTENT_TYPE, headers=attachment_headers(filename))


@router.get("/stats")
def stats(session: Session = Depends(get_session)):
    return {"stats": reporting.dashboard_stats(session)}


@router.get("/users")
def users(session: Session = Depends(get_session)):
    return reporting.list_users(session)


@router.get("/products")
def products(session: Session = Depends(get_session)):
    return reporting.list_products(session)


@router.get("/export")
def export_products(session: Session = Depends(get_session)):
    return _csv_response(reporting.export_products_csv(session), reporting.products_export_filename())


@router.get("/export-shopify")
def export_shopify(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    content, result = reporting.export_shopify_csv(session, settings.public_domain)
    response = _csv_response(content, ShopifyCSVExporter.filename())
    # Products that could not be converted are left out of the file
    response.headers[SKIPPED_HEADER] = str(len(result.errors))
    if result.errors:
        logger.error("Shopify export skipped %d product(s): %s",
                     len(result.errors), ", ".join(e["productId"] for e in result.errors))
    return response


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    session: Session = Depends(get_session),
    cache: TTLCache = Depends(get_cache),
):
    cache.invalidate_prefix(reporting.delete_user(session, user_id))
    return {"message": "User and associated products deleted successfully"}


@router.delete("/products/{product_id}")
def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    service.delete_any_product(product_id)
    return {"message": "Product deleted successfully"}


@router.post("/make-admin")
def make_admin(payload: MakeAdminInput, session: Session = Depends(get_session)):
    user = accounts.promote_to_admin(session, payload.user_id)
    session.commit()
    return {"message": "User promoted to admin successfully", "user": user.to_dict()}


@router.put("/users/{user_id}/verify-documents")
def verify_documents(
    user_id: str,
    payload: VerifyDocumentsInput,
    session: Session = Depends(get_session),
):
    user = accounts.set_documents_verified(session, user_id, payload.documents_verified)
    session.commit()
    state = "verified" if user.documents_verified else "unverified"
    return {"message": f"Documents marked as {state}", "user": user.to_dict()}
