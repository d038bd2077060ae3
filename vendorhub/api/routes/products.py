"""
The caller's own product listings.
"""

from fastapi import APIRouter, Depends

from ...common.constants import DEFAULT_PAGE, DEFAULT_PAGE_LIMIT
from ...db.models import User
from ...services.products import ProductService
from ..dependencies import get_current_user, get_product_service
from ..schemas import ProductCreate, ProductUpdate

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_PAGE_LIMIT,
    user: User = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return service.list_products(user.id, page=page, limit=limit)


@router.get("/{product_id}")
def get_product(
    product_id: str,
    user: User = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    return {"product": service.get_owned(user.id, product_id).to_dict()}


@router.post("", status_code=201)
def create_product(
    payload: ProductCreate,
    user: User = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    product = service.create_product(user.id, payload.model_dump())
    return {"message": "Product created successfully", "product": product.to_dict()}


@router.put("/{product_id}")
def update_product(
    product_id: str,
    payload: ProductUpdate,
    user: User = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    product = service.update_product(user.id, product_id, payload.model_dump(exclude_unset=True))
    return {"message": "Product updated successfully", "product": product.to_dict()}


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    user: User = Depends(get_current_user),
    service: ProductService = Depends(get_product_service),
):
    service.delete_product(user.id, product_id)
    return {"message": "Product deleted successfully"}
