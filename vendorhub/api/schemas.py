"""
Request bodies. JSON keys are camelCase; Python attributes stay snake_case.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterInput(CamelModel):
    email: EmailStr
    password: str
    display_name: str
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    phone_number: Optional[str] = None
    legal_declaration: bool = False


class LoginInput(CamelModel):
    email: str
    password: str


class ProfileInput(CamelModel):
    display_name: Optional[str] = None
    business_name: Optional[str] = None
    business_address: Optional[str] = None
    phone_number: Optional[str] = None


class PasswordInput(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


# sizes/colors arrive either as lists or as already-serialized JSON strings
OptionList = Optional[Union[List[str], str]]


class ProductCreate(CamelModel):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[float, str]] = None
    quantity: Optional[Union[int, float, str]] = None
    delivery: Optional[bool] = None
    pickup: Optional[str] = None
    images: List[str] = []
    sizes: OptionList = None
    colors: OptionList = None
    status: Optional[str] = None
    sku: Optional[str] = None


class ProductUpdate(ProductCreate):
    images: Optional[List[str]] = None


class MakeAdminInput(CamelModel):
    user_id: str


class VerifyDocumentsInput(CamelModel):
    documents_verified: bool


class ShopifyConnectInput(CamelModel):
    shopify_store_url: Optional[str] = None
    access_token: Optional[str] = None
    store_name: Optional[str] = None


class SyncInput(CamelModel):
    product_ids: Optional[List[str]] = None


class ProductReviewInput(CamelModel):
    is_verified: Optional[bool] = None
    is_approved_for_shopify: Optional[bool] = None
    admin_notes: Optional[str] = None
