"""
Catalog data models.

Plain data classes describing a product and its vendor as the export and
sync code sees them. No business logic and no database access.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Union

# A string list as stored (JSON text) or already decoded
SerializedList = Union[str, List[str], None]


@dataclass
class VendorInfo:
    """Vendor fields used for labels and tags."""
    email: str = ""
    display_name: str = ""
    business_name: str = ""
    business_address: str = ""


@dataclass
class ProductVariant:
    """One size/color combination of a product."""
    sku: str
    inventory_quantity: int
    option1: str = ""
    option2: str = ""


@dataclass
class CatalogProduct:
    """
    Product listing ready for export or sync.

    images, sizes and colors keep their stored form (JSON array text or a list);
    consumers decode them and treat malformed values as empty.
    """

    # Core fields (required)
    id: str
    name: str
    category: str = ""
    description: str = ""
    price: float = 0.0
    quantity: int = 0
    delivery: bool = True
    pickup: str = ""

    # Media and options
    images: SerializedList = field(default_factory=list)
    sizes: SerializedList = None
    colors: SerializedList = None

    status: str = "active"
    sku: str = ""
    vendor: VendorInfo = field(default_factory=VendorInfo)

    # Shopify sync state
    shopify_product_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("Product id is required")
        if not self.name:
            raise ValueError("Product name is required")
