"""
Shopify Product Sync

Pushes marketplace products to a Shopify store through the Admin REST API.
Each product becomes one Shopify product with one variant per size x color
combination. An existing remote product with the same title is updated,
otherwise a new one is created.

Products are synced one after another; a failure is recorded and the batch
moves on to the next product.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..common.constants import DEFAULT_PUBLIC_DOMAIN
from ..common.errors import UpstreamFailure
from ..common.text_utils import parse_string_list
from ..models import CatalogProduct, ProductVariant
from .api_client import ShopifyAPIClient
from .csv_exporter import format_price, vendor_label
from .images import ImageValidator
from .variants import has_variants, parse_options, split_quantity, variant_combinations

logger = logging.getLogger(__name__)


@dataclass
class SyncOutcome:
    """Result of pushing one product."""
    product_id: str
    shopify_id: str
    action: str  # "created" or "updated"


@dataclass
class SyncResults:
    """Batch summary: success count, per-product errors, synced products."""
    success: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    synced: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "errors": self.errors, "synced": self.synced}


def remote_title(product: CatalogProduct) -> str:
    """Title used on Shopify, also the key for finding an existing product."""
    return f"{product.name} - by {vendor_label(product.vendor)}"


def _sku(*parts: str) -> str:
    return re.sub(r'\s+', '-', '-'.join(p for p in parts if p)).upper()


def build_variants(product: CatalogProduct) -> List[ProductVariant]:
    """
    One variant per size x color combination, or a single default variant.

    Stock per variant is floor(quantity / combinations).
    """
    sizes, colors = parse_options(product)
    label = vendor_label(product.vendor)

    if not has_variants(sizes, colors):
        return [ProductVariant(
            sku=_sku(label, product.id),
            inventory_quantity=int(product.quantity or 0),
        )]

    combinations = variant_combinations(sizes, colors)
    quantity = split_quantity(int(product.quantity or 0), len(combinations))

    variants = []
    for size, color in combinations:
        if sizes:
            option1, option2 = size, color
        else:
            option1, option2 = color, ''
        variants.append(ProductVariant(
            sku=_sku(label, product.id, size, color),
            inventory_quantity=quantity,
            option1=option1,
            option2=option2,
        ))
    return variants


def build_payload(product: CatalogProduct, public_domain: str = DEFAULT_PUBLIC_DOMAIN) -> Dict[str, Any]:
    """
    Shopify product resource for a catalog product.

    Images are resolved the same way as in the CSV export: uploaded root-relative
    paths become absolute under public_domain, unusable references are left out.

    Args:
        product: Product to push
        public_domain: Base URL uploads are served from

    Returns:
        Dictionary suitable for the "product" key of a products.json request
    """
    label = vendor_label(product.vendor)
    sizes, colors = parse_options(product)
    images = ImageValidator(public_domain).resolve_all(
        parse_string_list(product.images, f"images of product {product.id}")
    )
    price = format_price(product.price)

    variants = []
    for variant in build_variants(product):
        entry = {
            "price": price,
            "sku": variant.sku,
            "inventory_quantity": variant.inventory_quantity,
            "inventory_management": "shopify",
            "requires_shipping": bool(product.delivery),
        }
        if variant.option1:
            entry["option1"] = variant.option1
        if variant.option2:
            entry["option2"] = variant.option2
        variants.append(entry)

    payload = {
        "title": remote_title(product),
        "body_html": f"{product.description}\n\n---\nVendor: {label}",
        "product_type": product.category,
        "vendor": label,
        "status": "active",
        "variants": variants,
        "images": [{"src": src} for src in images],
        "tags": ",".join(t for t in ("verified", "marketplace", product.category) if t),
    }

    options = []
    if sizes:
        options.append({"name": "Size", "values": sizes})
    if colors:
        options.append({"name": "Color", "values": colors})
    if options:
        payload["options"] = options

    return payload


class ShopifyProductSync:
    """
    Syncs catalog products to one Shopify store.

    Usage:
        with ShopifyAPIClient(shop, token) as client:
            results, outcomes = ShopifyProductSync(client, public_domain).sync_products(products)
    """

    def __init__(self, client: ShopifyAPIClient, public_domain: str = DEFAULT_PUBLIC_DOMAIN):
        self.client = client
        self.public_domain = public_domain

    def find_existing(self, title: str) -> Optional[Dict[str, Any]]:
        """First remote product whose title matches exactly."""
        matches = self.client.find_products_by_title(title)
        return matches[0] if matches else None

    def sync_product(self, product: CatalogProduct) -> SyncOutcome:
        """
        Create or update one product on Shopify.

        Raises:
            UpstreamFailure: If Shopify rejects a request
        """
        payload = build_payload(product, self.public_domain)
        existing = self.find_existing(payload["title"])

        if existing:
            remote = self.client.update_product(existing["id"], payload)
            action = "updated"
        else:
            remote = self.client.create_product(payload)
            action = "created"

        if not remote.get("id"):
            raise UpstreamFailure("Shopify response did not include a product id")

        logger.info("Shopify product %s %s (%s)", remote["id"], action, product.name)
        return SyncOutcome(product_id=product.id, shopify_id=str(remote["id"]), action=action)

    def sync_products(self, products: Sequence[CatalogProduct]) -> Tuple[SyncResults, List[SyncOutcome]]:
        """
        Sync products sequentially, collecting failures.

        Args:
            products: Products to push

        Returns:
            (summary, outcomes of the successful products)
        """
        results = SyncResults()
        outcomes = []

        for product in products:
            label = vendor_label(product.vendor)
            try:
                outcome = self.sync_product(product)
            except (UpstreamFailure, ValueError, TypeError) as e:
                logger.error("Error syncing product %s: %s", product.id, e)
                results.errors.append({
                    "productId": product.id,
                    "productName": product.name,
                    "vendorName": label,
                    "error": str(e),
                })
                continue

            outcomes.append(outcome)
            results.success += 1
            results.synced.append({
                "productId": product.id,
                "productName": product.name,
                "vendorName": label,
                "shopifyId": outcome.shopify_id,
                "action": outcome.action,
            })

        logger.info("Shopify sync: %d synced, %d failed", results.success, len(results.errors))
        return results, outcomes
