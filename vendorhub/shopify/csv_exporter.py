"""
Shopify CSV Exporter

Exports marketplace products to Shopify's bulk-import CSV format.
Handles all 47 columns of the product import template, including
size/color variant expansion and multi-image products.

Row layout follows Shopify's convention: the rows of one product share its
handle, product-level fields appear once, and continuation rows carry only
the variant and/or image they add.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..common.constants import DEFAULT_PUBLIC_DOMAIN, UNKNOWN_VENDOR, VENDOR_TAG_MARKER
from ..common.csv_utils import csv_filename, rows_to_csv, write_csv
from ..common.text_utils import first_address_segment, generate_handle, parse_string_list, truncate
from ..models import CatalogProduct, VendorInfo
from .images import ImageValidator, product_placeholder_url
from .variants import (
    DEFAULT_OPTION_VALUE,
    has_variants,
    option_names,
    option_values,
    parse_options,
    split_quantity,
    variant_combinations,
    variant_sku,
)

logger = logging.getLogger(__name__)

# Shopify product import columns (exact template order)
SHOPIFY_FIELDNAMES = [
    'Handle', 'Title', 'Body (HTML)', 'Vendor', 'Product Category', 'Type', 'Tags',
    'Published',
    'Option1 Name', 'Option1 Value', 'Option2 Name', 'Option2 Value',
    'Option3 Name', 'Option3 Value',
    'Variant SKU', 'Variant Grams', 'Variant Inventory Tracker', 'Variant Inventory Qty',
    'Variant Inventory Policy', 'Variant Fulfillment Service', 'Variant Price',
    'Variant Compare At Price', 'Variant Requires Shipping', 'Variant Taxable',
    'Variant Barcode',
    'Image Src', 'Image Position', 'Image Alt Text',
    'Gift Card', 'SEO Title', 'SEO Description',
    'Google Shopping / Google Product Category', 'Google Shopping / Gender',
    'Google Shopping / Age Group', 'Google Shopping / MPN',
    'Google Shopping / Condition', 'Google Shopping / Custom Product',
    'Google Shopping / Custom Label 0', 'Google Shopping / Custom Label 1',
    'Google Shopping / Custom Label 2', 'Google Shopping / Custom Label 3',
    'Google Shopping / Custom Label 4',
    'Variant Image', 'Variant Weight Unit', 'Variant Tax Code', 'Cost per item',
    'Status',
]

SHOPIFY_STATUSES = {'active', 'draft', 'archived'}
SEO_TITLE_LIMIT = 70
SEO_DESCRIPTION_LIMIT = 160


@dataclass
class ExportResult:
    """Rows produced for a batch, plus the products that had to be skipped."""
    rows: List[Dict[str, str]] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)
    product_count: int = 0


def vendor_label(vendor: Optional[VendorInfo]) -> str:
    """Business name, else display name, else 'Unknown Vendor'."""
    if vendor is None:
        return UNKNOWN_VENDOR
    return vendor.business_name or vendor.display_name or UNKNOWN_VENDOR


def vendor_tags(vendor: Optional[VendorInfo]) -> str:
    """Marker tag, vendor email and the first segment of the business address."""
    tags = [VENDOR_TAG_MARKER]
    if vendor is not None:
        if vendor.email:
            tags.append(vendor.email)
        location = first_address_segment(vendor.business_address)
        if location:
            tags.append(location)
    return ', '.join(tags)


def shopify_status(status: Optional[str]) -> str:
    status = (status or '').strip().lower()
    return status if status in SHOPIFY_STATUSES else 'active'


def format_price(price) -> str:
    return f"{float(price or 0):.2f}"


class ShopifyCSVExporter:
    """
    Exports products to Shopify-compatible CSV format.

    Usage:
        exporter = ShopifyCSVExporter(public_domain="https://shop.example.com")
        text, result = exporter.export_text(products)
        exporter.export_multiple(products, "output/products.csv")
    """

    def __init__(self, public_domain: str = DEFAULT_PUBLIC_DOMAIN):
        """
        Initialize the exporter.

        Args:
            public_domain: Absolute base URL for root-relative image paths
        """
        self.fieldnames = SHOPIFY_FIELDNAMES
        self.image_validator = ImageValidator(public_domain)

    def blank_row(self, handle: str) -> Dict[str, str]:
        row = {name: '' for name in self.fieldnames}
        row['Handle'] = handle
        return row

    def product_fields(self, product: CatalogProduct) -> Dict[str, str]:
        """
        Product-level fields, written once per product.

        Args:
            product: Product to convert

        Returns:
            Dictionary of field values
        """
        label = vendor_label(product.vendor)
        status = shopify_status(product.status)

        return {
            'Title': product.name,
            'Body (HTML)': product.description or '',
            'Vendor': label,
            'Type': product.category or '',
            'Tags': vendor_tags(product.vendor),
            'Published': 'TRUE' if status == 'active' else 'FALSE',
            'Gift Card': 'FALSE',
            'SEO Title': truncate(product.name, SEO_TITLE_LIMIT),
            'SEO Description': truncate(product.description, SEO_DESCRIPTION_LIMIT),
            'Google Shopping / Condition': 'new',
            'Google Shopping / Custom Product': 'FALSE',
            'Google Shopping / Custom Label 0': label,
            'Google Shopping / Custom Label 1': product.category or '',
            'Status': status,
        }

    def variant_fields(
        self,
        product: CatalogProduct,
        sku: str,
        quantity: int,
        options: Tuple[str, str],
        values: Tuple[str, str],
    ) -> Dict[str, str]:
        """
        Variant-level fields: SKU, options, stock, price and fulfillment.

        Args:
            product: Product the variant belongs to
            sku: Variant SKU
            quantity: Variant inventory quantity
            options: (Option1 Name, Option2 Name)
            values: (Option1 Value, Option2 Value)
        """
        return {
            'Option1 Name': options[0],
            'Option1 Value': values[0],
            'Option2 Name': options[1],
            'Option2 Value': values[1],
            'Variant SKU': sku,
            'Variant Grams': '0',
            'Variant Inventory Tracker': 'shopify',
            'Variant Inventory Qty': str(quantity),
            'Variant Inventory Policy': 'deny',
            'Variant Fulfillment Service': 'manual',
            'Variant Price': format_price(product.price),
            'Variant Requires Shipping': 'TRUE' if product.delivery else 'FALSE',
            'Variant Taxable': 'TRUE',
            'Variant Weight Unit': 'kg',
        }

    def image_fields(self, url: str, position: int, alt_text: str) -> Dict[str, str]:
        return {
            'Image Src': url,
            'Image Position': str(position),
            'Image Alt Text': alt_text,
        }

    def simple_product_rows(
        self,
        product: CatalogProduct,
        handle: str,
        images: List[str],
    ) -> List[Dict[str, str]]:
        """Rows for a product without sizes or colors."""
        sku = product.sku or product.id[:8]
        main = self.blank_row(handle)
        main.update(self.product_fields(product))
        main.update(self.variant_fields(
            product, sku, int(product.quantity or 0),
            ("Title", ""), (DEFAULT_OPTION_VALUE, ""),
        ))

        if not images:
            main.update(self.image_fields(product_placeholder_url(product.name), 1, product.name))
            return [main]

        main.update(self.image_fields(images[0], 1, product.name))
        rows = [main]

        # Additional images: handle + image only
        for position, url in enumerate(images[1:], start=2):
            row = self.blank_row(handle)
            row.update(self.image_fields(url, position, product.name))
            rows.append(row)

        return rows

    def variant_product_rows(
        self,
        product: CatalogProduct,
        handle: str,
        images: List[str],
        sizes: List[str],
        colors: List[str],
        is_first_product: bool,
    ) -> List[Dict[str, str]]:
        """Rows for a product with sizes and/or colors."""
        combinations = variant_combinations(sizes, colors)
        quantity = split_quantity(int(product.quantity or 0), len(combinations))
        names = option_names(sizes, colors)
        rows = []

        for index, (size, color) in enumerate(combinations):
            variant = self.variant_fields(
                product, variant_sku(product.id, index), quantity,
                names, option_values(sizes, colors, size, color),
            )

            if not images:
                row = self.blank_row(handle)
                if is_first_product and index == 0:
                    row.update(self.product_fields(product))
                row.update(variant)
                rows.append(row)
                continue

            for position, url in enumerate(images, start=1):
                row = self.blank_row(handle)
                if index == 0 and position == 1:
                    row.update(self.product_fields(product))
                if position == 1:
                    row.update(variant)
                row.update(self.image_fields(url, position, product.name))
                rows.append(row)

        return rows

    def product_to_rows(self, product: CatalogProduct, is_first_product: bool = True) -> List[Dict[str, str]]:
        """
        Convert product to all CSV rows (variants x images).

        Args:
            product: Product to convert
            is_first_product: Whether this is the first product of the export batch

        Returns:
            List of row dictionaries
        """
        handle = generate_handle(product.name)
        images = self.image_validator.validate_all(
            parse_string_list(product.images, f"images of product {product.id}")
        )
        sizes, colors = parse_options(product)

        if not has_variants(sizes, colors):
            return self.simple_product_rows(product, handle, images)

        return self.variant_product_rows(product, handle, images, sizes, colors, is_first_product)

    def build_rows(self, products: Sequence[CatalogProduct]) -> ExportResult:
        """
        Convert a batch of products, skipping (and recording) any that fail.

        Args:
            products: Products to export, in output order

        Returns:
            ExportResult with all rows and per-product errors
        """
        result = ExportResult()

        for position, product in enumerate(products):
            try:
                rows = self.product_to_rows(product, is_first_product=position == 0)
            except (TypeError, ValueError, AttributeError) as e:
                product_id = getattr(product, 'id', '?')
                logger.warning("Skipping product %s in Shopify export: %s", product_id, e)
                result.errors.append({
                    'productId': str(product_id),
                    'productName': str(getattr(product, 'name', '')),
                    'error': str(e),
                })
                continue

            result.rows.extend(rows)
            result.product_count += 1

        logger.info("Shopify export: %d products -> %d rows (%d skipped)",
                    result.product_count, len(result.rows), len(result.errors))
        return result

    def export_text(self, products: Sequence[CatalogProduct]) -> Tuple[str, ExportResult]:
        """Export products as one CSV payload (header + all rows), plus the batch result."""
        result = self.build_rows(products)
        return rows_to_csv(result.rows, self.fieldnames), result

    def export_multiple(self, products: Sequence[CatalogProduct], output_path: str) -> ExportResult:
        """
        Export multiple products to a CSV file.

        Args:
            products: Products to export
            output_path: Output CSV file path

        Returns:
            ExportResult for the batch (rows written and skipped products)
        """
        result = self.build_rows(products)
        write_csv(output_path, result.rows, self.fieldnames)
        return result

    @staticmethod
    def filename(on: Optional[date] = None) -> str:
        return csv_filename("shopify_products", on)
