"""
Variant expansion shared by the CSV exporter and the product sync.

A product with sizes and/or colors becomes one variant per size x color
combination. Stock is split evenly with floor division; the remainder units
are not assigned to any variant.
"""

from itertools import product as cartesian
from typing import List, Tuple

from ..common.text_utils import parse_string_list
from ..models import CatalogProduct

DEFAULT_OPTION_NAME = "Title"
DEFAULT_OPTION_VALUE = "Default Title"


def parse_options(product: CatalogProduct) -> Tuple[List[str], List[str]]:
    """Decode a product's sizes and colors; malformed values become []."""
    sizes = parse_string_list(product.sizes, f"sizes of product {product.id}")
    colors = parse_string_list(product.colors, f"colors of product {product.id}")
    return sizes, colors


def has_variants(sizes: List[str], colors: List[str]) -> bool:
    return bool(sizes or colors)


def variant_combinations(sizes: List[str], colors: List[str]) -> List[Tuple[str, str]]:
    """
    All (size, color) pairs, sizes outermost.

    A missing axis contributes a single empty value, so sizes only gives
    [(s, ''), ...] and colors only gives [('', c), ...].
    """
    return list(cartesian(sizes or [''], colors or ['']))


def split_quantity(total: int, parts: int) -> int:
    """Per-variant stock: floor(total / parts)."""
    if parts <= 0:
        return total
    return int(total) // parts


def option_names(sizes: List[str], colors: List[str]) -> Tuple[str, str]:
    """
    Option1/Option2 names for the given axes.

    Returns:
        ('Size', 'Color') with both axes, ('Size', '') or ('Color', '') with
        one, ('Title', '') with none
    """
    if sizes:
        return "Size", "Color" if colors else ""
    if colors:
        return "Color", ""
    return DEFAULT_OPTION_NAME, ""


def option_values(sizes: List[str], colors: List[str], size: str, color: str) -> Tuple[str, str]:
    """Option1/Option2 values matching option_names()."""
    if sizes:
        return size, color if colors else ""
    if colors:
        return color, ""
    return DEFAULT_OPTION_VALUE, ""


def variant_sku(product_id: str, index: int) -> str:
    """SKU of the index-th variant: first 8 chars of the product id + index."""
    return f"{product_id[:8]}-{index}"
