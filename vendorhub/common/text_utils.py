"""
Text Utilities

Helper functions for text processing: URL handles, serialized string lists,
address fragments.
"""

import json
import logging
import re
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def generate_handle(title: str) -> str:
    """
    Generate URL-friendly handle from a product name.

    Lowercases the text, replaces every run of characters outside [a-z0-9]
    with a single hyphen and strips leading/trailing hyphens.

    Args:
        title: Product name

    Returns:
        URL-friendly handle

    Example:
        >>> generate_handle("Stylish T-Shirt!")
        'stylish-t-shirt'
    """
    if not title:
        return ''
    handle = re.sub(r'[^a-z0-9]+', '-', title.lower())
    return handle.strip('-')


def parse_string_list(value: Any, field_name: str = "value") -> List[str]:
    """
    Decode a list of strings stored as a JSON array.

    Accepts an already-decoded list, a JSON array string, or None.
    Malformed input is logged and treated as an empty list.

    Args:
        value: Serialized or decoded list
        field_name: Name used in the warning message

    Returns:
        List of strings (non-string items are converted with str())
    """
    if value is None or value == '':
        return []

    if isinstance(value, str):
        try:
            value = json.loads(value)
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Could not parse %s %r: %s", field_name, value[:80], e)
            return []

    if value is None:
        return []

    if not isinstance(value, list):
        logger.warning("Expected a list for %s, got %s", field_name, type(value).__name__)
        return []

    return [item if isinstance(item, str) else str(item) for item in value]


def serialize_string_list(value: Any) -> Optional[str]:
    """
    Serialize a list of strings for storage.

    Strings are assumed to be JSON already and stored as-is; empty or missing
    input becomes None.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    items = [str(item) for item in value]
    return json.dumps(items) if items else None


def first_address_segment(address: Optional[str]) -> str:
    """Return the part of an address before the first comma, trimmed."""
    if not address:
        return ''
    return address.split(',')[0].strip()


def truncate(text: Optional[str], limit: int) -> str:
    """Collapse whitespace and cut text to at most limit characters."""
    if not text:
        return ''
    text = re.sub(r'\s+', ' ', text).strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip()
