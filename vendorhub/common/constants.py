"""
Shared constants for the project.

This module contains application-wide constants that should have a single source of truth.
"""

# Maximum number of listings a vendor may own
PRODUCT_LIMIT = 10

# Maximum number of images kept per product
MAX_PRODUCT_IMAGES = 10

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10

# Listing cache expiry in seconds (5 minutes)
DEFAULT_CACHE_TTL = 300

MIN_PASSWORD_LENGTH = 6

DEFAULT_PRODUCT_STATUS = "active"

# Shopify export
UNKNOWN_VENDOR = "Unknown Vendor"
VENDOR_TAG_MARKER = "marketplace-vendor"
PLACEHOLDER_IMAGE_BASE = "https://via.placeholder.com/800x800.png"

# Largest stock count the INTEGER column holds (signed 64-bit)
MAX_QUANTITY = 2**63 - 1

# Base URL root-relative upload paths are served from
DEFAULT_PUBLIC_DOMAIN = "http://localhost:8000"
