"""
Image URL Validation

Shopify fetches product images by URL during import, so every image reference
must be an absolute http(s) URL. Embedded data URIs, blanks and unparseable
values are swapped for placeholder images; root-relative paths are made
absolute under the public domain the uploads are served from.
"""

import logging
from typing import Any, Iterable, List, Optional
from urllib.parse import quote_plus

from ..common.constants import MAX_PRODUCT_IMAGES, PLACEHOLDER_IMAGE_BASE

logger = logging.getLogger(__name__)

NO_IMAGE_TEXT = "No Image"
EMBEDDED_IMAGE_TEXT = "Product Image"


def placeholder_image_url(text: str) -> str:
    """Placeholder image URL showing the given caption."""
    return f"{PLACEHOLDER_IMAGE_BASE}?text={text}"


def product_placeholder_url(product_name: str) -> str:
    """Placeholder image URL showing the product name (URL-encoded)."""
    return placeholder_image_url(quote_plus(product_name or NO_IMAGE_TEXT))


class ImageValidator:
    """
    Normalizes image references for Shopify import.

    Usage:
        validator = ImageValidator(public_domain="https://shop.example.com")
        urls = validator.validate_all(["/uploads/a.jpg", "data:image/png;base64,..."])
        fetchable = validator.resolve_all(["/uploads/a.jpg", "data:image/png;base64,..."])
    """

    def __init__(self, public_domain: str, max_images: int = MAX_PRODUCT_IMAGES):
        """
        Initialize the validator.

        Args:
            public_domain: Absolute base URL for root-relative paths
            max_images: Maximum number of images kept per product
        """
        self.public_domain = public_domain.rstrip('/')
        self.max_images = max_images

    def resolve(self, image: Any) -> Optional[str]:
        """
        Absolute URL for an image reference, or None when it cannot be fetched.

        Args:
            image: Stored image reference

        Returns:
            Absolute URL, or None for blanks, data URIs and scheme-less values
        """
        if not isinstance(image, str) or not image.strip():
            return None

        image = image.strip()

        if image.startswith('data:'):
            return None

        if image.startswith('/'):
            return f"{self.public_domain}{image}"

        if '://' not in image:
            return None

        return image

    def validate(self, image: Any) -> str:
        """
        Turn one image reference into a fetchable URL, using a placeholder
        when it cannot be resolved.
        """
        url = self.resolve(image)
        if url is not None:
            return url

        if isinstance(image, str) and image.strip().startswith('data:'):
            logger.debug("Replacing embedded data URI with placeholder")
            return placeholder_image_url(EMBEDDED_IMAGE_TEXT)

        if isinstance(image, str) and image.strip():
            logger.debug("Unusable image reference %r, using placeholder", image[:80])
        return placeholder_image_url(NO_IMAGE_TEXT)

    def validate_all(self, images: Iterable[Any]) -> List[str]:
        """Validate images in order, keeping at most max_images."""
        return [self.validate(image) for image in list(images)[:self.max_images]]

    def resolve_all(self, images: Iterable[Any]) -> List[str]:
        """Resolvable images only, in order, at most max_images of them."""
        urls = (self.resolve(image) for image in list(images)[:self.max_images])
        return [url for url in urls if url is not None]
