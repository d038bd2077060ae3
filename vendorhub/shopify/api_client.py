"""
Shopify API Client

Client for the Shopify Admin REST API.
Handles authentication, request spacing and error reporting.
"""

import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

from ..common.errors import UpstreamFailure

logger = logging.getLogger(__name__)


def normalize_shop(shop: str) -> str:
    """
    Reduce a store URL or domain to the bare shop name.

    Example:
        >>> normalize_shop("https://my-store.myshopify.com/")
        'my-store'
    """
    shop = shop.strip().replace("https://", "").replace("http://", "").rstrip("/")
    if ".myshopify.com" in shop:
        return shop.split(".myshopify.com")[0]
    return shop


class ShopifyAPIClient:
    """
    Client for the Shopify Admin API.

    Handles:
    - Authentication
    - Request spacing (2 requests/second)
    - Error reporting (raises UpstreamFailure)

    Requests are made one at a time and are not retried.

    Usage:
        client = ShopifyAPIClient(shop="my-store", access_token="shpat_xxx")
        result = client.rest_request("GET", "products.json?title=Mug")
    """

    DEFAULT_API_VERSION = "2024-10"

    def __init__(self, shop: str, access_token: str, api_version: str = DEFAULT_API_VERSION):
        """
        Initialize the API client.

        Args:
            shop: Shop name (without .myshopify.com) or full domain
            access_token: Shopify Admin API access token
            api_version: Admin API version segment
        """
        self.shop = normalize_shop(shop)
        self.access_token = access_token
        self.api_version = api_version
        self.base_url = f"https://{self.shop}.myshopify.com/admin/api/{api_version}"

        self.session = requests.Session()
        self.session.headers.update({
            "X-Shopify-Access-Token": access_token,
            "Content-Type": "application/json",
        })

        # Rate limiting
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.5  # 2 req/sec

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _rate_limit(self):
        """Implement rate limiting (2 requests/second max)."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def rest_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        timeout: int = 30
    ) -> Dict:
        """
        Make REST API request with rate limiting and error handling.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            endpoint: API endpoint (e.g., "products.json")
            data: Request body for POST/PUT
            params: Query string parameters
            timeout: Request timeout in seconds

        Returns:
            Response JSON

        Raises:
            ValueError: For an unsupported method
            UpstreamFailure: On timeout, connection error or HTTP >= 400
        """
        if method not in ("GET", "POST", "PUT", "DELETE"):
            raise ValueError(f"Unsupported method: {method}")

        url = urljoin(self.base_url + "/", endpoint)
        self._rate_limit()

        try:
            response = self.session.request(method, url, json=data, params=params, timeout=timeout)
        except requests.exceptions.Timeout as e:
            logger.error("Request timeout: %s", endpoint)
            raise UpstreamFailure(f"Shopify request timed out: {endpoint}") from e
        except requests.exceptions.RequestException as e:
            logger.error("Request failed: %s", e)
            raise UpstreamFailure(f"Shopify request failed: {e}") from e

        if response.status_code >= 400:
            error_msg = response.text[:200]
            logger.error("API Error %d on %s %s: %s", response.status_code, method, endpoint, error_msg)
            raise UpstreamFailure(f"Shopify API error {response.status_code}: {error_msg}")

        if not response.content:
            return {}
        return response.json()

    def get_shop(self) -> Dict[str, Any]:
        return self.rest_request("GET", "shop.json").get("shop", {})

    def test_connection(self) -> bool:
        """
        Test API connection by fetching shop info.

        Returns:
            True if connection successful
        """
        try:
            shop = self.get_shop()
        except UpstreamFailure:
            return False
        if shop:
            logger.info("Connected to: %s", shop.get("name", "Unknown"))
            return True
        return False

    def find_products_by_title(self, title: str) -> List[Dict[str, Any]]:
        """Products whose title equals the given title exactly."""
        result = self.rest_request("GET", "products.json", params={"title": title, "limit": 250})
        return [p for p in result.get("products", []) if p.get("title") == title]

    def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.rest_request("POST", "products.json", {"product": payload}).get("product", {})

    def update_product(self, product_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = {"product": {"id": product_id, **payload}}
        return self.rest_request("PUT", f"products/{product_id}.json", body).get("product", {})
