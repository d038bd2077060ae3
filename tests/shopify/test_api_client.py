"""Tests for vendorhub/shopify/api_client.py"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from vendorhub.common.errors import UpstreamFailure
from vendorhub.shopify.api_client import ShopifyAPIClient, normalize_shop


@pytest.fixture
def client():
    """Create a client with rate limiting disabled for fast tests."""
    c = ShopifyAPIClient(shop="test-store", access_token="shpat_test")
    c.min_request_interval = 0  # Disable rate limiting in tests
    return c


def make_response(status_code=200, payload=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.content = b"{}" if payload is not None else b""
    response.text = text
    return response


class TestNormalizeShop:
    def test_bare_name(self):
        assert normalize_shop("test-store") == "test-store"

    def test_full_domain(self):
        assert normalize_shop("test-store.myshopify.com") == "test-store"

    def test_full_url(self):
        assert normalize_shop("https://test-store.myshopify.com/") == "test-store"


class TestInit:
    def test_base_url(self, client):
        assert client.base_url == "https://test-store.myshopify.com/admin/api/2024-10"

    def test_custom_api_version(self):
        c = ShopifyAPIClient(shop="test-store", access_token="tok", api_version="2025-01")
        assert c.base_url.endswith("/admin/api/2025-01")

    def test_session_headers(self, client):
        assert client.session.headers["X-Shopify-Access-Token"] == "shpat_test"


class TestRestRequest:
    def test_successful_get(self, client):
        with patch.object(client.session, "request", return_value=make_response(200, {"shop": {"name": "Test"}})) as req:
            result = client.rest_request("GET", "shop.json")

        assert result == {"shop": {"name": "Test"}}
        method, url = req.call_args.args
        assert method == "GET"
        assert url == "https://test-store.myshopify.com/admin/api/2024-10/shop.json"
        assert req.call_args.kwargs["timeout"] == 30

    def test_post_sends_json_body(self, client):
        response = make_response(201, {"product": {"id": 123}})
        with patch.object(client.session, "request", return_value=response) as req:
            result = client.rest_request("POST", "products.json", {"product": {"title": "Mug"}})

        assert result == {"product": {"id": 123}}
        assert req.call_args.kwargs["json"] == {"product": {"title": "Mug"}}

    def test_empty_body(self, client):
        with patch.object(client.session, "request", return_value=make_response(200, None)):
            assert client.rest_request("DELETE", "products/1.json") == {}

    def test_raises_on_http_error(self, client):
        with patch.object(client.session, "request", return_value=make_response(422, {}, text="Invalid")):
            with pytest.raises(UpstreamFailure, match="422"):
                client.rest_request("POST", "products.json", {})

    def test_raises_on_timeout(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.Timeout):
            with pytest.raises(UpstreamFailure, match="timed out"):
                client.rest_request("GET", "shop.json")

    def test_raises_on_connection_error(self, client):
        with patch.object(client.session, "request", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(UpstreamFailure):
                client.rest_request("GET", "shop.json")

    def test_unsupported_method_raises(self, client):
        with pytest.raises(ValueError, match="Unsupported method"):
            client.rest_request("PATCH", "shop.json")

    def test_request_counter(self, client):
        with patch.object(client.session, "request", return_value=make_response(200, {})):
            client.rest_request("GET", "shop.json")
            client.rest_request("GET", "shop.json")
        assert client.requests_made == 2


class TestTestConnection:
    def test_success(self, client):
        with patch.object(client, "rest_request", return_value={"shop": {"name": "Test Store"}}):
            assert client.test_connection() is True

    def test_failure(self, client):
        with patch.object(client, "rest_request", side_effect=UpstreamFailure("401")):
            assert client.test_connection() is False

    def test_empty_shop(self, client):
        with patch.object(client, "rest_request", return_value={}):
            assert client.test_connection() is False


class TestProducts:
    def test_find_by_title_exact_match(self, client):
        payload = {"products": [{"id": 1, "title": "Mug"}, {"id": 2, "title": "Mug XL"}]}
        with patch.object(client, "rest_request", return_value=payload) as req:
            matches = client.find_products_by_title("Mug")

        assert matches == [{"id": 1, "title": "Mug"}]
        assert req.call_args.kwargs["params"] == {"title": "Mug", "limit": 250}

    def test_create(self, client):
        with patch.object(client, "rest_request", return_value={"product": {"id": 9}}) as req:
            assert client.create_product({"title": "Mug"}) == {"id": 9}
        req.assert_called_once_with("POST", "products.json", {"product": {"title": "Mug"}})

    def test_update(self, client):
        with patch.object(client, "rest_request", return_value={"product": {"id": 9}}) as req:
            client.update_product(9, {"title": "Mug"})
        req.assert_called_once_with("PUT", "products/9.json", {"product": {"id": 9, "title": "Mug"}})
