"""Shared test fixtures."""

import pytest
from fastapi.testclient import TestClient

from vendorhub.api.app import create_app
from vendorhub.common.cache import TTLCache
from vendorhub.common.config_loader import Settings
from vendorhub.db.migrations import run_migrations
from vendorhub.db.session import create_db_engine, make_session_factory
from vendorhub.models import CatalogProduct, VendorInfo
from vendorhub.services import accounts

PUBLIC_DOMAIN = "https://market.example.com"


class FakeShopifyClient:
    """In-memory stand-in for ShopifyAPIClient."""

    def __init__(self, shop, access_token, connected=True):
        self.shop = shop
        self.access_token = access_token
        self.connected = connected
        self.products = {}
        self.requests = []

    def __enter__(self):
        return self

    def __exit__(self, *args):
        pass

    def test_connection(self):
        return self.connected

    def find_products_by_title(self, title):
        self.requests.append(("GET", title))
        return [p for p in self.products.values() if p["title"] == title]

    def create_product(self, payload):
        self.requests.append(("POST", payload["title"]))
        product_id = 1001 + len(self.products)
        product = dict(payload, id=product_id)
        self.products[product_id] = product
        return product

    def update_product(self, product_id, payload):
        self.requests.append(("PUT", product_id))
        product = dict(payload, id=product_id)
        self.products[product_id] = product
        return product


class FakeClientFactory:
    """Hands out FakeShopifyClients and remembers them."""

    def __init__(self, connected=True):
        self.connected = connected
        self.clients = []
        self.store = {}

    def __call__(self, shop, access_token):
        client = FakeShopifyClient(shop, access_token, connected=self.connected)
        # One remote catalog shared across clients
        client.products = self.store
        self.clients.append(client)
        return client


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        jwt_secret="test-secret",
        cors_origins=["*"],
        public_domain=PUBLIC_DOMAIN,
        listing_cache_ttl=300,
        auto_migrate=True,
    )


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    run_migrations(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = make_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def cache():
    return TTLCache(ttl=300)


@pytest.fixture
def vendor(session):
    user = accounts.register_user(
        session,
        email="vendor@example.com",
        password="secret123",
        display_name="Jane Vendor",
        business_name="Jane's Threads",
        business_address="12 Market St, Springfield, USA",
    )
    session.commit()
    return user


@pytest.fixture
def other_vendor(session):
    user = accounts.register_user(
        session,
        email="other@example.com",
        password="secret123",
        display_name="Other Vendor",
    )
    session.commit()
    return user


@pytest.fixture
def admin(session):
    user = accounts.register_user(
        session,
        email="admin@example.com",
        password="adminpass",
        display_name="Site Admin",
        is_admin=True,
    )
    session.commit()
    return user


@pytest.fixture
def vendor_info():
    return VendorInfo(
        email="vendor@example.com",
        display_name="Jane Vendor",
        business_name="Jane's Threads",
        business_address="12 Market St, Springfield, USA",
    )


@pytest.fixture
def simple_product(vendor_info):
    """No sizes, colors or images."""
    return CatalogProduct(
        id="a1b2c3d4-0000-4000-8000-000000000001",
        name="Handmade Mug",
        category="Kitchen",
        description="A sturdy ceramic mug.",
        price=12.5,
        quantity=7,
        delivery=True,
        vendor=vendor_info,
    )


@pytest.fixture
def tshirt_product(vendor_info):
    """Sizes S/M/L/XL x colors Black/White, no images."""
    return CatalogProduct(
        id="f00dbabe-1111-4111-8111-000000000002",
        name="Stylish T-Shirt",
        category="Clothing",
        description="Soft cotton tee.",
        price=19.99,
        quantity=20,
        delivery=True,
        images="[]",
        sizes='["S", "M", "L", "XL"]',
        colors='["Black", "White"]',
        vendor=vendor_info,
    )


@pytest.fixture
def factory():
    return FakeClientFactory()


@pytest.fixture
def app(settings, factory):
    return create_app(settings, client_factory=factory)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register through the API; returns (token, user)."""

    def _register(email="vendor@example.com", password="secret123", **extra):
        body = {"email": email, "password": password, "displayName": extra.pop("displayName", "Vendor")}
        body.update(extra)
        response = client.post("/auth/register", json=body)
        assert response.status_code == 201, response.text
        data = response.json()
        return data["token"], data["user"]

    return _register


@pytest.fixture
def auth_header():
    def _auth_header(token):
        return {"Authorization": f"Bearer {token}"}
    return _auth_header


@pytest.fixture
def admin_token(app, register):
    """Token of a user registered through the API and then promoted."""
    token, user = register(email="admin@example.com", password="adminpass", displayName="Admin")
    session = app.state.session_factory()
    try:
        accounts.promote_to_admin(session, user["id"])
        session.commit()
    finally:
        session.close()
    return token
