"""Tests for vendorhub/services/products.py"""

import pytest

from vendorhub.common.errors import LimitExceeded, NotFound, ValidationFailed
from vendorhub.db.models import Product
from vendorhub.services.products import ProductService, clean_images


def product_data(**overrides):
    data = {
        "name": "Beaded Necklace",
        "category": "Jewelry",
        "description": "Hand-beaded necklace.",
        "price": "15.5",
        "quantity": "4",
        "delivery": True,
    }
    data.update(overrides)
    return data


@pytest.fixture
def service(session, cache):
    return ProductService(session, cache)


class TestCleanImages:
    def test_filters_and_caps(self):
        images = ["", "  ", None, 3] + [f"https://x.example.com/{i}.jpg" for i in range(12)]
        cleaned = clean_images(images)
        assert len(cleaned) == 10
        assert cleaned[0] == "https://x.example.com/0.jpg"

    def test_non_list(self):
        assert clean_images("https://x.example.com/1.jpg") == []


class TestCreateProduct:
    def test_creates_with_coercion(self, service, vendor):
        product = service.create_product(vendor.id, product_data(
            images=["https://x.example.com/1.jpg", ""],
            sizes=["S", "M"],
            colors='["Red"]',
        ))

        assert product.price == 15.5
        assert product.quantity == 4
        assert product.status == "active"
        assert product.images == '["https://x.example.com/1.jpg"]'
        assert product.sizes == '["S", "M"]'
        assert product.colors == '["Red"]'

    def test_missing_required_field(self, service, vendor):
        with pytest.raises(ValidationFailed, match="category"):
            service.create_product(vendor.id, product_data(category=""))

    def test_delivery_must_be_boolean(self, service, vendor):
        with pytest.raises(ValidationFailed, match="Delivery"):
            service.create_product(vendor.id, product_data(delivery="yes"))

    def test_false_delivery_is_allowed(self, service, vendor):
        assert service.create_product(vendor.id, product_data(delivery=False)).delivery is False

    def test_bad_price(self, service, vendor):
        with pytest.raises(ValidationFailed, match="Price"):
            service.create_product(vendor.id, product_data(price="cheap"))

    @pytest.mark.parametrize("price", ["nan", "inf", "-inf", float("nan")])
    def test_non_finite_price(self, service, vendor, price):
        with pytest.raises(ValidationFailed, match="Price"):
            service.create_product(vendor.id, product_data(price=price))

    @pytest.mark.parametrize("quantity", ["1e400", "inf", "nan", 10**30, 10**400])
    def test_quantity_out_of_range(self, service, vendor, quantity):
        with pytest.raises(ValidationFailed, match="Quantity"):
            service.create_product(vendor.id, product_data(quantity=quantity))
        assert service.count_products(vendor.id) == 0

    def test_large_quantity_accepted(self, service, vendor):
        product = service.create_product(vendor.id, product_data(quantity=str(2**53)))
        assert product.quantity == 2**53

    def test_eleventh_product_rejected(self, service, vendor, session):
        for i in range(10):
            service.create_product(vendor.id, product_data(name=f"Item {i}"))

        with pytest.raises(LimitExceeded):
            service.create_product(vendor.id, product_data(name="Item 10"))
        assert service.count_products(vendor.id) == 10

    def test_limit_is_per_vendor(self, service, vendor, other_vendor):
        for i in range(10):
            service.create_product(vendor.id, product_data(name=f"Item {i}"))
        assert service.create_product(other_vendor.id, product_data()).vendor_id == other_vendor.id


class TestListProducts:
    def test_pagination(self, service, vendor):
        for i in range(3):
            service.create_product(vendor.id, product_data(name=f"Item {i}"))

        first = service.list_products(vendor.id, page=1, limit=2)
        second = service.list_products(vendor.id, page=2, limit=2)

        assert first["pagination"] == {"total": 3, "pages": 2, "currentPage": 1, "limit": 2}
        assert [p["name"] for p in first["products"]] == ["Item 2", "Item 1"]
        assert [p["name"] for p in second["products"]] == ["Item 0"]

    def test_empty(self, service, vendor):
        result = service.list_products(vendor.id)
        assert result["products"] == []
        assert result["pagination"]["pages"] == 0

    def test_only_own_products(self, service, vendor, other_vendor):
        service.create_product(other_vendor.id, product_data())
        assert service.list_products(vendor.id)["pagination"]["total"] == 0

    def test_result_is_cached(self, service, vendor, session):
        service.list_products(vendor.id)
        # Written behind the service's back, so the cache is not invalidated
        session.add(Product(vendor_id=vendor.id, **{**product_data(), "price": 1.0, "quantity": 1}))
        session.commit()

        assert service.list_products(vendor.id)["pagination"]["total"] == 0
        assert service.list_products(vendor.id, page=1, limit=5)["pagination"]["total"] == 1

    def test_writes_invalidate_cache(self, service, vendor, cache):
        service.list_products(vendor.id)
        assert (vendor.id, 1, 10) in cache

        product = service.create_product(vendor.id, product_data())
        assert (vendor.id, 1, 10) not in cache
        assert service.list_products(vendor.id)["pagination"]["total"] == 1

        service.update_product(vendor.id, product.id, {"name": "Renamed"})
        assert service.list_products(vendor.id)["products"][0]["name"] == "Renamed"

        service.delete_product(vendor.id, product.id)
        assert service.list_products(vendor.id)["pagination"]["total"] == 0

    def test_other_vendor_cache_untouched(self, service, vendor, other_vendor, cache):
        service.list_products(other_vendor.id)
        service.create_product(vendor.id, product_data())
        assert (other_vendor.id, 1, 10) in cache


class TestUpdateProduct:
    def test_partial_update(self, service, vendor):
        product = service.create_product(vendor.id, product_data(sizes=["S"]))
        updated = service.update_product(vendor.id, product.id, {"price": 20, "sizes": ["S", "M"]})

        assert updated.price == 20.0
        assert updated.name == "Beaded Necklace"
        assert updated.quantity == 4
        assert updated.sizes == '["S", "M"]'

    def test_other_vendor_gets_not_found(self, service, vendor, other_vendor):
        product = service.create_product(vendor.id, product_data())
        with pytest.raises(NotFound):
            service.update_product(other_vendor.id, product.id, {"name": "Stolen"})
        assert service.get_owned(vendor.id, product.id).name == "Beaded Necklace"

    def test_non_finite_price_rejected(self, service, vendor):
        product = service.create_product(vendor.id, product_data())
        with pytest.raises(ValidationFailed, match="Price"):
            service.update_product(vendor.id, product.id, {"price": "inf"})


class TestDeleteProduct:
    def test_owner_delete(self, service, vendor):
        product = service.create_product(vendor.id, product_data())
        service.delete_product(vendor.id, product.id)
        assert service.count_products(vendor.id) == 0

    def test_second_delete_not_found(self, service, vendor):
        product = service.create_product(vendor.id, product_data())
        service.delete_product(vendor.id, product.id)
        with pytest.raises(NotFound):
            service.delete_product(vendor.id, product.id)

    def test_other_vendor_cannot_delete(self, service, vendor, other_vendor):
        product = service.create_product(vendor.id, product_data())
        with pytest.raises(NotFound):
            service.delete_product(other_vendor.id, product.id)
        assert service.count_products(vendor.id) == 1

    def test_admin_delete(self, service, vendor):
        product = service.create_product(vendor.id, product_data())
        service.delete_any_product(product.id)
        assert service.count_products(vendor.id) == 0
        with pytest.raises(NotFound):
            service.delete_any_product(product.id)
