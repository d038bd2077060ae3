"""Tests for vendorhub/shopify/csv_exporter.py"""

import csv
import io
import os
import re
from datetime import date

import pytest

from vendorhub.models import CatalogProduct, VendorInfo
from vendorhub.shopify.csv_exporter import (
    SHOPIFY_FIELDNAMES,
    ShopifyCSVExporter,
    format_price,
    shopify_status,
    vendor_label,
    vendor_tags,
)

PUBLIC_DOMAIN = "https://market.example.com"


@pytest.fixture
def exporter():
    return ShopifyCSVExporter(public_domain=PUBLIC_DOMAIN)


def make_product(**overrides):
    values = dict(
        id="c0ffee00-2222-4222-8222-000000000003",
        name="Linen Scarf",
        category="Accessories",
        description="Light linen scarf.",
        price=25,
        quantity=10,
        vendor=VendorInfo(email="v@example.com", business_name="Linen Co"),
    )
    values.update(overrides)
    return CatalogProduct(**values)


class TestShopifyFieldnames:
    def test_fieldnames_count(self):
        assert len(SHOPIFY_FIELDNAMES) == 47

    def test_no_duplicates(self):
        assert len(set(SHOPIFY_FIELDNAMES)) == len(SHOPIFY_FIELDNAMES)

    def test_order_of_leading_columns(self):
        assert SHOPIFY_FIELDNAMES[:4] == ["Handle", "Title", "Body (HTML)", "Vendor"]
        assert SHOPIFY_FIELDNAMES[-1] == "Status"


class TestVendorHelpers:
    def test_label_prefers_business_name(self):
        assert vendor_label(VendorInfo(business_name="Acme", display_name="Jo")) == "Acme"

    def test_label_falls_back_to_display_name(self):
        assert vendor_label(VendorInfo(display_name="Jo")) == "Jo"

    def test_label_unknown(self):
        assert vendor_label(VendorInfo()) == "Unknown Vendor"
        assert vendor_label(None) == "Unknown Vendor"

    def test_tags(self, vendor_info):
        assert vendor_tags(vendor_info) == "marketplace-vendor, vendor@example.com, 12 Market St"

    def test_tags_without_vendor_details(self):
        assert vendor_tags(VendorInfo()) == "marketplace-vendor"

    def test_status_defaults_to_active(self):
        assert shopify_status("Draft") == "draft"
        assert shopify_status("sold-out") == "active"
        assert shopify_status(None) == "active"

    def test_format_price(self):
        assert format_price(12.5) == "12.50"
        assert format_price("3") == "3.00"
        assert format_price(None) == "0.00"


class TestSimpleProduct:
    def test_single_row_without_images(self, exporter, simple_product):
        rows = exporter.product_to_rows(simple_product)
        assert len(rows) == 1

        row = rows[0]
        assert row["Handle"] == "handmade-mug"
        assert row["Title"] == "Handmade Mug"
        assert row["Vendor"] == "Jane's Threads"
        assert row["Type"] == "Kitchen"
        assert row["Option1 Name"] == "Title"
        assert row["Option1 Value"] == "Default Title"
        assert row["Variant Inventory Qty"] == "7"
        assert row["Variant Price"] == "12.50"
        assert row["Variant SKU"] == "a1b2c3d4"
        assert row["Status"] == "active"

    def test_placeholder_embeds_product_name(self, exporter, simple_product):
        row = exporter.product_to_rows(simple_product)[0]
        assert row["Image Src"].startswith("https://via.placeholder.com/")
        assert "Handmade+Mug" in row["Image Src"]
        assert row["Image Position"] == "1"

    def test_own_sku_is_kept(self, exporter):
        row = exporter.product_to_rows(make_product(sku="SCARF-01"))[0]
        assert row["Variant SKU"] == "SCARF-01"

    def test_every_row_has_all_columns(self, exporter, simple_product):
        for row in exporter.product_to_rows(simple_product):
            assert list(row) == SHOPIFY_FIELDNAMES
            assert all(isinstance(v, str) for v in row.values())

    def test_k_images_give_k_rows(self, exporter):
        product = make_product(images=[
            "https://cdn.example.com/1.jpg",
            "/uploads/2.jpg",
            "https://cdn.example.com/3.jpg",
        ])
        rows = exporter.product_to_rows(product)

        assert len(rows) == 3
        assert [r["Image Position"] for r in rows] == ["1", "2", "3"]
        assert rows[1]["Image Src"] == "https://market.example.com/uploads/2.jpg"

        assert rows[0]["Title"] == "Linen Scarf"
        assert rows[0]["Variant Inventory Qty"] == "10"
        for row in rows[1:]:
            assert row["Handle"] == "linen-scarf"
            assert row["Title"] == ""
            assert row["Variant SKU"] == ""
            assert row["Variant Price"] == ""

    def test_images_capped_at_ten(self, exporter):
        product = make_product(images=[f"https://cdn.example.com/{i}.jpg" for i in range(12)])
        rows = exporter.product_to_rows(product)
        assert len(rows) == 10
        assert rows[-1]["Image Src"] == "https://cdn.example.com/9.jpg"

    def test_data_uri_replaced_with_placeholder(self, exporter):
        product = make_product(images=["data:image/png;base64,iVBORw0KGgo="])
        rows = exporter.product_to_rows(product)

        assert len(rows) == 1
        assert "Product Image" in rows[0]["Image Src"]
        assert not any("data:" in value for row in rows for value in row.values())

    def test_unparseable_images_use_product_placeholder(self, exporter):
        product = make_product(images='["broken"')
        rows = exporter.product_to_rows(product)
        assert len(rows) == 1
        assert "Linen+Scarf" in rows[0]["Image Src"]

    def test_draft_product_unpublished(self, exporter):
        row = exporter.product_to_rows(make_product(status="draft"))[0]
        assert row["Published"] == "FALSE"
        assert row["Status"] == "draft"

    def test_pickup_only_product_does_not_require_shipping(self, exporter):
        row = exporter.product_to_rows(make_product(delivery=False))[0]
        assert row["Variant Requires Shipping"] == "FALSE"


class TestVariantProduct:
    def test_stylish_tshirt(self, exporter, tshirt_product):
        rows = exporter.product_to_rows(tshirt_product)

        assert len(rows) == 8
        assert {r["Handle"] for r in rows} == {"stylish-t-shirt"}
        assert {r["Variant Inventory Qty"] for r in rows} == {"2"}
        assert [r["Variant SKU"] for r in rows] == [f"f00dbabe-{i}" for i in range(8)]

        assert rows[0]["Option1 Name"] == "Size"
        assert rows[0]["Option2 Name"] == "Color"
        assert (rows[0]["Option1 Value"], rows[0]["Option2 Value"]) == ("S", "Black")
        assert (rows[1]["Option1 Value"], rows[1]["Option2 Value"]) == ("S", "White")
        assert (rows[7]["Option1 Value"], rows[7]["Option2 Value"]) == ("XL", "White")

    def test_metadata_only_on_first_variant(self, exporter, tshirt_product):
        rows = exporter.product_to_rows(tshirt_product, is_first_product=True)
        assert rows[0]["Title"] == "Stylish T-Shirt"
        assert all(r["Title"] == "" for r in rows[1:])

    def test_remainder_units_dropped(self, exporter):
        product = make_product(quantity=10, sizes=["S", "M", "L"])
        rows = exporter.product_to_rows(product)

        assert len(rows) == 3
        assert [r["Variant Inventory Qty"] for r in rows] == ["3", "3", "3"]
        assert rows[0]["Option1 Name"] == "Size"
        assert rows[0]["Option2 Name"] == ""

    def test_colors_only(self, exporter):
        rows = exporter.product_to_rows(make_product(quantity=4, colors='["Red", "Blue"]'))

        assert len(rows) == 2
        assert rows[0]["Option1 Name"] == "Color"
        assert [r["Option1 Value"] for r in rows] == ["Red", "Blue"]
        assert [r["Variant Inventory Qty"] for r in rows] == ["2", "2"]

    def test_variants_with_images(self, exporter):
        product = make_product(
            quantity=6,
            sizes=["S", "M"],
            images=["https://cdn.example.com/a.jpg", "https://cdn.example.com/b.jpg"],
        )
        rows = exporter.product_to_rows(product)

        # 2 variants x 2 images
        assert len(rows) == 4
        first, second, third, fourth = rows

        assert first["Title"] == "Linen Scarf"
        assert first["Variant SKU"] == "c0ffee00-0"
        assert first["Image Position"] == "1"

        assert second["Title"] == ""
        assert second["Variant SKU"] == ""
        assert second["Image Src"] == "https://cdn.example.com/b.jpg"

        assert third["Title"] == ""
        assert third["Variant SKU"] == "c0ffee00-1"
        assert third["Option1 Value"] == "M"
        assert third["Variant Inventory Qty"] == "3"
        assert third["Image Position"] == "1"

        assert fourth["Variant SKU"] == ""
        assert fourth["Image Position"] == "2"

    def test_malformed_sizes_treated_as_simple_product(self, exporter, caplog):
        product = make_product(sizes='["S", "M"')
        rows = exporter.product_to_rows(product)

        assert len(rows) == 1
        assert rows[0]["Option1 Value"] == "Default Title"
        assert "Could not parse sizes" in caplog.text


class TestBuildRows:
    def test_later_products_without_images_carry_no_metadata(self, exporter, simple_product, tshirt_product):
        result = exporter.build_rows([simple_product, tshirt_product])

        assert result.product_count == 2
        assert len(result.rows) == 9
        assert result.rows[0]["Title"] == "Handmade Mug"
        assert all(r["Title"] == "" for r in result.rows[1:])
        assert result.rows[1]["Variant SKU"] == "f00dbabe-0"

    def test_failed_product_is_skipped(self, exporter, simple_product, tshirt_product):
        broken = make_product(id="deadbeef-0000", name="Broken", price="not-a-number")
        result = exporter.build_rows([simple_product, broken, tshirt_product])

        assert result.product_count == 2
        assert len(result.rows) == 9
        assert len(result.errors) == 1
        assert result.errors[0]["productId"] == "deadbeef-0000"
        assert result.errors[0]["productName"] == "Broken"
        assert not any(r["Handle"] == "broken" for r in result.rows)

    def test_empty_batch(self, exporter):
        result = exporter.build_rows([])
        assert result.rows == []
        assert result.errors == []


class TestExportText:
    def test_header_and_rows(self, exporter, simple_product, tshirt_product):
        text, result = exporter.export_text([simple_product, tshirt_product])
        parsed = list(csv.reader(io.StringIO(text)))

        assert parsed[0] == SHOPIFY_FIELDNAMES
        assert len(parsed) == 1 + 9
        assert all(len(row) == 47 for row in parsed)
        assert result.product_count == 2

    def test_escaping_round_trips(self, exporter):
        description = 'Soft, warm and "cozy"\nHand wash only'
        product = make_product(name='Scarf, "Deluxe"', description=description)
        text, _ = exporter.export_text([product])

        assert '"Soft, warm and ""cozy""\nHand wash only"' in text

        row = next(csv.DictReader(io.StringIO(text)))
        assert row["Body (HTML)"] == description
        assert row["Title"] == 'Scarf, "Deluxe"'
        assert row["Handle"] == "scarf-deluxe"

    def test_plain_fields_unquoted(self, exporter, simple_product):
        text, _ = exporter.export_text([simple_product])
        assert "\nhandmade-mug,Handmade Mug," in text


class TestExportMultiple:
    def test_writes_file(self, exporter, tmp_path, simple_product, tshirt_product):
        output = str(tmp_path / "out" / "shopify.csv")
        result = exporter.export_multiple([simple_product, tshirt_product], output)

        assert len(result.rows) == 9
        assert result.product_count == 2
        assert os.path.exists(output)
        with open(output, encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 9
        assert rows[0]["Handle"] == "handmade-mug"


class TestFilename:
    def test_dated_filename(self):
        assert ShopifyCSVExporter.filename(date(2024, 5, 1)) == "shopify_products_2024-05-01.csv"

    def test_defaults_to_today(self):
        assert re.fullmatch(r"shopify_products_\d{4}-\d{2}-\d{2}\.csv", ShopifyCSVExporter.filename())
