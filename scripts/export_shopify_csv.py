#!/usr/bin/env python3
"""
Write the Shopify bulk-import CSV for every product in the database.

Usage:
    python3 scripts/export_shopify_csv.py --output output/shopify_products.csv
    python3 scripts/export_shopify_csv.py --output output/acme.csv --vendor owner@acme.com
    python3 scripts/export_shopify_csv.py --output out.csv --public-domain https://shop.example.com
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from vendorhub.common.config_loader import load_settings
from vendorhub.common.log_config import setup_logging
from vendorhub.db.session import create_db_engine, make_session_factory, session_scope
from vendorhub.services import accounts, reporting
from vendorhub.shopify.csv_exporter import ShopifyCSVExporter

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Export products as a Shopify bulk-import CSV")
    parser.add_argument('--output', '-o', type=str, default=None,
                        help='Output CSV path (default: output/shopify_products_<date>.csv)')
    parser.add_argument('--vendor', type=str,
                        help='Only export products of the vendor with this email')
    parser.add_argument('--public-domain', type=str,
                        help='Base URL for root-relative image paths')
    parser.add_argument('--database-url', type=str,
                        help='Database URL (default: from settings / DATABASE_URL)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Warnings only')
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    settings = load_settings()
    engine = create_db_engine(args.database_url or settings.database_url)
    factory = make_session_factory(engine)
    output = args.output or os.path.join('output', ShopifyCSVExporter.filename())

    with session_scope(factory) as session:
        vendor_id = None
        if args.vendor:
            vendor = accounts.find_user_by_email(session, args.vendor)
            if vendor is None:
                print(f"Error: no vendor with email {args.vendor}")
                sys.exit(1)
            vendor_id = vendor.id

        products = reporting.catalog_products(session, vendor_id)

    exporter = ShopifyCSVExporter(public_domain=args.public_domain or settings.public_domain)
    result = exporter.export_multiple(products, output)

    print(f"Exported {result.product_count} products ({len(result.rows)} rows) to {output}")
    if result.errors:
        print(f"Skipped {len(result.errors)} product(s):")
        for error in result.errors:
            print(f"  - {error['productName']} ({error['productId']}): {error['error']}")


if __name__ == "__main__":
    main()
