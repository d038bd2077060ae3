#!/usr/bin/env python3
"""
Apply pending schema migrations.

Usage:
    python3 scripts/migrate.py
    python3 scripts/migrate.py --database-url sqlite:///vendorhub.db
    python3 scripts/migrate.py --target 3
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from vendorhub.common.config_loader import load_settings
from vendorhub.common.log_config import setup_logging
from vendorhub.db.migrations import MIGRATIONS, current_version, run_migrations
from vendorhub.db.session import create_db_engine

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Apply pending VendorHub schema migrations")
    parser.add_argument('--database-url', type=str,
                        help='Database URL (default: from settings / DATABASE_URL)')
    parser.add_argument('--target', type=int,
                        help='Stop after this migration version')
    parser.add_argument('--status', action='store_true',
                        help='Show the current version and exit')
    parser.add_argument('--sql', action='store_true', help='Print executed SQL')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Warnings only')
    args = parser.parse_args()

    setup_logging(verbose=args.verbose, quiet=args.quiet, sql=args.sql)

    database_url = args.database_url or load_settings().database_url
    engine = create_db_engine(database_url)

    if args.status:
        latest = MIGRATIONS[-1].version
        print(f"Schema version: {current_version(engine)} (latest: {latest})")
        return

    applied = run_migrations(engine, target=args.target)

    if applied:
        print(f"Applied migrations: {', '.join(str(v) for v in applied)}")
    else:
        print("Schema is up to date")
    print(f"Schema version: {current_version(engine)}")


if __name__ == "__main__":
    main()
