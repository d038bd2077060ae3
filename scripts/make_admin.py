#!/usr/bin/env python3
"""
Promote a user to administrator, or create a new admin account.

Usage:
    python3 scripts/make_admin.py vendor@example.com
    python3 scripts/make_admin.py admin@example.com --create --password s3cret --name "Site Admin"
"""

import argparse
import getpass
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from vendorhub.common.config_loader import load_settings
from vendorhub.common.errors import ValidationFailed
from vendorhub.common.log_config import setup_logging
from vendorhub.db.migrations import run_migrations
from vendorhub.db.session import create_db_engine, make_session_factory, session_scope
from vendorhub.services import accounts

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Grant admin rights to a VendorHub user")
    parser.add_argument('email', help='Email of the user to promote')
    parser.add_argument('--create', action='store_true',
                        help='Create the account if it does not exist')
    parser.add_argument('--password', type=str,
                        help='Password for a created account (prompted if omitted)')
    parser.add_argument('--name', type=str, default='Administrator',
                        help='Display name for a created account')
    parser.add_argument('--database-url', type=str,
                        help='Database URL (default: from settings / DATABASE_URL)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')
    args = parser.parse_args()

    setup_logging(verbose=args.verbose)

    engine = create_db_engine(args.database_url or load_settings().database_url)
    run_migrations(engine)
    factory = make_session_factory(engine)

    with session_scope(factory) as session:
        user = accounts.find_user_by_email(session, args.email)

        if user is None:
            if not args.create:
                print(f"Error: no user with email {args.email} (use --create to add one)")
                sys.exit(1)
            password = args.password or getpass.getpass("Password: ")
            try:
                user = accounts.register_user(
                    session, args.email, password, args.name, is_admin=True
                )
            except ValidationFailed as e:
                print(f"Error: {e.message}")
                sys.exit(1)
            print(f"Created admin account {user.email}")
            return

        if user.is_admin:
            print(f"{user.email} is already an admin")
            return

        accounts.promote_to_admin(session, user.id)
        print(f"Promoted {user.email} to admin")


if __name__ == "__main__":
    main()
