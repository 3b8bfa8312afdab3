"""Ordering database management CLI.

Creates or drops the database schema for the ordering domain. Only SQL
providers are touched; set ``PROTEAN_ENV=production`` to target the
PostgreSQL configuration.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def _initialized_domain():
    from ordering.domain import ordering

    print("Initializing ordering domain...")
    ordering.init()
    return ordering


def setup_databases():
    from ordering.utils.db import setup_db

    domain = _initialized_domain()
    print("Creating ordering database schema...")
    setup_db(domain)
    print("Done.")


def drop_databases():
    from ordering.utils.db import drop_db

    domain = _initialized_domain()
    print("Dropping ordering database schema...")
    drop_db(domain)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Ordering database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
