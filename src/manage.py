"""Inventory database management CLI.

Creates and drops the database schema of the inventory domain and loads the
sample catalog.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load sample items and variants
"""

import argparse
import sys


def setup_database():
    """Create the database schema of the inventory domain."""
    from inventory.domain import inventory
    from inventory.utils.db import setup_db

    print("Initializing inventory domain...")
    inventory.init()
    print("Creating inventory database schema...")
    setup_db(inventory)
    print("Done.")


def drop_database():
    from inventory.domain import inventory
    from inventory.utils.db import drop_db

    print("Initializing inventory domain...")
    inventory.init()
    print("Dropping inventory database schema...")
    drop_db(inventory)
    print("Done.")


def seed_database():
    from inventory.domain import inventory
    from inventory.seed import seed_catalog
    from inventory.utils.logging import configure_logging

    configure_logging(file_prefix="manage")
    inventory.init()
    with inventory.domain_context():
        created = seed_catalog()
    print(f"Seeded {created} record(s).")


def main():
    parser = argparse.ArgumentParser(description="Inventory database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load the sample catalog")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
