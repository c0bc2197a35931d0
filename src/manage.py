"""Storefront database management CLI.

Creates and drops the schema, and seeds the records this service only reads
(categories and customer accounts are owned by other systems in production).

Usage:
    python src/manage.py setup-db
    python src/manage.py drop-db
    python src/manage.py add-category "Home Electrics"
    python src/manage.py add-category "Fans" --parent <category-id>
    python src/manage.py add-customer "Jane Doe" jane@example.com --verified
"""

import argparse
import sys

from shared.config import load_config
from shared.database import Database, drop_db, setup_db


def _database() -> Database:
    return Database.from_config(load_config())


def setup_database():
    database = _database()
    print(f"Creating schema on {database.engine.url.render_as_string()}...")
    setup_db(database)
    print("Done.")


def drop_database():
    database = _database()
    print(f"Dropping schema on {database.engine.url.render_as_string()}...")
    drop_db(database)
    print("Done.")


def add_category(name, parent_id=None):
    from catalog.category.category import Category

    database = _database()
    with database.transaction() as session:
        category = Category(name=name, parent_id=parent_id)
        session.add(category)
        session.flush()
        print(f"Category {category.name!r} created: {category.id}")


def add_customer(name, email, verified=False):
    from identity.customer.customer import register_customer

    database = _database()
    customer = database.run_in_transaction(register_customer, name, email, verified)
    print(f"Customer {customer.email} created: {customer.id}")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    category_parser = subparsers.add_parser("add-category", help="Add a category")
    category_parser.add_argument("name")
    category_parser.add_argument("--parent", dest="parent_id", help="Parent category id")

    customer_parser = subparsers.add_parser("add-customer", help="Add a customer account")
    customer_parser.add_argument("name")
    customer_parser.add_argument("email")
    customer_parser.add_argument("--verified", action="store_true", help="Mark the email as verified")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "add-category":
        add_category(args.name, args.parent_id)
    elif args.command == "add-customer":
        add_customer(args.name, args.email, args.verified)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
