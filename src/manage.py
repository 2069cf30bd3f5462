"""Takeaway management CLI.

Creates and drops the database schema, and recomputes stored order totals
from order items (useful after a VAT change or a manual data fix).

Usage:
    python src/manage.py setup-db                     # Create all tables
    python src/manage.py drop-db                      # Drop all tables
    python src/manage.py recalculate-totals           # Recompute every order
    python src/manage.py recalculate-totals --order-id <id>
"""

import argparse
import sys


def _domain():
    from takeaway.domain import takeaway

    takeaway.init()
    return takeaway


def setup_database():
    from takeaway.utils.db import setup_db

    domain = _domain()
    print("Creating takeaway database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    from takeaway.utils.db import drop_db

    domain = _domain()
    print("Dropping takeaway database schema...")
    drop_db(domain)
    print("Done.")


def recalculate_totals(order_id=None):
    from takeaway.order.revision import RecalculateOrderTotals

    domain = _domain()
    with domain.domain_context():
        count = domain.process(RecalculateOrderTotals(order_id=order_id), asynchronous=False)
    print(f"Recalculated totals for {count} order(s).")
    return count


def main():
    parser = argparse.ArgumentParser(description="Takeaway management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    recalc_parser = subparsers.add_parser("recalculate-totals", help="Recompute stored order totals")
    recalc_parser.add_argument("--order-id", help="Recompute a single order (default: all orders)")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "recalculate-totals":
        recalculate_totals(args.order_id)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
