"""Protean Engine runner for the takeaway domain.

In production, event processing is asynchronous: the Engine picks up
OrderPlaced events and runs the cart and coupon reactions.

Usage:
    python src/server.py
    python src/server.py --test-mode   # Drain pending events, then exit
"""

import argparse

from protean.server.engine import Engine


def main():
    parser = argparse.ArgumentParser(description="Takeaway Engine runner")
    parser.add_argument("--test-mode", action="store_true", help="Process pending events once and stop")
    args = parser.parse_args()

    from takeaway.domain import takeaway

    takeaway.init()
    Engine(takeaway, test_mode=args.test_mode).run()


if __name__ == "__main__":
    main()
