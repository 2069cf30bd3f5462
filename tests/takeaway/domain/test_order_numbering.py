"""Tests for order number formatting."""

from datetime import UTC, datetime

from takeaway.order.numbering import format_order_number, generate_order_number


class StubRandom:
    def __init__(self, *values):
        self.values = list(values)

    def randint(self, low, high):
        assert (low, high) == (1, 9999)
        return self.values.pop(0)


def test_format_pads_suffix():
    assert format_order_number("ORD-", datetime(2025, 3, 7, tzinfo=UTC), 42) == "ORD-20250307-0042"


def test_generate_uses_settings_prefix():
    number = generate_order_number(now=datetime(2025, 1, 1, tzinfo=UTC), rng=StubRandom(7))
    assert number == "ORD-20250101-0007"


def test_generate_with_explicit_prefix():
    number = generate_order_number(prefix="TK-", now=datetime(2025, 12, 31, tzinfo=UTC), rng=StubRandom(9999))
    assert number == "TK-20251231-9999"


def test_default_generator_stays_in_range():
    number = generate_order_number(now=datetime(2025, 1, 1, tzinfo=UTC))
    suffix = int(number.rsplit("-", 1)[1])
    assert number.startswith("ORD-20250101-")
    assert 1 <= suffix <= 9999
