"""Application tests for order number allocation against stored orders."""

from datetime import UTC, datetime

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from takeaway.order import numbering
from takeaway.order.numbering import MAX_ATTEMPTS, next_order_number
from takeaway.order.order import Order


class SequenceRandom:
    def __init__(self, *values):
        self.values = list(values)

    def randint(self, low, high):
        return self.values.pop(0)


NOW = datetime(2025, 6, 1, tzinfo=UTC)


def _store_order(number):
    current_domain.repository_for(Order).add(Order.create(order_number=number))


def test_free_number_is_used():
    assert next_order_number(now=NOW, rng=SequenceRandom(12)) == "ORD-20250601-0012"


def test_taken_number_is_redrawn():
    _store_order("ORD-20250601-0012")
    assert next_order_number(now=NOW, rng=SequenceRandom(12, 13)) == "ORD-20250601-0013"


def test_gives_up_after_max_attempts():
    _store_order("ORD-20250601-0012")

    with pytest.raises(ValidationError) as exc:
        next_order_number(now=NOW, rng=SequenceRandom(*([12] * MAX_ATTEMPTS)))
    assert "order_number" in exc.value.messages


def test_number_taken_lookup():
    _store_order("ORD-20250601-0042")

    assert numbering.order_number_taken("ORD-20250601-0042")
    assert not numbering.order_number_taken("ORD-20250601-0043")
