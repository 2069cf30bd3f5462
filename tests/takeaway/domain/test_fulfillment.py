"""Tests for fulfillment strategies and the strategy registry."""

from types import SimpleNamespace

import pytest
from protean.exceptions import ValidationError
from takeaway.exceptions import DeliveryAddressRejected, DeliveryAddressRequired
from takeaway.fulfillment.strategy import (
    DeliveryFulfillment,
    FulfillmentMode,
    PickupFulfillment,
    parse_mode,
    strategy_for,
)
from takeaway.order.order import Order


def _request(**fields):
    defaults = {
        "delivery_address": None,
        "delivery_zip": None,
        "delivery_instructions": None,
        "delivery_fee": None,
    }
    defaults.update(fields)
    return SimpleNamespace(**defaults)


@pytest.fixture()
def order():
    return Order.create(order_number="ORD-20250101-0001")


class TestParseMode:
    def test_missing_mode_defaults_to_delivery(self):
        assert parse_mode(None) is FulfillmentMode.DELIVERY
        assert parse_mode("") is FulfillmentMode.DELIVERY

    def test_case_insensitive(self):
        assert parse_mode(" Pickup ") is FulfillmentMode.PICKUP

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError) as exc:
            parse_mode("drone")
        assert "fulfillment_mode" in exc.value.messages

    def test_registry_lookup(self):
        assert isinstance(strategy_for("delivery"), DeliveryFulfillment)
        assert isinstance(strategy_for(FulfillmentMode.PICKUP), PickupFulfillment)


class TestPickup:
    def test_pickup_has_no_fee_and_no_address(self, order, address_validator):
        request = _request(delivery_address="1 rue de Rome", delivery_fee="7.00", delivery_instructions="Table 4")
        PickupFulfillment().validate_and_populate(order, request)

        assert order.delivery_fee == "0.00"
        assert order.delivery_address is None
        assert order.delivery_zip is None
        assert order.delivery_instructions == "Table 4"
        assert address_validator.calls == []


class TestDelivery:
    def test_address_required(self, order):
        with pytest.raises(DeliveryAddressRequired):
            DeliveryFulfillment().validate_and_populate(order, _request(delivery_address="   "))

    def test_default_fee_from_settings(self, order, address_validator):
        request = _request(delivery_address="10 La Canebière", delivery_zip="13001")
        DeliveryFulfillment().validate_and_populate(order, request)

        assert order.delivery_fee == "5.00"
        assert order.delivery_address == "10 La Canebière"
        assert order.delivery_zip == "13001"
        assert address_validator.calls == [{"address": "10 La Canebière", "zip_code": "13001"}]

    def test_requested_fee_is_used(self, order):
        request = _request(delivery_address="10 La Canebière", delivery_fee="3.5")
        DeliveryFulfillment().validate_and_populate(order, request)

        assert order.delivery_fee == "3.50"

    def test_negative_fee_rejected(self, order):
        request = _request(delivery_address="10 La Canebière", delivery_fee="-1.00")
        with pytest.raises(ValidationError) as exc:
            DeliveryFulfillment().validate_and_populate(order, request)
        assert "delivery_fee" in exc.value.messages

    def test_rejected_address_carries_reason(self, order, address_validator):
        address_validator.configure(False, "Delivery is not available beyond 10 km")

        with pytest.raises(DeliveryAddressRejected) as exc:
            DeliveryFulfillment().validate_and_populate(order, _request(delivery_address="Aix-en-Provence"))

        assert exc.value.reason == "Delivery is not available beyond 10 km"
        assert order.delivery_address is None
