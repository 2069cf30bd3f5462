"""Fulfillment strategies — how an order reaches the customer.

Each fulfillment mode has one strategy that validates the mode-specific
request fields and writes the delivery fields of the order. Strategies are
looked up through a registry keyed by mode; adding a mode means writing a
strategy class and registering it.
"""

from abc import ABC, abstractmethod
from enum import Enum

import structlog
from protean.exceptions import ValidationError

from takeaway.exceptions import DeliveryAddressRejected, DeliveryAddressRequired
from takeaway.geo import get_address_validator
from takeaway.pricing.money import format_amount, to_decimal
from takeaway.settings import get_settings

logger = structlog.get_logger(__name__)


class FulfillmentMode(Enum):
    DELIVERY = "delivery"
    PICKUP = "pickup"


class FulfillmentStrategy(ABC):
    mode: FulfillmentMode

    @abstractmethod
    def validate_and_populate(self, order, request) -> None:
        """Validate ``request`` for this mode and fill the order's delivery fields."""
        ...


class DeliveryFulfillment(FulfillmentStrategy):
    mode = FulfillmentMode.DELIVERY

    def validate_and_populate(self, order, request) -> None:
        address = (getattr(request, "delivery_address", None) or "").strip()
        zip_code = (getattr(request, "delivery_zip", None) or "").strip() or None
        if not address:
            raise DeliveryAddressRequired()

        check = get_address_validator().validate(address, zip_code)
        if not check.valid:
            logger.info("Delivery address rejected", zip_code=zip_code, reason=check.error)
            raise DeliveryAddressRejected(check.error)

        requested_fee = getattr(request, "delivery_fee", None)
        if requested_fee in (None, ""):
            fee = get_settings().delivery_fee
        else:
            fee = to_decimal(requested_fee, field="delivery_fee")
            if fee < 0:
                raise ValidationError({"delivery_fee": ["Delivery fee cannot be negative"]})

        order.delivery_address = address
        order.delivery_zip = zip_code
        order.delivery_instructions = getattr(request, "delivery_instructions", None)
        order.delivery_fee = format_amount(fee)


class PickupFulfillment(FulfillmentStrategy):
    mode = FulfillmentMode.PICKUP

    def validate_and_populate(self, order, request) -> None:
        order.delivery_fee = "0.00"
        order.delivery_address = None
        order.delivery_zip = None
        order.delivery_instructions = getattr(request, "delivery_instructions", None)


_STRATEGIES: dict[FulfillmentMode, FulfillmentStrategy] = {}


def register_strategy(strategy: FulfillmentStrategy) -> None:
    _STRATEGIES[strategy.mode] = strategy


def parse_mode(value) -> FulfillmentMode:
    """Resolve a request value to a mode. Missing values mean delivery."""
    if isinstance(value, FulfillmentMode):
        return value
    if value in (None, ""):
        return FulfillmentMode.DELIVERY
    try:
        return FulfillmentMode(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(mode.value for mode in FulfillmentMode)
        raise ValidationError({"fulfillment_mode": [f"Unknown fulfillment mode {value!r}, expected one of: {allowed}"]}) from None


def strategy_for(mode) -> FulfillmentStrategy:
    mode = parse_mode(mode)
    try:
        return _STRATEGIES[mode]
    except KeyError:
        raise ValidationError({"fulfillment_mode": [f"No fulfillment strategy for {mode.value}"]}) from None


register_strategy(DeliveryFulfillment())
register_strategy(PickupFulfillment())
