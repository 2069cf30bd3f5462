"""Error taxonomy of the ordering pipeline.

Every error carries a Protean-style ``messages`` dict (``{field: [message]}``)
so the API layer can render it without knowing the concrete class:

- ``ValidationError`` subclasses reject bad input before any state changes.
- ``BusinessRuleViolation`` subclasses reject well-formed requests that the
  restaurant's rules do not allow.
- ``NotFound`` subclasses (``ObjectNotFoundError``) signal stale client state.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class BusinessRuleViolation(ValidationError):
    """A well-formed request that the restaurant's rules reject."""


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------
class EmptyCart(ValidationError):
    def __init__(self):
        super().__init__({"cart": ["Cart is empty"]})


class InvalidPhoneNumber(ValidationError):
    def __init__(self, number):
        super().__init__({"client_phone": [f"Invalid phone number: {number!r}"]})


class DeliveryAddressRequired(ValidationError):
    def __init__(self):
        super().__init__({"delivery_address": ["A delivery address is required"]})


# ---------------------------------------------------------------------------
# Business-rule rejections
# ---------------------------------------------------------------------------
class DeliveryAddressRejected(BusinessRuleViolation):
    def __init__(self, reason=None):
        self.reason = reason or "Delivery is not available for this address"
        super().__init__({"delivery_address": [self.reason]})


class CouponInactive(BusinessRuleViolation):
    def __init__(self, code):
        super().__init__({"coupon": [f"Coupon {code} is no longer active"]})


class CouponExhausted(BusinessRuleViolation):
    def __init__(self, code):
        super().__init__({"coupon": [f"Coupon {code} is no longer available"]})


class CouponNotYetValid(BusinessRuleViolation):
    def __init__(self, code, starts_on):
        super().__init__({"coupon": [f"Coupon {code} is not valid before {starts_on}"]})


class CouponMinimumNotMet(BusinessRuleViolation):
    def __init__(self, code, minimum):
        super().__init__({"coupon": [f"Coupon {code} requires a minimum order of {minimum}"]})


class DishUnavailable(BusinessRuleViolation):
    def __init__(self, name):
        super().__init__({"product_id": [f"{name} is not available right now"]})


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class NotFound(ObjectNotFoundError):
    """Base for lookups that miss; keeps the payload on ``messages``."""

    def __init__(self, messages):
        self.messages = messages
        super().__init__(messages)


class ProductNotFound(NotFound):
    def __init__(self, product_id):
        super().__init__({"product_id": [f"Menu item not found: {product_id}"]})


class CartItemNotFound(NotFound):
    def __init__(self, product_id):
        super().__init__({"product_id": [f"Cart item not found: {product_id}"]})


class CouponNotFound(NotFound):
    def __init__(self, reference):
        super().__init__({"coupon": [f"Coupon not found: {reference}"]})


class OrderNotFound(NotFound):
    def __init__(self, order_id):
        super().__init__({"order_id": [f"Order not found: {order_id}"]})


class OrderItemNotFound(NotFound):
    def __init__(self, item_id):
        super().__init__({"item_id": [f"Order item not found: {item_id}"]})
