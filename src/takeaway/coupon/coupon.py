"""Coupon aggregate — discount codes with usage limits and validity windows.

Codes are stored upper-case and looked up case-insensitively. Availability
is layered:

    has_started()               no valid_from, or valid_from has passed
    is_valid()                  active and inside [valid_from, valid_until]
    can_be_used()               valid and usage_count < usage_limit
    can_be_applied_to_amount()  usable and the amount meets the minimum order

``discount_for()`` prices the coupon's terms alone (type, value, cap,
minimum order). Order recomputes use it so that an order keeps its discount
after its own redemption has used up the coupon.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Integer, String, Text
from protean.utils.globals import current_domain

from takeaway.coupon.events import CouponCreated, CouponDeactivated, CouponRedeemed
from takeaway.domain import takeaway
from takeaway.exceptions import CouponExhausted, CouponInactive, CouponNotFound
from takeaway.pricing.money import ZERO, format_amount, quantize, to_decimal


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code) -> str:
    return (code or "").strip().upper()


def _aware(moment):
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@takeaway.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    description = Text()
    discount_type = String(required=True, choices=DiscountType)
    discount_value = String(required=True, max_length=20)
    min_order_amount = String(max_length=20)
    max_discount = String(max_length=20)
    usage_limit = Integer(min_value=0)
    usage_count = Integer(default=0, min_value=0)
    valid_from = DateTime()
    valid_until = DateTime()
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discount_value_must_be_positive(self):
        value = to_decimal(self.discount_value, field="discount_value")
        if value <= ZERO:
            raise ValidationError({"discount_value": ["Discount value must be greater than zero"]})
        if self.discount_type == DiscountType.PERCENTAGE.value and value > 100:
            raise ValidationError({"discount_value": ["A percentage discount cannot exceed 100"]})

    @invariant.post
    def usage_must_stay_within_limit(self):
        if self.usage_limit is not None and (self.usage_count or 0) > self.usage_limit:
            raise ValidationError({"usage_count": ["Usage count cannot exceed the usage limit"]})

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from and self.valid_until and _aware(self.valid_until) < _aware(self.valid_from):
            raise ValidationError({"valid_until": ["Validity end must come after its start"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        description=None,
        min_order_amount=None,
        max_discount=None,
        usage_limit=None,
        valid_from=None,
        valid_until=None,
        is_active=True,
    ):
        now = datetime.now(UTC)
        coupon = cls(
            code=normalize_code(code),
            description=description,
            discount_type=discount_type,
            discount_value=format_amount(to_decimal(discount_value, field="discount_value")),
            min_order_amount=format_amount(min_order_amount) if min_order_amount not in (None, "") else None,
            max_discount=format_amount(max_discount) if max_discount not in (None, "") else None,
            usage_limit=usage_limit,
            usage_count=0,
            valid_from=valid_from,
            valid_until=valid_until,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        coupon.raise_(
            CouponCreated(
                coupon_id=str(coupon.id),
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
            )
        )
        return coupon

    # -------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------
    def has_started(self, now=None) -> bool:
        return not self.valid_from or (now or datetime.now(UTC)) >= _aware(self.valid_from)

    def is_valid(self, now=None) -> bool:
        if not self.is_active:
            return False
        now = now or datetime.now(UTC)
        if not self.has_started(now):
            return False
        if self.valid_until and now > _aware(self.valid_until):
            return False
        return True

    def can_be_used(self, now=None) -> bool:
        if not self.is_valid(now):
            return False
        if self.usage_limit is not None and (self.usage_count or 0) >= self.usage_limit:
            return False
        return True

    def meets_minimum(self, amount) -> bool:
        return not self.min_order_amount or to_decimal(amount) >= to_decimal(self.min_order_amount)

    def can_be_applied_to_amount(self, amount, now=None) -> bool:
        return self.can_be_used(now) and self.meets_minimum(amount)

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def discount_for(self, amount):
        """Discount the coupon's terms grant on ``amount``, rounded to cents."""
        amount = to_decimal(amount)
        if amount <= ZERO or not self.meets_minimum(amount):
            return ZERO

        value = to_decimal(self.discount_value)
        if self.discount_type == DiscountType.PERCENTAGE.value:
            discount = amount * value / 100
        else:
            discount = value

        if self.max_discount:
            discount = min(discount, to_decimal(self.max_discount))
        return quantize(min(discount, amount))

    def calculate_discount(self, amount, now=None):
        """Discount for a new order: zero unless the coupon applies right now."""
        if not self.can_be_applied_to_amount(amount, now):
            return ZERO
        return self.discount_for(amount)

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def redeem(self, order_id=None):
        if not self.is_active:
            raise CouponInactive(self.code)
        if not self.can_be_used():
            raise CouponExhausted(self.code)

        now = datetime.now(UTC)
        self.usage_count = (self.usage_count or 0) + 1
        self.updated_at = now
        self.raise_(
            CouponRedeemed(
                coupon_id=str(self.id),
                code=self.code,
                order_id=str(order_id) if order_id else None,
                usage_count=self.usage_count,
                redeemed_at=now,
            )
        )

    def deactivate(self):
        if not self.is_active:
            return
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(CouponDeactivated(coupon_id=str(self.id), code=self.code))

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "code": self.code,
            "description": self.description,
            "discount_type": self.discount_type,
            "discount_value": self.discount_value,
            "min_order_amount": self.min_order_amount,
            "max_discount": self.max_discount,
            "usage_limit": self.usage_limit,
            "usage_count": self.usage_count,
            "valid_from": self.valid_from.isoformat() if self.valid_from else None,
            "valid_until": self.valid_until.isoformat() if self.valid_until else None,
            "is_valid": self.is_valid(),
            "can_be_used": self.can_be_used(),
        }


def find_coupon(coupon_id) -> Coupon:
    try:
        return current_domain.repository_for(Coupon).get(str(coupon_id))
    except ObjectNotFoundError:
        raise CouponNotFound(coupon_id) from None


def find_coupon_by_code(code) -> Coupon | None:
    results = current_domain.repository_for(Coupon)._dao.query.filter(code=normalize_code(code)).all()
    return results.first if results and results.items else None
