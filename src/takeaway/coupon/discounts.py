"""Discount engine — coupon quotes and the public coupon listing.

Both functions are read-only: quoting a coupon never consumes it. Usage is
only recorded once an order carrying the coupon has been committed.
"""

from dataclasses import asdict, dataclass

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from takeaway.coupon.coupon import Coupon, find_coupon_by_code, normalize_code
from takeaway.exceptions import (
    CouponExhausted,
    CouponInactive,
    CouponMinimumNotMet,
    CouponNotFound,
    CouponNotYetValid,
)
from takeaway.pricing.money import format_amount, to_decimal


@dataclass(frozen=True)
class CouponQuote:
    """What a coupon would take off a given order amount."""

    coupon_id: str
    code: str
    discount_type: str
    discount_value: str
    discount_amount: str
    new_total: str

    def to_dict(self) -> dict:
        return asdict(self)


def validate_coupon(code, order_amount) -> CouponQuote:
    """Check that ``code`` applies to ``order_amount`` and price the discount.

    Raises, in order of precedence: ``ValidationError`` for a blank code,
    ``CouponNotFound``, ``CouponInactive``, ``CouponNotYetValid``,
    ``CouponExhausted`` (usage limit reached or validity window over) and
    ``CouponMinimumNotMet``.
    """
    normalized = normalize_code(code)
    if not normalized:
        raise ValidationError({"code": ["A coupon code is required"]})

    amount = to_decimal(order_amount, field="order_amount")

    coupon = find_coupon_by_code(normalized)
    if coupon is None:
        raise CouponNotFound(normalized)
    if not coupon.is_active:
        raise CouponInactive(coupon.code)
    if not coupon.has_started():
        raise CouponNotYetValid(coupon.code, coupon.valid_from.date().isoformat())
    if not coupon.can_be_used():
        raise CouponExhausted(coupon.code)
    if not coupon.can_be_applied_to_amount(amount):
        raise CouponMinimumNotMet(coupon.code, coupon.min_order_amount)

    discount = coupon.calculate_discount(amount)
    return CouponQuote(
        coupon_id=str(coupon.id),
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        discount_amount=format_amount(discount),
        new_total=format_amount(amount - discount),
    )


def list_active_coupons() -> list[dict]:
    """Active coupons, newest first, with their current usability flags."""
    coupons = current_domain.repository_for(Coupon)._dao.query.filter(is_active=True).all().items
    coupons = sorted(coupons, key=lambda c: c.created_at.timestamp() if c.created_at else 0, reverse=True)
    return [coupon.to_dict() for coupon in coupons]
