"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from takeaway.domain import takeaway


@takeaway.event(part_of="Coupon")
class CouponCreated:
    """A new coupon was made available."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = String(required=True, max_length=20)


@takeaway.event(part_of="Coupon")
class CouponRedeemed:
    """A coupon was used by a committed order."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    order_id = Identifier()
    usage_count = Integer(required=True)
    redeemed_at = DateTime(required=True)


@takeaway.event(part_of="Coupon")
class CouponDeactivated:
    """A coupon was switched off by an operator."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True, max_length=50)
