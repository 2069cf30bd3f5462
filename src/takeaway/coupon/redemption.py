"""Coupon redemption — command and handler.

A redemption re-checks ``can_be_used()`` against the freshly loaded coupon
before incrementing, so two orders racing for the last use cannot both
record it within one process.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from takeaway.coupon.coupon import Coupon, find_coupon
from takeaway.domain import takeaway

logger = structlog.get_logger(__name__)


@takeaway.command(part_of="Coupon")
class RedeemCoupon:
    coupon_id = Identifier(required=True)
    order_id = Identifier()


@takeaway.command_handler(part_of=Coupon)
class RedeemCouponHandler:
    @handle(RedeemCoupon)
    def redeem_coupon(self, command):
        coupon = find_coupon(command.coupon_id)
        coupon.redeem(order_id=command.order_id)
        current_domain.repository_for(Coupon).add(coupon)
        logger.info(
            "Coupon redeemed",
            coupon_code=coupon.code,
            order_id=str(command.order_id) if command.order_id else None,
            usage_count=coupon.usage_count,
        )
