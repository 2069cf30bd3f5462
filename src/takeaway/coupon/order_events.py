"""Coupon reaction to placed orders — one redemption per committed order.

The coupon is reloaded and re-checked before the increment. If another order
took the last use in the meantime, the order keeps its discount and the
overrun is logged rather than recorded.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from takeaway.coupon.coupon import Coupon
from takeaway.domain import takeaway
from takeaway.order.events import OrderPlaced

logger = structlog.get_logger(__name__)


@takeaway.event_handler(part_of=Coupon, stream_category="takeaway::order")
class OrderPlacedCouponHandler:
    """Records coupon usage for committed orders."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        if not event.coupon_id:
            return

        repo = current_domain.repository_for(Coupon)
        try:
            coupon = repo.get(str(event.coupon_id))
        except ObjectNotFoundError:
            logger.warning(
                "Placed order references an unknown coupon",
                coupon_id=str(event.coupon_id),
                order_number=event.order_number,
            )
            return

        if not coupon.can_be_used():
            logger.warning(
                "Coupon no longer usable at redemption, usage not recorded",
                coupon_code=coupon.code,
                order_number=event.order_number,
                usage_count=coupon.usage_count,
                usage_limit=coupon.usage_limit,
            )
            return

        coupon.redeem(order_id=event.order_id)
        repo.add(coupon)
        logger.info(
            "Coupon redeemed for order",
            coupon_code=coupon.code,
            order_number=event.order_number,
            usage_count=coupon.usage_count,
        )
