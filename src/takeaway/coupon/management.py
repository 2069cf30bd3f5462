"""Coupon management — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from takeaway.coupon.coupon import Coupon, find_coupon, find_coupon_by_code
from takeaway.domain import takeaway

logger = structlog.get_logger(__name__)


@takeaway.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = String(required=True, max_length=20)
    description = Text()
    min_order_amount = String(max_length=20)
    max_discount = String(max_length=20)
    usage_limit = Integer(min_value=0)
    valid_from = DateTime()
    valid_until = DateTime()
    is_active = Boolean(default=True)


@takeaway.command(part_of="Coupon")
class DeactivateCoupon:
    coupon_id = Identifier(required=True)


@takeaway.command_handler(part_of=Coupon)
class ManageCouponHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        if find_coupon_by_code(command.code) is not None:
            raise ValidationError({"code": [f"Coupon code {command.code.strip().upper()} already exists"]})

        coupon = Coupon.create(
            code=command.code,
            discount_type=command.discount_type,
            discount_value=command.discount_value,
            description=command.description,
            min_order_amount=command.min_order_amount,
            max_discount=command.max_discount,
            usage_limit=command.usage_limit,
            valid_from=command.valid_from,
            valid_until=command.valid_until,
            is_active=command.is_active if command.is_active is not None else True,
        )
        current_domain.repository_for(Coupon).add(coupon)
        logger.info("Coupon created", coupon_id=str(coupon.id), coupon_code=coupon.code)
        return str(coupon.id)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        coupon = find_coupon(command.coupon_id)
        coupon.deactivate()
        current_domain.repository_for(Coupon).add(coupon)
        logger.info("Coupon deactivated", coupon_id=str(coupon.id), coupon_code=coupon.code)
