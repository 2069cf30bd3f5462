"""Operator revisions of placed orders — commands and handler.

Any change to an order's items recomputes that item's line total and then
the order totals, in the same unit of work as the item change. The order
write that follows does not feed back into item handling.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from takeaway.coupon.coupon import Coupon
from takeaway.domain import takeaway
from takeaway.exceptions import OrderNotFound
from takeaway.menu.dish import find_dish
from takeaway.order.order import Order

logger = structlog.get_logger(__name__)

BATCH_SIZE = 100


@takeaway.command(part_of="Order")
class AddOrderItem:
    """Add a dish to a placed order. Name and price default to the menu's."""

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(min_value=1, default=1)
    product_name = String(max_length=255)
    unit_price = String(max_length=20)


@takeaway.command(part_of="Order")
class ReviseOrderItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(min_value=1)
    unit_price = String(max_length=20)


@takeaway.command(part_of="Order")
class RemoveOrderItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@takeaway.command(part_of="Order")
class RecalculateOrderTotals:
    """Recompute one order, or every order when no id is given."""

    order_id = Identifier()


@takeaway.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(str(order_id))
    except ObjectNotFoundError:
        raise OrderNotFound(order_id) from None


def coupon_for(order) -> Coupon | None:
    """The coupon an order references, or None when it has none or it is gone."""
    if not order.coupon_id:
        return None
    try:
        return current_domain.repository_for(Coupon).get(str(order.coupon_id))
    except ObjectNotFoundError:
        logger.warning(
            "Order references a missing coupon, keeping stored discount",
            order_number=order.order_number,
            coupon_id=str(order.coupon_id),
        )
        return None


def _all_order_ids() -> list[str]:
    dao = current_domain.repository_for(Order)._dao
    ids, offset = [], 0
    while True:
        page = dao.query.offset(offset).limit(BATCH_SIZE).all().items
        ids.extend(str(order.id) for order in page)
        if len(page) < BATCH_SIZE:
            return ids
        offset += BATCH_SIZE


@takeaway.command_handler(part_of=Order)
class ReviseOrderHandler:
    @handle(AddOrderItem)
    def add_order_item(self, command):
        order = load_order(command.order_id)

        product_name, unit_price = command.product_name, command.unit_price
        if not product_name or unit_price in (None, ""):
            dish = find_dish(command.product_id)
            product_name = product_name or dish.name
            unit_price = dish.price if unit_price in (None, "") else unit_price

        item = order.add_item(
            product_id=command.product_id,
            product_name=product_name,
            unit_price=unit_price,
            quantity=command.quantity or 1,
            coupon=coupon_for(order),
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Order item added", order_number=order.order_number, item_id=str(item.id), total=order.total)
        return str(item.id)

    @handle(ReviseOrderItem)
    def revise_order_item(self, command):
        order = load_order(command.order_id)
        order.revise_item(
            item_id=command.item_id,
            quantity=command.quantity,
            unit_price=command.unit_price,
            coupon=coupon_for(order),
        )
        current_domain.repository_for(Order).add(order)
        logger.info("Order item revised", order_number=order.order_number, item_id=str(command.item_id), total=order.total)

    @handle(RemoveOrderItem)
    def remove_order_item(self, command):
        order = load_order(command.order_id)
        order.remove_item(item_id=command.item_id, coupon=coupon_for(order))
        current_domain.repository_for(Order).add(order)
        logger.info("Order item removed", order_number=order.order_number, item_id=str(command.item_id), total=order.total)

    @handle(RecalculateOrderTotals)
    def recalculate_order_totals(self, command):
        order_ids = [str(command.order_id)] if command.order_id else _all_order_ids()
        repo = current_domain.repository_for(Order)

        for order_id in order_ids:
            order = load_order(order_id)
            previous_total = order.total
            order.recalculate(coupon=coupon_for(order))
            repo.add(order)
            if order.total != previous_total:
                logger.info(
                    "Order total corrected",
                    order_number=order.order_number,
                    previous_total=previous_total,
                    total=order.total,
                )

        logger.info("Order totals recalculated", order_count=len(order_ids))
        return len(order_ids)

    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        order = load_order(command.order_id)
        order.change_status(command.status)
        current_domain.repository_for(Order).add(order)
        logger.info("Order status changed", order_number=order.order_number, status=order.status)
