"""Order placement — turn the session cart into a priced, persisted order.

The handler runs inside the command's unit of work, so the order and its
items are written together or not at all. Nothing is written when a check
fails: the cart is only read here, and it is cleared by an ``OrderPlaced``
reaction once the order has been committed.

Steps:
    1. Read the session cart; an empty cart is rejected.
    2. Allocate an order number; the order starts pending.
    3. Let the fulfillment strategy for the mode validate and fill the
       delivery fields.
    4. Resolve the payment mode.
    5. Record the client; a supplied phone number must be well-formed.
    6. Snapshot cart lines into order items.
    7. Compute baseline totals.
    8. Reset any discount, then attach the coupon when it applies to the
       baseline total, or clamp a manual discount to it.
    9. Recompute so the discount is reflected.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from takeaway.cart.store import cart_store
from takeaway.coupon.coupon import find_coupon
from takeaway.domain import takeaway
from takeaway.exceptions import EmptyCart
from takeaway.fulfillment.strategy import parse_mode, strategy_for
from takeaway.order.numbering import next_order_number
from takeaway.order.order import Order, parse_payment_mode

logger = structlog.get_logger(__name__)


@takeaway.command(part_of="Order")
class PlaceOrder:
    session_id = String(required=True, max_length=255)
    fulfillment_mode = String(max_length=20)
    delivery_address = Text()
    delivery_zip = String(max_length=10)
    delivery_instructions = Text()
    delivery_fee = String(max_length=20)
    payment_mode = String(max_length=20)
    client_first_name = String(required=True, max_length=100)
    client_last_name = String(required=True, max_length=100)
    client_phone = String(max_length=20)
    client_email = String(required=True, max_length=255)
    coupon_id = Identifier()
    discount_amount = String(max_length=20)


@takeaway.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = cart_store.get(command.session_id)
        if cart.is_empty():
            raise EmptyCart()

        mode = parse_mode(command.fulfillment_mode)
        order = Order.create(
            order_number=next_order_number(),
            fulfillment_mode=mode,
            payment_mode=parse_payment_mode(command.payment_mode),
        )

        strategy_for(mode).validate_and_populate(order, command)
        order.set_client(
            first_name=command.client_first_name,
            last_name=command.client_last_name,
            email=command.client_email,
            phone=command.client_phone,
        )
        order.add_items_from_cart(cart)
        order.recalculate_totals()

        order.reset_discount()
        coupon = None
        if command.coupon_id:
            candidate = find_coupon(command.coupon_id)
            if candidate.can_be_applied_to_amount(order.total):
                order.attach_coupon(candidate)
                coupon = candidate
            else:
                logger.info(
                    "Coupon not applicable to order, placing without discount",
                    coupon_code=candidate.code,
                    order_number=order.order_number,
                    order_total=order.total,
                )
        elif command.discount_amount not in (None, ""):
            order.set_manual_discount(command.discount_amount)

        order.recalculate_totals(coupon=coupon)
        order.mark_placed(session_id=command.session_id)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_number=order.order_number,
            session_id=command.session_id,
            fulfillment_mode=order.fulfillment_mode,
            coupon_code=order.coupon_code,
            total=order.total,
        )
        return str(order.id)
