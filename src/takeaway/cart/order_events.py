"""Cart reaction to placed orders.

Runs after the placing unit of work has committed: a failed placement never
reaches this handler, so the cart survives for a retry.
"""

import structlog
from protean.utils.mixins import handle

from takeaway.cart.cart import SessionCart
from takeaway.cart.store import cart_store
from takeaway.domain import takeaway
from takeaway.order.events import OrderPlaced

logger = structlog.get_logger(__name__)


@takeaway.event_handler(part_of=SessionCart, stream_category="takeaway::order")
class OrderPlacedCartHandler:
    """Empties the session cart an order was placed from."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        if not event.session_id:
            return

        cart_store.clear(event.session_id, reason="order_placed")
        logger.info("Cart cleared after order placement", session_id=event.session_id, order_number=event.order_number)
