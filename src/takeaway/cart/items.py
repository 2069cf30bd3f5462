"""Cart line management — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String

from takeaway.cart.cart import SessionCart
from takeaway.cart.store import cart_store
from takeaway.domain import takeaway
from takeaway.menu.dish import find_dish

logger = structlog.get_logger(__name__)


@takeaway.command(part_of="SessionCart")
class AddToCart:
    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    quantity = Integer(min_value=1, default=1)


@takeaway.command(part_of="SessionCart")
class UpdateCartQuantity:
    """Set a line's quantity. Zero or a negative value removes the line."""

    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@takeaway.command(part_of="SessionCart")
class RemoveFromCart:
    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)


@takeaway.command(part_of="SessionCart")
class ClearCart:
    session_id = String(required=True, max_length=255)


@takeaway.command_handler(part_of=SessionCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        cart = cart_store.get(command.session_id)
        dish = None if cart.line_for(command.product_id) else find_dish(command.product_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity or 1, dish=dish)
        cart_store.save(cart)
        logger.debug(
            "Cart line added",
            session_id=command.session_id,
            product_id=str(command.product_id),
            item_count=cart.item_count(),
        )

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = cart_store.get(command.session_id)
        cart.update_quantity(product_id=command.product_id, quantity=command.quantity)
        cart_store.save(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = cart_store.get(command.session_id)
        cart.remove_item(product_id=command.product_id)
        cart_store.save(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart_store.clear(command.session_id)


def get_cart(session_id) -> dict:
    """Read model for the cart endpoints."""
    return cart_store.get(session_id).to_dict()
