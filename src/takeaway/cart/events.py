"""Domain events for the SessionCart aggregate."""

from protean.fields import Identifier, Integer, String

from takeaway.domain import takeaway


@takeaway.event(part_of="SessionCart")
class CartLineAdded:
    """A dish was added to the cart, or its line was incremented."""

    __version__ = 1

    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)


@takeaway.event(part_of="SessionCart")
class CartLineQuantityChanged:
    """The quantity of a cart line was overwritten."""

    __version__ = 1

    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@takeaway.event(part_of="SessionCart")
class CartLineRemoved:
    """A line was dropped from the cart."""

    __version__ = 1

    session_id = String(required=True, max_length=255)
    product_id = Identifier(required=True)


@takeaway.event(part_of="SessionCart")
class CartCleared:
    """Every line was removed from the cart."""

    __version__ = 1

    session_id = String(required=True, max_length=255)
    reason = String(max_length=50)
