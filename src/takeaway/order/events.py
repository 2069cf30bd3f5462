"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from takeaway.domain import takeaway


@takeaway.event(part_of="Order")
class OrderPlaced:
    """A cart was turned into a committed order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True, max_length=50)
    session_id = String(max_length=255)
    coupon_id = Identifier()
    fulfillment_mode = String(required=True, max_length=20)
    total = String(required=True, max_length=20)
    placed_at = DateTime(required=True)


@takeaway.event(part_of="Order")
class OrderItemAdded:
    """An operator added an item to an existing order."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = String(required=True, max_length=20)
    total = String(required=True, max_length=20)


@takeaway.event(part_of="Order")
class OrderItemRevised:
    """An operator changed the quantity or price of an order item."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)
    unit_price = String(required=True, max_length=20)
    line_total = String(required=True, max_length=20)
    total = String(required=True, max_length=20)


@takeaway.event(part_of="Order")
class OrderItemRemoved:
    """An operator removed an item from an existing order."""

    __version__ = 1

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    total = String(required=True, max_length=20)


@takeaway.event(part_of="Order")
class OrderTotalsRecalculated:
    """Stored totals were recomputed from the order's items."""

    __version__ = 1

    order_id = Identifier(required=True)
    subtotal = String(required=True, max_length=20)
    tax_amount = String(required=True, max_length=20)
    discount_amount = String(required=True, max_length=20)
    total = String(required=True, max_length=20)


@takeaway.event(part_of="Order")
class OrderStatusChanged:
    """The order moved to another status."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    changed_at = DateTime(required=True)
