"""Order aggregate — the immutable, priced record of a placed cart.

Money fields (delivery fee, subtotal, tax, discount, total, line totals) are
two-decimal strings derived by ``takeaway.pricing.tax.apply_order_totals``.
Every method that touches items ends with a recompute, so stored totals
always describe the items currently on the order.

Status flow:
    PENDING → CONFIRMED → PREPARING → DELIVERED
    CANCELLED (from PENDING, CONFIRMED, PREPARING)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from takeaway.domain import takeaway
from takeaway.exceptions import OrderItemNotFound
from takeaway.fulfillment.strategy import FulfillmentMode
from takeaway.order.events import (
    OrderItemAdded,
    OrderItemRemoved,
    OrderItemRevised,
    OrderPlaced,
    OrderStatusChanged,
    OrderTotalsRecalculated,
)
from takeaway.order.phone import check_phone_number, is_valid_phone_number
from takeaway.pricing.money import ZERO, format_amount, to_decimal
from takeaway.pricing.tax import apply_order_totals
from takeaway.settings import get_settings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMode(Enum):
    CARD = "card"
    CASH = "cash"
    VOUCHERS = "vouchers"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Items can only be edited before the order leaves the kitchen
_EDITABLE_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PREPARING}


def parse_payment_mode(value) -> PaymentMode:
    """Resolve a request value to a payment mode. Missing values mean card."""
    if isinstance(value, PaymentMode):
        return value
    if value in (None, ""):
        return PaymentMode.CARD
    try:
        return PaymentMode(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(mode.value for mode in PaymentMode)
        raise ValidationError({"payment_mode": [f"Unknown payment mode {value!r}, expected one of: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@takeaway.value_object(part_of="Order")
class ClientContact:
    """Who ordered, and how to reach them about this order."""

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    full_name = String(max_length=201)
    phone = String(max_length=20)
    email = String(required=True, max_length=255)

    @invariant.post
    def phone_must_be_well_formed(self):
        if self.phone and not is_valid_phone_number(self.phone):
            raise ValidationError({"phone": [f"Invalid phone number: {self.phone!r}"]})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@takeaway.entity(part_of="Order")
class OrderItem:
    """One ordered dish. Name and price are snapshots taken when the item was added."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    unit_price = String(required=True, max_length=20)
    quantity = Integer(required=True, min_value=1)
    line_total = String(max_length=20, default="0.00")

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "line_total": self.line_total,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@takeaway.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    fulfillment_mode = String(choices=FulfillmentMode, default=FulfillmentMode.DELIVERY.value)
    payment_mode = String(choices=PaymentMode, default=PaymentMode.CARD.value)
    client = ValueObject(ClientContact)
    delivery_address = Text()
    delivery_zip = String(max_length=10)
    delivery_instructions = Text()
    delivery_fee = String(max_length=20, default="0.00")
    subtotal = String(max_length=20, default="0.00")
    tax_amount = String(max_length=20, default="0.00")
    discount_amount = String(max_length=20, default="0.00")
    total = String(max_length=20, default="0.00")
    coupon_id = Identifier()
    coupon_code = String(max_length=50)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def amounts_must_not_be_negative(self):
        for field_name in ("delivery_fee", "discount_amount", "total"):
            if to_decimal(getattr(self, field_name), field=field_name) < ZERO:
                raise ValidationError({field_name: ["Amount cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, order_number, fulfillment_mode=FulfillmentMode.DELIVERY, payment_mode=PaymentMode.CARD):
        now = datetime.now(UTC)
        return cls(
            order_number=order_number,
            status=OrderStatus.PENDING.value,
            fulfillment_mode=FulfillmentMode(fulfillment_mode).value,
            payment_mode=PaymentMode(payment_mode).value,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Placement helpers
    # -------------------------------------------------------------------
    def set_client(self, first_name, last_name, email, phone=None):
        check_phone_number(phone)
        full_name = f"{first_name} {last_name}".strip() if first_name and last_name else None
        self.client = ClientContact(
            first_name=first_name,
            last_name=last_name,
            full_name=full_name,
            phone=phone or None,
            email=email,
        )

    def add_items_from_cart(self, cart):
        """Snapshot every cart line as an order item."""
        for line in cart.lines:
            self.add_items(
                OrderItem(
                    product_id=str(line.product_id),
                    product_name=line.name,
                    unit_price=line.unit_price,
                    quantity=line.quantity,
                )
            )

    def reset_discount(self):
        self.coupon_id = None
        self.coupon_code = None
        self.discount_amount = "0.00"

    def attach_coupon(self, coupon):
        """Reference ``coupon`` so every recompute prices its discount."""
        self.coupon_id = str(coupon.id)
        self.coupon_code = coupon.code

    def set_manual_discount(self, amount):
        """Apply an operator discount, clamped to ``[0, total]``."""
        discount = to_decimal(amount, field="discount_amount")
        discount = max(ZERO, min(discount, to_decimal(self.total)))
        self.discount_amount = format_amount(discount)

    def mark_placed(self, session_id=None):
        self.raise_(
            OrderPlaced(
                order_id=str(self.id),
                order_number=self.order_number,
                session_id=session_id,
                coupon_id=str(self.coupon_id) if self.coupon_id else None,
                fulfillment_mode=self.fulfillment_mode,
                total=self.total,
                placed_at=self.created_at or datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Totals
    # -------------------------------------------------------------------
    def recalculate_totals(self, coupon=None, tax_rate=None):
        """Re-derive line totals and order totals from the current items.

        ``coupon`` must be the coupon referenced by ``coupon_id`` when there
        is one; without it the stored discount is kept (clamped).
        """
        rate = get_settings().vat_rate if tax_rate is None else tax_rate
        with atomic_change(self):
            apply_order_totals(self, rate, coupon=coupon)
            self.updated_at = datetime.now(UTC)

    def recalculate(self, coupon=None, tax_rate=None):
        """Recompute totals and record that the stored figures were refreshed."""
        self.recalculate_totals(coupon=coupon, tax_rate=tax_rate)
        self.raise_(
            OrderTotalsRecalculated(
                order_id=str(self.id),
                subtotal=self.subtotal,
                tax_amount=self.tax_amount,
                discount_amount=self.discount_amount,
                total=self.total,
            )
        )

    # -------------------------------------------------------------------
    # Item revisions
    # -------------------------------------------------------------------
    def _ensure_editable(self):
        if OrderStatus(self.status) not in _EDITABLE_STATES:
            raise ValidationError({"status": [f"Items cannot be changed on a {self.status} order"]})

    def _item(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise OrderItemNotFound(item_id)
        return item

    def add_item(self, product_id, product_name, unit_price, quantity, coupon=None):
        self._ensure_editable()
        item = OrderItem(
            product_id=str(product_id),
            product_name=product_name,
            unit_price=format_amount(to_decimal(unit_price, field="unit_price")),
            quantity=quantity,
        )
        self.add_items(item)
        self.recalculate_totals(coupon=coupon)

        self.raise_(
            OrderItemAdded(
                order_id=str(self.id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=item.quantity,
                unit_price=item.unit_price,
                total=self.total,
            )
        )
        return item

    def revise_item(self, item_id, quantity=None, unit_price=None, coupon=None):
        self._ensure_editable()
        item = self._item(item_id)

        if quantity is not None:
            if quantity < 1:
                raise ValidationError({"quantity": ["Quantity must be at least 1"]})
            item.quantity = quantity
        if unit_price not in (None, ""):
            price = to_decimal(unit_price, field="unit_price")
            if price < ZERO:
                raise ValidationError({"unit_price": ["Unit price cannot be negative"]})
            item.unit_price = format_amount(price)

        self.recalculate_totals(coupon=coupon)

        self.raise_(
            OrderItemRevised(
                order_id=str(self.id),
                item_id=str(item.id),
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
                total=self.total,
            )
        )
        return item

    def remove_item(self, item_id, coupon=None):
        self._ensure_editable()
        item = self._item(item_id)
        if len(self.items) == 1:
            raise ValidationError({"items": ["An order must keep at least one item"]})

        self.remove_items(item)
        self.recalculate_totals(coupon=coupon)

        self.raise_(OrderItemRemoved(order_id=str(self.id), item_id=str(item_id), total=self.total))

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        try:
            target = OrderStatus(str(new_status).strip().lower())
        except ValueError:
            allowed = ", ".join(status.value for status in OrderStatus)
            raise ValidationError({"status": [f"Unknown status {new_status!r}, expected one of: {allowed}"]}) from None

        current = OrderStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise ValidationError({"status": [f"Cannot move an order from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Read model
    # -------------------------------------------------------------------
    def to_dict(self) -> dict:
        client = self.client
        return {
            "id": str(self.id),
            "order_number": self.order_number,
            "status": self.status,
            "fulfillment_mode": self.fulfillment_mode,
            "payment_mode": self.payment_mode,
            "client": {
                "first_name": client.first_name,
                "last_name": client.last_name,
                "full_name": client.full_name,
                "phone": client.phone,
                "email": client.email,
            }
            if client
            else None,
            "delivery_address": self.delivery_address,
            "delivery_zip": self.delivery_zip,
            "delivery_instructions": self.delivery_instructions,
            "delivery_fee": self.delivery_fee,
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "discount_amount": self.discount_amount,
            "total": self.total,
            "coupon_id": str(self.coupon_id) if self.coupon_id else None,
            "coupon_code": self.coupon_code,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
