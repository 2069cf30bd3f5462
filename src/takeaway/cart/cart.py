"""Session cart aggregate — the only mutable, pre-order state.

A cart belongs to one browser session and is identified by its session id.
Each line snapshots the dish it was created from, so the cart total does not
move when the menu changes. Lines are keyed by product: adding a dish that is
already in the cart increments its line instead of creating a second one.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer, String

from takeaway.cart.events import CartCleared, CartLineAdded, CartLineQuantityChanged, CartLineRemoved
from takeaway.domain import takeaway
from takeaway.exceptions import CartItemNotFound, DishUnavailable, ProductNotFound
from takeaway.pricing.money import ZERO, format_amount, to_decimal


@takeaway.entity(part_of="SessionCart")
class CartLine:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    unit_price = String(required=True, max_length=20)
    quantity = Integer(required=True, min_value=1)
    category = String(max_length=100)
    image_path = String(max_length=500)

    def line_total(self):
        return to_decimal(self.unit_price) * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": str(self.product_id),
            "name": self.name,
            "price": self.unit_price,
            "quantity": self.quantity,
            "category": self.category,
            "image": self.image_path,
            "line_total": format_amount(self.line_total()),
        }


@takeaway.aggregate
class SessionCart:
    session_id = String(identifier=True, max_length=255)
    lines = HasMany(CartLine)
    updated_at = DateTime()

    @classmethod
    def create(cls, session_id):
        return cls(session_id=session_id, updated_at=datetime.now(UTC))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def line_for(self, product_id):
        return next((line for line in self.lines if str(line.product_id) == str(product_id)), None)

    def is_empty(self) -> bool:
        return not self.lines

    def total(self) -> str:
        return format_amount(sum((line.line_total() for line in self.lines), ZERO))

    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "items": [line.to_dict() for line in self.lines],
            "total": self.total(),
            "item_count": self.item_count(),
        }

    # -------------------------------------------------------------------
    # Line management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity=1, dish=None):
        """Increment an existing line, or open a new one from ``dish``.

        Only new lines need the dish to be available; an existing line keeps
        its snapshot.
        """
        line = self.line_for(product_id)
        if line is not None:
            line.quantity += quantity
        else:
            if dish is None:
                raise ProductNotFound(product_id)
            if not dish.is_available:
                raise DishUnavailable(dish.name)
            line = CartLine(
                product_id=str(product_id),
                name=dish.name,
                unit_price=format_amount(dish.price),
                quantity=quantity,
                category=dish.category,
                image_path=dish.image_path,
            )
            self.add_lines(line)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartLineAdded(
                session_id=self.session_id,
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line.quantity,
            )
        )

    def update_quantity(self, product_id, quantity):
        """Overwrite a line's quantity. Zero or less removes the line."""
        line = self.line_for(product_id)
        if line is None:
            raise CartItemNotFound(product_id)

        if quantity <= 0:
            self._drop(line)
            return

        previous_quantity = line.quantity
        line.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartLineQuantityChanged(
                session_id=self.session_id,
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        line = self.line_for(product_id)
        if line is None:
            raise CartItemNotFound(product_id)
        self._drop(line)

    def clear(self, reason="cleared"):
        if self.lines:
            self.remove_lines(list(self.lines))
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(session_id=self.session_id, reason=reason))

    def _drop(self, line):
        self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartLineRemoved(session_id=self.session_id, product_id=str(line.product_id)))
