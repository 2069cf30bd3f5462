"""Dish aggregate — the menu entries customers put in their cart.

Prices are tax-inclusive and stored as two-decimal strings. A cart line
snapshots the dish's name, price, category and image path when it is first
added; later menu edits never reach existing carts or orders.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, String, Text
from protean.utils.globals import current_domain

from takeaway.domain import takeaway
from takeaway.exceptions import ProductNotFound
from takeaway.pricing.money import ZERO, format_amount, to_decimal

DEFAULT_DISH_IMAGE = "/assets/img/default-dish.png"


def resolve_image_path(image: str | None) -> str:
    """Map a stored image reference to the public path served to clients."""
    if not image:
        return DEFAULT_DISH_IMAGE
    if image.startswith("http"):
        return image
    if image.startswith(("/uploads/", "/assets/")):
        return image
    if image.startswith("assets/"):
        return "/" + image
    return "/uploads/menu/" + image.lstrip("/")


@takeaway.aggregate
class Dish:
    name = String(required=True, max_length=255)
    description = Text()
    price = String(required=True, max_length=20)
    category = String(max_length=100)
    image = String(max_length=500)
    is_available = Boolean(default=True)
    created_at = DateTime()

    @invariant.post
    def price_must_be_positive(self):
        if to_decimal(self.price, field="price") <= ZERO:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    @classmethod
    def create(cls, name, price, category=None, image=None, description=None, is_available=True):
        return cls(
            name=name,
            description=description,
            price=format_amount(to_decimal(price, field="price")),
            category=category,
            image=image,
            is_available=is_available,
            created_at=datetime.now(UTC),
        )

    @property
    def image_path(self) -> str:
        return resolve_image_path(self.image)


def find_dish(product_id) -> Dish:
    """Load a dish by id, translating a repository miss into ``ProductNotFound``."""
    try:
        return current_domain.repository_for(Dish).get(str(product_id))
    except ObjectNotFoundError:
        raise ProductNotFound(product_id) from None
