"""Pydantic request/response schemas for the Takeaway API.

These are external contracts, separate from the internal Protean commands.
Amounts travel as two-decimal strings, the same form they are stored in.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLineSchema(BaseModel):
    product_id: str
    name: str
    price: str
    quantity: int
    category: str | None = None
    image: str | None = None
    line_total: str


class CartResponse(BaseModel):
    items: list[CartLineSchema]
    total: str
    item_count: int


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    fulfillment_mode: str | None = None
    delivery_address: str | None = None
    delivery_zip: str | None = None
    delivery_instructions: str | None = None
    delivery_fee: str | None = None
    payment_mode: str | None = None
    client_first_name: str
    client_last_name: str
    client_phone: str | None = None
    client_email: str
    coupon_id: str | None = None
    discount_amount: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "fulfillment_mode": "delivery",
                    "delivery_address": "12 rue de la République",
                    "delivery_zip": "13001",
                    "payment_mode": "card",
                    "client_first_name": "Camille",
                    "client_last_name": "Martin",
                    "client_phone": "06 12 34 56 78",
                    "client_email": "camille@example.com",
                }
            ]
        }
    }


class PlaceOrderResponse(BaseModel):
    order_id: str
    order_number: str
    total: str


class AddOrderItemRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)
    product_name: str | None = None
    unit_price: str | None = None


class ReviseOrderItemRequest(BaseModel):
    quantity: int | None = Field(ge=1, default=None)
    unit_price: str | None = None


class ItemIdResponse(BaseModel):
    item_id: str


class UpdateOrderStatusRequest(BaseModel):
    status: str


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
class CreateCouponRequest(BaseModel):
    code: str
    discount_type: str
    discount_value: str
    description: str | None = None
    min_order_amount: str | None = None
    max_discount: str | None = None
    usage_limit: int | None = Field(ge=0, default=None)
    valid_from: datetime | None = None
    valid_until: datetime | None = None
    is_active: bool = True


class CouponIdResponse(BaseModel):
    coupon_id: str


class ValidateCouponRequest(BaseModel):
    code: str
    order_amount: str


class CouponQuoteResponse(BaseModel):
    coupon_id: str
    code: str
    discount_type: str
    discount_value: str
    discount_amount: str
    new_total: str


# ---------------------------------------------------------------------------
# Menu
# ---------------------------------------------------------------------------
class AddDishRequest(BaseModel):
    name: str
    price: str
    category: str | None = None
    image: str | None = None
    description: str | None = None
    is_available: bool = True


class DishIdResponse(BaseModel):
    dish_id: str


class DishAvailabilityRequest(BaseModel):
    is_available: bool
