"""FastAPI routes for the Takeaway domain — cart, orders, coupons and menu.

Cart and order placement are scoped to the browser session through the
``X-Session-Id`` header.
"""

from typing import Annotated

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from takeaway.api.schemas import (
    AddDishRequest,
    AddOrderItemRequest,
    AddToCartRequest,
    CartResponse,
    CouponIdResponse,
    CouponQuoteResponse,
    CreateCouponRequest,
    DishAvailabilityRequest,
    DishIdResponse,
    ItemIdResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    ReviseOrderItemRequest,
    StatusResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    ValidateCouponRequest,
)
from takeaway.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity, get_cart
from takeaway.coupon.discounts import list_active_coupons, validate_coupon
from takeaway.coupon.management import CreateCoupon, DeactivateCoupon
from takeaway.menu.management import AddDish, SetDishAvailability
from takeaway.order.placement import PlaceOrder
from takeaway.order.revision import (
    AddOrderItem,
    RemoveOrderItem,
    ReviseOrderItem,
    UpdateOrderStatus,
    load_order,
)

SessionId = Annotated[str, Header(alias="X-Session-Id")]

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def show_cart(session_id: SessionId) -> dict:
    return get_cart(session_id)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(session_id: SessionId, body: AddToCartRequest) -> dict:
    command = AddToCart(
        session_id=session_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return get_cart(session_id)


@cart_router.put("/items/{product_id}", response_model=CartResponse)
async def update_cart_item(session_id: SessionId, product_id: str, body: UpdateCartQuantityRequest) -> dict:
    command = UpdateCartQuantity(
        session_id=session_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return get_cart(session_id)


@cart_router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(session_id: SessionId, product_id: str) -> dict:
    command = RemoveFromCart(session_id=session_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return get_cart(session_id)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(session_id: SessionId) -> dict:
    current_domain.process(ClearCart(session_id=session_id), asynchronous=False)
    return get_cart(session_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def place_order(session_id: SessionId, body: PlaceOrderRequest) -> PlaceOrderResponse:
    command = PlaceOrder(session_id=session_id, **body.model_dump(exclude_none=True))
    order_id = current_domain.process(command, asynchronous=False)
    order = load_order(order_id)
    return PlaceOrderResponse(order_id=order_id, order_number=order.order_number, total=order.total)


@order_router.get("/{order_id}")
async def show_order(order_id: str) -> dict:
    return load_order(order_id).to_dict()


@order_router.post("/{order_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_order_item(order_id: str, body: AddOrderItemRequest) -> ItemIdResponse:
    command = AddOrderItem(order_id=order_id, **body.model_dump(exclude_none=True))
    item_id = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=item_id)


@order_router.patch("/{order_id}/items/{item_id}", response_model=StatusResponse)
async def revise_order_item(order_id: str, item_id: str, body: ReviseOrderItemRequest) -> StatusResponse:
    command = ReviseOrderItem(order_id=order_id, item_id=item_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.delete("/{order_id}/items/{item_id}", response_model=StatusResponse)
async def remove_order_item(order_id: str, item_id: str) -> StatusResponse:
    current_domain.process(RemoveOrderItem(order_id=order_id, item_id=item_id), asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.post("", status_code=201, response_model=CouponIdResponse)
async def create_coupon(body: CreateCouponRequest) -> CouponIdResponse:
    command = CreateCoupon(**body.model_dump(exclude_none=True))
    coupon_id = current_domain.process(command, asynchronous=False)
    return CouponIdResponse(coupon_id=coupon_id)


@coupon_router.post("/validate", response_model=CouponQuoteResponse)
async def validate_coupon_code(body: ValidateCouponRequest) -> dict:
    return validate_coupon(body.code, body.order_amount).to_dict()


@coupon_router.get("/active")
async def active_coupons() -> list[dict]:
    return list_active_coupons()


@coupon_router.put("/{coupon_id}/deactivate", response_model=StatusResponse)
async def deactivate_coupon(coupon_id: str) -> StatusResponse:
    current_domain.process(DeactivateCoupon(coupon_id=coupon_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Menu Router
# ---------------------------------------------------------------------------
menu_router = APIRouter(prefix="/dishes", tags=["menu"])


@menu_router.post("", status_code=201, response_model=DishIdResponse)
async def add_dish(body: AddDishRequest) -> DishIdResponse:
    dish_id = current_domain.process(AddDish(**body.model_dump(exclude_none=True)), asynchronous=False)
    return DishIdResponse(dish_id=dish_id)


@menu_router.put("/{dish_id}/availability", response_model=StatusResponse)
async def set_dish_availability(dish_id: str, body: DishAvailabilityRequest) -> StatusResponse:
    current_domain.process(SetDishAvailability(dish_id=dish_id, is_available=body.is_available), asynchronous=False)
    return StatusResponse()
