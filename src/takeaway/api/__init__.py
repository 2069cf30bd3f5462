"""Takeaway domain API package."""

from takeaway.api.errors import register_exception_handlers
from takeaway.api.routes import cart_router, coupon_router, menu_router, order_router

__all__ = ["cart_router", "coupon_router", "menu_router", "order_router", "register_exception_handlers"]
