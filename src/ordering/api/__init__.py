"""Ordering domain API package."""

from ordering.api.errors import register_error_handlers
from ordering.api.routes import cart_router, discount_router, order_router

__all__ = ["cart_router", "order_router", "discount_router", "register_error_handlers"]
