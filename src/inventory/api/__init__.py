"""Inventory domain API package."""

from inventory.api.errors import register_error_handlers
from inventory.api.routes import item_router, order_router, variant_router

__all__ = ["item_router", "variant_router", "order_router", "register_error_handlers"]
