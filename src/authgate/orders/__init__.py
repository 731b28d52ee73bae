"""Orders resource: entity, persistence mapper and route handlers."""

from authgate.orders.mapper import OrderMapper, build_engine
from authgate.orders.models import Order, orders_table
from authgate.orders.routes import build_order_routes, envelope, with_identity

__all__ = [
    "Order",
    "OrderMapper",
    "build_engine",
    "build_order_routes",
    "envelope",
    "orders_table",
    "with_identity",
]
