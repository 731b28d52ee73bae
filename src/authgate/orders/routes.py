"""Starlette route handlers for the orders resource."""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from authgate.auth.identity import VerifiedIdentity
from authgate.orders.mapper import OrderMapper
from authgate.orders.models import MAX_ORDER_ID, NAME_MAX_LENGTH

logger = logging.getLogger(__name__)

IdentityHandler = Callable[[Request, VerifiedIdentity], Awaitable[Response]]


def envelope(data: Any, *, code: int = 200, message: str = "success") -> JSONResponse:
    """Wrap ``data`` in the ``{"code", "message", "data"}`` response envelope."""
    return JSONResponse({"code": code, "message": message, "data": data}, status_code=code)


def with_identity(handler: IdentityHandler) -> Callable[[Request], Awaitable[Response]]:
    """Pass the identity attached by ``AuthMiddleware`` to ``handler`` explicitly.

    Raises:
        RuntimeError: If no identity was attached, i.e. the gate is not installed.
    """

    @functools.wraps(handler)
    async def endpoint(request: Request) -> Response:
        identity = getattr(request.state, "identity", None)
        if not isinstance(identity, VerifiedIdentity):
            raise RuntimeError(f"No verified identity attached to {request.url.path}; is AuthMiddleware installed?")
        return await handler(request, identity)

    return endpoint


def build_order_routes(mapper: OrderMapper) -> list[Route]:
    """Build Starlette routes for the orders resource.

    Args:
        mapper: The ``OrderMapper`` used for storage.

    Returns:
        List of Starlette Route objects.
    """

    @with_identity
    async def list_orders(request: Request, identity: VerifiedIdentity) -> Response:
        orders = await run_in_threadpool(mapper.list_by_user, identity.id)
        return envelope([order.to_dict() for order in orders])

    @with_identity
    async def create_order(request: Request, identity: VerifiedIdentity) -> Response:
        try:
            body = await request.json()
        except ValueError:
            body = None

        name = body.get("name") if isinstance(body, dict) else None
        if not isinstance(name, str) or not name.strip():
            return envelope(None, code=400, message="order name required")
        name = name.strip()
        if len(name) > NAME_MAX_LENGTH:
            return envelope(None, code=400, message=f"order name longer than {NAME_MAX_LENGTH} characters")

        order = await run_in_threadpool(mapper.create, identity.id, name)
        return envelope(order.to_dict())

    @with_identity
    async def get_order(request: Request, identity: VerifiedIdentity) -> Response:
        order_id: int = request.path_params["order_id"]
        order = None
        if order_id <= MAX_ORDER_ID:
            order = await run_in_threadpool(mapper.get, order_id, identity.id)
        if order is None:
            return envelope(None, code=404, message="order not found")
        return envelope(order.to_dict())

    @with_identity
    async def delete_order(request: Request, identity: VerifiedIdentity) -> Response:
        order_id: int = request.path_params["order_id"]
        if order_id > MAX_ORDER_ID:
            return envelope(None, code=404, message="order not found")
        deleted = await run_in_threadpool(mapper.delete, order_id, identity.id)
        if not deleted:
            return envelope(None, code=404, message="order not found")
        return envelope({"id": order_id})

    return [
        Route("/order/list", endpoint=list_orders, methods=["GET"]),
        Route("/order/create", endpoint=create_order, methods=["POST"]),
        Route("/order/{order_id:int}", endpoint=get_order, methods=["GET"]),
        Route("/order/{order_id:int}", endpoint=delete_order, methods=["DELETE"]),
    ]
