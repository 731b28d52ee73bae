"""Application assembly: ordered middleware, auth gate, and order routes."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from starlette.applications import Starlette
from starlette.middleware import Middleware

from authgate.auth.middleware import AuthMiddleware
from authgate.auth.protocol import IdentityVerifier
from authgate.orders.mapper import OrderMapper
from authgate.orders.routes import build_order_routes

logger = logging.getLogger(__name__)


def build_middleware(
    verifier: IdentityVerifier,
    *,
    middleware: Sequence[Middleware] | None = None,
    exempt_paths: set[str] | None = None,
) -> list[Middleware]:
    """Return the ordered middleware list, outermost first.

    The authentication gate is always appended last so that it runs
    immediately before route dispatch, after any caller-supplied middleware.
    """
    stack = list(middleware or [])
    stack.append(Middleware(AuthMiddleware, verifier=verifier, exempt_paths=exempt_paths))
    return stack


def create_app(
    verifier: IdentityVerifier,
    mapper: OrderMapper,
    *,
    middleware: Sequence[Middleware] | None = None,
    exempt_paths: set[str] | None = None,
    debug: bool = False,
) -> Starlette:
    """Create the Starlette application.

    Args:
        verifier: Identity verifier used by the authentication gate.
        mapper: Persistence mapper for the orders resource.
        middleware: Extra middleware, outermost first, placed before the gate.
        exempt_paths: Exact paths that bypass the gate. Empty by default.
        debug: Starlette debug mode.
    """
    stack = build_middleware(verifier, middleware=middleware, exempt_paths=exempt_paths)
    logger.debug("Middleware order: %s", [getattr(m.cls, "__name__", repr(m.cls)) for m in stack])
    return Starlette(
        debug=debug,
        routes=build_order_routes(mapper),
        middleware=stack,
    )
