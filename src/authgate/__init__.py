"""authgate: orders service protected by identity-provider token verification."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from authgate.auth.errors import (
    VerificationError,
    VerificationOutcome,
    VerificationResult,
    VerifierTransportError,
)
from authgate.auth.identity import VerifiedIdentity
from authgate.auth.middleware import AuthMiddleware, current_identity
from authgate.auth.protocol import IdentityVerifier
from authgate.auth.verifier import DEFAULT_VERIFY_URL, AuthingVerifier
from authgate.config import Settings
from authgate.orders.mapper import OrderMapper, build_engine
from authgate.orders.models import Order
from authgate.server.app import build_middleware, create_app
from authgate.server.transport import TransportManager

__all__ = [
    # Public API
    "serve",
    "create_app",
    "build_middleware",
    "Settings",
    # Authentication
    "IdentityVerifier",
    "AuthingVerifier",
    "AuthMiddleware",
    "VerifiedIdentity",
    "VerificationResult",
    "VerificationOutcome",
    "VerificationError",
    "VerifierTransportError",
    "current_identity",
    "DEFAULT_VERIFY_URL",
    # Orders
    "Order",
    "OrderMapper",
    "build_engine",
    # Serving
    "TransportManager",
]

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


def serve(
    settings: Settings | None = None,
    *,
    verifier: IdentityVerifier | None = None,
    on_startup: Callable[[], None] | None = None,
    on_shutdown: Callable[[], None] | None = None,
) -> None:
    """Launch the orders service behind the authentication gate.

    Args:
        settings: Service settings. Defaults to ``Settings.from_env()``.
        verifier: Identity verifier to use instead of an ``AuthingVerifier``
            built from ``settings``.
        on_startup: Optional callback invoked after setup, before serving starts.
        on_shutdown: Optional callback invoked after the server stops.
    """
    settings = settings or Settings.from_env()
    logging.getLogger("authgate").setLevel(getattr(logging, settings.log_level))

    engine = build_engine(settings.database_url)
    mapper = OrderMapper(engine)
    mapper.create_schema()

    owned_verifier: AuthingVerifier | None = None
    if verifier is None:
        owned_verifier = AuthingVerifier(settings.verify_url, timeout=settings.verify_timeout)
        verifier = owned_verifier

    app = create_app(verifier, mapper)
    logger.info(
        "Starting authgate v%s (verify_url=%s, database=%s)",
        __version__,
        settings.verify_url,
        engine.url.render_as_string(hide_password=True),
    )

    if on_startup is not None:
        on_startup()

    transport_manager = TransportManager()
    try:
        asyncio.run(
            transport_manager.run_http(
                app,
                host=settings.host,
                port=settings.port,
                log_level=settings.log_level,
            )
        )
    finally:
        if owned_verifier is not None:
            owned_verifier.close()
        engine.dispose()
        if on_shutdown is not None:
            on_shutdown()
