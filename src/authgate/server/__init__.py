"""HTTP application assembly and serving."""

from authgate.server.app import build_middleware, create_app
from authgate.server.transport import TransportManager

__all__ = ["build_middleware", "create_app", "TransportManager"]
