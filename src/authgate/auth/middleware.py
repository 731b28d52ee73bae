"""ASGI middleware that gates every request on identity-provider verification."""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

import anyio.to_thread
from starlette.responses import PlainTextResponse

from authgate.auth.identity import VerifiedIdentity
from authgate.auth.protocol import IdentityVerifier
from authgate.auth.verifier import APP_ID_HEADER, USERPOOL_ID_HEADER

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

MSG_LOGIN_REQUIRED = "Unauthorized. Please login first"
MSG_CLIENT_INVALID = "client app invalid. please send x-authing-app-id and x-authing-userpool-id"
MSG_TOKEN_INVALID = "bearer authorization invalid"
MSG_INTERNAL_ERROR = "Internal error"

# Identity of the request currently being handled
current_identity: ContextVar[VerifiedIdentity | None] = ContextVar("current_identity", default=None)


def extract_headers(scope: dict[str, Any]) -> dict[str, str]:
    """Extract headers from an ASGI scope as a lowercase-key dict."""
    result: dict[str, str] = {}
    for key_bytes, value_bytes in scope.get("headers", []):
        result[key_bytes.decode("latin-1").lower()] = value_bytes.decode("latin-1")
    return result


class AuthMiddleware:
    """ASGI middleware that verifies bearer tokens before routing.

    Each HTTP request must carry ``Authorization: Bearer <token>`` plus the
    ``x-authing-app-id`` and ``x-authing-userpool-id`` tenant headers. The
    token is checked with the identity provider on every request; on success
    the ``VerifiedIdentity`` is stored in ``scope["state"]["identity"]``
    (``request.state.identity``) and in ``current_identity`` for the duration
    of the request.

    Only ``http`` scopes are gated; ``lifespan`` and ``websocket`` scopes
    pass through, so websocket routes must not be mounted behind it.

    Args:
        app: The ASGI application to wrap.
        verifier: An ``IdentityVerifier`` implementation.
        exempt_paths: Exact paths that bypass verification. Empty by default.
    """

    def __init__(
        self,
        app: Any,
        verifier: IdentityVerifier,
        *,
        exempt_paths: set[str] | None = None,
    ) -> None:
        self._app = app
        self._verifier = verifier
        self._exempt_paths = exempt_paths or set()

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        path = scope.get("path", "")
        if path in self._exempt_paths:
            await self._app(scope, receive, send)
            return

        headers = extract_headers(scope)

        authorization = headers.get("authorization", "")
        if not authorization.startswith(BEARER_PREFIX):
            logger.warning("Authentication failed for %s: missing bearer token", path)
            await self._reject(scope, receive, send, 401, MSG_LOGIN_REQUIRED, challenge=True)
            return

        app_id = headers.get(APP_ID_HEADER)
        userpool_id = headers.get(USERPOOL_ID_HEADER)
        if not app_id or not userpool_id:
            logger.warning("Authentication failed for %s: missing tenant headers", path)
            await self._reject(scope, receive, send, 403, MSG_CLIENT_INVALID)
            return

        token = authorization[len(BEARER_PREFIX) :]
        try:
            result = await anyio.to_thread.run_sync(self._verifier.verify, token, app_id, userpool_id)
        except Exception:
            logger.exception("Identity verification error for %s", path)
            await self._reject(scope, receive, send, 500, MSG_INTERNAL_ERROR)
            return

        if not result.ok:
            logger.warning(
                "Authentication failed for %s: provider answered %s (code=%d)",
                path,
                result.outcome.value,
                result.status_code,
            )
            await self._reject(scope, receive, send, 401, MSG_TOKEN_INVALID, challenge=True)
            return

        identity = result.identity
        logger.debug("Verified identity %s for %s", identity.id, path)

        scope["state"] = {**scope.get("state", {}), "identity": identity}
        context_token = current_identity.set(identity)
        try:
            await self._app(scope, receive, send)
        finally:
            current_identity.reset(context_token)

    @staticmethod
    async def _reject(
        scope: dict[str, Any],
        receive: Any,
        send: Any,
        status_code: int,
        message: str,
        *,
        challenge: bool = False,
    ) -> None:
        """Send a plain-text rejection response."""
        headers = {"WWW-Authenticate": "Bearer"} if challenge else None
        response = PlainTextResponse(message, status_code=status_code, headers=headers)
        await response(scope, receive, send)
