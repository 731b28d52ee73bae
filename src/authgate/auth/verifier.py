"""Authing "who am I" verifier implementation."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from authgate.auth.errors import VerificationResult, VerifierTransportError
from authgate.auth.identity import VerifiedIdentity
from authgate.auth.protocol import IdentityVerifier

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_URL = "https://core.authing.cn/api/v2/users/me"
DEFAULT_TIMEOUT = 10.0

APP_ID_HEADER = "x-authing-app-id"
USERPOOL_ID_HEADER = "x-authing-userpool-id"


class AuthingVerifier:
    """Verifies bearer tokens against the Authing ``users/me`` endpoint.

    The provider answers with a JSON envelope ``{"code": int, "message": str,
    "data": {...}}``; only ``code == 200`` with a ``data`` object carrying an
    ``id`` counts as success.

    Args:
        verify_url: Provider endpoint returning the current user's profile.
        client: Optional ``httpx.Client`` to send requests with. When omitted,
            a client is created with ``timeout`` and owned by the verifier.
        timeout: Request timeout in seconds for a verifier-owned client.
    """

    def __init__(
        self,
        verify_url: str = DEFAULT_VERIFY_URL,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if not verify_url:
            raise ValueError("verify_url must not be empty")
        self._verify_url = verify_url
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    @property
    def verify_url(self) -> str:
        return self._verify_url

    def verify(self, token: str, app_id: str, userpool_id: str) -> VerificationResult:
        """Send one verification request and translate the provider's answer."""
        headers = {
            "Authorization": token,
            APP_ID_HEADER: app_id,
            USERPOOL_ID_HEADER: userpool_id,
        }
        try:
            response = self._client.get(self._verify_url, headers=headers)
        except httpx.HTTPError as exc:
            raise VerifierTransportError(f"identity provider request failed: {exc}") from exc

        return self._parse_response(response)

    def close(self) -> None:
        """Close the underlying client if the verifier created it."""
        if self._owns_client:
            self._client.close()

    @staticmethod
    def _parse_response(response: httpx.Response) -> VerificationResult:
        """Convert a provider response into a ``VerificationResult``. Never raises."""
        try:
            body: Any = response.json()
        except ValueError:
            logger.debug("Provider returned a non-JSON body (HTTP %d)", response.status_code)
            return VerificationResult.malformed("response body is not JSON")

        if not isinstance(body, dict):
            return VerificationResult.malformed("response body is not an object")

        code = body.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            return VerificationResult.malformed("response has no integer 'code'")

        message = body.get("message")
        if not isinstance(message, str):
            message = None

        if code != 200:
            return VerificationResult.rejected(code, message)

        data = body.get("data")
        if not isinstance(data, dict):
            return VerificationResult.malformed("response has no 'data' object", status_code=code)

        try:
            identity = VerifiedIdentity.from_profile(data)
        except ValueError:
            return VerificationResult.malformed("profile has no 'id'", status_code=code)

        return VerificationResult.accepted(identity)


# Verify protocol compliance at import time
assert isinstance(AuthingVerifier.__new__(AuthingVerifier), IdentityVerifier)
