"""Shared test fixtures for authgate tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest

from authgate.auth.errors import VerificationResult
from authgate.auth.identity import VerifiedIdentity
from authgate.auth.verifier import AuthingVerifier
from authgate.orders.mapper import OrderMapper, build_engine

VERIFY_URL = "https://idp.example.test/api/v2/users/me"

# ---------------------------------------------------------------------------
# Stub verifier recording every call
# ---------------------------------------------------------------------------


class StubVerifier:
    """IdentityVerifier stub returning a fixed result or raising a fixed error."""

    def __init__(self, result: VerificationResult | None = None, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[tuple[str, str, str]] = []

    def verify(self, token: str, app_id: str, userpool_id: str) -> VerificationResult:
        self.calls.append((token, app_id, userpool_id))
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result


def auth_headers(token: str = "abc123", app_id: str = "X", userpool_id: str = "Y") -> dict[str, str]:
    """Request headers carrying a bearer token and both tenant headers."""
    return {
        "Authorization": f"Bearer {token}",
        "x-authing-app-id": app_id,
        "x-authing-userpool-id": userpool_id,
    }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def accepting_verifier() -> StubVerifier:
    """Verifier that accepts every token as user ``u1``."""
    return StubVerifier(VerificationResult.accepted(VerifiedIdentity.from_profile({"id": "u1"})))


@pytest.fixture
def rejecting_verifier() -> StubVerifier:
    """Verifier that rejects every token with provider code 401."""
    return StubVerifier(VerificationResult.rejected(401, "token expired"))


@pytest.fixture
def mapper() -> Iterator[OrderMapper]:
    """OrderMapper over a fresh in-memory SQLite database."""
    engine = build_engine("sqlite://")
    order_mapper = OrderMapper(engine)
    order_mapper.create_schema()
    yield order_mapper
    engine.dispose()


@pytest.fixture
def make_authing_verifier() -> Iterator[Callable[[Callable[[httpx.Request], httpx.Response]], AuthingVerifier]]:
    """Factory building an ``AuthingVerifier`` whose provider is ``handler``."""
    clients: list[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], Any]) -> AuthingVerifier:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return AuthingVerifier(VERIFY_URL, client=client)

    yield _make
    for client in clients:
        client.close()
