"""IdentityVerifier protocol for pluggable token verification backends."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from authgate.auth.errors import VerificationResult


@runtime_checkable
class IdentityVerifier(Protocol):
    """Protocol for identity verification backends.

    Implementations exchange a bearer token and tenant context for a
    ``VerificationResult``. Network failures are raised as
    ``VerifierTransportError``; every other failure is reported through
    the result so that callers fail closed.
    """

    def verify(self, token: str, app_id: str, userpool_id: str) -> VerificationResult:
        """Verify a bearer token.

        Args:
            token: The bearer token with the ``Bearer `` prefix removed.
            app_id: Application identifier of the tenant.
            userpool_id: User-pool identifier of the tenant.

        Returns:
            A ``VerificationResult`` describing the provider's answer.
        """
        ...
