"""Bearer-token authentication against an external identity provider."""

from authgate.auth.errors import (
    VerificationError,
    VerificationOutcome,
    VerificationResult,
    VerifierTransportError,
)
from authgate.auth.identity import VerifiedIdentity
from authgate.auth.middleware import AuthMiddleware, current_identity, extract_headers
from authgate.auth.protocol import IdentityVerifier
from authgate.auth.verifier import DEFAULT_VERIFY_URL, AuthingVerifier

__all__ = [
    "IdentityVerifier",
    "AuthingVerifier",
    "DEFAULT_VERIFY_URL",
    "VerifiedIdentity",
    "VerificationResult",
    "VerificationOutcome",
    "VerificationError",
    "VerifierTransportError",
    "AuthMiddleware",
    "current_identity",
    "extract_headers",
]
