"""Verification outcomes and the verifier error hierarchy."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from authgate.auth.identity import VerifiedIdentity


class VerificationError(Exception):
    """Base class for errors raised while verifying a token."""


class VerifierTransportError(VerificationError):
    """The identity provider could not be reached or did not answer."""


class VerificationOutcome(str, enum.Enum):
    OK = "ok"
    REJECTED = "rejected"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class VerificationResult:
    """Envelope returned by a verifier for a single token check.

    Attributes:
        status_code: The ``code`` reported by the provider (0 if unreadable).
        outcome: Whether the token was accepted, rejected, or the answer
            could not be understood.
        identity: The resolved identity, only set when ``outcome`` is OK.
        message: Provider message or a short local reason.
    """

    status_code: int
    outcome: VerificationOutcome
    identity: VerifiedIdentity | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is VerificationOutcome.OK and self.identity is not None and self.status_code == 200

    @classmethod
    def accepted(cls, identity: VerifiedIdentity) -> VerificationResult:
        return cls(status_code=200, outcome=VerificationOutcome.OK, identity=identity)

    @classmethod
    def rejected(cls, status_code: int, message: str | None = None) -> VerificationResult:
        return cls(status_code=status_code, outcome=VerificationOutcome.REJECTED, message=message)

    @classmethod
    def malformed(cls, reason: str, status_code: int = 0) -> VerificationResult:
        return cls(status_code=status_code, outcome=VerificationOutcome.MALFORMED, message=reason)
