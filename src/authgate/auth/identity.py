"""VerifiedIdentity: the user record resolved by the identity provider."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class VerifiedIdentity:
    """A user identity confirmed by the identity provider.

    Attributes:
        id: Unique user identifier assigned by the provider.
        profile: Every field of the provider's ``data`` object (read-only).
    """

    id: str
    profile: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "profile", MappingProxyType(dict(self.profile)))

    @classmethod
    def from_profile(cls, data: Mapping[str, Any]) -> VerifiedIdentity:
        """Build an identity from a provider ``data`` object.

        Raises:
            ValueError: If ``data`` has no non-empty ``id``.
        """
        user_id = data.get("id")
        if user_id is None or user_id == "":
            raise ValueError("profile has no 'id'")
        return cls(id=str(user_id), profile=data)

    @property
    def data(self) -> dict[str, Any]:
        """A plain-dict copy of the provider profile."""
        return dict(self.profile)
