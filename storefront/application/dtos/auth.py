"""DTOs for authentication and user profiles (no password ever leaves the store)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from storefront.core.constants import DEFAULT_AVATAR, DEFAULT_BANNER
from storefront.domain.enums import UserRole


@dataclass(frozen=True)
class AuthUser:
    """Public identity of a signed-in account."""

    uid: str
    email: str
    display_name: str | None = None
    photo_url: str | None = None
    creation_time: int | None = None  # epoch milliseconds
    provider_data: tuple[dict[str, Any], ...] = field(default_factory=tuple)

    @property
    def metadata(self) -> dict[str, Any]:
        return {"creationTime": self.creation_time}


@dataclass(frozen=True)
class AuthResponse:
    """Result of sign-up / sign-in: wraps the public identity."""

    user: AuthUser


@dataclass(frozen=True)
class UserProfile:
    """Profile document stored in the users collection (keyed by uid)."""

    fullname: str
    email: str
    avatar: str = DEFAULT_AVATAR
    banner: str = DEFAULT_BANNER
    address: str = ""
    basket: tuple[dict[str, Any], ...] = ()
    mobile: dict[str, Any] = field(default_factory=lambda: {"data": {}})
    role: UserRole = UserRole.USER
    date_joined: int | None = None  # epoch milliseconds

    def to_dict(self) -> dict[str, Any]:
        """Return the document form (camelCase keys, as stored in Firestore)."""
        return {
            "fullname": self.fullname,
            "avatar": self.avatar,
            "banner": self.banner,
            "email": self.email,
            "address": self.address,
            "basket": list(self.basket),
            "mobile": dict(self.mobile),
            "role": self.role.value,
            "dateJoined": self.date_joined,
        }
