"""
In-process stand-in for the Firebase project (auth users, profiles, products).

Used when no live backend is available. Every method is synchronous, so a
gateway operation that calls into the store between two awaits sees and
leaves a consistent state: no other task can observe a half-applied change.
Data lives for the lifetime of the store only.
"""

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from storefront.application.dtos.auth import AuthUser
from storefront.domain.exceptions import BackendException
from storefront.infrastructure.gateway.fallback_seed import seed_products, seed_users
from storefront.shared.utils.datetime import utc_now_ms

EMAIL_EXISTS_MESSAGE = "The email address is already in use by another account."


@dataclass
class UserRecord:
    """Credentials plus the profile document they own. uid never changes."""

    uid: str
    email: str
    password: str
    display_name: str | None = None
    photo_url: str | None = None
    creation_time: int | None = None
    provider_data: list[dict[str, Any]] = field(default_factory=list)
    profile: dict[str, Any] = field(default_factory=dict)

    def public(self) -> AuthUser:
        """Public identity (never includes the password)."""
        return AuthUser(
            uid=self.uid,
            email=self.email,
            display_name=self.display_name,
            photo_url=self.photo_url,
            creation_time=self.creation_time,
            provider_data=tuple(dict(p) for p in self.provider_data),
        )


class FallbackStore:
    """Users keyed by email, products in catalog order, and the current session.

    Invariants: emails are unique; the session, when set, is a record that
    is present in the store.
    """

    def __init__(
        self,
        users: Iterable[UserRecord] = (),
        products: Iterable[dict[str, Any]] = (),
    ) -> None:
        self._users: dict[str, UserRecord] = {}
        self._products: dict[str, dict[str, Any]] = {}
        self._session: UserRecord | None = None
        for user in users:
            self.insert_user(user)
        for product in products:
            self._products[product["id"]] = copy.deepcopy(product)

    @classmethod
    def seeded(cls) -> FallbackStore:
        """Build a store holding its own copy of the demo accounts and catalog."""
        now_ms = utc_now_ms()
        return cls(
            users=(UserRecord(**row) for row in seed_users(now_ms)),
            products=seed_products(now_ms),
        )

    # ------------------------------------------------------------------ #
    # Users
    # ------------------------------------------------------------------ #
    def find_by_email(self, email: str) -> UserRecord | None:
        return self._users.get(email)

    def find_by_uid(self, uid: str) -> UserRecord | None:
        return next((u for u in self._users.values() if u.uid == uid), None)

    def insert_user(self, record: UserRecord) -> None:
        """Add a record; the email must not already be registered."""
        if record.email in self._users:
            raise BackendException(EMAIL_EXISTS_MESSAGE, "EMAIL_EXISTS")
        self._users[record.email] = record

    def migrate_email(self, record: UserRecord, new_email: str) -> None:
        """Re-key record under new_email in one step (uid and profile retained)."""
        if new_email == record.email:
            return
        if new_email in self._users:
            raise BackendException(EMAIL_EXISTS_MESSAGE, "EMAIL_EXISTS")
        del self._users[record.email]
        record.email = new_email
        record.profile["email"] = new_email
        self._users[new_email] = record

    def merge_profile(self, uid: str, updates: dict[str, Any]) -> bool:
        """Overwrite only the supplied profile fields. Returns False for an unknown uid."""
        record = self.find_by_uid(uid)
        if record is None:
            return False
        record.profile = {**record.profile, **copy.deepcopy(updates)}
        return True

    # ------------------------------------------------------------------ #
    # Session
    # ------------------------------------------------------------------ #
    @property
    def session(self) -> UserRecord | None:
        return self._session

    def start_session(self, record: UserRecord) -> None:
        if self._users.get(record.email) is not record:
            raise ValueError(f"record {record.uid!r} is not in the store")
        self._session = record

    def end_session(self) -> None:
        self._session = None

    # ------------------------------------------------------------------ #
    # Products
    # ------------------------------------------------------------------ #
    def get_product(self, product_id: str) -> dict[str, Any] | None:
        product = self._products.get(product_id)
        return copy.deepcopy(product) if product is not None else None

    def list_products(self) -> list[dict[str, Any]]:
        """All products in catalog order (copies)."""
        return [copy.deepcopy(p) for p in self._products.values()]

    def count_products(self) -> int:
        return len(self._products)
