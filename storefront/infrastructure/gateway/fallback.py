"""In-memory gateway used when the live Firebase backend is unavailable.

Answers with the same envelopes and errors as LiveGateway and keeps the
backend's timing contract: catalog reads resolve after a simulated
latency and race the request timeout, and identity changes reach the
state-change handler after a short delay instead of synchronously.

Store mutations always run between awaits, never across one.
"""

from __future__ import annotations

import asyncio
from typing import Any

from storefront.application.dtos.auth import AuthResponse, AuthUser, UserProfile
from storefront.application.dtos.documents import (
    DocumentEnvelope,
    QuerySnapshotEnvelope,
)
from storefront.application.dtos.product import ProductPage, SearchResult
from storefront.core.config import Settings
from storefront.core.constants import (
    DEFAULT_AVATAR,
    DEFAULT_CURATED_LIMIT,
    DEMO_CREDENTIALS_HINT,
    PREFIX_RANGE_SENTINEL,
)
from storefront.domain.enums import GatewayMode
from storefront.domain.exceptions import (
    NoCurrentUserException,
    OperationNotSupportedException,
    UserNotFoundException,
    WrongPasswordException,
)
from storefront.infrastructure.gateway.base import (
    BaseGateway,
    merge_products_by_id,
    settle_waiter,
)
from storefront.infrastructure.gateway.fallback_store import FallbackStore, UserRecord
from storefront.shared.telemetry.logging import get_logger
from storefront.shared.utils.async_utils import race_with_timeout
from storefront.shared.utils.datetime import utc_now_ms
from storefront.shared.utils.generators import generate_cuid, generate_fallback_uid

logger = get_logger(__name__)


PASSWORD_UPDATED = "Password updated successfully!"
EMAIL_UPDATED = "Email Successfully updated"


class FallbackGateway(BaseGateway):
    """Gateway served entirely from a FallbackStore."""

    mode = GatewayMode.FALLBACK

    def __init__(self, settings: Settings, store: FallbackStore | None = None) -> None:
        super().__init__(settings)
        self._store = store if store is not None else FallbackStore.seeded()

    @property
    def store(self) -> FallbackStore:
        return self._store

    @property
    def current_user(self) -> AuthUser | None:
        session = self._store.session
        return session.public() if session else None

    def _announce(self, user: AuthUser | None) -> None:
        self._schedule_auth_state(user, self._settings.fallback_auth_delay_seconds)

    def _session_record(self) -> UserRecord:
        record = self._store.session
        if record is None:
            raise NoCurrentUserException()
        return record

    def _reauthenticated_record(self, current_password: str) -> UserRecord:
        record = self._session_record()
        if record.password != current_password:
            raise WrongPasswordException()
        return record

    async def _latency(self) -> None:
        await asyncio.sleep(self._settings.fallback_latency_seconds)

    # AUTH ------------

    async def create_account(self, email: str, password: str) -> AuthResponse:
        local_part = email.split("@")[0]
        now_ms = utc_now_ms()
        record = UserRecord(
            uid=generate_fallback_uid(),
            email=email,
            password=password,
            display_name=local_part,
            photo_url=DEFAULT_AVATAR,
            creation_time=now_ms,
            provider_data=[{"providerId": "password"}],
            profile=UserProfile(
                fullname=local_part, email=email, date_joined=now_ms
            ).to_dict(),
        )
        self._store.insert_user(record)
        self._store.start_session(record)
        logger.info("Fallback account created: uid=%s", record.uid)
        user = record.public()
        self._announce(user)
        return AuthResponse(user=user)

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        record = self._store.find_by_email(email)
        if record is None:
            raise UserNotFoundException(email)
        if record.password != password:
            raise WrongPasswordException()
        self._store.start_session(record)
        logger.debug("Fallback sign-in: uid=%s", record.uid)
        user = record.public()
        self._announce(user)
        return AuthResponse(user=user)

    @staticmethod
    def _social_unsupported(operation: str, provider: str) -> OperationNotSupportedException:
        return OperationNotSupportedException(
            operation,
            f"{provider} sign-in not available in demo mode. {DEMO_CREDENTIALS_HINT}",
        )

    async def sign_in_with_google(self, access_token: str | None = None) -> AuthResponse:
        raise self._social_unsupported("signInWithGoogle", "Google")

    async def sign_in_with_facebook(self, access_token: str | None = None) -> AuthResponse:
        raise self._social_unsupported("signInWithFacebook", "Facebook")

    async def sign_in_with_github(self, access_token: str | None = None) -> AuthResponse:
        raise self._social_unsupported("signInWithGithub", "Github")

    async def sign_out(self) -> None:
        self._store.end_session()
        logger.debug("Fallback sign-out")
        self._announce(None)

    async def password_reset(self, email: str) -> None:
        if self._store.find_by_email(email) is None:
            raise UserNotFoundException(email)
        # No email is sent in demo mode.

    async def password_update(self, password: str) -> str:
        self._session_record().password = password
        return PASSWORD_UPDATED

    async def change_password(self, current_password: str, new_password: str) -> str:
        self._reauthenticated_record(current_password).password = new_password
        return PASSWORD_UPDATED

    async def reauthenticate(self, current_password: str) -> None:
        self._reauthenticated_record(current_password)

    async def update_email(self, current_password: str, new_email: str) -> str:
        record = self._reauthenticated_record(current_password)
        self._store.migrate_email(record, new_email)
        return EMAIL_UPDATED

    async def _on_waiter_registered(self, waiter: asyncio.Future[AuthUser]) -> None:
        user = self.current_user
        if user is not None:
            asyncio.get_running_loop().call_later(
                self._settings.fallback_auth_delay_seconds, settle_waiter, waiter, user
            )

    async def set_auth_persistence(self) -> None:
        # In-memory sessions already last for the process lifetime.
        return None

    # PROFILES ------------

    async def add_user(self, uid: str, user: dict[str, Any]) -> None:
        self._store.merge_profile(uid, user)

    async def get_user(self, uid: str) -> DocumentEnvelope:
        record = self._store.find_by_uid(uid)
        if record is None:
            return DocumentEnvelope.not_found(uid)
        return DocumentEnvelope.found(uid, record.profile)

    async def update_profile(self, uid: str, updates: dict[str, Any]) -> None:
        self._store.merge_profile(uid, updates)

    async def save_basket_items(self, items: list[dict[str, Any]], uid: str) -> None:
        self._store.merge_profile(uid, {"basket": list(items)})

    # PRODUCTS ------------

    async def get_single_product(self, product_id: str) -> DocumentEnvelope:
        await self._latency()
        product = self._store.get_product(product_id)
        if product is None:
            return DocumentEnvelope.not_found(product_id)
        return DocumentEnvelope.found(product_id, product)

    async def get_products(self, last_key: str | None = None) -> ProductPage:
        return await race_with_timeout(
            self._fetch_page(last_key),
            self._settings.request_timeout_seconds,
            operation="get_products",
        )

    async def _fetch_page(self, last_key: str | None) -> ProductPage:
        await self._latency()
        catalog = self._store.list_products()
        page_size = self._settings.products_page_size
        start = 0
        if last_key:
            index = next(
                (i for i, p in enumerate(catalog) if p["id"] == last_key), None
            )
            # An unknown cursor restarts the listing.
            start = index + 1 if index is not None else 0
        products = catalog[start:start + page_size]
        next_key = products[-1]["id"] if len(products) == page_size else None
        total = None if last_key else len(catalog)
        return ProductPage(products=products, last_key=next_key, total=total)

    async def search_products(self, search_key: str) -> SearchResult:
        return await race_with_timeout(
            self._search(search_key),
            self._settings.request_timeout_seconds,
            operation="search_products",
        )

    async def _search(self, search_key: str) -> SearchResult:
        await self._latency()
        catalog = self._store.list_products()
        limit = self._settings.products_page_size
        upper = f"{search_key}{PREFIX_RANGE_SENTINEL}"

        by_name = sorted(
            (p for p in catalog if search_key <= _name_lower(p) <= upper),
            key=_name_lower,
        )[:limit]

        terms = set(search_key.split(" "))
        by_keywords = sorted(
            (p for p in catalog if terms.intersection(p.get("keywords", []))),
            key=lambda p: p.get("dateAdded") or 0,
            reverse=True,
        )[:limit]

        last_key = by_name[-1]["id"] if by_name else None
        return SearchResult(
            products=merge_products_by_id(by_name, by_keywords),
            last_key=last_key,
        )

    async def get_featured_products(
        self, limit: int = DEFAULT_CURATED_LIMIT
    ) -> QuerySnapshotEnvelope:
        return await self._flagged("isFeatured", limit)

    async def get_recommended_products(
        self, limit: int = DEFAULT_CURATED_LIMIT
    ) -> QuerySnapshotEnvelope:
        return await self._flagged("isRecommended", limit)

    async def _flagged(self, flag: str, limit: int) -> QuerySnapshotEnvelope:
        await self._latency()
        matches = [p for p in self._store.list_products() if p.get(flag) is True]
        return QuerySnapshotEnvelope(
            docs=tuple(DocumentEnvelope.found(p["id"], p) for p in matches[:limit])
        )

    # Catalog mutations are not simulated: fail loudly instead of dropping writes.

    def generate_key(self) -> str:
        return generate_cuid()

    async def add_product(self, product_id: str, product: dict[str, Any]) -> None:
        raise OperationNotSupportedException("addProduct")

    async def edit_product(self, product_id: str, updates: dict[str, Any]) -> None:
        raise OperationNotSupportedException("editProduct")

    async def remove_product(self, product_id: str) -> None:
        raise OperationNotSupportedException("removeProduct")

    async def store_image(
        self, image_id: str, folder: str, image: bytes, content_type: str = "image/jpeg"
    ) -> str:
        raise OperationNotSupportedException("storeImage")

    async def delete_image(self, image_id: str) -> None:
        raise OperationNotSupportedException("deleteImage")


def _name_lower(product: dict[str, Any]) -> str:
    return product.get("name_lower") or str(product.get("name", "")).lower()
