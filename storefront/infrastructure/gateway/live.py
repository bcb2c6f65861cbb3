"""Gateway backed by a live Firebase project (Auth, Firestore, Storage over REST).

Unless a service account is configured, Firestore and Storage requests carry
the signed-in user's ID token, so the project's security rules see the same
identity the web client would. Expired ID tokens are refreshed on demand.

After set_auth_persistence() the session's refresh token is written to
settings.auth_persistence_path (when set) and restored by the next
on_auth_state_changed() call, including in a new process.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

from storefront.application.dtos.auth import AuthResponse, AuthUser
from storefront.application.dtos.documents import (
    DocumentEnvelope,
    QuerySnapshotEnvelope,
)
from storefront.application.dtos.product import ProductPage, SearchResult
from storefront.core.config import Settings
from storefront.core.constants import DEFAULT_CURATED_LIMIT, PREFIX_RANGE_SENTINEL
from storefront.domain.enums import AuthPersistence, GatewayMode
from storefront.domain.exceptions import (
    NoCurrentUserException,
    OperationNotSupportedException,
    StorefrontException,
)
from storefront.infrastructure.firebase._identity_client import AuthSession
from storefront.infrastructure.firebase._rest_client import DocumentSnapshot
from storefront.infrastructure.firebase._storage_client import object_path
from storefront.infrastructure.firebase.client import FirebaseHandles
from storefront.infrastructure.firebase.collections import (
    COLLECTION_PRODUCTS,
    COLLECTION_USERS,
    FIELD_DATE_ADDED,
    FIELD_DOCUMENT_ID,
    FIELD_IS_FEATURED,
    FIELD_IS_RECOMMENDED,
    FIELD_KEYWORDS,
    FIELD_NAME_LOWER,
    STORAGE_FOLDER_PRODUCTS,
)
from storefront.infrastructure.gateway.base import (
    BaseGateway,
    merge_products_by_id,
    settle_waiter,
)
from storefront.shared.telemetry.logging import get_logger
from storefront.shared.telemetry.tracing import add_span_attributes, traced
from storefront.shared.utils.async_utils import race_with_timeout

logger = get_logger(__name__)


PASSWORD_UPDATED = "Password updated successfully!"
EMAIL_UPDATED = "Email Successfully updated"


_PROVIDERS = {
    "signInWithGoogle": ("google.com", "Google"),
    "signInWithFacebook": ("facebook.com", "Facebook"),
    "signInWithGithub": ("github.com", "Github"),
}


def _product(snapshot: DocumentSnapshot) -> dict[str, Any]:
    return {"id": snapshot.id, **snapshot.to_dict()}


def _snapshot_envelope(snapshots: list[DocumentSnapshot]) -> QuerySnapshotEnvelope:
    return QuerySnapshotEnvelope(
        docs=tuple(DocumentEnvelope.found(s.id, s.to_dict()) for s in snapshots)
    )


class LiveGateway(BaseGateway):
    """Gateway delegating every operation to the Firebase REST APIs."""

    mode = GatewayMode.LIVE

    def __init__(self, settings: Settings, handles: FirebaseHandles) -> None:
        super().__init__(settings)
        self._handles = handles
        self._session: AuthSession | None = None
        self._refresh_lock = asyncio.Lock()
        self._persistence = AuthPersistence.NONE
        if not handles.uses_service_account:
            handles.firestore.set_token_provider(self._id_token)
            if handles.storage is not None:
                handles.storage.set_token_provider(self._id_token)

    @property
    def current_user(self) -> AuthUser | None:
        return self._session.user if self._session else None

    @property
    def _products(self):
        return self._handles.firestore.collection(COLLECTION_PRODUCTS)

    @property
    def _users(self):
        return self._handles.firestore.collection(COLLECTION_USERS)

    # SESSION ------------

    async def _id_token(self) -> str | None:
        """Current ID token (refreshed when expired), or None when signed out."""
        if self._session is None:
            return None
        if self._session.expired:
            async with self._refresh_lock:
                if self._session is not None and self._session.expired:
                    self._set_session(await self._handles.auth.refresh(self._session))
        return self._session.id_token if self._session else None

    def _set_session(self, session: AuthSession | None) -> None:
        self._session = session
        if self._persistence is AuthPersistence.LOCAL:
            self._write_persisted(session)

    def _require_session(self) -> AuthSession:
        if self._session is None:
            raise NoCurrentUserException()
        return self._session

    def _signed_in(self, session: AuthSession) -> AuthResponse:
        self._set_session(session)
        self._schedule_auth_state(session.user)
        return AuthResponse(user=session.user)

    @property
    def _persistence_file(self) -> Path | None:
        path = self._settings.auth_persistence_path
        return Path(path).expanduser() if path else None

    def _write_persisted(self, session: AuthSession | None) -> None:
        path = self._persistence_file
        if path is None:
            return
        if session is None:
            path.unlink(missing_ok=True)
            return
        user = session.user
        path.write_text(
            json.dumps({
                "uid": user.uid,
                "email": user.email,
                "display_name": user.display_name,
                "photo_url": user.photo_url,
                "creation_time": user.creation_time,
                "refresh_token": session.refresh_token,
            }),
            encoding="utf-8",
        )

    async def _restore_persisted(self) -> AuthSession | None:
        path = self._persistence_file
        if path is None or not path.is_file():
            return None
        try:
            stored = json.loads(path.read_text(encoding="utf-8"))
            refresh_token = stored.pop("refresh_token")
            expired = AuthSession(
                user=AuthUser(**stored),
                id_token="",
                refresh_token=refresh_token,
                expires_at=0.0,
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable persisted session %s: %s", path, e)
            return None
        try:
            return await self._handles.auth.refresh(expired)
        except StorefrontException as e:
            logger.info("Persisted session could not be refreshed: %s", e.message)
            path.unlink(missing_ok=True)
            return None

    # AUTH ------------

    @traced("gateway.create_account")
    async def create_account(self, email: str, password: str) -> AuthResponse:
        return self._signed_in(await self._handles.auth.sign_up(email, password))

    @traced("gateway.sign_in")
    async def sign_in(self, email: str, password: str) -> AuthResponse:
        return self._signed_in(
            await self._handles.auth.sign_in_with_password(email, password)
        )

    async def _sign_in_with_provider(
        self, operation: str, access_token: str | None
    ) -> AuthResponse:
        provider_id, label = _PROVIDERS[operation]
        if not access_token:
            raise OperationNotSupportedException(
                operation,
                f"{label} sign-in needs an OAuth access token obtained from {label}",
            )
        auth_domain = self._handles.config.auth_domain or "localhost"
        session = await self._handles.auth.sign_in_with_idp(
            provider_id, access_token, f"https://{auth_domain}/__/auth/handler"
        )
        return self._signed_in(session)

    @traced("gateway.sign_in_with_google")
    async def sign_in_with_google(self, access_token: str | None = None) -> AuthResponse:
        return await self._sign_in_with_provider("signInWithGoogle", access_token)

    @traced("gateway.sign_in_with_facebook")
    async def sign_in_with_facebook(self, access_token: str | None = None) -> AuthResponse:
        return await self._sign_in_with_provider("signInWithFacebook", access_token)

    @traced("gateway.sign_in_with_github")
    async def sign_in_with_github(self, access_token: str | None = None) -> AuthResponse:
        return await self._sign_in_with_provider("signInWithGithub", access_token)

    @traced("gateway.sign_out")
    async def sign_out(self) -> None:
        self._session = None
        self._write_persisted(None)
        self._schedule_auth_state(None)

    @traced("gateway.password_reset")
    async def password_reset(self, email: str) -> None:
        await self._handles.auth.send_password_reset(email)

    @traced("gateway.password_update")
    async def password_update(self, password: str) -> str:
        self._require_session()
        token = await self._id_token()
        session = self._require_session()
        out = await self._handles.auth.update_account(token or "", password=password)
        self._set_session(self._handles.auth.with_tokens(session, out))
        return PASSWORD_UPDATED

    @traced("gateway.reauthenticate")
    async def reauthenticate(self, current_password: str) -> None:
        session = self._require_session()
        fresh = await self._handles.auth.sign_in_with_password(
            session.user.email, current_password
        )
        self._set_session(fresh)

    @traced("gateway.change_password")
    async def change_password(self, current_password: str, new_password: str) -> str:
        await self.reauthenticate(current_password)
        return await self.password_update(new_password)

    @traced("gateway.update_email")
    async def update_email(self, current_password: str, new_email: str) -> str:
        await self.reauthenticate(current_password)
        session = self._require_session()
        out = await self._handles.auth.update_account(session.id_token, email=new_email)
        self._set_session(self._handles.auth.with_tokens(session, out, email=new_email))
        return EMAIL_UPDATED

    async def _on_waiter_registered(self, waiter: asyncio.Future[AuthUser]) -> None:
        # Firebase reports the current state to a new observer right away.
        if self._session is None:
            restored = await self._restore_persisted()
            if restored is not None:
                self._persistence = AuthPersistence.LOCAL
                self._set_session(restored)
        settle_waiter(waiter, self.current_user)

    @traced("gateway.set_auth_persistence")
    async def set_auth_persistence(self) -> None:
        self._persistence = AuthPersistence.LOCAL
        self._write_persisted(self._session)

    # PROFILES ------------

    @traced("gateway.add_user")
    async def add_user(self, uid: str, user: dict[str, Any]) -> None:
        await self._users.document(uid).set(user)

    @traced("gateway.get_user")
    async def get_user(self, uid: str) -> DocumentEnvelope:
        snapshot = await self._users.document(uid).get()
        if snapshot is None:
            return DocumentEnvelope.not_found(uid)
        return DocumentEnvelope.found(snapshot.id, snapshot.to_dict())

    @traced("gateway.update_profile")
    async def update_profile(self, uid: str, updates: dict[str, Any]) -> None:
        await self._users.document(uid).update(updates)

    @traced("gateway.save_basket_items")
    async def save_basket_items(self, items: list[dict[str, Any]], uid: str) -> None:
        await self._users.document(uid).update({"basket": list(items)})

    # PRODUCTS ------------

    @traced("gateway.get_single_product")
    async def get_single_product(self, product_id: str) -> DocumentEnvelope:
        snapshot = await self._products.document(product_id).get()
        if snapshot is None:
            return DocumentEnvelope.not_found(product_id)
        return DocumentEnvelope.found(snapshot.id, snapshot.to_dict())

    @traced("gateway.get_products")
    async def get_products(self, last_key: str | None = None) -> ProductPage:
        return await race_with_timeout(
            self._fetch_page(last_key),
            self._settings.request_timeout_seconds,
            operation="get_products",
        )

    async def _fetch_page(self, last_key: str | None) -> ProductPage:
        page_size = self._settings.products_page_size
        query = self._products.order_by(FIELD_DOCUMENT_ID).limit(page_size)
        if last_key:
            query = query.start_after(last_key)
        total = None if last_key else await self._products.count()
        products = [_product(s) for s in await query.get()]
        next_key = products[-1]["id"] if len(products) == page_size else None
        add_span_attributes(page_count=len(products))
        return ProductPage(products=products, last_key=next_key, total=total)

    @traced("gateway.search_products")
    async def search_products(self, search_key: str) -> SearchResult:
        return await race_with_timeout(
            self._search(search_key),
            self._settings.request_timeout_seconds,
            operation="search_products",
        )

    async def _search(self, search_key: str) -> SearchResult:
        limit = self._settings.products_page_size
        by_name_query = (
            self._products.order_by(FIELD_NAME_LOWER)
            .where(FIELD_NAME_LOWER, ">=", search_key)
            .where(FIELD_NAME_LOWER, "<=", f"{search_key}{PREFIX_RANGE_SENTINEL}")
            .limit(limit)
        )
        by_keywords_query = (
            self._products.order_by(FIELD_DATE_ADDED, "desc")
            .where(FIELD_KEYWORDS, "array-contains-any", search_key.split(" "))
            .limit(limit)
        )
        by_name, by_keywords = await asyncio.gather(
            by_name_query.get(), by_keywords_query.get()
        )
        last_key = by_name[-1].id if by_name else None
        return SearchResult(
            products=merge_products_by_id(
                [_product(s) for s in by_name],
                [_product(s) for s in by_keywords],
            ),
            last_key=last_key,
        )

    @traced("gateway.get_featured_products")
    async def get_featured_products(
        self, limit: int = DEFAULT_CURATED_LIMIT
    ) -> QuerySnapshotEnvelope:
        query = self._products.where(FIELD_IS_FEATURED, "==", True).limit(limit)
        return _snapshot_envelope(await query.get())

    @traced("gateway.get_recommended_products")
    async def get_recommended_products(
        self, limit: int = DEFAULT_CURATED_LIMIT
    ) -> QuerySnapshotEnvelope:
        query = self._products.where(FIELD_IS_RECOMMENDED, "==", True).limit(limit)
        return _snapshot_envelope(await query.get())

    def generate_key(self) -> str:
        return self._products.document().id

    @traced("gateway.add_product")
    async def add_product(self, product_id: str, product: dict[str, Any]) -> None:
        await self._products.document(product_id).set(product)

    @traced("gateway.edit_product")
    async def edit_product(self, product_id: str, updates: dict[str, Any]) -> None:
        await self._products.document(product_id).update(updates)

    @traced("gateway.remove_product")
    async def remove_product(self, product_id: str) -> None:
        await self._products.document(product_id).delete()

    def _require_storage(self, operation: str):
        if self._handles.storage is None:
            raise OperationNotSupportedException(
                operation, "No storage bucket configured (FIREBASE_STORAGE_BUCKET)"
            )
        return self._handles.storage

    @traced("gateway.store_image")
    async def store_image(
        self, image_id: str, folder: str, image: bytes, content_type: str = "image/jpeg"
    ) -> str:
        storage = self._require_storage("storeImage")
        path = object_path(folder, image_id)
        metadata = await storage.put(path, image, content_type)
        return storage.download_url(path, metadata)

    @traced("gateway.delete_image")
    async def delete_image(self, image_id: str) -> None:
        storage = self._require_storage("deleteImage")
        await storage.delete(object_path(STORAGE_FOLDER_PRODUCTS, image_id))

    async def aclose(self) -> None:
        await super().aclose()
        await self._handles.aclose()
