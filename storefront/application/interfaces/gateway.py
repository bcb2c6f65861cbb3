"""Data gateway interface (port) for the application layer.

One contract for auth, profile, and catalog operations. LiveGateway and
FallbackGateway both fulfil it; the factory picks one at startup and the
caller never learns which.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

from storefront.application.dtos.auth import AuthUser

if TYPE_CHECKING:
    from storefront.application.dtos.auth import AuthResponse
    from storefront.application.dtos.documents import (
        DocumentEnvelope,
        QuerySnapshotEnvelope,
    )
    from storefront.application.dtos.product import ProductPage, SearchResult
    from storefront.domain.enums import GatewayMode

# Called with the new identity (or None on sign-out). May be sync or async.
AuthStateHandler = Callable[[AuthUser | None], Awaitable[None] | None]


class IDataGateway(Protocol):
    """Protocol for the storefront data gateway (DIP)."""

    @property
    def mode(self) -> GatewayMode:
        """Backend serving this gateway; fixed at construction."""

    @property
    def current_user(self) -> AuthUser | None:
        """Signed-in identity, or None."""

    def set_auth_state_change_handler(self, handler: AuthStateHandler | None) -> None:
        """Register the continuous identity-change handler (replaces any previous one)."""

    # Auth
    async def create_account(self, email: str, password: str) -> AuthResponse:
        """Register an account and sign it in."""

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        """Sign in with email and password."""

    async def sign_in_with_google(self, access_token: str | None = None) -> AuthResponse:
        """Sign in with a Google OAuth credential."""

    async def sign_in_with_facebook(self, access_token: str | None = None) -> AuthResponse:
        """Sign in with a Facebook OAuth credential."""

    async def sign_in_with_github(self, access_token: str | None = None) -> AuthResponse:
        """Sign in with a GitHub OAuth credential."""

    async def sign_out(self) -> None:
        """Clear the session."""

    async def password_reset(self, email: str) -> None:
        """Start a password reset for the account."""

    async def password_update(self, password: str) -> str:
        """Set a new password for the signed-in account."""

    async def change_password(self, current_password: str, new_password: str) -> str:
        """Re-authenticate, then set a new password."""

    async def reauthenticate(self, current_password: str) -> None:
        """Confirm the signed-in account's password."""

    async def update_email(self, current_password: str, new_email: str) -> str:
        """Re-authenticate, then move the account to a new email."""

    async def on_auth_state_changed(self) -> AuthUser:
        """Resolve with the established identity; reject when it is absent."""

    async def set_auth_persistence(self) -> None:
        """Keep the session beyond this gateway (live: saved to auth_persistence_path)."""

    # Profiles
    async def add_user(self, uid: str, user: dict[str, Any]) -> None:
        """Store the profile document for uid."""

    async def get_user(self, uid: str) -> DocumentEnvelope:
        """Return the profile document for uid."""

    async def update_profile(self, uid: str, updates: dict[str, Any]) -> None:
        """Partial-merge updates into the profile for uid."""

    async def save_basket_items(self, items: list[dict[str, Any]], uid: str) -> None:
        """Replace the basket on the profile for uid."""

    # Catalog reads
    async def get_single_product(self, product_id: str) -> DocumentEnvelope:
        """Return one product; exists is False when missing."""

    async def get_products(self, last_key: str | None = None) -> ProductPage:
        """Return the next page of products after last_key."""

    async def search_products(self, search_key: str) -> SearchResult:
        """Return products matching by name prefix or keyword."""

    async def get_featured_products(self, limit: int = 12) -> QuerySnapshotEnvelope:
        """Return up to limit featured products."""

    async def get_recommended_products(self, limit: int = 12) -> QuerySnapshotEnvelope:
        """Return up to limit recommended products."""

    # Catalog mutations
    def generate_key(self) -> str:
        """Allocate a new product id."""

    async def add_product(self, product_id: str, product: dict[str, Any]) -> None:
        """Create or replace a product."""

    async def edit_product(self, product_id: str, updates: dict[str, Any]) -> None:
        """Partial update of a product."""

    async def remove_product(self, product_id: str) -> None:
        """Delete a product."""

    async def store_image(
        self, image_id: str, folder: str, image: bytes, content_type: str = "image/jpeg"
    ) -> str:
        """Upload an image and return its download URL."""

    async def delete_image(self, image_id: str) -> None:
        """Delete a product image."""

    async def aclose(self) -> None:
        """Release backend resources."""
