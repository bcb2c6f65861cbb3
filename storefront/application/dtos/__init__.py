"""Data transfer objects shared by both gateway implementations."""

from storefront.application.dtos.auth import AuthResponse, AuthUser, UserProfile
from storefront.application.dtos.documents import (
    DocumentEnvelope,
    QuerySnapshotEnvelope,
)
from storefront.application.dtos.product import ProductPage, SearchResult

__all__ = [
    "AuthResponse",
    "AuthUser",
    "DocumentEnvelope",
    "ProductPage",
    "QuerySnapshotEnvelope",
    "SearchResult",
    "UserProfile",
]
