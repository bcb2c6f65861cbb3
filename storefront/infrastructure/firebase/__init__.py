"""Firebase REST integration (Firestore, Authentication, Storage)."""

from storefront.infrastructure.firebase.client import FirebaseHandles, init_firebase

__all__ = [
    "FirebaseHandles",
    "init_firebase",
]
