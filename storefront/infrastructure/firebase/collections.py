"""Firestore collection and Storage folder names (schema-in-code).

Firestore has no DDL. Use these constants so collection names stay
consistent between the live gateway and the fallback seed.
"""

COLLECTION_USERS = "users"
COLLECTION_PRODUCTS = "products"

# Cloud Storage folders
STORAGE_FOLDER_PRODUCTS = "products"

# Fields the catalog queries rely on
FIELD_DOCUMENT_ID = "__name__"
FIELD_NAME_LOWER = "name_lower"
FIELD_KEYWORDS = "keywords"
FIELD_DATE_ADDED = "dateAdded"
FIELD_IS_FEATURED = "isFeatured"
FIELD_IS_RECOMMENDED = "isRecommended"
