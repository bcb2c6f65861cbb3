"""Core constants: placeholder credentials, paging, and demo defaults."""

# Values of FIREBASE_API_KEY that mean "no real backend configured"
PLACEHOLDER_API_KEYS = frozenset({"", "undefined", "demo-mode"})

DEFAULT_PAGE_SIZE = 12
DEFAULT_CURATED_LIMIT = 12

REQUEST_TIMEOUT_MESSAGE = "Request timeout, please try again"

# Demo-mode defaults for new fallback accounts
DEFAULT_AVATAR = "/static/defaultAvatar.jpg"
DEFAULT_BANNER = "/static/defaultBanner.jpg"
DEMO_CREDENTIALS_HINT = "Please use test@example.com / password123"

# Upper bound used for prefix-range queries on string fields
PREFIX_RANGE_SENTINEL = "\uf8ff"
