"""Small shared helpers (ids, time, async combinators)."""

from storefront.shared.utils.async_utils import race_with_timeout
from storefront.shared.utils.datetime import utc_now, utc_now_ms
from storefront.shared.utils.generators import generate_cuid

__all__ = ["generate_cuid", "race_with_timeout", "utc_now", "utc_now_ms"]
