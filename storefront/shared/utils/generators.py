"""Identifier generation for product keys and fallback accounts."""

from cuid2 import cuid_wrapper

FALLBACK_UID_PREFIX = "dummy-user-"

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 (collision-resistant and safe in document paths)."""
    return _next_cuid()


def generate_fallback_uid() -> str:
    """Return a uid for an account created while running on the fallback backend."""
    return f"{FALLBACK_UID_PREFIX}{generate_cuid()}"
