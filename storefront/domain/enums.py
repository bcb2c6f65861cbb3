"""Domain enumerations for the storefront gateway."""

from enum import Enum


class GatewayMode(str, Enum):
    """Which backend serves the gateway. Fixed for the lifetime of a gateway."""

    LIVE = "live"
    FALLBACK = "fallback"


class UserRole(str, Enum):
    """Profile role."""

    USER = "USER"
    ADMIN = "ADMIN"


class AuthPersistence(str, Enum):
    """How long a live session survives.

    NONE keeps the session in memory only. LOCAL also writes it to
    settings.auth_persistence_path so a later process can restore it.
    """

    NONE = "none"
    LOCAL = "local"
