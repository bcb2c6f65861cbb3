"""Gateway implementations (live Firebase, in-memory fallback) and their factory."""

from storefront.infrastructure.gateway.factory import create_gateway
from storefront.infrastructure.gateway.fallback import FallbackGateway
from storefront.infrastructure.gateway.fallback_store import FallbackStore, UserRecord
from storefront.infrastructure.gateway.live import LiveGateway

__all__ = [
    "FallbackGateway",
    "FallbackStore",
    "LiveGateway",
    "UserRecord",
    "create_gateway",
]
