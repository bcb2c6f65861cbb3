"""Gateway construction: pick the live or fallback backend once, at startup."""

from __future__ import annotations

import httpx

from storefront.application.interfaces.gateway import IDataGateway
from storefront.core.config import Settings, get_settings
from storefront.infrastructure.firebase.client import init_firebase
from storefront.infrastructure.gateway.fallback import FallbackGateway
from storefront.infrastructure.gateway.live import LiveGateway
from storefront.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


def create_gateway(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> IDataGateway:
    """Return the gateway for this process.

    Live when the Firebase credentials bundle is real and the backend
    handles initialize; fallback otherwise. Never raises for an unusable
    backend, and the choice is not revisited: build a new gateway to switch.

    Args:
        settings: Settings to use; defaults to get_settings().
        http_client: Optional injected httpx client for the live backend
            (not closed by the gateway).
    """
    s = settings or get_settings()
    handles = init_firebase(s.firebase_config(), s, http_client=http_client)
    if handles is not None:
        logger.info(
            "Using live Firebase backend (project %s)", handles.config.project_id
        )
        return LiveGateway(s, handles)
    logger.info("Using in-memory fallback backend")
    return FallbackGateway(s)
