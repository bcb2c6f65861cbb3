"""Backend availability detection and Firebase handle construction.

init_firebase() decides once whether a live backend is usable: the web
credentials bundle must carry a real (non-placeholder) API key and a
project id, and building the REST handles must not raise. Any failure is
logged and reported as None so the caller can fall back to the in-memory
backend; nothing propagates.

An optional service account (FIREBASE_SERVICE_ACCOUNT_KEY as a JSON string,
or FIREBASE_SERVICE_ACCOUNT_PATH) switches Firestore and Storage requests
from the signed-in user's ID token to service account tokens.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from storefront.core.config import FirebaseConfig, Settings
from storefront.domain.exceptions import ConfigurationException
from storefront.infrastructure.firebase._identity_client import IdentityToolkitClient
from storefront.infrastructure.firebase._rest_client import (
    FirestoreRESTClient,
    _get_credentials,
    service_account_token_provider,
)
from storefront.infrastructure.firebase._storage_client import StorageRESTClient

logger = logging.getLogger(__name__)


@dataclass
class FirebaseHandles:
    """Live backend handles, built once per gateway."""

    config: FirebaseConfig
    http: httpx.AsyncClient
    firestore: FirestoreRESTClient
    auth: IdentityToolkitClient
    storage: StorageRESTClient | None
    uses_service_account: bool = False
    owns_http: bool = True

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self.owns_http:
            await self.http.aclose()


def _load_key_dict(settings: Settings) -> dict | None:
    """Return service account dict from env key or file path."""
    key_json = (
        settings.firebase_service_account_key.get_secret_value()
        if settings.firebase_service_account_key
        else None
    )
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ConfigurationException(
                "FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON"
            ) from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def _build_handles(
    config: FirebaseConfig,
    settings: Settings,
    http_client: httpx.AsyncClient | None,
) -> FirebaseHandles:
    if config.is_placeholder:
        raise ConfigurationException("Firebase API key not found")
    if not config.project_id:
        raise ConfigurationException("Firebase config missing project_id")

    key_dict = _load_key_dict(settings)
    provider = (
        service_account_token_provider(_get_credentials(key_dict)) if key_dict else None
    )

    http = http_client or httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    firestore = FirestoreRESTClient(
        config.project_id, http, api_key=config.api_key, token_provider=provider
    )
    storage = (
        StorageRESTClient(config.storage_bucket, http, token_provider=provider)
        if config.storage_bucket
        else None
    )
    return FirebaseHandles(
        config=config,
        http=http,
        firestore=firestore,
        auth=IdentityToolkitClient(config.api_key or "", http),
        storage=storage,
        uses_service_account=provider is not None,
        owns_http=http_client is None,
    )


def init_firebase(
    config: FirebaseConfig,
    settings: Settings,
    *,
    http_client: httpx.AsyncClient | None = None,
) -> FirebaseHandles | None:
    """Initialize live Firebase handles, or return None when unavailable.

    Safe to call with a missing or placeholder API key (returns None). On
    invalid credentials or any initialization error, logs a warning and
    returns None so the process can run against the fallback backend.

    Returns:
        FirebaseHandles when the live backend is usable, else None.
    """
    try:
        return _build_handles(config, settings, http_client)
    except ConfigurationException as e:
        logger.warning("%s, using fallback backend", e.message)
        return None
    except Exception as e:
        logger.warning(
            "Firebase initialization failed, using fallback backend: %s", e
        )
        return None
