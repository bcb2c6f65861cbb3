"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Nothing here is required: a missing or placeholder
Firebase API key is a valid configuration that selects the in-memory
fallback backend.
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront.core.constants import (
    DEFAULT_PAGE_SIZE,
    PLACEHOLDER_API_KEYS,
)


@dataclass(frozen=True)
class FirebaseConfig:
    """Firebase web credentials bundle (what the browser SDK is initialized with)."""

    api_key: str | None
    auth_domain: str | None = None
    project_id: str | None = None
    storage_bucket: str | None = None
    messaging_sender_id: str | None = None
    app_id: str | None = None

    @property
    def is_placeholder(self) -> bool:
        """True when the API key is missing or one of the demo placeholders."""
        return self.api_key is None or self.api_key.strip() in PLACEHOLDER_API_KEYS


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "storefront"
    app_version: str = "1.0.0"
    debug: bool = False

    # Firebase web config. Absent or placeholder api key => fallback mode.
    firebase_api_key: SecretStr | None = None
    firebase_auth_domain: str | None = None
    firebase_project_id: str | None = None
    firebase_storage_bucket: str | None = None
    firebase_messaging_sender_id: str | None = None
    firebase_app_id: str | None = None

    # Optional service account: when set, Firestore/Storage calls use its token
    # instead of the signed-in user's ID token. Key (env JSON) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Where a live session is kept after set_auth_persistence(); None keeps it
    # in memory for the process lifetime.
    auth_persistence_path: str | None = None

    # Timeouts
    request_timeout_seconds: float = 15.0  # catalog listing/search race window
    http_timeout_seconds: float = 30.0

    # Fallback backend simulation
    fallback_latency_seconds: float = 0.5
    fallback_auth_delay_seconds: float = 0.1

    # Catalog
    products_page_size: int = DEFAULT_PAGE_SIZE

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator(
        "request_timeout_seconds",
        "fallback_latency_seconds",
        "fallback_auth_delay_seconds",
    )
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("durations must be >= 0")
        return v

    @field_validator("products_page_size")
    @classmethod
    def _positive_page_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("products_page_size must be >= 1")
        return v

    def firebase_config(self) -> FirebaseConfig:
        """Return the Firebase credentials bundle built from these settings."""
        api_key = (
            self.firebase_api_key.get_secret_value() if self.firebase_api_key else None
        )
        return FirebaseConfig(
            api_key=api_key,
            auth_domain=self.firebase_auth_domain,
            project_id=self.firebase_project_id,
            storage_bucket=self.firebase_storage_bucket,
            messaging_sender_id=self.firebase_messaging_sender_id,
            app_id=self.firebase_app_id,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars so
    the next get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
