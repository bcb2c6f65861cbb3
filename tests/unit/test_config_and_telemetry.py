"""Tests for settings, logging setup, and the tracing decorator."""

import logging

import pytest
from pydantic import ValidationError

from storefront.core.config import Settings, get_settings
from storefront.shared.telemetry import add_span_attributes, get_logger, setup_logging, traced
from tests.conftest import make_settings


def test_defaults_select_fallback_bundle() -> None:
    settings = Settings(_env_file=None)
    assert settings.request_timeout_seconds == 15.0
    assert settings.products_page_size == 12
    assert settings.firebase_config().is_placeholder


def test_firebase_config_unwraps_secret() -> None:
    settings = make_settings(firebase_api_key="AIzaSyReal", firebase_project_id="shop")
    config = settings.firebase_config()
    assert config.api_key == "AIzaSyReal"
    assert config.project_id == "shop"
    assert "AIzaSyReal" not in repr(settings)


@pytest.mark.parametrize(
    "overrides",
    [
        {"request_timeout_seconds": -1},
        {"fallback_latency_seconds": -0.1},
        {"products_page_size": 0},
    ],
)
def test_invalid_settings_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        make_settings(**overrides)


def test_get_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIREBASE_API_KEY", "demo-mode")
    monkeypatch.setenv("PRODUCTS_PAGE_SIZE", "4")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.products_page_size == 4
        assert settings.firebase_config().is_placeholder
        assert get_settings() is settings
    finally:
        get_settings.cache_clear()


def test_setup_logging_level_follows_debug(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEBUG", "true")
    get_settings.cache_clear()
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers = []
    try:
        setup_logging()
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert get_logger("storefront.test").name == "storefront.test"
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("httpx").setLevel(logging.NOTSET)
        logging.getLogger("httpcore").setLevel(logging.NOTSET)
        get_settings.cache_clear()


@pytest.mark.asyncio
async def test_traced_passes_results_and_errors_through() -> None:
    @traced("test.ok")
    async def ok(uid: str) -> str:
        add_span_attributes(page_count=1)
        return uid

    @traced()
    def boom() -> None:
        raise ValueError("nope")

    assert await ok(uid="u-1") == "u-1"
    with pytest.raises(ValueError, match="nope"):
        boom()
