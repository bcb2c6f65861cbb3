"""Tests for backend detection and gateway construction."""

import json

import httpx
import pytest

from storefront.core.config import FirebaseConfig
from storefront.domain.enums import GatewayMode
from storefront.infrastructure.firebase.client import init_firebase
from storefront.infrastructure.gateway.factory import create_gateway
from storefront.infrastructure.gateway.fallback import FallbackGateway
from storefront.infrastructure.gateway.live import LiveGateway
from tests.conftest import live_settings, make_settings


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request {request.url}")


@pytest.mark.parametrize("api_key", [None, "", "undefined", "demo-mode", "  demo-mode  "])
def test_placeholder_api_key_is_placeholder(api_key: str | None) -> None:
    assert FirebaseConfig(api_key=api_key, project_id="demo-shop").is_placeholder


def test_real_api_key_is_not_placeholder() -> None:
    assert not FirebaseConfig(api_key="AIzaSyReal", project_id="demo-shop").is_placeholder


@pytest.mark.asyncio
@pytest.mark.parametrize("api_key", [None, "undefined", "demo-mode", ""])
async def test_placeholder_config_selects_fallback(api_key: str | None) -> None:
    gw = create_gateway(make_settings(firebase_api_key=api_key, firebase_project_id="p"))
    try:
        assert isinstance(gw, FallbackGateway)
        assert gw.mode is GatewayMode.FALLBACK
    finally:
        await gw.aclose()


@pytest.mark.asyncio
async def test_real_config_selects_live(mock_http) -> None:
    """Detection makes no network calls."""
    gw = create_gateway(live_settings(), http_client=mock_http(_unreachable))
    try:
        assert isinstance(gw, LiveGateway)
        assert gw.mode is GatewayMode.LIVE
    finally:
        await gw.aclose()


@pytest.mark.asyncio
async def test_missing_project_id_selects_fallback(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING"):
        gw = create_gateway(live_settings(firebase_project_id=None))
    try:
        assert isinstance(gw, FallbackGateway)
    finally:
        await gw.aclose()
    assert "missing project_id" in caplog.text


def test_invalid_service_account_json_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    settings = live_settings(firebase_service_account_key="{not json")
    with caplog.at_level("WARNING"):
        assert init_firebase(settings.firebase_config(), settings) is None
    assert "not valid JSON" in caplog.text


def test_unusable_service_account_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    """Credential construction errors are logged and swallowed by detection."""
    settings = live_settings(
        firebase_service_account_key=json.dumps({"type": "service_account"})
    )
    with caplog.at_level("WARNING"):
        assert init_firebase(settings.firebase_config(), settings) is None
    assert "Firebase initialization failed" in caplog.text


@pytest.mark.asyncio
async def test_missing_service_account_file_uses_user_tokens(tmp_path) -> None:
    settings = live_settings(firebase_service_account_path=str(tmp_path / "absent.json"))
    handles = init_firebase(settings.firebase_config(), settings)
    assert handles is not None
    try:
        assert handles.uses_service_account is False
        assert handles.owns_http is True
    finally:
        await handles.aclose()
    assert handles.http.is_closed


@pytest.mark.asyncio
async def test_injected_client_is_not_owned(mock_http) -> None:
    settings = live_settings()
    client = mock_http(_unreachable)
    handles = init_firebase(settings.firebase_config(), settings, http_client=client)
    assert handles.http is client
    assert handles.owns_http is False
    assert handles.storage is not None
    await handles.aclose()
    assert not client.is_closed


@pytest.mark.asyncio
async def test_no_bucket_means_no_storage(mock_http) -> None:
    settings = live_settings(firebase_storage_bucket=None)
    handles = init_firebase(
        settings.firebase_config(), settings, http_client=mock_http(_unreachable)
    )
    assert handles is not None
    assert handles.storage is None
