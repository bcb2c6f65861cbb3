"""Tests for FallbackGateway catalog reads and mutations."""

import pytest

from storefront.domain.exceptions import (
    OperationNotSupportedException,
    RequestTimeoutException,
)
from storefront.infrastructure.gateway.fallback import FallbackGateway
from tests.conftest import make_settings


def _ids(products: list[dict]) -> list[str]:
    return [p["id"] for p in products]


@pytest.mark.asyncio
async def test_first_page_uses_default_page_size(gateway: FallbackGateway) -> None:
    page = await gateway.get_products()
    assert len(page.products) == 12
    assert page.total == 12
    assert _ids(page.products)[0] == "dummy-1"
    assert page.last_key == "dummy-12"

    tail = await gateway.get_products(page.last_key)
    assert tail.products == []
    assert tail.last_key is None
    assert tail.total is None


@pytest.mark.asyncio
async def test_pagination_covers_catalog_without_overlap() -> None:
    """Following last_key visits every product once, in catalog order."""
    gw = FallbackGateway(make_settings(products_page_size=5))
    try:
        pages = []
        key = None
        while True:
            page = await gw.get_products(key)
            pages.append(page)
            key = page.last_key
            if key is None:
                break

        assert [len(p.products) for p in pages] == [5, 5, 2]
        assert [p.total for p in pages] == [12, None, None]
        seen = [pid for p in pages for pid in _ids(p.products)]
        assert seen == [f"dummy-{i}" for i in range(1, 13)]
    finally:
        await gw.aclose()


@pytest.mark.asyncio
async def test_unknown_cursor_restarts_listing(gateway: FallbackGateway) -> None:
    page = await gateway.get_products("no-such-product")
    assert _ids(page.products)[0] == "dummy-1"
    assert page.total is None


@pytest.mark.asyncio
async def test_get_single_product(gateway: FallbackGateway) -> None:
    doc = await gateway.get_single_product("dummy-3")
    assert doc.exists
    assert doc.data()["name"] == "Portable Bluetooth Speaker"

    missing = await gateway.get_single_product("dummy-99")
    assert not missing.exists
    assert missing.data() is None


@pytest.mark.asyncio
async def test_search_merges_name_and_keyword_matches(gateway: FallbackGateway) -> None:
    """A product matching both ways appears once, at its name-match position."""
    result = await gateway.search_products("smart")
    assert _ids(result.products) == ["dummy-2", "dummy-9"]
    assert result.last_key == "dummy-9"


@pytest.mark.asyncio
async def test_search_keyword_matches_newest_first(gateway: FallbackGateway) -> None:
    result = await gateway.search_products("wireless")
    assert _ids(result.products) == ["dummy-4", "dummy-8", "dummy-3", "dummy-1"]
    assert result.last_key == "dummy-4"


@pytest.mark.asyncio
async def test_search_multiple_terms_any_match(gateway: FallbackGateway) -> None:
    result = await gateway.search_products("gaming 4K")
    assert _ids(result.products) == ["dummy-10", "dummy-7", "dummy-5"]
    assert result.last_key is None


@pytest.mark.asyncio
async def test_search_without_matches(gateway: FallbackGateway) -> None:
    result = await gateway.search_products("zzz")
    assert result.products == []
    assert result.last_key is None


@pytest.mark.asyncio
async def test_featured_and_recommended(gateway: FallbackGateway) -> None:
    featured = await gateway.get_featured_products()
    assert [d.id for d in featured] == [
        "dummy-1", "dummy-2", "dummy-3", "dummy-4", "dummy-7", "dummy-9", "dummy-12",
    ]
    assert all(d.data()["isFeatured"] is True for d in featured)

    recommended = await gateway.get_recommended_products(limit=3)
    assert recommended.size == 3
    assert [d.id for d in recommended] == ["dummy-2", "dummy-4", "dummy-5"]
    assert recommended.to_list()[0]["id"] == "dummy-2"


@pytest.mark.asyncio
async def test_featured_limit_zero_is_empty(gateway: FallbackGateway) -> None:
    snapshot = await gateway.get_featured_products(limit=0)
    assert snapshot.empty


@pytest.mark.asyncio
async def test_slow_catalog_times_out() -> None:
    gw = FallbackGateway(
        make_settings(fallback_latency_seconds=0.5, request_timeout_seconds=0.05)
    )
    try:
        with pytest.raises(RequestTimeoutException) as exc_info:
            await gw.get_products()
        assert exc_info.value.message == "Request timeout, please try again"
        with pytest.raises(RequestTimeoutException):
            await gw.search_products("smart")
    finally:
        await gw.aclose()


@pytest.mark.asyncio
async def test_generate_key_is_unique(gateway: FallbackGateway) -> None:
    keys = {gateway.generate_key() for _ in range(50)}
    assert len(keys) == 50


@pytest.mark.asyncio
async def test_catalog_mutations_not_supported(gateway: FallbackGateway) -> None:
    """Mutations fail loudly and leave the catalog untouched."""
    with pytest.raises(OperationNotSupportedException) as exc_info:
        await gateway.add_product("new-1", {"name": "Thing"})
    assert exc_info.value.details == {"operation": "addProduct"}
    with pytest.raises(OperationNotSupportedException):
        await gateway.edit_product("dummy-1", {"price": 1})
    with pytest.raises(OperationNotSupportedException):
        await gateway.remove_product("dummy-1")
    with pytest.raises(OperationNotSupportedException):
        await gateway.store_image("img-1", "products", b"\x89PNG")
    with pytest.raises(OperationNotSupportedException):
        await gateway.delete_image("img-1")

    assert not (await gateway.get_single_product("new-1")).exists
    assert (await gateway.get_single_product("dummy-1")).data()["price"] == 5.99
