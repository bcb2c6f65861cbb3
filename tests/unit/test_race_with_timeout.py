"""Tests for race_with_timeout."""

import asyncio

import pytest

from storefront.domain.exceptions import RequestTimeoutException
from storefront.shared.utils.async_utils import race_with_timeout


@pytest.mark.asyncio
async def test_fast_fetch_wins() -> None:
    async def fetch() -> str:
        await asyncio.sleep(0)
        return "page"

    assert await race_with_timeout(fetch(), 1.0) == "page"


@pytest.mark.asyncio
async def test_timeout_wins_and_late_result_is_discarded() -> None:
    """Once the timeout settles the call, the fetch never completes."""
    completed: list[str] = []

    async def slow_fetch() -> str:
        await asyncio.sleep(0.2)
        completed.append("late")
        return "late page"

    with pytest.raises(RequestTimeoutException) as exc_info:
        await race_with_timeout(slow_fetch(), 0.02, operation="get_products")
    assert exc_info.value.error_code == "REQUEST_TIMEOUT"
    assert exc_info.value.details == {"timeout_seconds": 0.02}

    await asyncio.sleep(0.3)
    assert completed == []


@pytest.mark.asyncio
async def test_fetch_error_before_deadline_propagates() -> None:
    async def failing() -> None:
        raise ValueError("permission denied")

    with pytest.raises(ValueError, match="permission denied"):
        await race_with_timeout(failing(), 1.0)


@pytest.mark.asyncio
async def test_inner_timeout_error_is_not_mistaken_for_the_race() -> None:
    async def inner_timeout() -> None:
        raise TimeoutError("socket read timed out")

    with pytest.raises(TimeoutError, match="socket read"):
        await race_with_timeout(inner_timeout(), 1.0)


@pytest.mark.asyncio
async def test_timeout_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("WARNING", logger="storefront.shared.utils.async_utils"):
        with pytest.raises(RequestTimeoutException):
            await race_with_timeout(asyncio.sleep(1), 0.01, operation="search_products")
    assert "search_products timed out" in caplog.text
