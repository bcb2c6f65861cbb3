"""Async combinators shared by both gateway implementations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from storefront.domain.exceptions import RequestTimeoutException

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def race_with_timeout(
    awaitable: Awaitable[T],
    timeout_seconds: float,
    *,
    operation: str = "request",
) -> T:
    """Await ``awaitable`` unless ``timeout_seconds`` elapses first.

    Exactly one outcome settles the call. When the timeout wins, the fetch is
    cancelled so a late result is never delivered and a late error is never
    raised; the caller gets RequestTimeoutException. Errors raised by the
    fetch before the deadline propagate unchanged.

    Args:
        awaitable: The fetch to run.
        timeout_seconds: Race window.
        operation: Name used in the timeout log line.

    Raises:
        RequestTimeoutException: The window elapsed before the fetch settled.
    """
    deadline = asyncio.timeout(timeout_seconds)
    try:
        async with deadline:
            return await awaitable
    except TimeoutError:
        if not deadline.expired():
            raise
        logger.warning("%s timed out after %.1fs", operation, timeout_seconds)
        raise RequestTimeoutException(timeout_seconds) from None
