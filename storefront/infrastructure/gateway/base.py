"""Behaviour shared by both gateway implementations.

Auth-state notification lives here: the continuous handler registered with
set_auth_state_change_handler(), and the one-shot waiters created by
on_auth_state_changed(). A waiter is settled by the next identity change
(resolved with a user, rejected on sign-out) or by the subclass's fast path
when an identity is already established.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from storefront.application.dtos.auth import AuthUser
from storefront.application.interfaces.gateway import AuthStateHandler
from storefront.core.config import Settings
from storefront.domain.enums import GatewayMode
from storefront.domain.exceptions import NoCurrentUserException

logger = logging.getLogger(__name__)

AUTH_STATE_FAILED_MESSAGE = "Auth State Changed failed"


def merge_products_by_id(*result_sets: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Merge product lists into one, de-duplicated by id.

    A later duplicate replaces the earlier entry's data but keeps its
    position, so with (name_matches, keyword_matches) a keyword match wins
    on collision.
    """
    merged: dict[str, dict[str, Any]] = {}
    for products in result_sets:
        for product in products:
            merged[product["id"]] = product
    return list(merged.values())


class BaseGateway(ABC):
    """Auth-state plumbing and lifecycle common to LiveGateway and FallbackGateway."""

    mode: GatewayMode

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._state_handler: AuthStateHandler | None = None
        self._auth_waiters: list[asyncio.Future[AuthUser]] = []
        self._background: set[asyncio.Task[None]] = set()

    @property
    @abstractmethod
    def current_user(self) -> AuthUser | None:
        """Signed-in identity, or None."""

    def set_auth_state_change_handler(self, handler: AuthStateHandler | None) -> None:
        self._state_handler = handler

    def _schedule_auth_state(self, user: AuthUser | None, delay: float = 0.0) -> None:
        """Deliver an identity change after ``delay`` seconds, off the caller's path."""
        task = asyncio.get_running_loop().create_task(
            self._deliver_auth_state(user, delay)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _deliver_auth_state(self, user: AuthUser | None, delay: float) -> None:
        if delay:
            await asyncio.sleep(delay)
        handler = self._state_handler
        if handler is not None:
            try:
                result = handler(user)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Auth state change handler failed")
        self._settle_waiters(user)

    def _settle_waiters(self, user: AuthUser | None) -> None:
        waiters, self._auth_waiters = self._auth_waiters, []
        for waiter in waiters:
            settle_waiter(waiter, user)

    async def on_auth_state_changed(self) -> AuthUser:
        """Resolve with the established identity, or wait for the next change.

        One-shot: the result is settled once (resolved with a user, rejected
        with NoCurrentUserException when the identity is absent). Use
        set_auth_state_change_handler() for continuing updates.
        """
        waiter: asyncio.Future[AuthUser] = asyncio.get_running_loop().create_future()
        self._auth_waiters.append(waiter)
        try:
            await self._on_waiter_registered(waiter)
            return await waiter
        finally:
            if waiter in self._auth_waiters:
                self._auth_waiters.remove(waiter)

    @abstractmethod
    async def _on_waiter_registered(self, waiter: asyncio.Future[AuthUser]) -> None:
        """Fast path hook: settle ``waiter`` now if the identity is already known."""

    def _require_session_user(self) -> AuthUser:
        user = self.current_user
        if user is None:
            raise NoCurrentUserException()
        return user

    async def aclose(self) -> None:
        """Cancel pending notifications and one-shot waiters."""
        for waiter in self._auth_waiters:
            waiter.cancel()
        self._auth_waiters = []
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        self._background.clear()


def settle_waiter(waiter: asyncio.Future[AuthUser], user: AuthUser | None) -> None:
    """Settle a one-shot waiter unless it already has an outcome."""
    if waiter.done():
        return
    if user is not None:
        waiter.set_result(user)
    else:
        waiter.set_exception(NoCurrentUserException(AUTH_STATE_FAILED_MESSAGE))
