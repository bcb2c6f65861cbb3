"""Firebase Authentication over the Identity Toolkit REST API.

Covers what the web SDK's email/password and IdP flows do: sign-up,
password sign-in, IdP sign-in with an OAuth credential, password reset
email, account update (email/password), account lookup, and ID token
refresh. Auth errors come back as ``{"error": {"message": "EMAIL_NOT_FOUND"}}``
and are classified into the gateway's exception taxonomy here.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any
from urllib.parse import urlencode

import httpx

from storefront.application.dtos.auth import AuthUser
from storefront.domain.exceptions import (
    BackendException,
    NoCurrentUserException,
    UserNotFoundException,
    WrongPasswordException,
)
from storefront.infrastructure.firebase._http import request_json

_BASE = "https://identitytoolkit.googleapis.com/v1"
_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"

# Refresh a little before the backend-reported expiry
_EXPIRY_SKEW_SECONDS = 60.0

_NO_SESSION_CODES = frozenset({
    "CREDENTIAL_TOO_OLD_LOGIN_AGAIN",
    "TOKEN_EXPIRED",
    "INVALID_ID_TOKEN",
    "USER_NOT_FOUND",
    "USER_DISABLED",
})


def _classify(exc: BackendException) -> Exception:
    """Map an Identity Toolkit error to the gateway taxonomy."""
    code = exc.message.split(":", 1)[0].strip()
    if code == "EMAIL_NOT_FOUND":
        return UserNotFoundException()
    if code == "INVALID_PASSWORD":
        return WrongPasswordException()
    if code in _NO_SESSION_CODES:
        return NoCurrentUserException(exc.message)
    if code and code.isupper():
        return BackendException(exc.message, code, exc.details.get("status_code"))
    return exc


@dataclass(frozen=True)
class AuthSession:
    """Signed-in state: public identity plus the tokens that authorize it."""

    user: AuthUser
    id_token: str
    refresh_token: str
    expires_at: float  # time.monotonic() deadline

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.expires_at - _EXPIRY_SKEW_SECONDS


def _expiry(expires_in: Any) -> float:
    return time.monotonic() + float(expires_in or 3600)


class IdentityToolkitClient:
    """Async client for accounts:* and token endpoints."""

    def __init__(self, api_key: str, http_client: httpx.AsyncClient) -> None:
        self._api_key = api_key
        self._http = http_client

    async def _call(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await request_json(
                self._http,
                "POST",
                f"{_BASE}/accounts:{endpoint}",
                body=body,
                params={"key": self._api_key},
            )
        except BackendException as e:
            raise _classify(e) from e

    async def _session(self, out: dict[str, Any], fallback_email: str | None = None) -> AuthSession:
        """Build a session from a sign-in answer, looking up profile fields."""
        id_token = out["idToken"]
        info = await self.lookup(id_token)
        user = AuthUser(
            uid=out.get("localId") or info.get("localId", ""),
            email=out.get("email") or info.get("email") or fallback_email or "",
            display_name=info.get("displayName") or out.get("displayName"),
            photo_url=info.get("photoUrl") or out.get("photoUrl"),
            creation_time=int(info["createdAt"]) if info.get("createdAt") else None,
            provider_data=tuple(
                {"providerId": p.get("providerId")}
                for p in info.get("providerUserInfo", [])
            ),
        )
        return AuthSession(
            user=user,
            id_token=id_token,
            refresh_token=out.get("refreshToken", ""),
            expires_at=_expiry(out.get("expiresIn")),
        )

    async def sign_up(self, email: str, password: str) -> AuthSession:
        out = await self._call(
            "signUp",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return await self._session(out, email)

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        out = await self._call(
            "signInWithPassword",
            {"email": email, "password": password, "returnSecureToken": True},
        )
        return await self._session(out, email)

    async def sign_in_with_idp(
        self, provider_id: str, access_token: str, request_uri: str
    ) -> AuthSession:
        """Exchange an OAuth access token from provider_id for a Firebase session."""
        out = await self._call(
            "signInWithIdp",
            {
                "postBody": urlencode(
                    {"access_token": access_token, "providerId": provider_id}
                ),
                "requestUri": request_uri,
                "returnIdpCredential": True,
                "returnSecureToken": True,
            },
        )
        return await self._session(out)

    async def send_password_reset(self, email: str) -> None:
        await self._call("sendOobCode", {"requestType": "PASSWORD_RESET", "email": email})

    async def update_account(
        self,
        id_token: str,
        *,
        email: str | None = None,
        password: str | None = None,
    ) -> dict[str, Any]:
        """Change email and/or password; the answer carries fresh tokens."""
        body: dict[str, Any] = {"idToken": id_token, "returnSecureToken": True}
        if email is not None:
            body["email"] = email
        if password is not None:
            body["password"] = password
        return await self._call("update", body)

    async def lookup(self, id_token: str) -> dict[str, Any]:
        out = await self._call("lookup", {"idToken": id_token})
        users = out.get("users") or []
        return users[0] if users else {}

    async def refresh(self, session: AuthSession) -> AuthSession:
        """Exchange the refresh token for a new ID token."""
        try:
            out = await request_json(
                self._http,
                "POST",
                _TOKEN_URL,
                body={"grant_type": "refresh_token", "refresh_token": session.refresh_token},
                params={"key": self._api_key},
            )
        except BackendException as e:
            raise _classify(e) from e
        return AuthSession(
            user=session.user,
            id_token=out["id_token"],
            refresh_token=out.get("refresh_token", session.refresh_token),
            expires_at=_expiry(out.get("expires_in")),
        )

    @staticmethod
    def with_tokens(session: AuthSession, out: dict[str, Any], **user_changes: Any) -> AuthSession:
        """Return session updated from an accounts:update answer."""
        user = replace(session.user, **user_changes) if user_changes else session.user
        return AuthSession(
            user=user,
            id_token=out.get("idToken", session.id_token),
            refresh_token=out.get("refreshToken", session.refresh_token),
            expires_at=_expiry(out.get("expiresIn")) if "idToken" in out else session.expires_at,
        )
