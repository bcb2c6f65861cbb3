"""Shared HTTP helper for the Firebase REST clients.

Every non-success response becomes a BackendException carrying the
backend's own code and message (Google APIs answer with
``{"error": {"code": 400, "message": "...", "status": "..."}}``).
Transport failures (DNS, connect, read timeouts) become BackendException too.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from storefront.domain.exceptions import BackendException


def _error_from_response(resp: httpx.Response) -> BackendException:
    """Build a BackendException from a Google API error body."""
    code = f"HTTP_{resp.status_code}"
    message = resp.reason_phrase or "Backend request failed"
    try:
        body = resp.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        message = error.get("message") or message
        code = error.get("status") or code
    elif isinstance(error, str):
        # securetoken.googleapis.com answers {"error": "invalid_grant", ...}
        code = error.upper()
        message = body.get("error_description") or message
    return BackendException(message, code, resp.status_code)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    body: dict | None = None,
    params: dict[str, Any] | list[tuple[str, Any]] | None = None,
    content: bytes | None = None,
    headers: dict[str, str] | None = None,
    access_token: str | None = None,
    not_found_ok: bool = False,
) -> Any:
    """Perform an async HTTP request and decode the JSON answer.

    Args:
        not_found_ok: Return None on 404 instead of raising.

    Returns:
        Decoded JSON ({} for an empty body), or None for a tolerated 404.

    Raises:
        BackendException: Non-2xx status or transport failure.
    """
    all_headers = {"Content-Type": "application/json"}
    if headers:
        all_headers.update(headers)
    if access_token:
        all_headers["Authorization"] = f"Bearer {access_token}"
    try:
        resp = await client.request(
            method,
            url,
            headers=all_headers,
            json=body if content is None else None,
            content=content,
            params=params,
        )
    except httpx.HTTPError as e:
        raise BackendException(str(e) or type(e).__name__, "NETWORK_ERROR") from e
    if resp.status_code == 404 and not_found_ok:
        return None
    if not resp.is_success:
        raise _error_from_response(resp)
    raw = resp.content
    return json.loads(raw.decode()) if raw else {}
