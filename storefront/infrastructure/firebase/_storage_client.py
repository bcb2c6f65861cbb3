"""Cloud Storage for Firebase over its REST endpoint (firebasestorage.googleapis.com/v0).

Objects are addressed as ``<folder>/<id>``. Download URLs are the
token-bearing URLs the web SDK's getDownloadURL() returns.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from storefront.domain.exceptions import BackendException
from storefront.infrastructure.firebase._http import request_json
from storefront.infrastructure.firebase._rest_client import TokenProvider

_BASE = "https://firebasestorage.googleapis.com/v0/b"


def object_path(folder: str, object_id: str) -> str:
    return f"{folder.strip('/')}/{object_id}"


class StorageRESTClient:
    """Upload, locate, and delete objects in the project's default bucket."""

    def __init__(
        self,
        bucket: str,
        http_client: httpx.AsyncClient,
        *,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._bucket = bucket
        self._http = http_client
        self._token_provider = token_provider

    def set_token_provider(self, token_provider: TokenProvider | None) -> None:
        self._token_provider = token_provider

    async def _token(self) -> str | None:
        return await self._token_provider() if self._token_provider else None

    def _object_url(self, path: str) -> str:
        return f"{_BASE}/{self._bucket}/o/{quote(path, safe='')}"

    async def put(self, path: str, data: bytes, content_type: str) -> dict:
        """Upload bytes to path; returns the object metadata."""
        return await request_json(
            self._http,
            "POST",
            f"{_BASE}/{self._bucket}/o",
            params={"uploadType": "media", "name": path},
            content=data,
            headers={"Content-Type": content_type},
            access_token=await self._token(),
        )

    def download_url(self, path: str, metadata: dict) -> str:
        """Build the public download URL from upload metadata."""
        tokens = metadata.get("downloadTokens") or ""
        token = tokens.split(",")[0]
        if not token:
            raise BackendException(
                f"No download token for object {path!r}", "STORAGE_NO_DOWNLOAD_TOKEN"
            )
        return f"{self._object_url(path)}?alt=media&token={token}"

    async def delete(self, path: str) -> None:
        await request_json(
            self._http,
            "DELETE",
            self._object_url(path),
            access_token=await self._token(),
        )
