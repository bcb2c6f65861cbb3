"""Thin Firestore REST API client (no firebase-admin).

Requests are authorized either with a service account token (google-auth)
or with the signed-in user's Firebase ID token, so security rules apply
exactly as they do for the web client. All HTTP calls use
httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx

from storefront.infrastructure.firebase._http import request_json
from storefront.infrastructure.firebase._rest_encoding import (
    DocumentRef,
    _encode_value,
    decode_aggregate_count,
    decode_document,
    encode_document,
)
from storefront.infrastructure.firebase.collections import FIELD_DOCUMENT_ID
from storefront.shared.utils.generators import generate_cuid

_FIRESTORE_SCOPE = "https://www.googleapis.com/auth/datastore"
_CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
_BASE = "https://firestore.googleapis.com/v1"

TokenProvider = Callable[[], Awaitable[str | None]]


def _get_credentials(key_dict: dict):
    """Return google.oauth2.service_account.Credentials for Firestore and Storage."""
    from google.oauth2 import service_account

    return service_account.Credentials.from_service_account_info(
        key_dict, scopes=[_FIRESTORE_SCOPE, _CLOUD_PLATFORM_SCOPE]
    )


def _get_access_token(credentials) -> str:
    from google.auth.transport.requests import Request

    if not credentials.valid:
        credentials.refresh(Request())
    return credentials.token


def service_account_token_provider(credentials) -> TokenProvider:
    """Token provider that refreshes service account tokens in a worker thread."""

    async def provide() -> str | None:
        return await asyncio.to_thread(_get_access_token, credentials)

    return provide


class DocumentReference:
    """Reference to a single document; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    async def set(self, data: dict[str, Any]) -> None:
        """Create or overwrite the document (PATCH with full replace)."""
        await self._client._request("PATCH", self._path, body=encode_document(data))

    async def update(self, updates: dict[str, Any]) -> None:
        """Overwrite only the given top-level fields; the document must exist."""
        params: list[tuple[str, Any]] = [
            ("updateMask.fieldPaths", field) for field in updates
        ]
        params.append(("currentDocument.exists", "true"))
        await self._client._request(
            "PATCH", self._path, body=encode_document(updates), params=params
        )

    async def get(self) -> DocumentSnapshot | None:
        """Fetch the document; returns None if not found."""
        out = await self._client._request("GET", self._path, not_found_ok=True)
        if not out:
            return None
        return DocumentSnapshot(self.id, decode_document(out))

    async def delete(self) -> None:
        """Delete the document. Idempotent if document is already missing (404)."""
        await self._client._request("DELETE", self._path, not_found_ok=True)


class DocumentSnapshot:
    """Snapshot of a document (id + data)."""

    def __init__(self, id_: str, data: dict):
        self.id = id_
        self._data = data

    def to_dict(self) -> dict:
        return self._data


_OP_MAP: dict[str, str] = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
    "<": "LESS_THAN",
    "<=": "LESS_THAN_OR_EQUAL",
    ">": "GREATER_THAN",
    ">=": "GREATER_THAN_OR_EQUAL",
    "in": "IN",
    "not-in": "NOT_IN",
    "array_contains": "ARRAY_CONTAINS",
    "array-contains": "ARRAY_CONTAINS",
    "array_contains_any": "ARRAY_CONTAINS_ANY",
    "array-contains-any": "ARRAY_CONTAINS_ANY",
}

_DIRECTIONS = {"asc": "ASCENDING", "desc": "DESCENDING"}


class Query:
    """Fluent query builder; runs via runQuery (filters/order/cursor/limit on server)."""

    def __init__(self, client: FirestoreRESTClient, parent: str, collection_id: str):
        self._client = client
        self._parent = parent
        self._collection_id = collection_id
        self._filters: list[dict[str, Any]] = []
        self._orders: list[dict[str, Any]] = []
        self._start_after: list[Any] | None = None
        self._offset: int = 0
        self._limit: int | None = None

    def where(self, field: str, op: str, value: Any) -> Query:
        self._filters.append({
            "fieldFilter": {
                "field": {"fieldPath": field},
                "op": _OP_MAP.get(op, op),
                "value": _encode_value(value),
            }
        })
        return self

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        self._orders.append({
            "field": {"fieldPath": field},
            "direction": _DIRECTIONS.get(direction.lower(), direction),
        })
        return self

    def start_after(self, *values: Any) -> Query:
        """Resume after the given order-by values (a document id when ordering by __name__)."""
        self._start_after = [
            self._document_ref(v) if self._orders_by_name(i) else v
            for i, v in enumerate(values)
        ]
        return self

    def offset(self, n: int) -> Query:
        self._offset = n
        return self

    def limit(self, n: int) -> Query:
        self._limit = n
        return self

    def _orders_by_name(self, index: int) -> bool:
        return (
            index < len(self._orders)
            and self._orders[index]["field"]["fieldPath"] == FIELD_DOCUMENT_ID
        )

    def _document_ref(self, doc_id: str) -> DocumentRef:
        return DocumentRef(f"{self._parent}/{self._collection_id}/{doc_id}")

    def _structured(self, *, paged: bool = True) -> dict[str, Any]:
        structured: dict[str, Any] = {
            "from": [{"collectionId": self._collection_id}],
        }
        if len(self._filters) == 1:
            structured["where"] = self._filters[0]
        elif self._filters:
            structured["where"] = {
                "compositeFilter": {"op": "AND", "filters": self._filters}
            }
        if self._orders:
            structured["orderBy"] = self._orders
        if paged:
            if self._start_after is not None:
                structured["startAt"] = {
                    "values": [_encode_value(v) for v in self._start_after],
                    "before": False,
                }
            if self._offset:
                structured["offset"] = self._offset
            if self._limit:
                structured["limit"] = self._limit
        return structured

    async def stream(self) -> AsyncIterator[DocumentSnapshot]:
        """Execute the query and yield document snapshots."""
        resp = await self._client._request(
            "POST",
            f"{self._parent}:runQuery",
            body={"structuredQuery": self._structured()},
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "document" not in item:
                continue
            doc = item["document"]
            name = doc.get("name", "")
            doc_id = name.split("/")[-1] if name else ""
            yield DocumentSnapshot(doc_id, decode_document(doc))

    async def get(self) -> list[DocumentSnapshot]:
        """Execute the query and return all snapshots in order."""
        return [snapshot async for snapshot in self.stream()]

    async def count(self) -> int:
        """Count matching documents server-side (ignores cursor, offset, and limit)."""
        alias = "total"
        body = {
            "structuredAggregationQuery": {
                "structuredQuery": self._structured(paged=False),
                "aggregations": [{"alias": alias, "count": {}}],
            }
        }
        resp = await self._client._request(
            "POST", f"{self._parent}:runAggregationQuery", body=body
        )
        items = resp if isinstance(resp, list) else ([resp] if resp else [])
        for item in items:
            if "result" in item:
                return decode_aggregate_count(item, alias)
        return 0


class CollectionReference:
    """Reference to a collection; matches firestore API style."""

    def __init__(self, client: FirestoreRESTClient, path: str):
        self._client = client
        self._path = path.rstrip("/")

    @property
    def id(self) -> str:
        return self._path.split("/")[-1]

    def document(self, document_id: str | None = None) -> DocumentReference:
        """Reference a document; without an id a new one is allocated client-side."""
        return DocumentReference(
            self._client, f"{self._path}/{document_id or generate_cuid()}"
        )

    def _query(self) -> Query:
        parent = self._path.rsplit("/", 1)[0]
        return Query(self._client, parent, self.id)

    def where(self, field: str, op: str, value: Any) -> Query:
        """Start a query with a filter. Chain .where(), .order_by(), .limit(), then .stream()."""
        return self._query().where(field, op, value)

    def order_by(self, field: str, direction: str = "ASCENDING") -> Query:
        return self._query().order_by(field, direction)

    def limit(self, n: int) -> Query:
        return self._query().limit(n)

    async def count(self) -> int:
        return await self._query().count()


class FirestoreRESTClient:
    """Lightweight Firestore client using REST API (no firebase-admin)."""

    def __init__(
        self,
        project_id: str,
        http_client: httpx.AsyncClient,
        *,
        api_key: str | None = None,
        token_provider: TokenProvider | None = None,
    ) -> None:
        self._project_id = project_id
        self._prefix = f"projects/{project_id}/databases/(default)/documents"
        self._http = http_client
        self._api_key = api_key
        self._token_provider = token_provider

    def set_token_provider(self, token_provider: TokenProvider | None) -> None:
        self._token_provider = token_provider

    async def get_token(self) -> str | None:
        """Return a bearer token, or None for unauthenticated (rules-checked) access."""
        if self._token_provider is None:
            return None
        return await self._token_provider()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        body: dict | None = None,
        params: list[tuple[str, Any]] | None = None,
        not_found_ok: bool = False,
    ) -> Any:
        all_params = list(params or [])
        if self._api_key:
            all_params.append(("key", self._api_key))
        return await request_json(
            self._http,
            method,
            f"{_BASE}/{path}",
            body=body,
            params=all_params or None,
            access_token=await self.get_token(),
            not_found_ok=not_found_ok,
        )

    def collection(self, collection_id: str) -> CollectionReference:
        return CollectionReference(self, f"{self._prefix}/{collection_id}")
