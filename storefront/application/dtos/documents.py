"""Document and query envelopes.

Both gateways answer reads with these instead of SDK-specific snapshot
objects. A document is either found (payload is a dict) or not found
(payload is None); there is no third state.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class DocumentEnvelope:
    """Single document read result (id + optional payload)."""

    id: str
    payload: dict[str, Any] | None = None

    @classmethod
    def found(cls, doc_id: str, data: dict[str, Any]) -> DocumentEnvelope:
        return cls(doc_id, copy.deepcopy(data))

    @classmethod
    def not_found(cls, doc_id: str) -> DocumentEnvelope:
        return cls(doc_id, None)

    @property
    def exists(self) -> bool:
        return self.payload is not None

    def data(self) -> dict[str, Any] | None:
        """Return a copy of the document data, or None when it does not exist."""
        if self.payload is None:
            return None
        return copy.deepcopy(self.payload)


@dataclass(frozen=True)
class QuerySnapshotEnvelope:
    """Ordered result of a collection query."""

    docs: tuple[DocumentEnvelope, ...] = field(default_factory=tuple)

    @property
    def empty(self) -> bool:
        return not self.docs

    @property
    def size(self) -> int:
        return len(self.docs)

    def __iter__(self) -> Iterator[DocumentEnvelope]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)

    def to_list(self) -> list[dict[str, Any]]:
        """Return every document's data with its id merged in (``{"id": ..., **data}``)."""
        return [{**(doc.data() or {}), "id": doc.id} for doc in self.docs]
