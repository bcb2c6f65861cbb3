"""DTOs for catalog listing and search results."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProductPage:
    """One page of the product listing.

    last_key is the id of the last product on the page (feed it back to get
    the next page). It is None once the listing is exhausted, i.e. when the
    page came back shorter than the page size. total is only set on the
    first page.
    """

    products: list[dict[str, Any]]
    last_key: str | None
    total: int | None = None


@dataclass(frozen=True)
class SearchResult:
    """Merged, de-duplicated result of a product search."""

    products: list[dict[str, Any]]
    last_key: str | None = None
