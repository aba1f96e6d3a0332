"""Search index entries, results and query responses."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from awesome_mac_catalog.models.catalog import AppSummary

T = TypeVar("T")


@dataclass(frozen=True)
class SearchIndexEntry(Generic[T]):
    """Precomputed lowercase fields and tokens for one indexed app."""

    app: T
    name_lower: str
    description_lower: str
    category_lower: str
    tokens: frozenset[str]


@dataclass(frozen=True)
class SearchResult(Generic[T]):
    """A ranked search hit."""

    app: T
    score: int
    matches: tuple[str, ...] = ()


@dataclass(frozen=True)
class HighlightPart:
    text: str
    highlighted: bool


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata.

    ``total`` counts ranked candidates, which stop at the candidate cap;
    ``capped`` is True when more matches existed than were counted.
    """

    page: int
    limit: int
    total: int
    has_more: bool
    capped: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "has_more": self.has_more,
            "capped": self.capped,
        }


@dataclass(frozen=True)
class SearchResponse:
    """One page of search results, with suggestions when nothing matched."""

    q: str
    results: tuple[AppSummary, ...]
    pagination: Pagination
    request_id: str
    timestamp: str
    suggestions: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "q": self.q,
            "results": [r.to_dict() for r in self.results],
            "pagination": self.pagination.to_dict(),
            "request_id": self.request_id,
            "timestamp": self.timestamp,
        }
        if self.suggestions is not None:
            data["suggestions"] = list(self.suggestions)
        return data
