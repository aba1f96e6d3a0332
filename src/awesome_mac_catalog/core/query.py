"""Query service: ranked, paginated search over the cached catalog."""

import math
import re
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from loguru import logger

from awesome_mac_catalog.config import (
    QUERY_MAX_LENGTH,
    SEARCH_CANDIDATE_CAP,
    SEARCH_DEFAULT_LIMIT,
    SEARCH_MAX_LIMIT,
    SEARCH_MAX_PAGE,
    SUGGESTION_LIMIT,
    SUGGESTION_MIN_QUERY_LENGTH,
)
from awesome_mac_catalog.core.cache import CatalogCache
from awesome_mac_catalog.core.catalog.lookup import apps_in_category, find_app, find_category
from awesome_mac_catalog.core.search.index import SearchIndex, filter_apps
from awesome_mac_catalog.models.catalog import (
    App,
    AppSummary,
    Category,
    FilterCriteria,
    ParsedCatalog,
)
from awesome_mac_catalog.models.search import Pagination, SearchResponse

# Control characters except tab, newline and carriage return.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")


def sanitize_search_query(query: str) -> str:
    """Strip control characters, cap the length and normalize whitespace."""
    cleaned = _CONTROL_RE.sub("", query).strip()[:QUERY_MAX_LENGTH]
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def _to_int(value: int | float | str | None, default: int) -> int:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return math.floor(number)


def clamp_page(page: int | float | str | None) -> int:
    return max(1, min(_to_int(page, 1), SEARCH_MAX_PAGE))


def clamp_limit(limit: int | float | str | None) -> int:
    return max(1, min(_to_int(limit, SEARCH_DEFAULT_LIMIT), SEARCH_MAX_LIMIT))


def generate_suggestions(
    apps: Sequence[AppSummary], query: str, limit: int = SUGGESTION_LIMIT
) -> list[str]:
    """Suggest names for a query that matched nothing.

    In order, until limit is reached: app names starting with the query,
    app names containing it, then category names containing it.
    """
    if len(query) < SUGGESTION_MIN_QUERY_LENGTH:
        return []

    q = query.lower()
    suggestions: dict[str, None] = {}

    def fill(names: Sequence[str]) -> None:
        for name in names:
            if len(suggestions) >= limit:
                return
            suggestions.setdefault(name)

    fill([app.name for app in apps if app.name.lower().startswith(q)])
    fill([app.name for app in apps if q in app.name.lower()])
    fill(list(dict.fromkeys(app.category_name for app in apps if q in app.category_name.lower())))
    return list(suggestions)


class QueryService:
    """Search and browse one locale's catalog.

    The search index is built once per catalog object and reused until the
    cache hands out a new catalog.
    """

    def __init__(
        self,
        cache: CatalogCache,
        *,
        candidate_cap: int = SEARCH_CANDIDATE_CAP,
        suggestion_limit: int = SUGGESTION_LIMIT,
    ) -> None:
        self.cache = cache
        self.candidate_cap = candidate_cap
        self.suggestion_limit = suggestion_limit
        self._indexed: (
            tuple[ParsedCatalog, SearchIndex[AppSummary], tuple[AppSummary, ...]] | None
        ) = None

    def _index_for(
        self, catalog: ParsedCatalog
    ) -> tuple[SearchIndex[AppSummary], tuple[AppSummary, ...]]:
        indexed = self._indexed
        if indexed is not None and indexed[0] is catalog:
            return indexed[1], indexed[2]

        summaries = tuple(AppSummary.from_app(app) for app in catalog.apps)
        index = SearchIndex(summaries)
        self._indexed = (catalog, index, summaries)
        return index, summaries

    async def search(
        self,
        q: str,
        page: int | str | None = 1,
        limit: int | str | None = SEARCH_DEFAULT_LIMIT,
    ) -> SearchResponse:
        """Return one page of ranked results for q.

        A blank query is a valid empty result and does not touch the source.
        ``pagination.total`` stops at the candidate cap; ``pagination.capped``
        tells when matches beyond the cap were dropped.

        Raises:
            SourceUnavailableError: The catalog cannot be loaded.
        """
        query = sanitize_search_query(q)
        page = clamp_page(page)
        limit = clamp_limit(limit)
        request_id = str(uuid.uuid4())
        timestamp = datetime.now(UTC).isoformat()

        if not query:
            return SearchResponse(
                q="",
                results=(),
                pagination=Pagination(page=page, limit=limit, total=0, has_more=False),
                request_id=request_id,
                timestamp=timestamp,
            )

        catalog = await self.cache.get()
        index, summaries = self._index_for(catalog)

        matches = index.search(query, self.candidate_cap + 1)
        capped = len(matches) > self.candidate_cap
        matches = matches[: self.candidate_cap]
        total = len(matches)

        start = (page - 1) * limit
        results = tuple(match.app for match in matches[start : start + limit])

        suggestions: tuple[str, ...] | None = None
        if total == 0:
            suggestions = tuple(generate_suggestions(summaries, query, self.suggestion_limit))

        logger.debug(
            "Search {!r} page {}: {} matches{} [request_id={}]",
            query,
            page,
            total,
            " (capped)" if capped else "",
            request_id,
        )
        return SearchResponse(
            q=query,
            results=results,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                has_more=page * limit < total,
                capped=capped,
            ),
            request_id=request_id,
            timestamp=timestamp,
            suggestions=suggestions,
        )

    async def list_categories(self) -> tuple[Category, ...]:
        return (await self.cache.get()).categories

    async def get_category(self, id_or_slug: str) -> tuple[Category, list[App]] | None:
        """A category and every app filed under it or its subcategories."""
        catalog = await self.cache.get()
        category = find_category(catalog, id_or_slug)
        if category is None:
            return None
        return category, apps_in_category(catalog, category.id)

    async def get_app(self, id_or_slug: str) -> App | None:
        return find_app(await self.cache.get(), id_or_slug)

    async def filter(self, criteria: FilterCriteria) -> list[App]:
        return filter_apps((await self.cache.get()).apps, criteria)
