"""In-memory ranked search over catalog apps.

Scoring tiers, summed per app:

- name: exact match 100, prefix 75, substring 50 (only the best applies)
- description substring: 20
- category name substring: 15
- tokens: 10 per query token that prefixes an indexed token, plus 5 per
  query token that equals an indexed token

Apps scoring 0 are not returned. Ties are broken by name.
"""

from collections.abc import Iterable, Sequence
from typing import Generic, TypeVar

from awesome_mac_catalog.core.search.tokenizer import tokenize
from awesome_mac_catalog.models.catalog import App, FilterCriteria
from awesome_mac_catalog.models.search import SearchIndexEntry, SearchResult
from awesome_mac_catalog.protocols import SearchableApp

A = TypeVar("A", bound=SearchableApp)

DEFAULT_LIMIT = 20

NAME_EXACT_SCORE = 100
NAME_PREFIX_SCORE = 75
NAME_CONTAINS_SCORE = 50
DESCRIPTION_SCORE = 20
CATEGORY_SCORE = 15
TOKEN_PREFIX_SCORE = 10
TOKEN_EXACT_SCORE = 5


def _index_entry(app: A) -> SearchIndexEntry[A]:
    tokens = frozenset(
        [*tokenize(app.name), *tokenize(app.description), *tokenize(app.category_name)]
    )
    return SearchIndexEntry(
        app=app,
        name_lower=app.name.lower(),
        description_lower=app.description.lower(),
        category_lower=app.category_name.lower(),
        tokens=tokens,
    )


def score_entry(
    entry: SearchIndexEntry[A], query: str, query_tokens: Sequence[str]
) -> tuple[int, list[str]]:
    """Score one entry against a lowercased, trimmed query and its tokens."""
    score = 0
    matches: list[str] = []

    if entry.name_lower == query:
        score += NAME_EXACT_SCORE
        matches.append("name:exact")
    elif entry.name_lower.startswith(query):
        score += NAME_PREFIX_SCORE
        matches.append("name:prefix")
    elif query in entry.name_lower:
        score += NAME_CONTAINS_SCORE
        matches.append("name:contains")

    if query in entry.description_lower:
        score += DESCRIPTION_SCORE
        matches.append("description:contains")

    if query in entry.category_lower:
        score += CATEGORY_SCORE
        matches.append("category:contains")

    token_matches = sum(
        1 for qt in query_tokens if any(token.startswith(qt) for token in entry.tokens)
    )
    if token_matches:
        score += token_matches * TOKEN_PREFIX_SCORE
        matches.append("tokens:name")

    score += TOKEN_EXACT_SCORE * sum(1 for qt in query_tokens if qt in entry.tokens)
    return score, matches


def _sort_key(result: SearchResult[A]) -> tuple[int, str, str]:
    name = result.app.name
    return (-result.score, name.casefold(), name)


class SearchIndex(Generic[A]):
    """Ranked search over apps, kept in a map by app id.

    add/remove/clear update the map in place, so a long-lived index can
    follow small catalog changes without a rebuild.
    """

    def __init__(self, apps: Iterable[A] = ()) -> None:
        self._entries: dict[str, SearchIndexEntry[A]] = {}
        for app in apps:
            self.add(app)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, app_id: object) -> bool:
        return app_id in self._entries

    def add(self, app: A) -> None:
        """Index app, replacing any entry with the same id."""
        self._entries[app.id] = _index_entry(app)

    def remove(self, app_id: str) -> None:
        self._entries.pop(app_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[SearchResult[A]]:
        """Return up to limit results, best first. Blank queries match nothing."""
        q = query.strip().lower()
        if not q:
            return []
        query_tokens = tokenize(q)

        results: list[SearchResult[A]] = []
        for entry in self._entries.values():
            score, matches = score_entry(entry, q, query_tokens)
            if score > 0:
                results.append(SearchResult(app=entry.app, score=score, matches=tuple(matches)))

        results.sort(key=_sort_key)
        return results[:limit]


def search_apps(apps: Iterable[A], query: str, limit: int = DEFAULT_LIMIT) -> list[SearchResult[A]]:
    """One-shot search without keeping the index around."""
    return SearchIndex(apps).search(query, limit)


def filter_apps(apps: Iterable[App], criteria: FilterCriteria) -> list[App]:
    """Keep apps matching every given criterion.

    category_id matches the app's own category or its parent, so apps in a
    subcategory show up under the main category too.
    """
    return [
        app
        for app in apps
        if (not criteria.is_free or app.is_free)
        and (not criteria.is_open_source or app.is_open_source)
        and (not criteria.is_app_store or app.is_app_store)
        and (
            not criteria.category_id
            or criteria.category_id in (app.category_id, app.parent_category_id)
        )
    ]


def search_and_filter_apps(
    apps: Iterable[App],
    query: str,
    criteria: FilterCriteria,
    limit: int = DEFAULT_LIMIT,
) -> list[SearchResult[App]]:
    """Filter first, then search within what is left.

    With a blank query the first limit filtered apps come back unscored.
    """
    filtered = filter_apps(apps, criteria)
    if not query.strip():
        return [SearchResult(app=app, score=0) for app in filtered[:limit]]
    return search_apps(filtered, query, limit)
