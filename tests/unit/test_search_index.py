"""Tests for ranked search, filtering and highlighting."""

import pytest

from awesome_mac_catalog.core.search.highlight import highlight_matches
from awesome_mac_catalog.core.search.index import (
    SearchIndex,
    filter_apps,
    search_and_filter_apps,
    search_apps,
)
from awesome_mac_catalog.models.catalog import App, AppSummary, FilterCriteria, ParsedCatalog
from awesome_mac_catalog.models.search import HighlightPart


def make_app(name: str, description: str = "", category: str = "Misc", app_id: str = "") -> App:
    return App(
        id=app_id or name.lower().replace(" ", "-"),
        slug=name.lower().replace(" ", "-"),
        name=name,
        description=description,
        url=f"https://example.com/{name}",
        is_free=False,
        is_open_source=False,
        is_app_store=False,
        has_awesome_list=False,
        category_id=category.lower(),
        category_name=category,
    )


@pytest.fixture
def index(catalog: ParsedCatalog) -> SearchIndex[App]:
    return SearchIndex(catalog.apps)


def test_exact_name_ranks_first(index: SearchIndex[App]) -> None:
    results = index.search("VS Code")
    assert results[0].app.name == "VS Code"
    assert results[0].score >= 100
    assert "name:exact" in results[0].matches


def test_exact_name_beats_visual_studio() -> None:
    apps = [
        make_app("Visual Studio", "IDE, also for VS Code users"),
        make_app("VS Code", "Code editor"),
    ]
    results = search_apps(apps, "VS Code")
    assert [r.app.name for r in results][0] == "VS Code"
    assert results[0].matches[0] == "name:exact"


def test_prefix_match_scores(index: SearchIndex[App]) -> None:
    (result,) = index.search("VS")
    assert result.app.name == "VS Code"
    # name prefix 75, plus 10 for the token prefix and 5 for the exact token
    assert result.score == 90
    assert result.matches == ("name:prefix", "tokens:name")


def test_score_tiers_add_up(index: SearchIndex[App]) -> None:
    scores = {r.app.name: (r.score, r.matches) for r in index.search("text")}
    assert scores["Sublime Text"] == (
        100,
        ("name:contains", "description:contains", "category:contains", "tokens:name"),
    )
    assert scores["VS Code"] == (50, ("description:contains", "category:contains", "tokens:name"))


def test_results_sorted_by_score(index: SearchIndex[App]) -> None:
    results = index.search("o")
    assert len(results) == 5
    scores = [r.score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_exact_name_outranks_substring() -> None:
    apps = [make_app("Notes Plus"), make_app("Notes"), make_app("My Notes")]
    names = [r.app.name for r in search_apps(apps, "notes")]
    assert names[0] == "Notes"
    assert set(names) == {"Notes", "Notes Plus", "My Notes"}


def test_ties_broken_by_name() -> None:
    apps = [
        make_app("Zed Editor", category="Editors"),
        make_app("beta Editor", category="Editors"),
        make_app("Atom Editor", category="Editors"),
    ]
    results = search_apps(apps, "editor")
    assert len({r.score for r in results}) == 1
    assert [r.app.name for r in results] == ["Atom Editor", "beta Editor", "Zed Editor"]


def test_blank_query_matches_nothing(index: SearchIndex[App]) -> None:
    assert index.search("") == []
    assert index.search("   ") == []


def test_no_match_returns_empty(index: SearchIndex[App]) -> None:
    assert index.search("zzzqqq") == []


def test_limit(index: SearchIndex[App]) -> None:
    assert len(index.search("o", 2)) == 2


def test_add_remove_clear(index: SearchIndex[App]) -> None:
    assert len(index) == 5
    index.add(make_app("New App", "A new application", app_id="new"))
    assert "new" in index
    assert [r.app.id for r in index.search("New App")][0] == "new"

    index.remove("development-tools-text-editors-vs-code")
    assert all(r.app.name != "VS Code" for r in index.search("VS Code"))
    index.remove("not-there")

    index.clear()
    assert len(index) == 0
    assert index.search("Xcode") == []


def test_index_accepts_summaries(catalog: ParsedCatalog) -> None:
    summaries = [AppSummary.from_app(app) for app in catalog.apps]
    results = search_apps(summaries, "terminal")
    assert {r.app.name for r in results} == {"iTerm2", "Fig"}
    assert all(isinstance(r.app, AppSummary) for r in results)


def test_filter_flags(catalog: ParsedCatalog) -> None:
    def names(criteria: FilterCriteria) -> list[str]:
        return [a.name for a in filter_apps(catalog.apps, criteria)]

    assert len(names(FilterCriteria())) == 5
    assert names(FilterCriteria(is_free=True)) == ["VS Code", "Xcode", "iTerm2"]
    assert names(FilterCriteria(is_open_source=True)) == ["VS Code", "iTerm2"]
    assert names(FilterCriteria(is_app_store=True)) == ["Xcode"]
    assert names(FilterCriteria(is_free=True, is_app_store=True)) == ["Xcode"]


def test_filter_category_includes_subcategories(catalog: ParsedCatalog) -> None:
    def names(category_id: str, **flags: bool) -> list[str]:
        criteria = FilterCriteria(category_id=category_id, **flags)
        return [a.name for a in filter_apps(catalog.apps, criteria)]

    assert names("development-tools") == ["VS Code", "Sublime Text", "Xcode"]
    assert names("development-tools-ides") == ["Xcode"]
    assert names("development-tools", is_free=True) == ["VS Code", "Xcode"]
    assert names("missing") == []


def test_search_and_filter(catalog: ParsedCatalog) -> None:
    results = search_and_filter_apps(catalog.apps, "editor", FilterCriteria(is_free=True))
    assert [r.app.name for r in results] == ["VS Code"]

    unscored = search_and_filter_apps(catalog.apps, "  ", FilterCriteria(is_free=True), limit=2)
    assert [(r.app.name, r.score) for r in unscored] == [("VS Code", 0), ("Xcode", 0)]


def test_highlight_marks_every_occurrence() -> None:
    assert highlight_matches("Banana", "an") == [
        HighlightPart("B", False),
        HighlightPart("an", True),
        HighlightPart("an", True),
        HighlightPart("a", False),
    ]


def test_highlight_keeps_text_case() -> None:
    assert highlight_matches("Visual Studio Code", "code") == [
        HighlightPart("Visual Studio ", False),
        HighlightPart("Code", True),
    ]


def test_highlight_without_match_or_query() -> None:
    assert highlight_matches("Xcode", "vim") == [HighlightPart("Xcode", False)]
    assert highlight_matches("Xcode", "  ") == [HighlightPart("Xcode", False)]
    assert highlight_matches("Xcode", "xcode") == [HighlightPart("Xcode", True)]


def test_highlight_offsets_survive_case_folding() -> None:
    """A capital dotted I lowercases to two characters; later spans stay put."""
    assert highlight_matches("İstanbul app", "app") == [
        HighlightPart("İstanbul ", False),
        HighlightPart("app", True),
    ]
    assert highlight_matches("a.b a+b", "a+b") == [
        HighlightPart("a.b ", False),
        HighlightPart("a+b", True),
    ]
