"""Build the category tree and flat app list from an outline node sequence.

Structure is implied by document order: a depth-2 heading opens a main
category, a depth-3 heading opens a subcategory of the most recent main
category, and description paragraphs and app lists attach to whichever of
the two is currently open.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from loguru import logger

from awesome_mac_catalog.core.catalog.slugify import generate_id, slugify
from awesome_mac_catalog.models.catalog import App, Category, ParsedCatalog
from awesome_mac_catalog.models.outline import (
    AppList,
    AppListItem,
    DescriptionParagraph,
    Heading,
    Icon,
    IconType,
    InlineNode,
    OutlineNode,
)

_LEADING_DASH_RE = re.compile(r"^\s*-\s*")


@dataclass(frozen=True)
class _Cursor:
    """The currently open main category and subcategory."""

    main: Category | None = None
    sub: Category | None = None

    @property
    def target(self) -> Category | None:
        return self.sub if self.sub is not None else self.main


@dataclass
class _Output:
    categories: list[Category] = field(default_factory=list)
    apps: list[App] = field(default_factory=list)
    category_map: dict[str, Category] = field(default_factory=dict)
    app_map: dict[str, App] = field(default_factory=dict)


def extract_description(children: Iterable[InlineNode]) -> str:
    """Join the text children of a list item, dropping the leading " - "."""
    text = "".join(child.value for child in children if child.type == "text")
    return _LEADING_DASH_RE.sub("", text).strip()


def _icon_url(icons: tuple[Icon, ...], icon_type: IconType) -> str | None:
    return next((icon.url for icon in icons if icon.type == icon_type), None)


def _make_app(item: AppListItem, category: Category) -> App | None:
    mark = item.mark
    if mark is None:
        logger.debug("Skipping list item without mark in {!r}", category.name)
        return None
    if mark.deleted:
        logger.debug("Skipping deleted app {!r}", mark.title)
        return None

    title = mark.title.strip()
    url = mark.url.strip()
    if not title or not url:
        logger.debug("Skipping malformed app (title={!r}, url={!r})", title, url)
        return None

    oss_url = _icon_url(mark.icons, "oss")
    free_url = _icon_url(mark.icons, "freeware")
    app_store_url = _icon_url(mark.icons, "app-store")
    awesome_list_url = _icon_url(mark.icons, "awesome-list")

    return App(
        id=generate_id(title, category.id),
        slug=slugify(title),
        name=title,
        description=extract_description(item.children),
        url=url,
        is_free=free_url is not None,
        is_open_source=oss_url is not None,
        is_app_store=app_store_url is not None,
        has_awesome_list=awesome_list_url is not None,
        oss_url=oss_url,
        app_store_url=app_store_url,
        awesome_list_url=awesome_list_url,
        category_id=category.id,
        category_name=category.name,
        parent_category_id=category.parent_id,
        parent_category_name=category.parent_name,
    )


def _on_heading(cursor: _Cursor, node: Heading, out: _Output) -> _Cursor:
    if node.depth == 2:
        main = Category(id=generate_id(node.text), slug=slugify(node.text), name=node.text, depth=2)
        out.categories.append(main)
        out.category_map[main.id] = main
        return _Cursor(main=main)

    if node.depth != 3:
        return cursor
    if cursor.main is None:
        logger.debug("Skipping subcategory {!r} with no main category", node.text)
        return cursor

    sub = Category(
        id=generate_id(node.text, cursor.main.id),
        slug=slugify(node.text),
        name=node.text,
        depth=3,
        parent_id=cursor.main.id,
        parent_name=cursor.main.name,
    )
    cursor.main.subcategories.append(sub)
    out.category_map[sub.id] = sub
    return _Cursor(main=cursor.main, sub=sub)


def _on_description(cursor: _Cursor, node: DescriptionParagraph) -> _Cursor:
    if node.emphasis_text and cursor.target is not None:
        cursor.target.description = node.emphasis_text
    return cursor


def _on_app_list(cursor: _Cursor, node: AppList, out: _Output) -> _Cursor:
    category = cursor.target
    if category is None:
        logger.debug("Skipping {} list items outside any category", len(node.items))
        return cursor

    for item in node.items:
        app = _make_app(item, category)
        if app is None:
            continue
        category.apps.append(app)
        out.apps.append(app)
        out.app_map[app.id] = app
        # Slugs are not unique across categories; the last app wins, but a slug
        # never shadows another app registered under that string as its id.
        holder = out.app_map.get(app.slug)
        if holder is None or holder.id != app.slug:
            out.app_map[app.slug] = app
    return cursor


def build_catalog(nodes: Iterable[OutlineNode]) -> ParsedCatalog:
    """Build a ParsedCatalog from outline nodes in document order.

    Malformed or deleted list items are dropped, never raised. Building the
    same nodes twice yields equal catalogs.

    Args:
        nodes: Headings, description paragraphs and app lists.

    Returns:
        The category tree, the flat app list and id/slug lookup maps.
    """
    out = _Output()
    cursor = _Cursor()
    for node in nodes:
        if isinstance(node, Heading):
            cursor = _on_heading(cursor, node, out)
        elif isinstance(node, DescriptionParagraph):
            cursor = _on_description(cursor, node)
        elif isinstance(node, AppList):
            cursor = _on_app_list(cursor, node, out)

    logger.debug(
        "Built catalog: {} categories, {} subcategories, {} apps",
        len(out.categories),
        len(out.category_map) - len(out.categories),
        len(out.apps),
    )
    return ParsedCatalog(
        categories=tuple(out.categories),
        apps=tuple(out.apps),
        category_map=out.category_map,
        app_map=out.app_map,
    )
