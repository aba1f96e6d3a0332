"""MCP server exposing catalog search and browsing tools."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from awesome_mac_catalog.config import (
    DEFAULT_LOCALE,
    LOCALE_FILENAMES,
    SEARCH_DEFAULT_LIMIT,
    resolve_data_directory,
)
from awesome_mac_catalog.core.cache import CatalogCache
from awesome_mac_catalog.core.query import QueryService
from awesome_mac_catalog.core.source import OutlineFileSource
from awesome_mac_catalog.errors import SourceUnavailableError
from awesome_mac_catalog.models.catalog import Category, FilterCriteria


def _unavailable(e: SourceUnavailableError) -> dict[str, Any]:
    return {
        "error": "Search index unavailable. Please try again later.",
        "message": str(e),
        "code": e.code,
        "retry_after": e.retry_after,
    }


def category_to_dict(category: Category, *, include_subcategories: bool = True) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": category.id,
        "slug": category.slug,
        "name": category.name,
        "description": category.description,
        "depth": category.depth,
        "app_count": category.app_count(),
    }
    if category.parent_id:
        data["parent_id"] = category.parent_id
        data["parent_name"] = category.parent_name
    if include_subcategories and category.subcategories:
        data["subcategories"] = [category_to_dict(sub) for sub in category.subcategories]
    return data


# --- Core functions (testable without MCP context) ---


async def catalog_search(
    service: QueryService,
    *,
    query: str = "",
    page: int = 1,
    limit: int = SEARCH_DEFAULT_LIMIT,
) -> dict[str, Any]:
    """Ranked search over app names, descriptions and categories.

    Args:
        query: Search text.
        page: 1-indexed page (1-100).
        limit: Results per page (1-50, default 10).
    """
    try:
        response = await service.search(query, page=page, limit=limit)
    except SourceUnavailableError as e:
        return _unavailable(e)
    return response.to_dict()


async def catalog_list_categories(
    service: QueryService, *, include_subcategories: bool = True
) -> dict[str, Any]:
    """List categories with app counts."""
    try:
        categories = await service.list_categories()
    except SourceUnavailableError as e:
        return _unavailable(e)
    return {
        "categories": [
            category_to_dict(c, include_subcategories=include_subcategories) for c in categories
        ],
        "count": len(categories),
    }


async def catalog_get_category(service: QueryService, *, category: str) -> dict[str, Any]:
    """Get a category by id or slug with all of its apps, subcategories included."""
    try:
        found = await service.get_category(category)
    except SourceUnavailableError as e:
        return _unavailable(e)
    if found is None:
        return {"error": f"Category '{category}' not found."}
    cat, apps = found
    return {
        "category": category_to_dict(cat),
        "apps": [app.to_dict() for app in apps],
        "count": len(apps),
    }


async def catalog_get_app(service: QueryService, *, app: str) -> dict[str, Any]:
    """Get one app by id or slug."""
    try:
        found = await service.get_app(app)
    except SourceUnavailableError as e:
        return _unavailable(e)
    if found is None:
        return {"error": f"App '{app}' not found."}
    return {"app": found.to_dict()}


async def catalog_filter_apps(
    service: QueryService,
    *,
    free: bool = False,
    open_source: bool = False,
    app_store: bool = False,
    category: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict[str, Any]:
    """List apps matching every given filter.

    Args:
        free: Only free apps.
        open_source: Only open source apps.
        app_store: Only apps on the App Store.
        category: Category id; includes apps of its subcategories.
        limit: Max results.
        offset: Pagination offset.
    """
    criteria = FilterCriteria(
        is_free=free, is_open_source=open_source, is_app_store=app_store, category_id=category
    )
    try:
        apps = await service.filter(criteria)
    except SourceUnavailableError as e:
        return _unavailable(e)

    limit = max(1, limit)
    offset = max(0, offset)
    page = apps[offset : offset + limit]
    output: dict[str, Any] = {
        "results": [app.to_dict() for app in page],
        "count": len(page),
        "total": len(apps),
        "has_more": offset + len(page) < len(apps),
    }
    if output["has_more"]:
        output["next_offset"] = offset + limit
    return output


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """One query service per locale, shared for the server lifetime."""

    services: dict[str, QueryService]

    def service(self, locale: str) -> QueryService:
        return self.services.get(locale) or self.services[DEFAULT_LOCALE]


def build_services(data_dir: Path) -> dict[str, QueryService]:
    source = OutlineFileSource(data_dir)
    return {
        locale: QueryService(CatalogCache(source, locale=locale)) for locale in LOCALE_FILENAMES
    }


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Create the per-locale caches on startup."""
    data_dir = resolve_data_directory()
    logger.info("Serving catalog from {}", data_dir)
    yield ServerContext(services=build_services(data_dir))


mcp_server = FastMCP(
    "awesome-mac-catalog",
    instructions="""\
A catalog of macOS apps grouped into categories and subcategories.

1. Use catalog_search_tool for free-text queries. When nothing matches, the
   response carries "suggestions" you can search for instead.
2. Use catalog_list_categories_tool to discover category ids, then
   catalog_filter_apps_tool to browse a category (subcategories included),
   or catalog_get_category_tool to get a category with all of its apps.
3. Use catalog_get_app_tool with an app id or slug for full details.

An "error" with code INDEX_UNAVAILABLE means the catalog could not be loaded;
retry later rather than treating it as "no results".
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def catalog_search_tool(
    ctx: Context,
    query: str,
    page: int = 1,
    limit: int = SEARCH_DEFAULT_LIMIT,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Any]:
    """Search apps by name, description and category.

    Results are ranked: exact name matches first, then name prefixes, name
    substrings and description/category matches. pagination.total stops at
    250 ranked matches; pagination.capped is true when more existed.

    Args:
        query: Search text.
        page: 1-indexed page.
        limit: Results per page (1-50, default 10).
        locale: "en" or "zh".
    """
    return await catalog_search(_ctx(ctx).service(locale), query=query, page=page, limit=limit)


@mcp_server.tool()
async def catalog_list_categories_tool(
    ctx: Context,
    include_subcategories: bool = True,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Any]:
    """List catalog categories with their app counts.

    Args:
        include_subcategories: Nest subcategories under their main category.
        locale: "en" or "zh".
    """
    return await catalog_list_categories(
        _ctx(ctx).service(locale), include_subcategories=include_subcategories
    )


@mcp_server.tool()
async def catalog_get_category_tool(
    ctx: Context,
    category: str,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Any]:
    """Get one category with all of its apps (subcategory apps included).

    Args:
        category: Category id or slug.
        locale: "en" or "zh".
    """
    return await catalog_get_category(_ctx(ctx).service(locale), category=category)


@mcp_server.tool()
async def catalog_get_app_tool(
    ctx: Context,
    app: str,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Any]:
    """Get full details for one app.

    Args:
        app: App id or slug.
        locale: "en" or "zh".
    """
    return await catalog_get_app(_ctx(ctx).service(locale), app=app)


@mcp_server.tool()
async def catalog_filter_apps_tool(
    ctx: Context,
    free: bool = False,
    open_source: bool = False,
    app_store: bool = False,
    category: str | None = None,
    limit: int = 50,
    offset: int = 0,
    locale: str = DEFAULT_LOCALE,
) -> dict[str, Any]:
    """List apps matching all given filters.

    Pagination: When has_more is true, use next_offset in a follow-up call.

    Args:
        free: Only free apps.
        open_source: Only open source apps.
        app_store: Only apps available on the App Store.
        category: Category id (apps of its subcategories are included).
        limit: Max results.
        offset: Pagination offset.
        locale: "en" or "zh".
    """
    return await catalog_filter_apps(
        _ctx(ctx).service(locale),
        free=free,
        open_source=open_source,
        app_store=app_store,
        category=category,
        limit=limit,
        offset=offset,
    )


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from awesome_mac_catalog.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
