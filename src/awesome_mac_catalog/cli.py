"""CLI for the app catalog (search, browse, fetch, MCP server)."""

import asyncio
import json
import os
from collections.abc import Coroutine
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from loguru import logger

from awesome_mac_catalog.config import (
    DEFAULT_LOCALE,
    OUTLINE_URL_ENV,
    SEARCH_DEFAULT_LIMIT,
    resolve_data_directory,
)
from awesome_mac_catalog.core.cache import CatalogCache
from awesome_mac_catalog.core.catalog.lookup import all_app_slugs, all_category_ids
from awesome_mac_catalog.core.query import QueryService
from awesome_mac_catalog.core.source import OutlineFileSource
from awesome_mac_catalog.errors import CatalogError, SourceUnavailableError
from awesome_mac_catalog.logging_config import configure_logging
from awesome_mac_catalog.mcp.server import (
    catalog_filter_apps,
    catalog_get_app,
    catalog_get_category,
    catalog_list_categories,
    catalog_search,
)

app = typer.Typer(help="Awesome Mac catalog: search and browse macOS apps.")

T = TypeVar("T")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory with outline documents"),
]
LocaleOption = Annotated[str, typer.Option("--locale", "-l", help="Catalog locale (en, zh)")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _service(data_dir: Path | None, locale: str) -> QueryService:
    source = OutlineFileSource(data_dir or resolve_data_directory())
    return QueryService(CatalogCache(source, locale=locale))


def _run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


def _check(result: dict[str, Any]) -> dict[str, Any]:
    """Exit with an error message when a core function reported one."""
    if "error" in result:
        logger.error("{}", result.get("message") or result["error"])
        raise typer.Exit(1)
    return result


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    page: int = typer.Option(1, "--page", "-p", help="Result page (1-indexed)"),
    limit: int = typer.Option(SEARCH_DEFAULT_LIMIT, "--limit", "-n", help="Results per page"),
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search apps by name, description and category."""
    result = _check(
        _run(catalog_search(_service(data_dir, locale), query=query, page=page, limit=limit))
    )
    if output_json:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    pagination = result["pagination"]
    more = "+" if pagination["capped"] else ""
    typer.echo(
        f"Found {pagination['total']}{more} results "
        f"(page {pagination['page']}, showing {len(result['results'])}):\n"
    )
    for r in result["results"]:
        badges = [
            name
            for name, flag in (
                ("free", r["is_free"]),
                ("oss", r["is_open_source"]),
                ("app-store", r["is_app_store"]),
            )
            if flag
        ]
        typer.echo(f"  {r['name']}  [{r['category_name']}] {' '.join(badges)}".rstrip())
        if r["description"]:
            typer.echo(f"    {r['description'][:100]}")
        typer.echo(f"    id={r['id']}")
        typer.echo()
    if result.get("suggestions"):
        typer.echo("Did you mean: " + ", ".join(result["suggestions"]))


@app.command()
def categories(
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List categories and subcategories with app counts."""
    result = _check(_run(catalog_list_categories(_service(data_dir, locale))))
    if output_json:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    typer.echo(f"{result['count']} categories:\n")
    for main_cat in result["categories"]:
        typer.echo(f"  {main_cat['name']} ({main_cat['app_count']})  [id={main_cat['id']}]")
        for sub in main_cat.get("subcategories", []):
            typer.echo(f"    {sub['name']} ({sub['app_count']})  [id={sub['id']}]")


@app.command()
def apps(
    free: bool = typer.Option(False, "--free", help="Only free apps"),
    open_source: bool = typer.Option(False, "--open-source", help="Only open source apps"),
    app_store: bool = typer.Option(False, "--app-store", help="Only App Store apps"),
    category: Annotated[
        str | None,
        typer.Option("--category", "-c", help="Category id (subcategories included)"),
    ] = None,
    limit: int = typer.Option(50, "--limit", "-n", help="Max results"),
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List apps matching all given filters."""
    result = _check(
        _run(
            catalog_filter_apps(
                _service(data_dir, locale),
                free=free,
                open_source=open_source,
                app_store=app_store,
                category=category,
                limit=limit,
            )
        )
    )
    if output_json:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    typer.echo(f"{result['total']} apps (showing {result['count']}):\n")
    for r in result["results"]:
        typer.echo(f"  {r['name']}  [{r['category_name']}]  {r['url']}")


@app.command()
def category(
    category_ref: str = typer.Argument(..., metavar="ID_OR_SLUG", help="Category id or slug"),
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show one category with its apps (subcategories included)."""
    result = _check(
        _run(catalog_get_category(_service(data_dir, locale), category=category_ref))
    )
    if output_json:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
        return

    cat = result["category"]
    typer.echo(f"{cat['name']}  [id={cat['id']}]")
    if cat["description"]:
        typer.echo(f"  {cat['description']}")
    typer.echo(f"\n{result['count']} apps:\n")
    for r in result["apps"]:
        typer.echo(f"  {r['name']}  [{r['category_name']}]  {r['url']}")


@app.command()
def show(
    app_ref: str = typer.Argument(..., metavar="APP", help="App id or slug"),
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
) -> None:
    """Show every field of one app as JSON."""
    result = _check(_run(catalog_get_app(_service(data_dir, locale), app=app_ref)))
    typer.echo(json.dumps(result["app"], indent=2, ensure_ascii=False))


@app.command()
def fetch(
    url: Annotated[
        str | None,
        typer.Option(
            "--url",
            "-u",
            help=f"URL template with {{locale}}/{{filename}} (default: ${OUTLINE_URL_ENV})",
        ),
    ] = None,
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
) -> None:
    """Download the outline document for a locale."""
    from awesome_mac_catalog.fetcher import OutlineFetcher

    url_template = url or os.environ.get(OUTLINE_URL_ENV)
    if not url_template:
        logger.error("No URL given. Pass --url or set {}.", OUTLINE_URL_ENV)
        raise typer.Exit(1)

    dst = data_dir or resolve_data_directory()
    try:
        changed = OutlineFetcher(url_template).fetch(locale, dst)
    except CatalogError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    typer.echo("Updated" if changed else "Already up to date")


@app.command()
def check(
    locale: LocaleOption = DEFAULT_LOCALE,
    data_dir: DataDirOption = None,
) -> None:
    """Load the catalog once and report what it contains."""
    service = _service(data_dir, locale)
    try:
        catalog = _run(service.cache.get())
    except SourceUnavailableError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    category_ids = all_category_ids(catalog)
    slugs = all_app_slugs(catalog)
    typer.echo(
        f"{len(catalog.categories)} categories, "
        f"{len(category_ids) - len(catalog.categories)} subcategories, "
        f"{len(catalog.apps)} apps, {len(slugs)} unique slugs"
    )
    if len(slugs) < len(catalog.apps):
        logger.warning(
            "{} apps share a slug with another app; slug lookups return the last one",
            len(catalog.apps) - len(slugs),
        )


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from awesome_mac_catalog.mcp.server import run_mcp_server

    run_mcp_server()
