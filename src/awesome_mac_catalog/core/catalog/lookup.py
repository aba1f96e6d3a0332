"""Category and app lookups over a built catalog."""

from awesome_mac_catalog.models.catalog import App, Category, ParsedCatalog


def find_category(catalog: ParsedCatalog, id_or_slug: str) -> Category | None:
    """Find a category or subcategory by id, falling back to slug.

    Slugs repeat across main categories, so a slug match returns the first
    category in document order.
    """
    category = catalog.category_map.get(id_or_slug)
    if category is not None:
        return category
    for main in catalog.categories:
        if main.slug == id_or_slug:
            return main
        for sub in main.subcategories:
            if sub.slug == id_or_slug:
                return sub
    return None


def find_app(catalog: ParsedCatalog, id_or_slug: str) -> App | None:
    """Find an app by id, falling back to slug.

    The builder never lets a slug entry replace an id entry in app_map, so an
    id always resolves to its own app.
    """
    return catalog.app_map.get(id_or_slug)


def apps_in_category(catalog: ParsedCatalog, category_id: str) -> list[App]:
    """Apps filed directly under category_id or under one of its subcategories."""
    return [
        app
        for app in catalog.apps
        if app.category_id == category_id or app.parent_category_id == category_id
    ]


def all_app_slugs(catalog: ParsedCatalog) -> list[str]:
    return list(dict.fromkeys(app.slug for app in catalog.apps))


def all_category_ids(catalog: ParsedCatalog) -> list[str]:
    """Ids of every main category, each followed by its subcategories."""
    ids: list[str] = []
    for main in catalog.categories:
        ids.append(main.id)
        ids.extend(sub.id for sub in main.subcategories)
    return ids
