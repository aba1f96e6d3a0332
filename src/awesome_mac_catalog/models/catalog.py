"""Domain models for the app catalog and its search results."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class App:
    """A single app listed in the catalog."""

    id: str
    slug: str
    name: str
    description: str
    url: str
    is_free: bool
    is_open_source: bool
    is_app_store: bool
    has_awesome_list: bool
    category_id: str
    category_name: str
    oss_url: str | None = None
    app_store_url: str | None = None
    awesome_list_url: str | None = None
    parent_category_id: str | None = None
    parent_category_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "url": self.url,
            "is_free": self.is_free,
            "is_open_source": self.is_open_source,
            "is_app_store": self.is_app_store,
            "has_awesome_list": self.has_awesome_list,
            "oss_url": self.oss_url,
            "app_store_url": self.app_store_url,
            "awesome_list_url": self.awesome_list_url,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "parent_category_id": self.parent_category_id,
            "parent_category_name": self.parent_category_name,
        }


@dataclass
class Category:
    """A main (depth 2) or sub (depth 3) category.

    Mutable only while the catalog builder is running; treat as read-only
    once it is part of a ParsedCatalog.
    """

    id: str
    slug: str
    name: str
    depth: int
    description: str | None = None
    parent_id: str | None = None
    parent_name: str | None = None
    apps: list[App] = field(default_factory=list)
    subcategories: list["Category"] = field(default_factory=list)

    def app_count(self) -> int:
        """Apps in this category and all of its subcategories."""
        return len(self.apps) + sum(sub.app_count() for sub in self.subcategories)


@dataclass(frozen=True)
class ParsedCatalog:
    """The fully built catalog for one source document revision."""

    categories: tuple[Category, ...]
    apps: tuple[App, ...]
    category_map: dict[str, Category]
    app_map: dict[str, App]


@dataclass(frozen=True)
class AppSummary:
    """Display projection of an App, used for search responses."""

    id: str
    slug: str
    name: str
    description: str
    category_id: str
    category_name: str
    is_free: bool
    is_open_source: bool
    is_app_store: bool

    @classmethod
    def from_app(cls, app: App) -> "AppSummary":
        return cls(
            id=app.id,
            slug=app.slug,
            name=app.name,
            description=app.description,
            category_id=app.category_id,
            category_name=app.category_name,
            is_free=app.is_free,
            is_open_source=app.is_open_source,
            is_app_store=app.is_app_store,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "category_id": self.category_id,
            "category_name": self.category_name,
            "is_free": self.is_free,
            "is_open_source": self.is_open_source,
            "is_app_store": self.is_app_store,
        }


@dataclass(frozen=True)
class FilterCriteria:
    """Filters, AND-combined. A False flag or a None category does not filter."""

    is_free: bool = False
    is_open_source: bool = False
    is_app_store: bool = False
    category_id: str | None = None
