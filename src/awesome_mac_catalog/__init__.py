"""Awesome Mac catalog construction and search."""

from awesome_mac_catalog.core.cache import CatalogCache
from awesome_mac_catalog.core.catalog.builder import build_catalog
from awesome_mac_catalog.core.query import QueryService
from awesome_mac_catalog.core.search.index import SearchIndex, filter_apps, search_apps
from awesome_mac_catalog.core.search.tokenizer import tokenize
from awesome_mac_catalog.core.source import OutlineFileSource
from awesome_mac_catalog.errors import SourceUnavailableError
from awesome_mac_catalog.protocols import OutlineSourceProtocol

__all__ = [
    "CatalogCache",
    "OutlineFileSource",
    "OutlineSourceProtocol",
    "QueryService",
    "SearchIndex",
    "SourceUnavailableError",
    "build_catalog",
    "filter_apps",
    "search_apps",
    "tokenize",
]
