"""Revision-keyed cache of the parsed catalog."""

from collections.abc import Callable, Hashable, Iterable

from loguru import logger

from awesome_mac_catalog.config import DEFAULT_LOCALE
from awesome_mac_catalog.core.catalog.builder import build_catalog
from awesome_mac_catalog.errors import SourceUnavailableError
from awesome_mac_catalog.models.catalog import ParsedCatalog
from awesome_mac_catalog.models.outline import OutlineNode
from awesome_mac_catalog.protocols import OutlineSourceProtocol

BuildFn = Callable[[Iterable[OutlineNode]], ParsedCatalog]


class CatalogCache:
    """Hold the catalog built from the latest revision of one outline document.

    Every get() checks the source revision. When it differs from the cached
    one, the whole document is re-read and rebuilt and the slot is replaced;
    the cached catalog is never mutated.

    There is no lock: concurrent callers that both see a stale revision each
    rebuild, and the last one to finish is kept. Both results are equal since
    they come from the same document.
    """

    def __init__(
        self,
        source: OutlineSourceProtocol,
        *,
        locale: str = DEFAULT_LOCALE,
        build: BuildFn = build_catalog,
    ) -> None:
        self.source = source
        self.locale = locale
        self._build = build
        self._slot: tuple[Hashable, ParsedCatalog] | None = None

    @property
    def revision(self) -> Hashable | None:
        """Revision of the cached catalog, or None when nothing is cached."""
        return self._slot[0] if self._slot else None

    def invalidate(self) -> None:
        self._slot = None

    async def get(self) -> ParsedCatalog:
        """Return the catalog for the current source revision.

        Raises:
            SourceUnavailableError: The document cannot be located, read or built.
        """
        revision = await self.source.revision(self.locale)
        slot = self._slot
        if slot is not None and slot[0] == revision:
            return slot[1]

        nodes = await self.source.read(self.locale)
        try:
            catalog = self._build(nodes)
        except Exception as e:
            logger.exception("Failed to build catalog for locale {!r}", self.locale)
            msg = f"Cannot build catalog for locale {self.locale!r}: {e}"
            raise SourceUnavailableError(msg) from e

        self._slot = (revision, catalog)
        logger.info(
            "Loaded catalog for locale {!r}: {} categories, {} apps",
            self.locale,
            len(catalog.categories),
            len(catalog.apps),
        )
        return catalog
