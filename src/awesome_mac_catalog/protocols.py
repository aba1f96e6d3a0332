"""Protocols for dependency injection in the catalog pipeline."""

from collections.abc import Hashable, Sequence
from typing import Protocol, runtime_checkable

from awesome_mac_catalog.models.outline import OutlineNode


@runtime_checkable
class OutlineSourceProtocol(Protocol):
    """Protocol for readers of the outline document.

    Both methods raise SourceUnavailableError when the document cannot be
    located or read.
    """

    async def revision(self, locale: str) -> Hashable:
        """Return an opaque marker that changes whenever the document changes."""
        ...

    async def read(self, locale: str) -> Sequence[OutlineNode]:
        """Read and return the outline nodes of the document."""
        ...


class SearchableApp(Protocol):
    """Anything the search index can rank: App or AppSummary."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def category_name(self) -> str: ...
