"""Exceptions raised by the catalog pipeline."""

from awesome_mac_catalog.config import RETRY_AFTER_SECONDS


class CatalogError(RuntimeError):
    """Base class for catalog errors."""


class SourceUnavailableError(CatalogError):
    """The outline document (and so the catalog) cannot be loaded.

    Retryable: callers should report "try again later", not "no results".
    """

    code = "INDEX_UNAVAILABLE"

    def __init__(self, message: str, *, retry_after: int = RETRY_AFTER_SECONDS) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class MalformedSourceError(SourceUnavailableError):
    """The outline document exists but is not an outline node array."""


class FetchError(CatalogError):
    """Downloading the outline document failed.

    status_code is None when no request was sent.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
