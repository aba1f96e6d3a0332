"""Read outline documents from a data directory, one file per locale."""

import asyncio
import json
from pathlib import Path

from loguru import logger

from awesome_mac_catalog.config import DEFAULT_LOCALE, LOCALE_FILENAMES
from awesome_mac_catalog.core.outline.reader import parse_outline
from awesome_mac_catalog.errors import SourceUnavailableError
from awesome_mac_catalog.models.outline import OutlineNode


def outline_filename(locale: str) -> str:
    """File name of the outline document for locale (default locale if unknown)."""
    return LOCALE_FILENAMES.get(locale, LOCALE_FILENAMES[DEFAULT_LOCALE])


class OutlineFileSource:
    """Outline documents stored as JSON files, revisioned by mtime.

    A locale whose file is missing falls back to the default locale's file.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, locale: str) -> Path:
        path = self.data_dir / outline_filename(locale)
        if path.exists():
            return path
        fallback = self.data_dir / outline_filename(DEFAULT_LOCALE)
        if fallback != path:
            logger.debug("No outline for locale {!r}, using {}", locale, fallback.name)
        return fallback

    async def revision(self, locale: str) -> int:
        path = self.path_for(locale)
        try:
            stat = await asyncio.to_thread(path.stat)
        except OSError as e:
            msg = f"Missing outline document {str(path)!r}. Run 'fetch' first. ({e})"
            raise SourceUnavailableError(msg) from e
        return stat.st_mtime_ns

    async def read(self, locale: str) -> list[OutlineNode]:
        path = self.path_for(locale)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            raw = json.loads(text)
        except (OSError, ValueError) as e:
            msg = f"Cannot read outline document {str(path)!r}: {e}"
            raise SourceUnavailableError(msg) from e
        return parse_outline(raw)
