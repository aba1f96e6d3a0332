"""Download outline documents over HTTP with ETag revalidation."""

import json
import os
from pathlib import Path

import requests
from loguru import logger

from awesome_mac_catalog.core.source import outline_filename
from awesome_mac_catalog.errors import FetchError, MalformedSourceError

USER_AGENT = "awesome-mac-catalog/0.1"
REQUEST_TIMEOUT = 30


class OutlineFetcher:
    """Fetch the outline document for a locale into a data directory.

    url_template may contain "{locale}" and "{filename}" placeholders. The
    ETag of the last download is kept next to the file (``<file>.etag``) and
    sent as If-None-Match, so an unchanged document is not rewritten and
    its mtime (the catalog revision) stays the same.
    """

    def __init__(self, url_template: str, *, session: requests.Session | None = None) -> None:
        self.url_template = url_template
        self.sess = session or requests.Session()
        self.sess.headers["User-Agent"] = USER_AGENT
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            self.sess.headers["Authorization"] = f"Bearer {token}"

    def url_for(self, locale: str) -> str:
        """Fill the URL template for locale.

        Raises:
            FetchError: The template has a placeholder other than {locale} or {filename}.
        """
        try:
            return self.url_template.format(locale=locale, filename=outline_filename(locale))
        except (KeyError, IndexError, ValueError) as e:
            msg = f"Bad URL template {self.url_template!r}: use {{locale}} and {{filename}} only"
            raise FetchError(msg) from e

    def fetch(self, locale: str, dest_dir: str | Path) -> bool:
        """Download the document; return False when the server says it is unchanged.

        Raises:
            FetchError: Bad URL template, or the server answered with an error status.
            MalformedSourceError: The body is not a JSON list of outline nodes.
        """
        dest = Path(dest_dir) / outline_filename(locale)
        etag_path = dest.with_name(dest.name + ".etag")
        url = self.url_for(locale)

        headers: dict[str, str] = {"Accept": "application/json"}
        if dest.exists() and etag_path.exists():
            headers["If-None-Match"] = etag_path.read_text(encoding="utf-8").strip()

        logger.debug("Fetching {} -> {}", url, dest)
        r = self.sess.get(url, headers=headers, timeout=REQUEST_TIMEOUT)
        if r.status_code == 304:
            logger.info("Outline for locale {!r} not modified", locale)
            return False
        if not r.ok:
            msg = f"Failed to fetch {url!r}: {r.status_code} {r.reason}"
            raise FetchError(msg, status_code=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            msg = f"Response from {url!r} is not JSON"
            raise MalformedSourceError(msg) from e
        if not isinstance(data, list):
            msg = f"Response from {url!r} is not an outline node list"
            raise MalformedSourceError(msg)

        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp = dest.with_name(dest.name + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp.replace(dest)

        etag = r.headers.get("ETag")
        if etag:
            etag_path.write_text(etag, encoding="utf-8")
        else:
            etag_path.unlink(missing_ok=True)

        logger.info("Fetched outline for locale {!r}: {} nodes", locale, len(data))
        return True
