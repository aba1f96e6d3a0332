"""Configuration constants for awesome-mac-catalog."""

import os
from pathlib import Path

# Directory with outline documents. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/awesome-mac-catalog").expanduser(),
    Path("~/.awesome-mac-catalog").expanduser(),
    Path("dist"),
]

DATA_DIR_ENV = "AWESOME_MAC_DATA_DIR"

# URL template for `fetch`, e.g. "https://example.org/{filename}".
OUTLINE_URL_ENV = "AWESOME_MAC_OUTLINE_URL"

DEFAULT_LOCALE = "en"

# Outline document per locale. Unknown locales use the default locale's file.
LOCALE_FILENAMES: dict[str, str] = {
    "en": "awesome-mac.json",
    "zh": "awesome-mac.zh.json",
}

# Ranked matches considered per query, before pagination.
SEARCH_CANDIDATE_CAP = 250

SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 50
SEARCH_MAX_PAGE = 100

SUGGESTION_LIMIT = 5
SUGGESTION_MIN_QUERY_LENGTH = 2

QUERY_MAX_LENGTH = 200

# Retry hint attached to "source unavailable" errors.
RETRY_AFTER_SECONDS = 60


def resolve_data_directory() -> Path:
    """Return the outline data directory.

    The AWESOME_MAC_DATA_DIR environment variable wins; otherwise the first
    existing entry of DATA_DIRECTORIES, falling back to the first entry.
    """
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
