"""Split text into highlighted and plain parts for a query."""

import re

from awesome_mac_catalog.models.search import HighlightPart


def highlight_matches(text: str, query: str) -> list[HighlightPart]:
    """Mark every case-insensitive, non-overlapping occurrence of query in text.

    Offsets come from matching text itself, so characters whose lowercase
    form has a different length do not shift the highlighted spans.
    """
    if not query.strip():
        return [HighlightPart(text=text, highlighted=False)]

    parts: list[HighlightPart] = []
    last = 0
    for match in re.finditer(re.escape(query), text, re.IGNORECASE):
        start, end = match.span()
        if start > last:
            parts.append(HighlightPart(text=text[last:start], highlighted=False))
        parts.append(HighlightPart(text=match.group(), highlighted=True))
        last = end

    if last < len(text):
        parts.append(HighlightPart(text=text[last:], highlighted=False))

    return parts or [HighlightPart(text=text, highlighted=False)]
