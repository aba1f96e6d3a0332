"""Split free text into comparable lowercase word tokens."""

import re

_NON_WORD_RE = re.compile(r"[^\w\s]+")


def tokenize(text: str) -> list[str]:
    """Lowercase text, break it on non-word characters and whitespace.

    Tokens of a single character are dropped. Used for both indexed fields
    and queries, so the two sides always compare like with like.
    """
    return [token for token in _NON_WORD_RE.sub(" ", text.lower()).split() if len(token) > 1]
