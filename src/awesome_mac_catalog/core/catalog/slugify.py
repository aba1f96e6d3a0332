"""URL slugs and deterministic identifiers for categories and apps."""

import re

_SPECIAL_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """Convert text to a URL-friendly slug ("Text Editors" -> "text-editors")."""
    slug = _SPECIAL_RE.sub("", text.lower().strip())
    slug = _SEPARATOR_RE.sub("-", slug)
    return slug.strip("-")


def generate_id(text: str, prefix: str | None = None) -> str:
    """Slug of text, namespaced under prefix when one is given."""
    slug = slugify(text)
    return f"{prefix}-{slug}" if prefix else slug
