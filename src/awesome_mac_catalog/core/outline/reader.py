"""Parse the raw outline document (a markdown AST as JSON) into outline nodes."""

from typing import Any

from loguru import logger

from awesome_mac_catalog.errors import MalformedSourceError
from awesome_mac_catalog.models.outline import (
    AppList,
    AppListItem,
    AppMark,
    DescriptionParagraph,
    Heading,
    Icon,
    InlineNode,
    OutlineNode,
)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _parse_mark(raw: Any) -> AppMark | None:
    if not isinstance(raw, dict):
        return None
    icons = tuple(
        Icon(type=_as_str(icon.get("type")), url=_as_str(icon.get("url")))
        for icon in _as_list(raw.get("icons"))
        if isinstance(icon, dict)
    )
    return AppMark(
        title=_as_str(raw.get("title")),
        url=_as_str(raw.get("url")),
        icons=icons,
        deleted=bool(raw.get("delete") or raw.get("deleted")),
    )


def _parse_inline(raw: Any) -> InlineNode | None:
    if not isinstance(raw, dict):
        return None
    node_type = _as_str(raw.get("type"))
    # Link text is the app name; only plain text values are kept.
    value = _as_str(raw.get("value")) if node_type == "text" else ""
    return InlineNode(type=node_type, value=value)


def _parse_list_item(raw: Any) -> AppListItem | None:
    if not isinstance(raw, dict) or raw.get("type") != "listItem":
        return None
    paragraph = next(
        (
            child
            for child in _as_list(raw.get("children"))
            if isinstance(child, dict) and child.get("type") == "paragraph"
        ),
        None,
    )
    if paragraph is None:
        return AppListItem(mark=None)
    children = tuple(
        node
        for node in (_parse_inline(c) for c in _as_list(paragraph.get("children")))
        if node is not None
    )
    return AppListItem(mark=_parse_mark(paragraph.get("mark")), children=children)


def _parse_emphasis(children: list[Any]) -> str | None:
    emphasis = next(
        (c for c in children if isinstance(c, dict) and c.get("type") == "emphasis"),
        None,
    )
    if emphasis is None:
        return None
    inner = _as_list(emphasis.get("children"))
    if not inner or not isinstance(inner[0], dict):
        return None
    return _as_str(inner[0].get("value")) or None


def parse_outline_node(raw: Any) -> OutlineNode | None:
    """Convert one raw AST node, or return None when it is not catalog structure."""
    if not isinstance(raw, dict):
        return None

    node_type = raw.get("type")
    if node_type == "heading":
        depth = raw.get("depth")
        text = _as_str(raw.get("value"))
        if depth not in (2, 3) or not text:
            return None
        return Heading(depth=depth, text=text)

    if node_type == "paragraph" and "children" in raw:
        return DescriptionParagraph(emphasis_text=_parse_emphasis(_as_list(raw["children"])))

    if node_type == "list" and "children" in raw:
        items = tuple(
            item
            for item in (_parse_list_item(c) for c in _as_list(raw["children"]))
            if item is not None
        )
        return AppList(items=items)

    return None


def parse_outline(raw: Any) -> list[OutlineNode]:
    """Parse a raw outline document into outline nodes, in document order.

    Args:
        raw: Decoded JSON of the outline document (a list of AST nodes).

    Returns:
        The recognised nodes. Unrecognised or malformed nodes are skipped.

    Raises:
        MalformedSourceError: The document is not a list of nodes.
    """
    if not isinstance(raw, list):
        msg = f"Outline document must be a list of nodes, got {type(raw).__name__}"
        raise MalformedSourceError(msg)

    nodes: list[OutlineNode] = []
    skipped = 0
    for raw_node in raw:
        node = parse_outline_node(raw_node)
        if node is None:
            skipped += 1
            continue
        nodes.append(node)

    logger.debug("Parsed outline: {} nodes, {} skipped", len(nodes), skipped)
    return nodes
