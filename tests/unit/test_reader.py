"""Tests for parsing the raw outline document into outline nodes."""

import pytest

from awesome_mac_catalog.core.outline.reader import parse_outline, parse_outline_node
from awesome_mac_catalog.errors import MalformedSourceError, SourceUnavailableError
from awesome_mac_catalog.models.outline import (
    AppList,
    AppListItem,
    DescriptionParagraph,
    Heading,
    Icon,
)
from tests.unit.outline_data import OUTLINE, heading, list_item


def test_parse_outline_rejects_non_list() -> None:
    with pytest.raises(MalformedSourceError):
        parse_outline({"type": "root"})


def test_malformed_source_is_source_unavailable() -> None:
    """Callers handle a broken document the same way as a missing one."""
    assert issubclass(MalformedSourceError, SourceUnavailableError)


def test_parse_outline_skips_unrecognised_nodes() -> None:
    nodes = parse_outline([heading(1, "Title"), {"type": "html", "value": "<br>"}, "junk", None])
    assert nodes == []


def test_parse_outline_keeps_document_order() -> None:
    nodes = parse_outline(OUTLINE)
    assert isinstance(nodes[0], Heading)
    assert nodes[0] == Heading(depth=2, text="Development Tools")
    assert isinstance(nodes[1], DescriptionParagraph)
    assert nodes[2] == Heading(depth=3, text="Text Editors")
    assert isinstance(nodes[3], AppList)


def test_heading_requires_known_depth_and_text() -> None:
    assert parse_outline_node(heading(3, "IDEs")) == Heading(depth=3, text="IDEs")
    assert parse_outline_node(heading(4, "Deep")) is None
    assert parse_outline_node(heading(2, "")) is None


def test_description_paragraph_reads_emphasis_text() -> None:
    raw = {
        "type": "paragraph",
        "children": [
            {"type": "text", "value": "ignored"},
            {"type": "emphasis", "children": [{"type": "text", "value": "Editors"}]},
        ],
    }
    assert parse_outline_node(raw) == DescriptionParagraph(emphasis_text="Editors")


def test_paragraph_without_emphasis_has_no_text() -> None:
    raw = {"type": "paragraph", "children": [{"type": "text", "value": "plain"}]}
    assert parse_outline_node(raw) == DescriptionParagraph(emphasis_text=None)


def test_list_item_mark_and_inline_children() -> None:
    raw = {
        "type": "list",
        "children": [
            list_item(
                "VS Code",
                "https://code.visualstudio.com",
                "Editor",
                icons=[{"type": "oss", "url": "https://github.com/microsoft/vscode"}],
            )
        ],
    }
    node = parse_outline_node(raw)
    assert isinstance(node, AppList)
    item = node.items[0]
    assert item.mark is not None
    assert item.mark.title == "VS Code"
    assert item.mark.icons == (Icon(type="oss", url="https://github.com/microsoft/vscode"),)
    assert item.mark.deleted is False
    # Link anchor text is not carried over, only text values.
    assert [(c.type, c.value) for c in item.children] == [("link", ""), ("text", " - Editor")]


def test_list_item_deleted_flag_accepts_both_spellings() -> None:
    old = list_item("Gone", "https://example.com", delete=True)
    new = list_item("Gone", "https://example.com")
    new["children"][0]["mark"]["deleted"] = True

    node = parse_outline_node({"type": "list", "children": [old, new]})
    assert isinstance(node, AppList)
    assert all(item.mark is not None and item.mark.deleted for item in node.items)


def test_list_item_without_paragraph_has_no_mark() -> None:
    raw = {"type": "list", "children": [{"type": "listItem", "children": []}, {"type": "thing"}]}
    node = parse_outline_node(raw)
    assert node == AppList(items=(AppListItem(mark=None),))
