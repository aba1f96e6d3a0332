"""Tests for the file-backed outline source."""

import asyncio
import os
from pathlib import Path

import pytest

from awesome_mac_catalog.core.source import OutlineFileSource, outline_filename
from awesome_mac_catalog.errors import MalformedSourceError, SourceUnavailableError
from awesome_mac_catalog.models.outline import Heading
from awesome_mac_catalog.protocols import OutlineSourceProtocol


def test_outline_filename_per_locale() -> None:
    assert outline_filename("en") == "awesome-mac.json"
    assert outline_filename("zh") == "awesome-mac.zh.json"
    assert outline_filename("fr") == "awesome-mac.json"


def test_file_source_satisfies_protocol(data_dir: Path) -> None:
    assert isinstance(OutlineFileSource(data_dir), OutlineSourceProtocol)


def test_read_returns_outline_nodes(data_dir: Path) -> None:
    nodes = asyncio.run(OutlineFileSource(data_dir).read("en"))
    assert nodes[0] == Heading(depth=2, text="Development Tools")


def test_revision_follows_mtime(data_dir: Path) -> None:
    source = OutlineFileSource(data_dir)
    path = data_dir / "awesome-mac.json"
    os.utime(path, ns=(1_000_000_000, 1_000_000_000))
    first = asyncio.run(source.revision("en"))
    os.utime(path, ns=(2_000_000_000, 2_000_000_000))
    second = asyncio.run(source.revision("en"))
    assert first == 1_000_000_000
    assert second == 2_000_000_000


def test_missing_locale_falls_back_to_default(data_dir: Path) -> None:
    source = OutlineFileSource(data_dir)
    assert source.path_for("zh") == data_dir / "awesome-mac.json"

    (data_dir / "awesome-mac.zh.json").write_text("[]", encoding="utf-8")
    assert source.path_for("zh") == data_dir / "awesome-mac.zh.json"
    assert asyncio.run(source.read("zh")) == []


def test_missing_document_is_unavailable(tmp_path: Path) -> None:
    source = OutlineFileSource(tmp_path / "nothing-here")
    with pytest.raises(SourceUnavailableError, match="Run 'fetch' first"):
        asyncio.run(source.revision("en"))
    with pytest.raises(SourceUnavailableError):
        asyncio.run(source.read("en"))


def test_invalid_json_is_unavailable(data_dir: Path) -> None:
    (data_dir / "awesome-mac.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(SourceUnavailableError) as exc_info:
        asyncio.run(OutlineFileSource(data_dir).read("en"))
    assert exc_info.value.code == "INDEX_UNAVAILABLE"
    assert exc_info.value.retry_after == 60


def test_non_list_document_is_malformed(data_dir: Path) -> None:
    (data_dir / "awesome-mac.json").write_text('{"type": "root"}', encoding="utf-8")
    with pytest.raises(MalformedSourceError):
        asyncio.run(OutlineFileSource(data_dir).read("en"))
