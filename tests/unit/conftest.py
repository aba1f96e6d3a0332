"""Shared test fixtures."""

import json
from pathlib import Path

import pytest

from awesome_mac_catalog.core.catalog.builder import build_catalog
from awesome_mac_catalog.core.outline.reader import parse_outline
from awesome_mac_catalog.models.catalog import ParsedCatalog
from awesome_mac_catalog.models.outline import OutlineNode
from tests.unit.outline_data import OUTLINE


@pytest.fixture
def outline_nodes() -> list[OutlineNode]:
    """The sample outline, parsed into nodes."""
    return parse_outline(OUTLINE)


@pytest.fixture
def catalog(outline_nodes: list[OutlineNode]) -> ParsedCatalog:
    """Catalog with two main categories, two subcategories and five apps."""
    return build_catalog(outline_nodes)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory holding the sample outline as the English document."""
    data = tmp_path / "data"
    data.mkdir()
    (data / "awesome-mac.json").write_text(json.dumps(OUTLINE), encoding="utf-8")
    return data
