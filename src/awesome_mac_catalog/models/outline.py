"""Outline nodes: the semi-structured input the catalog is built from."""

from dataclasses import dataclass
from typing import Literal

IconType = Literal["oss", "freeware", "app-store", "awesome-list"]


@dataclass(frozen=True)
class Icon:
    """A badge attached to an app list item.

    type is kept as written in the document; only IconType values set app flags.
    """

    type: str
    url: str


@dataclass(frozen=True)
class AppMark:
    """Annotation on a list item describing one app."""

    title: str
    url: str
    icons: tuple[Icon, ...] = ()
    deleted: bool = False


@dataclass(frozen=True)
class InlineNode:
    """One inline child of a list item paragraph (text, link, ...)."""

    type: str
    value: str = ""


@dataclass(frozen=True)
class Heading:
    depth: int
    text: str


@dataclass(frozen=True)
class DescriptionParagraph:
    emphasis_text: str | None


@dataclass(frozen=True)
class AppListItem:
    mark: AppMark | None
    children: tuple[InlineNode, ...] = ()


@dataclass(frozen=True)
class AppList:
    items: tuple[AppListItem, ...]


OutlineNode = Heading | DescriptionParagraph | AppList
