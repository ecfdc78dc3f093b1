"""Data models shared by the build steps."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Sequence

from .utils import normalize_tag


@dataclass(frozen=True)
class Document:
    """One article loaded from the content directory."""

    source: str  # path relative to the content root
    slug: str  # canonical site path, always starts with "/"
    published_at: dt.date
    title: str
    summary: str
    tags: tuple[str, ...] = ()
    label: Optional[str] = None
    body: str = ""
    html: str = ""

    def sort_key(self) -> tuple:
        return (-self.published_at.toordinal(), self.slug, self.source)


@dataclass(frozen=True)
class TagGroup:
    value: str
    count: int

    @property
    def segment(self) -> str:
        return normalize_tag(self.value)


@dataclass(frozen=True)
class PageWindow:
    """One page of a paginated listing."""

    page_number: int
    total_pages: int
    skip: int
    limit: int
    path: str
    prev_path: Optional[str] = None
    next_path: Optional[str] = None

    @property
    def is_first(self) -> bool:
        return self.page_number == 1

    @property
    def is_last(self) -> bool:
        return self.page_number == self.total_pages

    def slice(self, items: Sequence) -> tuple:
        return tuple(items[self.skip : self.skip + self.limit])


@dataclass(frozen=True)
class Page:
    """A page to be rendered at `path`."""

    path: str
    kind: str  # article, article-list, tag, tag-index, home, alias, not-found
    items: tuple = ()
    window: Optional[PageWindow] = None
    tag: Optional[TagGroup] = None
    target: str = ""
    base: str = ""

    @property
    def document(self) -> Optional[Document]:
        if self.kind == "article" and self.items:
            return self.items[0]
        return None
