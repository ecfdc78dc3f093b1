from __future__ import annotations

import hashlib
import posixpath
from typing import Iterator, Optional

from .errors import DuplicateRouteError, InvalidRouteError
from .models import Page
from .render import output_path_for


def describe(page: Page) -> str:
    doc = page.document
    if doc is not None:
        return f"{page.kind} ({doc.source})"
    return page.kind


def output_key(path: str) -> str:
    """Return the normalized output file a site path is written to."""
    key = posixpath.normpath(output_path_for(path).as_posix())
    if key == ".." or key.startswith("../"):
        raise InvalidRouteError(f"Output path for {path} escapes the output directory")
    return key


class RouteTable:
    """Output pages keyed by site path, in registration order."""

    def __init__(self) -> None:
        self._pages: dict[str, Page] = {}
        self._files: dict[str, Page] = {}

    def register(self, page: Page) -> None:
        key = output_key(page.path)
        existing = self._pages.get(page.path) or self._files.get(key)
        if existing is not None:
            raise DuplicateRouteError(page.path, describe(existing), describe(page))
        self._pages[page.path] = page
        self._files[key] = page

    def get(self, path: str) -> Optional[Page]:
        return self._pages.get(path)

    def paths(self) -> list[str]:
        return list(self._pages)

    def __contains__(self, path: object) -> bool:
        return path in self._pages

    def __iter__(self) -> Iterator[Page]:
        return iter(self._pages.values())

    def __len__(self) -> int:
        return len(self._pages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RouteTable):
            return NotImplemented
        return self._pages == other._pages

    def digest(self) -> str:
        digest = hashlib.sha256()
        for path, page in self._pages.items():
            digest.update(path.encode("utf-8"))
            digest.update(b"\0")
            digest.update(repr(page).encode("utf-8"))
            digest.update(b"\0")
        return digest.hexdigest()
