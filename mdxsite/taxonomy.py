from __future__ import annotations

import dataclasses
from typing import Iterable, Sequence

from .errors import ContentError
from .models import Document, TagGroup
from .utils import is_valid_segment, normalize_tag


def canonicalize_tags(documents: Sequence[Document]) -> list[Document]:
    """Merge tag spellings that share a URL segment.

    The first spelling met while walking ``documents`` in listing order becomes
    the canonical one, so ``"SEO"`` and ``"seo"`` end up as a single tag.
    """
    canonical: dict[str, str] = {}
    for doc in documents:
        for tag in doc.tags:
            segment = normalize_tag(tag)
            if not is_valid_segment(segment):
                raise ContentError(f"{doc.source}: tag {tag!r} cannot be used in a URL")
            canonical.setdefault(segment, tag)

    result = []
    for doc in documents:
        tags: list[str] = []
        for tag in doc.tags:
            value = canonical[normalize_tag(tag)]
            if value not in tags:
                tags.append(value)
        if tuple(tags) != doc.tags:
            doc = dataclasses.replace(doc, tags=tuple(tags))
        result.append(doc)
    return result


def group_by_tag(documents: Iterable[Document]) -> list[TagGroup]:
    counts: dict[str, int] = {}
    for doc in documents:
        for tag in set(doc.tags):
            counts[tag] = counts.get(tag, 0) + 1
    return [
        TagGroup(value=value, count=count)
        for value, count in sorted(counts.items(), key=lambda x: (-x[1], x[0].lower(), x[0]))
    ]


def documents_for_tag(documents: Iterable[Document], tag: str) -> list[Document]:
    return [doc for doc in documents if tag in doc.tags]
