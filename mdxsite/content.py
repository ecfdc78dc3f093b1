from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Iterable, Optional

import yaml

from .errors import ContentError, MissingFieldError, MissingSlugSourceError
from .mdx import render_body
from .models import Document
from .utils import is_valid_segment, normalize_tag, parse_bool, slugify

CONTENT_SUFFIXES = {".md", ".mdx"}
REQUIRED_FIELDS = ("title", "publishedAt", "summary", "tags")


def parse_list(value: str) -> list[str]:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1]
        items = [item.strip().strip("'\"") for item in inner.split(",")]
    else:
        items = [item.strip() for item in value.split(",")]
    return [item for item in items if item]


def parse_front_matter(text: str, source: str = "<string>") -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    try:
        meta = yaml.safe_load("\n".join(lines[1:end]))
    except yaml.YAMLError as exc:
        raise ContentError(f"{source}: invalid front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ContentError(f"{source}: front matter must be a mapping")
    body = "\n".join(lines[end + 1 :])
    return meta, body


def parse_published_at(value: object, source: str) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    try:
        if "T" in text or " " in text:
            return dt.datetime.fromisoformat(text).date()
        return dt.date.fromisoformat(text)
    except ValueError as exc:
        raise ContentError(f"{source}: invalid publishedAt date '{text}'") from exc


def parse_tags(value: object, source: str) -> tuple[str, ...]:
    if isinstance(value, str):
        items = parse_list(value)
    elif isinstance(value, (list, tuple)):
        items = [str(item).strip() for item in value if item is not None]
    else:
        raise ContentError(f"{source}: tags must be a list of strings")
    tags: list[str] = []
    for item in items:
        if not item or item in tags:
            continue
        if not is_valid_segment(normalize_tag(item)):
            raise ContentError(f"{source}: tag {item!r} cannot be used in a URL")
        tags.append(item)
    return tuple(tags)


def derive_slug(source: Path, meta: Optional[dict] = None, prefix: str = "", from_path: bool = False) -> str:
    """Map a content file to its canonical site path.

    An explicit ``slug`` field wins. Otherwise ``index`` files are named after
    their directory and every other file after its stem, optionally nested
    under its directory path. The result always starts with ``/`` and carries
    the namespace ``prefix`` when one is configured.
    """
    explicit = str((meta or {}).get("slug") or "").strip()
    if explicit:
        parts = explicit.strip("/").split("/")
    else:
        stem = source.stem
        parts = list(source.parent.parts) if from_path or stem == "index" else []
        if stem != "index":
            parts.append(stem)
    parts = [slugify(part) for part in parts if part not in {"", "."}]
    parts = [part for part in parts if part]
    if not parts:
        raise MissingSlugSourceError(f"{source.as_posix()}: cannot derive a slug")
    prefix_parts = [slugify(part) for part in prefix.strip("/").split("/") if part]
    return "/" + "/".join(prefix_parts + parts)


def load_document(path: Path, content_dir: Path, prefix: str = "", from_path: bool = False) -> Optional[Document]:
    rel = path.relative_to(content_dir)
    source = rel.as_posix()
    try:
        raw_text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentError(f"Cannot read content file {source}: {exc}") from exc
    meta, body = parse_front_matter(raw_text, source)
    if parse_bool(meta.get("draft")):
        return None
    if "publishedAt" not in meta and "date" in meta:
        meta["publishedAt"] = meta["date"]
    for name in REQUIRED_FIELDS:
        if meta.get(name) is None or (name != "tags" and str(meta[name]).strip() == ""):
            raise MissingFieldError(source, name)

    label = meta.get("label")
    return Document(
        source=source,
        slug=derive_slug(rel, meta, prefix, from_path),
        published_at=parse_published_at(meta["publishedAt"], source),
        title=str(meta["title"]).strip(),
        summary=str(meta["summary"]).strip(),
        tags=parse_tags(meta["tags"], source),
        label=str(label).strip() if label else None,
        body=body,
        html=render_body(body),
    )


def list_content_files(content_dir: Path) -> list[Path]:
    files = [
        path
        for path in content_dir.rglob("*")
        if path.is_file() and path.suffix.lower() in CONTENT_SUFFIXES and ".draft" not in path.suffixes
    ]
    return sorted(files, key=lambda p: p.as_posix())


def sort_documents(documents: Iterable[Document]) -> list[Document]:
    return sorted(documents, key=lambda doc: doc.sort_key())


def load_documents(content_dir: Path, prefix: str = "", from_path: bool = False) -> list[Document]:
    if not content_dir.is_dir():
        raise ContentError(f"Content directory not found: {content_dir}")
    documents = []
    for path in list_content_files(content_dir):
        document = load_document(path, content_dir, prefix, from_path)
        if document is not None:
            documents.append(document)
    return sort_documents(documents)
