"""Shared fixtures for the mdxsite test suite."""

import argparse
import datetime as dt
from pathlib import Path

import pytest

from mdxsite.models import Document


def _make_document(slug, published_at="2024-01-01", tags=(), title=None, summary="A short summary.", label=None):
    if isinstance(published_at, str):
        published_at = dt.date.fromisoformat(published_at)
    name = slug.strip("/")
    return Document(
        source=f"{name}.mdx",
        slug=slug,
        published_at=published_at,
        title=title or name.replace("-", " ").title(),
        summary=summary,
        tags=tuple(tags),
        label=label,
        body="Body text.",
        html="<p>Body text.</p>",
    )


@pytest.fixture
def make_document():
    """Return a factory for in-memory documents."""
    return _make_document


def _front_matter(fields: dict) -> str:
    lines = ["---"]
    for key, value in fields.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"{key}:")
            lines.extend(f'  - "{item}"' for item in value)
        elif isinstance(value, str):
            lines.append(f'{key}: "{value}"')
        else:
            lines.append(f"{key}: {value}")
    lines.append("---")
    return "\n".join(lines)


@pytest.fixture
def write_post():
    """Return a helper that writes an article with front matter."""

    def write(directory: Path, name: str, body: str = "Some **content**.", **fields) -> Path:
        meta = {
            "title": "Untitled",
            "publishedAt": "2024-01-01",
            "summary": "Summary text",
            "tags": ["General"],
        }
        meta.update(fields)
        meta = {key: value for key, value in meta.items() if value is not None}
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{_front_matter(meta)}\n{body}\n", encoding="utf-8")
        return path

    return write


@pytest.fixture
def build_args(tmp_path: Path):
    """Return a factory for CLI namespaces rooted in tmp_path."""

    def make(**overrides) -> argparse.Namespace:
        values = {
            "config": str(tmp_path / "site.toml"),
            "content": str(tmp_path / "src" / "posts"),
            "static": str(tmp_path / "static"),
            "theme": "",
            "output": str(tmp_path / "public"),
            "site_name": "Test Site",
            "site_description": "Notes about testing.",
            "site_url": "https://example.com",
            "posts_per_page": 10,
            "tags_per_page": 24,
            "home_limit": 10,
            "feed_limit": 20,
            "article_prefix": "",
            "slug_from_path": False,
            "merge_tag_case": True,
            "enable_rss": True,
            "tag_feeds": True,
            "enable_sitemap": True,
            "newsletter": False,
            "theme_default": "light",
            "highlight_style": "default",
            "clean": True,
            "lock_file": str(tmp_path / "build.lock.json"),
            "aliases": {"/article": "/articles"},
        }
        values.update(overrides)
        return argparse.Namespace(**values)

    return make
