from __future__ import annotations

import datetime as dt
import html
from typing import Sequence

from .models import Document, TagGroup
from .routes import RouteTable
from .taxonomy import documents_for_tag
from .utils import join_url, rfc822_date, url_path

FEED_LIMIT = 20


def build_rss(
    documents: Sequence[Document],
    site_url: str,
    title: str,
    description: str,
    feed_limit: int = FEED_LIMIT,
    feed_path: str = "/rss.xml",
) -> str:
    site_url = site_url.rstrip("/")
    items = []
    for doc in documents[:feed_limit]:
        link = join_url(site_url, url_path(doc.slug))
        categories = [doc.label, *doc.tags] if doc.label else list(doc.tags)
        items.append(
            "\n".join(
                [
                    "<item>",
                    f"<title>{html.escape(doc.title)}</title>",
                    f"<link>{link}</link>",
                    f'<guid isPermaLink="true">{link}</guid>',
                    f"<pubDate>{rfc822_date(doc.published_at)}</pubDate>",
                    f"<description>{html.escape(doc.summary)}</description>",
                    *[f"<category>{html.escape(name)}</category>" for name in categories],
                    "</item>",
                ]
            )
        )
    self_link = join_url(site_url, url_path(feed_path))
    last_build = rfc822_date(documents[0].published_at) if documents else rfc822_date(dt.date(1970, 1, 1))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
            "<channel>",
            f"<title>{html.escape(title)}</title>",
            f"<link>{site_url}/</link>",
            f"<description>{html.escape(description)}</description>",
            f'<atom:link href="{self_link}" rel="self" type="application/rss+xml" />',
            f"<lastBuildDate>{last_build}</lastBuildDate>",
            *items,
            "</channel>",
            "</rss>",
        ]
    )


def build_tag_feeds(
    documents: Sequence[Document],
    tag_groups: Sequence[TagGroup],
    site_url: str,
    site_name: str,
    feed_limit: int = FEED_LIMIT,
) -> dict[str, str]:
    feeds = {}
    for tag in tag_groups:
        feed_path = f"/rss/{tag.segment}.xml"
        feeds[feed_path] = build_rss(
            documents_for_tag(documents, tag.value),
            site_url,
            f"{site_name}: {tag.value}",
            f"Posts tagged with {tag.value}",
            feed_limit,
            feed_path,
        )
    return feeds


def build_sitemap(routes: RouteTable, site_url: str) -> str:
    site_url = site_url.rstrip("/")
    items = []
    for page in routes:
        if page.kind in {"alias", "not-found"}:
            continue
        loc = site_url + "/" if page.path == "/" else join_url(site_url, url_path(page.path))
        lines = ["<url>", f"<loc>{loc}</loc>"]
        if page.document is not None:
            lines.append(f"<lastmod>{page.document.published_at.isoformat()}</lastmod>")
        lines.append("</url>")
        items.append("\n".join(lines))
    return "\n".join(
        [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            *items,
            "</urlset>",
        ]
    )
