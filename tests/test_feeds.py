"""Unit tests for RSS feeds and the sitemap."""

import datetime as dt

from mdxsite.feeds import build_rss, build_sitemap, build_tag_feeds
from mdxsite.generator import generate_pages
from mdxsite.taxonomy import group_by_tag
from mdxsite.utils import rfc822_date


def test_rfc822_date() -> None:
    assert rfc822_date(dt.date(2024, 1, 2)) == "Tue, 02 Jan 2024 00:00:00 +0000"


def test_rss_items(make_document) -> None:
    docs = [
        make_document("/newer", "2024-03-01", tags=["Web Dev"], title="Newer & better", label="Guide"),
        make_document("/older", "2024-01-01", tags=["Python"]),
    ]
    rss = build_rss(docs, "https://example.com/", "Site", "About things")

    assert rss.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<link>https://example.com/newer</link>" in rss
    assert '<guid isPermaLink="true">https://example.com/older</guid>' in rss
    assert "<title>Newer &amp; better</title>" in rss
    assert "<category>Guide</category>" in rss
    assert "<category>Web Dev</category>" in rss
    assert "<lastBuildDate>Fri, 01 Mar 2024 00:00:00 +0000</lastBuildDate>" in rss
    assert rss.index("/newer") < rss.index("/older")


def test_rss_limit(make_document) -> None:
    docs = [make_document(f"/p{i}", f"2024-01-{i + 1:02d}") for i in range(5)]
    rss = build_rss(docs, "https://example.com", "Site", "About", feed_limit=2)
    assert rss.count("<item>") == 2


def test_empty_rss_is_valid() -> None:
    rss = build_rss([], "https://example.com", "Site", "About")
    assert "<item>" not in rss
    assert rss.endswith("</rss>")


def test_tag_feeds(make_document) -> None:
    docs = [
        make_document("/a", "2024-02-01", tags=["Web Dev"]),
        make_document("/b", "2024-01-01", tags=["Python"]),
    ]
    feeds = build_tag_feeds(docs, group_by_tag(docs), "https://example.com", "Site")

    assert set(feeds) == {"/rss/web-dev.xml", "/rss/python.xml"}
    assert "https://example.com/a" in feeds["/rss/web-dev.xml"]
    assert "https://example.com/b" not in feeds["/rss/web-dev.xml"]
    assert "<title>Site: Web Dev</title>" in feeds["/rss/web-dev.xml"]
    assert 'href="https://example.com/rss/python.xml"' in feeds["/rss/python.xml"]


def test_sitemap(make_document) -> None:
    docs = [make_document("/hello", "2024-02-01", tags=["Web Dev"])]
    routes = generate_pages(docs, group_by_tag(docs))
    sitemap = build_sitemap(routes, "https://example.com/")

    assert "<loc>https://example.com/</loc>" in sitemap
    assert "<loc>https://example.com/hello</loc>\n<lastmod>2024-02-01</lastmod>" in sitemap
    assert "<loc>https://example.com/tags/web-dev</loc>" in sitemap
    assert "/article<" not in sitemap
    assert "/404" not in sitemap


def test_feed_links_are_percent_encoded(make_document) -> None:
    docs = [make_document("/hello", "2024-02-01", tags=["C#"])]
    feeds = build_tag_feeds(docs, group_by_tag(docs), "https://example.com", "Site")

    assert set(feeds) == {"/rss/c#.xml"}
    assert 'href="https://example.com/rss/c%23.xml"' in feeds["/rss/c#.xml"]

    sitemap = build_sitemap(generate_pages(docs, group_by_tag(docs)), "https://example.com")
    assert "<loc>https://example.com/tags/c%23</loc>" in sitemap
    assert "/tags/c#" not in sitemap
