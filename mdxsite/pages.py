from __future__ import annotations

import datetime as dt
import html
import json
from typing import Iterable, Optional

from .models import Document, Page, PageWindow, TagGroup
from .pager import page_path
from .render import fix_relative_img_src, render_template
from .utils import display_date, join_url, normalize_tag, url_path


def tag_url(tag: str) -> str:
    return url_path(f"/tags/{normalize_tag(tag)}")


def build_tag_chips(tags: Iterable[str], active: Optional[str] = None) -> str:
    chips = []
    for tag in tags:
        active_class = " is-active" if tag == active else ""
        chips.append(f'<a class="chip{active_class}" href="{tag_url(tag)}">{html.escape(tag)}</a>')
    return " ".join(chips)


def build_post_cards(documents: Iterable[Document], active_tag: Optional[str] = None) -> str:
    cards = []
    for idx, doc in enumerate(documents):
        delay = min(idx * 0.05, 0.3)
        label_html = f'<span class="post-label">{html.escape(doc.label)}</span>' if doc.label else ""
        cards.append(
            f'<article class="post-card" style="animation-delay: {delay:.2f}s">'
            '<div class="post-meta"><div class="post-meta-left">'
            f'<time class="post-date" datetime="{doc.published_at.isoformat()}">'
            f"{display_date(doc.published_at)}</time>"
            f"{label_html}"
            "</div>"
            f'<div class="post-tags">{build_tag_chips(doc.tags, active_tag)}</div></div>'
            f'<h2 class="post-title"><a href="{url_path(doc.slug)}">{html.escape(doc.title)}</a></h2>'
            f'<p class="post-summary">{html.escape(doc.summary)}</p>'
            f'<a class="post-more" href="{url_path(doc.slug)}">Read more</a>'
            "</article>"
        )
    return "\n".join(cards)


def build_pagination(window: PageWindow, base: str) -> str:
    if window.total_pages <= 1:
        return ""
    items = []
    if window.prev_path:
        items.append(f'<a class="page-link" rel="prev" href="{url_path(window.prev_path)}">Previous Page</a>')
    else:
        items.append('<span class="page-link is-disabled">Previous Page</span>')
    numbers = []
    for num in range(1, window.total_pages + 1):
        if num == window.page_number:
            numbers.append(f'<span class="page-number is-active">{num}</span>')
        else:
            numbers.append(f'<a class="page-number" href="{url_path(page_path(base, num))}">{num}</a>')
    items.append(f'<div class="page-numbers">{"".join(numbers)}</div>')
    if window.next_path:
        items.append(f'<a class="page-link" rel="next" href="{url_path(window.next_path)}">Next Page</a>')
    else:
        items.append('<span class="page-link is-disabled">Next Page</span>')
    return f'<nav class="pagination">{"".join(items)}</nav>'


def build_newsletter_form() -> str:
    return (
        '<div class="newsletter">'
        "<h3>Subscribe to the newsletter</h3>"
        "<p>Stay updated with the latest posts and news.</p>"
        '<form name="newsletter" method="POST" data-netlify="true" '
        'data-netlify-honeypot="bot-field" data-newsletter>'
        '<input type="hidden" name="form-name" value="newsletter" />'
        '<p class="is-hidden"><input name="bot-field" /></p>'
        '<input type="text" name="name" placeholder="Your name" required />'
        '<input type="email" name="email" placeholder="Your email" required />'
        '<button type="submit">Subscribe</button>'
        '<p class="newsletter-status" role="status" aria-live="polite"></p>'
        "</form>"
        "</div>"
    )


def page_suffix(window: Optional[PageWindow]) -> str:
    if window is None or window.page_number == 1:
        return ""
    return f" - Page {window.page_number}"


def build_article_meta(doc: Document, site_url: str, site_name: str) -> str:
    """Canonical link, Open Graph, Twitter card and JSON-LD tags for an article."""
    canonical = join_url(site_url, url_path(doc.slug))
    structured = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": doc.title,
        "description": doc.summary,
        "datePublished": doc.published_at.isoformat(),
        "publisher": {"@type": "Organization", "name": site_name},
        "mainEntityOfPage": {"@type": "WebPage", "@id": canonical},
        "keywords": list(doc.tags),
    }
    # "</" would close the script element early.
    json_ld = json.dumps(structured, ensure_ascii=False).replace("</", "<\\/")
    url = html.escape(canonical, quote=True)
    title = html.escape(doc.title, quote=True)
    summary = html.escape(doc.summary, quote=True)
    return (
        f'<link rel="canonical" href="{url}" />'
        '<meta property="og:type" content="article" />'
        f'<meta property="og:url" content="{url}" />'
        f'<meta property="og:title" content="{title}" />'
        f'<meta property="og:description" content="{summary}" />'
        '<meta name="twitter:card" content="summary_large_image" />'
        f'<meta name="twitter:title" content="{title}" />'
        f'<meta name="twitter:description" content="{summary}" />'
        f'<script type="application/ld+json">{json_ld}</script>'
    )


def render_article(page: Page, args: object) -> tuple[str, str, str]:
    doc = page.document
    label_html = f'<span class="post-label">{html.escape(doc.label)}</span>' if doc.label else ""
    newsletter_html = build_newsletter_form() if getattr(args, "newsletter", False) else ""
    body_html = fix_relative_img_src(doc.html)
    content = (
        '<article class="post">'
        '<div class="post-meta"><div class="post-meta-left">'
        f'<time class="post-date" datetime="{doc.published_at.isoformat()}">'
        f"{display_date(doc.published_at)}</time>"
        f"{label_html}"
        "</div>"
        f'<div class="post-tags">{build_tag_chips(doc.tags)}</div></div>'
        f'<h1 class="post-title">{html.escape(doc.title)}</h1>'
        f'<p class="post-lead">{html.escape(doc.summary)}</p>'
        f'<div class="post-body">{body_html}</div>'
        f"{newsletter_html}"
        '<div class="post-footer"><a href="/articles">Back to articles</a></div>'
        "</article>"
    )
    keywords = html.escape(", ".join(doc.tags), quote=True)
    extra_head = f'<meta name="keywords" content="{keywords}" />' if doc.tags else ""
    site_url = getattr(args, "site_url", "")
    if site_url:
        extra_head += build_article_meta(doc, site_url, getattr(args, "site_name", ""))
    return doc.title, content, extra_head


def render_article_list(page: Page, args: object) -> tuple[str, str, str]:
    content = (
        '<div class="section-head">'
        "<h1>Articles</h1>"
        "<p>Browse all articles.</p>"
        "</div>"
        f'<div class="post-grid">{build_post_cards(page.items)}</div>'
        f"{build_pagination(page.window, page.base)}"
    )
    return f"Articles{page_suffix(page.window)}", content, ""


def render_tag(page: Page, args: object) -> tuple[str, str, str]:
    tag = page.tag.value
    content = (
        '<div class="section-head">'
        '<a class="back-link" href="/tags">Back to all tags</a>'
        f"<h1>Posts tagged with &quot;{html.escape(tag)}&quot;</h1>"
        f"<p>{page.tag.count} {'post' if page.tag.count == 1 else 'posts'}</p>"
        "</div>"
        f'<div class="post-grid">{build_post_cards(page.items, active_tag=tag)}</div>'
        f"{build_pagination(page.window, page.base)}"
    )
    if getattr(args, "tag_feeds", False) and getattr(args, "site_url", ""):
        feed_href = url_path(f"/rss/{page.tag.segment}.xml")
        extra_head = (
            f'<link rel="alternate" type="application/rss+xml" '
            f'title="{html.escape(tag, quote=True)}" href="{feed_href}" />'
        )
    else:
        extra_head = ""
    return f'Posts tagged with "{tag}"{page_suffix(page.window)}', content, extra_head


def build_tag_list(groups: Iterable[TagGroup]) -> str:
    items = []
    for group in groups:
        items.append(
            f'<li><a class="chip" href="{tag_url(group.value)}">{html.escape(group.value)}'
            f'<span class="count">({group.count})</span></a></li>'
        )
    return "\n".join(items) if items else "<li>No tags yet.</li>"


def render_tag_index(page: Page, args: object) -> tuple[str, str, str]:
    content = (
        '<div class="section-head">'
        "<h1>Tags</h1>"
        "<p>Browse articles by topic.</p>"
        "</div>"
        f'<ul class="tag-list">{build_tag_list(page.items)}</ul>'
        f"{build_pagination(page.window, page.base)}"
    )
    return f"Tags{page_suffix(page.window)}", content, ""


def render_home(page: Page, args: object) -> tuple[str, str, str]:
    about = html.escape(getattr(args, "site_description", ""))
    content = (
        '<section class="hero">'
        f"<h1>{html.escape(getattr(args, 'site_name', ''))}</h1>"
        f"<p>{about}</p>"
        "</section>"
        '<div class="section-head">'
        "<h2>Latest articles</h2>"
        "</div>"
        f'<div class="post-grid">{build_post_cards(page.items)}</div>'
        '<div class="section-more"><a class="post-more" href="/articles">View all articles</a></div>'
    )
    return "Home", content, ""


def render_not_found(page: Page, args: object) -> tuple[str, str, str]:
    content = (
        '<div class="section-head">'
        "<h1>404</h1>"
        "<p>Page not found. Try heading back to the homepage.</p>"
        "</div>"
        '<div class="post-card">'
        '<p class="post-summary">The page you requested does not exist.</p>'
        '<a class="post-more" href="/">Back to home</a>'
        "</div>"
    )
    return "404", content, ""


def render_alias(page: Page) -> str:
    target = html.escape(url_path(page.target), quote=True)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en"><head><meta charset="utf-8" />'
        f'<meta http-equiv="refresh" content="0; url={target}" />'
        f'<link rel="canonical" href="{target}" />'
        f"<title>Redirecting to {target}</title></head>"
        f'<body><p>Redirecting to <a href="{target}">{target}</a>.</p></body></html>\n'
    )


RENDERERS = {
    "article": render_article,
    "article-list": render_article_list,
    "tag": render_tag,
    "tag-index": render_tag_index,
    "home": render_home,
    "not-found": render_not_found,
}


def render_page(page: Page, base_template: str, args: object) -> str:
    if page.kind == "alias":
        return render_alias(page)
    try:
        renderer = RENDERERS[page.kind]
    except KeyError:
        raise ValueError(f"Unknown page kind: {page.kind}") from None
    title, content, extra_head = renderer(page, args)
    site_name = getattr(args, "site_name", "")
    description = page.document.summary if page.document else getattr(args, "site_description", "")
    feed_link = (
        '<link rel="alternate" type="application/rss+xml" title="RSS" href="/rss.xml" />'
        if getattr(args, "enable_rss", False) and getattr(args, "site_url", "")
        else ""
    )
    return render_template(
        base_template,
        title=html.escape(f"{title} | {site_name}"),
        description=html.escape(description, quote=True),
        site_name=html.escape(site_name),
        site_description=html.escape(getattr(args, "site_description", "")),
        year=str(dt.datetime.now().year),
        extra_head=feed_link + extra_head,
        theme_default=getattr(args, "theme_default", "light"),
        content=content,
    )
