from __future__ import annotations

import argparse
import datetime as dt
import sys
import time
from pathlib import Path

from .cache import LOCK_VERSION, diff_manifest, hash_text, load_lock, write_lock
from .config import load_aliases, load_config
from .content import load_documents, sort_documents
from .errors import SiteError
from .feeds import FEED_LIMIT, build_rss, build_sitemap, build_tag_feeds
from .generator import HOME_LIMIT, POSTS_PER_PAGE, TAGS_PER_PAGE, generate_pages
from .pages import render_page
from .render import DEFAULT_THEME_DIR, copy_static, highlight_css, output_path_for, read_template, write_text
from .taxonomy import canonicalize_tags, group_by_tag
from .utils import clean_output_dir, parse_bool, parse_int


def build_site(args: argparse.Namespace) -> dict:
    """Build the whole site and return a summary of what was written.

    Raises SiteError subclasses for unreadable content, invalid front matter,
    missing slugs and duplicate output paths.
    """
    content_dir = Path(args.content)
    static_dir = Path(args.static)
    output_dir = Path(args.output)
    theme_dir = Path(args.theme) if args.theme else DEFAULT_THEME_DIR
    project_root = Path.cwd()

    template_path = theme_dir / "base.html"
    if not template_path.exists():
        print(f"Theme template not found: {template_path}", file=sys.stderr)
        sys.exit(1)

    documents = load_documents(content_dir, prefix=args.article_prefix, from_path=args.slug_from_path)
    if args.merge_tag_case:
        documents = sort_documents(canonicalize_tags(documents))
    tag_groups = group_by_tag(documents)
    routes = generate_pages(
        documents,
        tag_groups,
        posts_per_page=max(1, args.posts_per_page),
        tags_per_page=max(1, args.tags_per_page),
        home_limit=max(0, args.home_limit),
        aliases=args.aliases,
    )

    if args.clean:
        clean_output_dir(output_dir, project_root)
    output_dir.mkdir(parents=True, exist_ok=True)
    theme_static = theme_dir / "static"
    if theme_static.is_dir():
        copy_static(theme_static, output_dir)
    write_text(output_dir / "css" / "highlight.css", highlight_css(args.highlight_style))
    if static_dir.is_dir():
        copy_static(static_dir, output_dir)

    base_template = read_template(template_path)
    manifest: dict[str, str] = {}
    for page in routes:
        html_doc = render_page(page, base_template, args)
        write_text(output_dir / output_path_for(page.path), html_doc)
        manifest[page.path] = hash_text(html_doc)

    site_url = (args.site_url or "").strip()
    extra_files: dict[str, str] = {}
    if site_url:
        if args.enable_rss:
            extra_files["/rss.xml"] = build_rss(
                documents, site_url, args.site_name, args.site_description, args.feed_limit
            )
            if args.tag_feeds:
                extra_files.update(
                    build_tag_feeds(documents, tag_groups, site_url, args.site_name, args.feed_limit)
                )
        if args.enable_sitemap:
            extra_files["/sitemap.xml"] = build_sitemap(routes, site_url)
    elif args.enable_rss or args.enable_sitemap:
        print("No site URL configured; skipping RSS and sitemap.", file=sys.stderr)
    for path, text in extra_files.items():
        write_text(output_dir / output_path_for(path), text)
        manifest[path] = hash_text(text)

    lock_path = Path(args.lock_file)
    previous = load_lock(lock_path).get("routes", {})
    added, removed, changed = diff_manifest(previous, manifest)
    write_lock(
        lock_path,
        {
            "version": LOCK_VERSION,
            "built_at": dt.datetime.now().replace(microsecond=0).isoformat(),
            "routes": manifest,
        },
    )
    return {
        "documents": len(documents),
        "tags": len(tag_groups),
        "pages": len(routes),
        "files": len(manifest),
        "added": sorted(added),
        "removed": sorted(removed),
        "changed": sorted(changed),
    }


def main() -> None:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args()
    config = load_config(Path(pre_args.config))

    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    parser = argparse.ArgumentParser(description="Static site generator for MDX articles.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument(
        "--content", default=cfg_str("content", "src/posts"), help="Directory containing MDX/Markdown articles."
    )
    parser.add_argument("--static", default=cfg_str("static", "static"), help="Directory containing static assets.")
    parser.add_argument("--theme", default=cfg_str("theme", ""), help="Theme directory (defaults to the built-in theme).")
    parser.add_argument("--output", default=cfg_str("output", "public"), help="Output directory for the site.")
    parser.add_argument("--site-name", default=cfg_str("site_name", "My Blog"), help="Site title.")
    parser.add_argument(
        "--site-description",
        default=cfg_str("site_description", "Articles and notes."),
        help="Site description.",
    )
    parser.add_argument(
        "--site-url",
        default=cfg_str("site_url", ""),
        help="Public site URL used for RSS and sitemap.",
    )
    parser.add_argument(
        "--posts-per-page",
        default=cfg_int("posts_per_page", POSTS_PER_PAGE),
        type=int,
        help="Number of articles per list page.",
    )
    parser.add_argument(
        "--tags-per-page",
        default=cfg_int("tags_per_page", TAGS_PER_PAGE),
        type=int,
        help="Number of tags per tag index page.",
    )
    parser.add_argument(
        "--home-limit",
        default=cfg_int("home_limit", HOME_LIMIT),
        type=int,
        help="Number of latest articles on the home page (0 disables the home page).",
    )
    parser.add_argument(
        "--feed-limit",
        default=cfg_int("feed_limit", FEED_LIMIT),
        type=int,
        help="Maximum number of articles in each RSS feed.",
    )
    parser.add_argument(
        "--article-prefix",
        default=cfg_str("article_prefix", ""),
        help="Path namespace for article pages (e.g. 'articles').",
    )
    parser.add_argument(
        "--slug-from-path",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("slug_from_path", False),
        help="Include sub-directories of the content folder in article slugs.",
    )
    parser.add_argument(
        "--merge-tag-case",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("merge_tag_case", True),
        help="Merge tags that only differ by case or spacing.",
    )
    parser.add_argument(
        "--enable-rss",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_rss", True),
        help="Generate rss.xml.",
    )
    parser.add_argument(
        "--tag-feeds",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("tag_feeds", False),
        help="Generate one RSS feed per tag under rss/.",
    )
    parser.add_argument(
        "--enable-sitemap",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("enable_sitemap", True),
        help="Generate sitemap.xml.",
    )
    parser.add_argument(
        "--newsletter",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("newsletter", False),
        help="Show the newsletter signup form on article pages.",
    )
    parser.add_argument(
        "--theme-default",
        choices=["light", "dark"],
        default=cfg_str("theme_default", "light"),
        help="Color scheme used before the visitor picks one.",
    )
    parser.add_argument(
        "--highlight-style",
        default=cfg_str("highlight_style", "default"),
        help="Pygments style used for code blocks.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=cfg_bool("clean", True),
        help="Clean output directory before build.",
    )
    parser.add_argument(
        "--lock-file",
        default=cfg_str("lock_file", "build.lock.json"),
        help="Path to the build manifest JSON.",
    )
    args = parser.parse_args()
    args.aliases = load_aliases(config)

    start = time.perf_counter()
    try:
        summary = build_site(args)
    except SiteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    elapsed = time.perf_counter() - start
    print(
        f"Rendered {summary['pages']} pages from {summary['documents']} articles "
        f"and {summary['tags']} tags."
    )
    if summary["added"] or summary["removed"] or summary["changed"]:
        print(
            f"Changes since last build: {len(summary['added'])} added, "
            f"{len(summary['removed'])} removed, {len(summary['changed'])} changed."
        )
    else:
        print("No output changes since last build.")
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {args.output}")
