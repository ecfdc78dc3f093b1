from __future__ import annotations

from typing import Optional, Sequence

from .content import sort_documents
from .models import Document, Page, TagGroup
from .pager import paginate
from .routes import RouteTable
from .taxonomy import documents_for_tag

ARTICLES_BASE = "/articles"
TAGS_BASE = "/tags"
POSTS_PER_PAGE = 10
TAGS_PER_PAGE = 24
HOME_LIMIT = 10
DEFAULT_ALIASES = {"/article": ARTICLES_BASE}


def tag_base(tag: TagGroup) -> str:
    return f"{TAGS_BASE}/{tag.segment}"


def generate_pages(
    documents: Sequence[Document],
    tag_groups: Sequence[TagGroup],
    posts_per_page: int = POSTS_PER_PAGE,
    tags_per_page: int = TAGS_PER_PAGE,
    home_limit: int = HOME_LIMIT,
    aliases: Optional[dict[str, str]] = None,
) -> RouteTable:
    """Compute every page of the site without touching the filesystem.

    Raises DuplicateRouteError when two pages resolve to the same path.
    """
    routes = RouteTable()
    documents = sort_documents(documents)

    if home_limit > 0:
        routes.register(Page(path="/", kind="home", items=tuple(documents[:home_limit])))

    for doc in documents:
        routes.register(Page(path=doc.slug, kind="article", items=(doc,)))

    for window in paginate(len(documents), posts_per_page, ARTICLES_BASE):
        routes.register(
            Page(
                path=window.path,
                kind="article-list",
                items=window.slice(documents),
                window=window,
                base=ARTICLES_BASE,
            )
        )

    for tag in tag_groups:
        tagged = documents_for_tag(documents, tag.value)
        base = tag_base(tag)
        for window in paginate(len(tagged), posts_per_page, base):
            routes.register(
                Page(
                    path=window.path,
                    kind="tag",
                    items=window.slice(tagged),
                    window=window,
                    tag=tag,
                    base=base,
                )
            )

    for window in paginate(len(tag_groups), tags_per_page, TAGS_BASE):
        routes.register(
            Page(
                path=window.path,
                kind="tag-index",
                items=window.slice(tag_groups),
                window=window,
                base=TAGS_BASE,
            )
        )

    for path, target in sorted((DEFAULT_ALIASES if aliases is None else aliases).items()):
        # An alias to a listing that was not emitted would only redirect to a 404.
        if target not in routes:
            continue
        routes.register(Page(path=path, kind="alias", target=target))

    routes.register(Page(path="/404", kind="not-found"))
    return routes
