"""Unit tests for page generation."""

import random

import pytest

from mdxsite.errors import DuplicateRouteError
from mdxsite.generator import generate_pages
from mdxsite.taxonomy import group_by_tag


@pytest.fixture
def corpus(make_document):
    docs = []
    for i in range(25):
        tags = ["Web Dev"] if i % 2 == 0 else ["Python"]
        docs.append(make_document(f"/post-{i:02d}", f"2024-01-{i + 1:02d}", tags=tags))
    return docs


def build(docs, **kwargs):
    return generate_pages(docs, group_by_tag(docs), **kwargs)


class TestGeneratePages:
    def test_one_detail_page_per_document(self, corpus) -> None:
        routes = build(corpus)
        articles = [page for page in routes if page.kind == "article"]

        assert sorted(page.path for page in articles) == sorted(doc.slug for doc in corpus)
        assert all(page.document.slug == page.path for page in articles)

    def test_article_list_windows(self, corpus) -> None:
        routes = build(corpus, posts_per_page=10)
        lists = [page for page in routes if page.kind == "article-list"]

        assert [page.path for page in lists] == ["/articles", "/articles/page/2", "/articles/page/3"]
        assert [len(page.items) for page in lists] == [10, 10, 5]
        assert [page.window.is_last for page in lists] == [False, False, True]
        assert "/articles/page/4" not in routes
        assert lists[0].items[0].slug == "/post-24"
        assert lists[2].items[-1].slug == "/post-00"

    def test_listing_order_is_newest_first(self, corpus) -> None:
        routes = build(corpus, posts_per_page=100)
        items = routes.get("/articles").items
        dates = [doc.published_at for doc in items]
        assert dates == sorted(dates, reverse=True)

    def test_tag_listing_contains_only_tagged_documents(self, corpus) -> None:
        routes = build(corpus, posts_per_page=10)
        web_dev = [page for page in routes if page.kind == "tag" and page.tag.value == "Web Dev"]

        assert [page.path for page in web_dev] == ["/tags/web-dev", "/tags/web-dev/page/2"]
        assert [len(page.items) for page in web_dev] == [10, 3]
        assert all("Web Dev" in doc.tags for page in web_dev for doc in page.items)

    def test_web_dev_document_reaches_its_tag_page(self, make_document) -> None:
        doc = make_document("/intro", tags=["Web Dev"])
        routes = build([doc])
        assert routes.get("/tags/web-dev").items == (doc,)

    def test_tag_index_uses_its_own_page_size(self, make_document) -> None:
        docs = [make_document(f"/p{i}", tags=[f"tag {i:02d}"]) for i in range(30)]
        routes = build(docs, tags_per_page=24)
        index = [page for page in routes if page.kind == "tag-index"]

        assert [page.path for page in index] == ["/tags", "/tags/page/2"]
        assert [len(page.items) for page in index] == [24, 6]

    def test_empty_corpus_emits_no_listings(self) -> None:
        routes = generate_pages([], [])

        assert "/articles" not in routes
        assert "/tags" not in routes
        assert "/article" not in routes
        assert not any(page.kind in {"article-list", "tag", "tag-index"} for page in routes)

    def test_home_alias_and_not_found(self, corpus) -> None:
        routes = build(corpus, home_limit=5)

        assert [doc.slug for doc in routes.get("/").items] == ["/post-24", "/post-23", "/post-22", "/post-21", "/post-20"]
        assert routes.get("/article").target == "/articles"
        assert routes.get("/404").kind == "not-found"

    def test_home_page_can_be_disabled(self, corpus) -> None:
        assert "/" not in build(corpus, home_limit=0)

    def test_custom_aliases(self, corpus) -> None:
        routes = build(corpus, aliases={"/blog": "/articles", "/topics": "/tags", "/gone": "/nowhere"})

        assert routes.get("/blog").target == "/articles"
        assert routes.get("/topics").target == "/tags"
        assert "/gone" not in routes
        assert "/article" not in routes

    def test_identical_dates_have_stable_order(self, make_document) -> None:
        docs = [make_document(f"/{name}", "2024-01-01") for name in ("delta", "alpha", "charlie", "bravo")]
        expected = ["/alpha", "/bravo", "/charlie", "/delta"]

        for seed in range(5):
            shuffled = docs[:]
            random.Random(seed).shuffle(shuffled)
            assert [doc.slug for doc in build(shuffled).get("/articles").items] == expected

    def test_regeneration_is_idempotent(self, corpus) -> None:
        first = build(corpus)
        shuffled = corpus[:]
        random.Random(1).shuffle(shuffled)
        second = build(shuffled)

        assert first == second
        assert first.digest() == second.digest()


class TestDuplicateRoutes:
    def test_two_documents_with_same_slug(self, make_document) -> None:
        docs = [make_document("/same", "2024-01-01"), make_document("/same", "2024-02-01")]
        with pytest.raises(DuplicateRouteError, match="/same"):
            build(docs)

    def test_document_shadowing_a_listing(self, make_document) -> None:
        with pytest.raises(DuplicateRouteError, match="/articles"):
            build([make_document("/articles")])

    def test_tags_colliding_on_url_segment(self, make_document) -> None:
        docs = [make_document("/a", tags=["SEO"]), make_document("/b", tags=["seo"])]
        with pytest.raises(DuplicateRouteError, match="/tags/seo"):
            build(docs)

    def test_dot_segment_tag_cannot_replace_the_home_page(self, make_document) -> None:
        docs = [make_document("/a", tags=["Python", ".."])]
        with pytest.raises(DuplicateRouteError, match="/tags/.."):
            build(docs)

    def test_slash_tag_cannot_replace_the_tag_index(self, make_document) -> None:
        docs = [make_document("/a", tags=["/"])]
        with pytest.raises(DuplicateRouteError, match="/tags"):
            build(docs)
