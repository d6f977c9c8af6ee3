import threading

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from spacetraveling import dependencies as deps
from spacetraveling.exceptions import InvalidCursor, SourceUnavailable
from spacetraveling.routers import pages
from spacetraveling.schemas.blog import Post, PostNavigation, PostPage, PostsPagination, PostSummary
from spacetraveling.services.page_cache import MISSING, PageCache
from tests.conftest import SEARCH_URL, FakeListingService, FakePostService


@pytest.fixture(autouse=True)
def clear_page_cache():
    pages.page_cache.clear()
    pages._generating.clear()
    yield
    pages.page_cache.clear()
    pages._generating.clear()


def _page(uid, title, **kwargs):
    return PostPage(post=Post(uid=uid, data={"title": title}), reading_time=4, **kwargs)


def _listing(*uids, next_page=None):
    return PostsPagination(
        results=[PostSummary(uid=uid, data={"title": uid.upper()}) for uid in uids],
        next_page=next_page,
    )


def make_app(listing_service, post_service=None):
    app = FastAPI()
    app.dependency_overrides[deps.get_listing_service] = lambda: listing_service
    app.dependency_overrides[deps.get_post_service] = lambda: post_service or FakePostService()
    app.include_router(pages.router)
    return app


def test_home_renders_first_page_with_load_more():
    client = TestClient(make_app(FakeListingService(_listing("a", next_page=f"{SEARCH_URL}?page=2"))))

    res = client.get("/")

    assert res.status_code == 200
    assert 'href="/post/a"' in res.text
    assert "Carregar mais posts" in res.text
    assert "/api/posts/more" in res.text


def test_home_without_more_pages_hides_button():
    client = TestClient(make_app(FakeListingService(_listing("a"))))

    assert "Carregar mais posts" not in client.get("/").text


def test_home_is_cached_between_requests():
    service = FakeListingService(_listing("a"))
    client = TestClient(make_app(service))

    client.get("/")
    client.get("/")

    assert service.calls == [("load_initial", None)]


def test_home_in_preview_bypasses_cache_and_shows_exit_link():
    service = FakeListingService(_listing("a"))
    client = TestClient(make_app(service))
    client.cookies.set("io.prismic.preview", "preview-ref")

    res = client.get("/")
    client.get("/")

    assert "Sair do modo Preview" in res.text
    assert service.calls == [("load_initial", "preview-ref"), ("load_initial", "preview-ref")]


def test_home_returns_502_page_when_source_down():
    client = TestClient(make_app(FakeListingService(error=SourceUnavailable("down"))))

    res = client.get("/")

    assert res.status_code == 502
    assert "Algo deu errado" in res.text


def test_prebuilt_post_renders_page():
    page = _page(
        "a",
        "Como utilizar Hooks",
        edited_at="* editado em 19 mar 2021, às 15:49",
        navigation=PostNavigation(next=Post(uid="b", data={"title": "Criando um app CRA"})),
    )
    client = TestClient(make_app(FakeListingService(_listing("a")), FakePostService({"a": page})))

    res = client.get("/post/a")

    assert res.status_code == 200
    assert "<h1>Como utilizar Hooks</h1>" in res.text
    assert "4 min" in res.text
    assert "* editado em 19 mar 2021, às 15:49" in res.text
    assert 'href="/post/b"' in res.text
    assert "Post anterior" not in res.text


def test_post_page_is_cached():
    post_service = FakePostService({"a": _page("a", "A")})
    client = TestClient(make_app(FakeListingService(_listing("a")), post_service))

    client.get("/post/a")
    client.get("/post/a")

    assert post_service.calls == [("a", None)]


def test_unlisted_post_serves_fallback_then_generated_page():
    post_service = FakePostService({"late": _page("late", "Post tardio")})
    client = TestClient(make_app(FakeListingService(_listing("a")), post_service))

    first = client.get("/post/late")
    second = client.get("/post/late")

    assert first.status_code == 200
    assert "Carregando..." in first.text
    assert 'http-equiv="refresh"' in first.text
    assert "<h1>Post tardio</h1>" in second.text
    assert post_service.calls == [("late", None)]


def test_unknown_post_gives_fallback_then_not_found():
    client = TestClient(make_app(FakeListingService(_listing("a")), FakePostService()))

    first = client.get("/post/ghost")
    second = client.get("/post/ghost")

    assert "Carregando..." in first.text
    assert second.status_code == 404
    assert "Post não encontrado" in second.text
    assert pages.page_cache.get("post:ghost") is MISSING


def test_prebuilt_post_missing_from_source_is_404():
    client = TestClient(make_app(FakeListingService(_listing("a")), FakePostService()))

    res = client.get("/post/a")

    assert res.status_code == 404


def test_post_page_returns_502_when_source_down():
    client = TestClient(
        make_app(FakeListingService(_listing("a")), FakePostService(error=SourceUnavailable("down")))
    )

    res = client.get("/post/a")

    assert res.status_code == 502


def test_preview_post_generated_synchronously_with_ref():
    post_service = FakePostService({"draft": _page("draft", "Rascunho", preview=True)})
    client = TestClient(make_app(FakeListingService(_listing("a")), post_service))
    client.cookies.set("io.prismic.preview", "preview-ref")

    res = client.get("/post/draft")

    assert "<h1>Rascunho</h1>" in res.text
    assert "Sair do modo Preview" in res.text
    assert post_service.calls == [("draft", "preview-ref")]
    assert pages.page_cache.get("post:draft") is None


def test_comments_embed_rendered_when_configured(monkeypatch):
    from spacetraveling.services import comments
    from spacetraveling.settings import Settings

    monkeypatch.setattr(comments, "settings", Settings(COMMENTS_REPO="someone/comments"))
    client = TestClient(make_app(FakeListingService(_listing("a")), FakePostService({"a": _page("a", "A")})))

    res = client.get("/post/a")

    assert 'src="https://utteranc.es/client.js"' in res.text
    assert 'repo="someone/comments"' in res.text


def test_many_unknown_posts_keep_cache_bounded(monkeypatch):
    monkeypatch.setattr(pages, "page_cache", PageCache(max_entries=10))
    post_service = FakePostService()
    client = TestClient(make_app(FakeListingService(_listing("a")), post_service))

    for i in range(50):
        client.get(f"/post/random-{i}")

    assert len(post_service.calls) == 50
    assert len(pages.page_cache) <= 10


def test_generation_claimed_once_across_threads():
    barrier = threading.Barrier(8)
    claims = []

    def claim():
        barrier.wait()
        claims.append(pages._claim_generation("late"))

    threads = [threading.Thread(target=claim) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert claims.count(True) == 1
    assert "late" in pages._generating


def test_generation_can_be_claimed_again_after_it_finishes():
    assert pages._claim_generation("late") is True

    pages.generate_post_page(FakePostService({"late": _page("late", "Post tardio")}), "late")

    assert pages._claim_generation("late") is True


def test_post_page_returns_502_when_navigation_cursor_is_foreign():
    client = TestClient(
        make_app(
            FakeListingService(_listing("a")),
            FakePostService(error=InvalidCursor("Refusing to follow cursor outside search")),
        )
    )

    res = client.get("/post/a")

    assert res.status_code == 502
