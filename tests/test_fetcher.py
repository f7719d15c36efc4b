# File: tests/test_fetcher.py
"""HTTP fetching and a full crawl against a local aiohttp site."""
from __future__ import annotations

import json

import pytest
from aiohttp import ClientResponseError, ClientSession, web

from seo_scout.crawler.fetcher import MetadataFetcher
from seo_scout.crawler.models import CrawlTask, SitemapHint
from seo_scout.engine import start_scan

ROOT_HTML = """
<html><head>
<title>Local test site home</title>
<meta name="description" content="A tiny site used to exercise the crawler end to end in tests.">
<meta name="keywords" content="test, crawler">
</head><body>
<h1>Home</h1>
<a href="/page1">One</a> <a href="/page2">Two</a> <a href="/broken">Broken</a>
<a href="https://elsewhere.example.org/">External</a>
</body></html>
"""


def site_app(seen_agents: list) -> web.Application:
    app = web.Application()

    def html(text: str):
        async def handler(request):
            seen_agents.append(request.headers.get("User-Agent"))
            return web.Response(text=text, content_type="text/html")

        return handler

    async def robots(request):
        return web.Response(text=f"Sitemap: http://{request.host}/sitemap.xml\n", content_type="text/plain")

    async def sitemap(request):
        xml = (
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
            f"<url><loc>http://{request.host}/page1</loc><lastmod>2024-02-01</lastmod></url>"
            "</urlset>"
        )
        return web.Response(text=xml, content_type="application/xml")

    app.router.add_get("/", html(ROOT_HTML))
    app.router.add_get("/page1", html("<title>Page one</title><h1>One</h1><h1>Again</h1>"))
    app.router.add_get("/page2", html('<title>Page two</title><a href="/page1">back</a>'))
    app.router.add_get("/robots.txt", robots)
    app.router.add_get("/sitemap.xml", sitemap)
    return app


@pytest.mark.asyncio()
async def test_fetch_builds_graded_result(serve_app):
    agents: list = []
    async with serve_app(site_app(agents)) as base:
        async with ClientSession() as session:
            fetcher = MetadataFetcher(session, user_agent="TestAgent/1.0", timeout=2.0)
            task = CrawlTask(f"{base}/page1", depth=1, sitemap_hint=SitemapHint(lastmod="2024-02-01"))
            page = await fetcher.fetch(task, frozenset({f"{base}/page1"}))

    assert agents == ["TestAgent/1.0"]
    assert page.title == "Page one"
    assert page.title_length == 8
    assert page.title_score == "needs improvement"
    assert page.h1_count == 2
    assert page.h1_score == "needs improvement"
    assert page.depth == 1
    assert page.in_sitemap
    assert page.lastmod == "2024-02-01"
    assert page.html and "<h1>One</h1>" in page.html


@pytest.mark.asyncio()
async def test_fetch_raises_on_http_error(serve_app):
    async with serve_app(site_app([])) as base:
        async with ClientSession() as session:
            fetcher = MetadataFetcher(session, user_agent="TestAgent/1.0", timeout=2.0)
            with pytest.raises(ClientResponseError) as exc_info:
                await fetcher.fetch(CrawlTask(f"{base}/broken"), frozenset())

    assert exc_info.value.status == 404
    assert exc_info.value.message == "HTTP error! Status: 404"


@pytest.mark.asyncio()
async def test_full_crawl_against_local_site(serve_app, make_config):
    agents: list = []
    async with serve_app(site_app(agents)) as base:
        cfg = make_config(base_url=base, user_agent="TestAgent/1.0", concurrency=2, output_format="json")
        report = await start_scan(cfg)

    pages = {p.url: p for p in report.pages}
    assert set(pages) == {base, f"{base}/page1", f"{base}/page2", f"{base}/broken"}
    assert pages[base].title_score == "good"
    assert pages[base].description_score == "good"
    assert pages[base].keywords_count == 2
    assert pages[f"{base}/page1"].in_sitemap
    assert pages[f"{base}/page1"].lastmod == "2024-02-01"
    assert pages[f"{base}/page2"].depth == 1
    assert "404" in pages[f"{base}/broken"].error
    assert set(agents) == {"TestAgent/1.0"}

    assert report.summary.total_pages == 4
    assert report.summary.pages_with_errors == 1
    assert report.summary.pages_in_sitemap == 1

    saved = json.loads((cfg.output_dir / "seo-report.json").read_text(encoding="utf-8"))
    assert len(saved["pages"]) == 4
    assert (cfg.cache_dir / "127.0.0.1.json").is_file()
