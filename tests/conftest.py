# File: tests/conftest.py
import asyncio
import contextlib
from typing import AsyncIterator, Dict, Iterable, List, Optional, Sequence

import pytest
from aiohttp import web

from seo_scout.config import CrawlConfig
from seo_scout.crawler.models import CrawlTask, PageResult, SitemapEntry, Suggestion

ROOT = "https://example.com"


class FakeFetcher:
    """Serves canned pages from a link graph and records every fetch."""

    def __init__(
        self,
        links: Optional[Dict[str, Sequence[str]]] = None,
        failures: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
        delay: float = 0.0,
    ) -> None:
        self.links = links or {}
        self.failures = failures or {}
        self.delays = delays or {}
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, task: CrawlTask, known_sitemap_urls) -> PageResult:
        self.calls.append(task.url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            pause = self.delays.get(task.url, self.delay)
            if pause:
                await asyncio.sleep(pause)
            if task.url in self.failures:
                raise self.failures[task.url]
            title = f"Page {task.url}"
            return PageResult(
                url=task.url,
                depth=task.depth,
                title=title,
                title_length=len(title),
                title_score="good",
                links=list(self.links.get(task.url, [])),
                in_sitemap=task.url in known_sitemap_urls,
                html="<html><title>x</title></html>",
            )
        finally:
            self.in_flight -= 1


class FakeResolver:
    """Sitemap resolver returning a fixed list of URLs."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self.entries = [SitemapEntry(url=u, lastmod="2024-01-01") for u in urls]
        self.resolved: List[str] = []

    async def discover(self, base_url: str) -> str:
        return f"{base_url}/sitemap.xml"

    async def resolve(self, sitemap_url: str) -> List[SitemapEntry]:
        self.resolved.append(sitemap_url)
        return list(self.entries)


class FakeSuggester:
    def __init__(self, suggestion: Optional[Suggestion] = None, error: Optional[Exception] = None) -> None:
        self.suggestion = suggestion or Suggestion("Better title", "Better description", "a, b, c")
        self.error = error
        self.calls: List[str] = []

    async def suggest(self, page: PageResult, html: str) -> Suggestion:
        self.calls.append(page.url)
        if self.error is not None:
            raise self.error
        return self.suggestion


@pytest.fixture()
def make_config(tmp_path):
    """Factory for CrawlConfig writing everything below tmp_path."""

    def _make(**overrides) -> CrawlConfig:
        data = dict(
            base_url=ROOT,
            timeout=2.0,
            output_dir=tmp_path / "output",
            cache_dir=tmp_path / "output" / "cache",
        )
        data.update(overrides)
        return CrawlConfig(**data)

    return _make


@pytest.fixture()
def fake_fetcher():
    return FakeFetcher


@pytest.fixture()
def fake_resolver():
    return FakeResolver


@pytest.fixture()
def fake_suggester():
    return FakeSuggester


@contextlib.asynccontextmanager
async def _serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on an ephemeral port, yield its base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port = runner.addresses[0][1]
    try:
        yield f"http://127.0.0.1:{port}"
    finally:
        await runner.cleanup()


@pytest.fixture()
def serve_app():
    return _serve_app
