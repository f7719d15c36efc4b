# seo_scout/crawler/scheduler.py
"""
Batch scheduler: runs one bounded batch of crawl tasks concurrently.
"""
from __future__ import annotations

import asyncio
import logging
from typing import FrozenSet, List, Optional, Protocol, Sequence

from seo_scout.crawler.frontier import VisitedSet
from seo_scout.crawler.models import CrawlTask, PageResult, Suggestion

__all__ = ("BatchScheduler", "PageFetcher", "Suggester")


class PageFetcher(Protocol):
    """Fetches a URL and extracts its metadata; raises on failure."""

    async def fetch(self, task: CrawlTask, known_sitemap_urls: FrozenSet[str]) -> PageResult:
        ...


class Suggester(Protocol):
    """Proposes better metadata for a page; may raise on failure."""

    async def suggest(self, page: PageResult, html: str) -> Suggestion:
        ...


class BatchScheduler:
    """Executes a batch and returns one :class:`PageResult` per claimed task.

    Tasks whose URL is already visited are skipped. Claiming (marking visited)
    happens before any fetch is started, so the spawned coroutines never touch
    the visited set themselves. Fetch failures are converted into error results
    and never propagate out of :meth:`run`.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        visited: VisitedSet,
        *,
        timeout: float,
        suggester: Optional[Suggester] = None,
        known_sitemap_urls: FrozenSet[str] = frozenset(),
    ) -> None:
        self.fetcher = fetcher
        self.visited = visited
        self.timeout = timeout
        self.suggester = suggester
        self.known_sitemap_urls = known_sitemap_urls
        self.dispatched = 0
        self.logger = logging.getLogger("SeoScout")

    def claim(self, batch: Sequence[CrawlTask]) -> List[CrawlTask]:
        """Mark unvisited tasks visited and return them; duplicates drop out."""
        claimed: List[CrawlTask] = []
        for task in batch:
            if not self.visited.add(task.url):
                self.logger.debug("Skip already visited %s", task.url)
                continue
            claimed.append(task)
        self.dispatched += len(claimed)
        return claimed

    async def run(self, batch: Sequence[CrawlTask]) -> List[PageResult]:
        claimed = self.claim(batch)
        if not claimed:
            return []
        return list(await asyncio.gather(*(self._process(task) for task in claimed)))

    async def _process(self, task: CrawlTask) -> PageResult:
        try:
            page = await asyncio.wait_for(
                self.fetcher.fetch(task, self.known_sitemap_urls), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            self.logger.warning("Timed out %s after %.1f s", task.url, self.timeout)
            return PageResult.failed(task, f"Timed out after {self.timeout:g} s")
        except Exception as exc:
            self.logger.warning("Error crawling %s: %s", task.url, exc)
            return PageResult.failed(task, str(exc) or type(exc).__name__)

        self.logger.info("Crawled: %s", task.url)
        if self.suggester is not None and page.error is None and page.needs_suggestions:
            page = await self._enrich(page)
        return page.without_html()

    async def _enrich(self, page: PageResult) -> PageResult:
        try:
            suggestion = await self.suggester.suggest(page, page.html or "")
        except Exception as exc:
            self.logger.warning("No suggestions for %s: %s", page.url, exc)
            return page
        return page.with_suggestion(suggestion)
