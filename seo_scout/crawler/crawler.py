# === FILE: seo_scout/crawler/crawler.py ===
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import FrozenSet, List, Optional, Set

from aiohttp import ClientSession

from seo_scout.aggregator import SeoReport, build_report
from seo_scout.cache import CacheStore, CrawlCache
from seo_scout.config import CrawlConfig, TraversalPolicy
from seo_scout.crawler.fetcher import MetadataFetcher
from seo_scout.crawler.frontier import Frontier, VisitedSet
from seo_scout.crawler.models import CrawlTask, PageResult, SitemapEntry, SitemapHint
from seo_scout.crawler.scheduler import BatchScheduler, PageFetcher, Suggester
from seo_scout.crawler.sitemap import SitemapResolver
from seo_scout.report.sink import OutputSink
from seo_scout.suggest import ChatCompletionSuggester
from seo_scout.utils import cache_key_from_url, normalize_url

__all__ = ("CrawlController",)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class CrawlController:
    """Drives one crawl: seeding, batched traversal, checkpoints and the final report.

    One instance per run; it exclusively owns the frontier, the visited set and
    the result collection. Collaborators default to the HTTP implementations
    bound to the session opened in ``__aenter__`` and may be replaced (tests
    do).
    """

    def __init__(
        self,
        config: CrawlConfig,
        *,
        fetcher: Optional[PageFetcher] = None,
        sitemap_resolver: Optional[SitemapResolver] = None,
        suggester: Optional[Suggester] = None,
        cache_store: Optional[CacheStore] = None,
        sink: Optional[OutputSink] = None,
    ) -> None:
        self.config = config
        self.root_url = normalize_url(str(config.base_url))
        self.cache_key = cache_key_from_url(self.root_url)
        self.cache_store = cache_store or CacheStore(config.cache_dir)
        self.sink = sink or OutputSink(config.output_dir, config.output_name, config.output_format)
        self.frontier = Frontier()
        self.visited = VisitedSet()
        self.results: List[PageResult] = []
        self.processed = 0
        self.sitemap_entries: List[SitemapEntry] = []
        self.known_sitemap_urls: FrozenSet[str] = frozenset()
        self.queued: Set[str] = set()
        self.from_cache = False
        self.session: Optional[ClientSession] = None
        self.fetcher = fetcher
        self.sitemap_resolver = sitemap_resolver
        self.suggester = suggester
        self.logger = logging.getLogger("SeoScout")

    async def __aenter__(self) -> CrawlController:
        self.session = ClientSession(headers={"User-Agent": self.config.user_agent}, raise_for_status=False)
        if self.fetcher is None:
            self.fetcher = MetadataFetcher(
                self.session, user_agent=self.config.user_agent, timeout=self.config.timeout
            )
        if self.sitemap_resolver is None:
            self.sitemap_resolver = SitemapResolver(
                self.session, user_agent=self.config.user_agent, timeout=self.config.timeout
            )
        if self.suggester is None and self.config.suggestions.enabled:
            self.suggester = ChatCompletionSuggester(self.session, self.config.suggestions)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    # ------------------------------------------------------------------ #
    # Public entry point                                                 #
    # ------------------------------------------------------------------ #

    async def crawl(self) -> SeoReport:
        cfg = self.config
        self.logger.info(
            "Starting crawl of %s (policy=%s, max depth %d, limit %d)",
            self.root_url, cfg.policy.value, cfg.max_depth, cfg.page_limit,
        )
        start = time.monotonic()

        # the site cache is keyed by host; a single page neither reads nor rewrites it
        uses_cache = cfg.policy is not TraversalPolicy.SINGLE_PAGE
        cache = self.cache_store.load(self.cache_key) if uses_cache else None
        if cache is not None and not cfg.force_refresh and cache.is_fresh(cfg.cache_ttl):
            self.logger.info(
                "[CACHE] Using cached crawl data (%.0f s old). Use --force to refresh.", cache.age_seconds()
            )
            self._adopt(cache)
            self.from_cache = True
            return self._finish(cache.crawl_date)

        if cache is not None:
            self._adopt(cache)
        await self._seed()

        scheduler = BatchScheduler(
            self.fetcher,
            self.visited,
            timeout=cfg.timeout,
            suggester=self.suggester,
            known_sitemap_urls=self.known_sitemap_urls,
        )
        while self.frontier and self.processed < cfg.page_limit:
            await self._run_batch(scheduler)

        duration = time.monotonic() - start
        self.logger.info(
            "Crawl completed. Processed %d/%d pages in %.2f s (%d still queued)",
            self.processed, cfg.page_limit, duration, len(self.frontier),
        )
        return self._finish(_now())

    # ------------------------------------------------------------------ #
    # Seeding                                                            #
    # ------------------------------------------------------------------ #

    def _adopt(self, cache: CrawlCache) -> None:
        """Take over cached pages: they are visited and part of the results."""
        complete = 0
        for page in cache.pages:
            if not self.visited.add(page.url):
                continue
            self.results.append(page)
            complete += page.is_enriched
        self.processed = len(self.results)
        self.logger.info(
            "Loaded %d pages from cache (%d fully enriched, %d partial)",
            len(self.results), complete, len(self.results) - complete,
        )

    def _enqueue(self, url: str, depth: int, hint: Optional[SitemapHint] = None) -> bool:
        url = normalize_url(url)
        if url in self.visited or url in self.queued:
            return False
        self.queued.add(url)
        self.frontier.push(CrawlTask(url=url, depth=depth, sitemap_hint=hint))
        self.logger.debug("Queued %s (depth %d)", url, depth)
        return True

    async def _seed(self) -> None:
        cfg = self.config
        policy = cfg.policy
        if policy is TraversalPolicy.SINGLE_PAGE:
            self._enqueue(self.root_url, 0)
            return

        sitemap_url = cfg.sitemap_url or await self.sitemap_resolver.discover(self.root_url)
        self.logger.info("Attempting to parse sitemap at %s", sitemap_url)
        self.sitemap_entries = await self.sitemap_resolver.resolve(sitemap_url)
        self.known_sitemap_urls = frozenset(normalize_url(e.url) for e in self.sitemap_entries)

        for entry in self.sitemap_entries:
            if self.processed + len(self.frontier) >= cfg.page_limit:
                break
            self._enqueue(entry.url, 0, entry.hint)

        if not self.sitemap_entries:
            if policy is TraversalPolicy.SITEMAP_ONLY:
                self.logger.warning(
                    "No URLs found in sitemap %s; nothing to crawl in sitemap-only mode.", sitemap_url
                )
            else:
                self.logger.info("No URLs found in sitemap. Continuing with regular crawl.")
        else:
            self.logger.info("Found %d URLs in sitemap.", len(self.sitemap_entries))

        if policy is not TraversalPolicy.SITEMAP_ONLY:
            self._enqueue(self.root_url, 0)

    # ------------------------------------------------------------------ #
    # Main loop                                                          #
    # ------------------------------------------------------------------ #

    async def _run_batch(self, scheduler: BatchScheduler) -> None:
        cfg = self.config
        size = min(cfg.concurrency, cfg.page_limit - self.processed)
        batch = self.frontier.pop_batch(size)
        self.logger.info(
            "Processing batch of %d URLs... (processed %d/%d)", len(batch), self.processed, cfg.page_limit
        )
        new_pages = await scheduler.run(batch)
        self.results.extend(new_pages)
        self.processed += len(new_pages)
        self._checkpoint()

        if not cfg.follow_links or cfg.policy is not TraversalPolicy.SITEMAP_AND_LINKS:
            return
        for page in new_pages:
            if page.depth >= cfg.max_depth:
                continue
            for link in page.links:
                self._enqueue(link, page.depth + 1)

    def _checkpoint(self) -> None:
        """Persist cache and the selected output after a completed batch."""
        now = _now()
        if self.config.policy is not TraversalPolicy.SINGLE_PAGE:
            cache = CrawlCache(
                crawl_date=now,
                base_url=self.root_url,
                options=self.config.public_options(),
                pages=self.results,
            )
            try:
                self.cache_store.save(self.cache_key, cache)
            except OSError as exc:
                self.logger.error("Could not save crawl cache: %s", exc)
        try:
            self.sink.write_progress(self._report(now))
        except OSError as exc:
            self.logger.error("Could not write progress report: %s", exc)
        self.logger.info("Batch complete. Total processed: %d", len(self.results))

    def _report(self, crawl_date: datetime) -> SeoReport:
        return build_report(
            self.results,
            base_url=self.root_url,
            crawl_date=crawl_date,
            options=self.config.public_options(),
        )

    def _finish(self, crawl_date: datetime) -> SeoReport:
        report = self._report(crawl_date)
        try:
            self.sink.write_final(report)
        except OSError as exc:
            self.logger.error("Error saving report: %s", exc)
        return report
