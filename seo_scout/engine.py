# File: seo_scout/engine.py
"""seo_scout.engine: entry point that runs one crawl and returns its report."""

from __future__ import annotations

from typing import Any

from seo_scout.aggregator import SeoReport
from seo_scout.config import CrawlConfig
from seo_scout.crawler.crawler import CrawlController
from seo_scout.logger import logger

__all__ = ["start_scan"]


async def start_scan(cfg: CrawlConfig, **collaborators: Any) -> SeoReport:
    """
    Run the crawl controller inside its session context and return the report.

    Parameters
    ----------
    cfg : CrawlConfig
        Crawl settings.
    **collaborators
        Optional replacements passed through to :class:`CrawlController`
        (``fetcher``, ``sitemap_resolver``, ``suggester``, ``cache_store``,
        ``sink``).

    Returns
    -------
    SeoReport
        Summary and pages of the finished crawl.
    """
    logger.info("Starting scan…")
    async with CrawlController(cfg, **collaborators) as controller:
        return await controller.crawl()
