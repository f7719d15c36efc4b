# seo_scout/crawler/fetcher.py
"""
Fetcher module: downloads a page and turns it into a graded PageResult.
"""
from __future__ import annotations

from typing import FrozenSet

from aiohttp import ClientResponseError, ClientSession, ClientTimeout

from seo_scout.crawler.models import CrawlTask, PageResult
from seo_scout.parser.html_parser import (
    count_keywords,
    parse_html,
    score_description,
    score_h1,
    score_keywords,
    score_title,
)


class MetadataFetcher:
    """Fetches HTML with a per-request timeout and extracts SEO metadata.

    Any failure (network error, timeout, non-2xx status) is raised; the batch
    scheduler converts it into an error result.
    """

    def __init__(self, session: ClientSession, *, user_agent: str, timeout: float) -> None:
        self.session = session
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch(self, task: CrawlTask, known_sitemap_urls: FrozenSet[str]) -> PageResult:
        html = await self._download(task.url)
        return self.build_result(task, html, known_sitemap_urls)

    async def _download(self, url: str) -> str:
        async with self.session.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=ClientTimeout(total=self.timeout),
            raise_for_status=False,
        ) as resp:
            if not 200 <= resp.status < 300:
                raise ClientResponseError(
                    resp.request_info,
                    resp.history,
                    status=resp.status,
                    message=f"HTTP error! Status: {resp.status}",
                )
            return await resp.text(errors="replace")

    @staticmethod
    def build_result(task: CrawlTask, html: str, known_sitemap_urls: FrozenSet[str]) -> PageResult:
        """Grade the markup of *task* into a PageResult."""
        page = parse_html(html, task.url)
        hint = task.sitemap_hint
        return PageResult(
            url=task.url,
            title=page.title,
            title_length=len(page.title),
            title_score=score_title(page.title),
            description=page.description,
            description_length=len(page.description),
            description_score=score_description(page.description),
            keywords=page.keywords,
            keywords_count=count_keywords(page.keywords),
            keywords_score=score_keywords(page.keywords),
            h1_count=page.h1_count,
            h1_score=score_h1(page.h1_count),
            h1_text=page.h1_text,
            canonical_url=page.canonical_url,
            og_title=page.og_title,
            og_description=page.og_description,
            og_image=page.og_image,
            twitter_card=page.twitter_card,
            twitter_title=page.twitter_title,
            twitter_description=page.twitter_description,
            twitter_image=page.twitter_image,
            robots=page.robots,
            depth=task.depth,
            links=page.links,
            in_sitemap=task.url in known_sitemap_urls,
            lastmod=hint.lastmod if hint else None,
            priority=hint.priority if hint else None,
            changefreq=hint.changefreq if hint else None,
            html=html,
        )
