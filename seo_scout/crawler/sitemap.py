# seo_scout/crawler/sitemap.py
"""
Sitemap discovery and resolution over HTTP.
"""
from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Set
from urllib.parse import urlparse, urlunparse

from aiohttp import ClientError, ClientSession, ClientTimeout

from seo_scout.crawler.models import SitemapEntry
from seo_scout.parser.robots_parser import first_sitemap_url
from seo_scout.parser.sitemap_parser import parse_sitemap

__all__ = ("SitemapResolver",)


class SitemapResolver:
    """Fetches sitemaps and flattens sitemap indexes into a list of entries.

    Index documents are followed to any depth; a location already visited in
    the same resolution is not fetched again. A document that cannot be
    fetched or parsed contributes no entries.
    """

    def __init__(self, session: ClientSession, *, user_agent: str, timeout: float) -> None:
        self.session = session
        self.user_agent = user_agent
        self.timeout = timeout
        self.logger = logging.getLogger("SeoScout")

    async def discover(self, base_url: str) -> str:
        """Sitemap location for a site: robots.txt ``Sitemap:`` or ``/sitemap.xml``."""
        parsed = urlparse(base_url)
        robots_url = urlunparse((parsed.scheme, parsed.netloc, "/robots.txt", "", "", ""))
        fallback = urlunparse((parsed.scheme, parsed.netloc, "/sitemap.xml", "", "", ""))
        text = await self._get_text(robots_url)
        found = first_sitemap_url(text) if text else None
        if found:
            self.logger.info("Found sitemap in robots.txt: %s", found)
            return found
        return fallback

    async def resolve(self, sitemap_url: str) -> List[SitemapEntry]:
        return await self._resolve(sitemap_url, set())

    async def _resolve(self, sitemap_url: str, seen: Set[str]) -> List[SitemapEntry]:
        if sitemap_url in seen:
            self.logger.debug("Sitemap %s already resolved, skipping", sitemap_url)
            return []
        seen.add(sitemap_url)

        body = await self._get_text(sitemap_url)
        if not body:
            return []
        parsed = parse_sitemap(body)

        entries: List[SitemapEntry] = list(parsed.entries)
        for child in parsed.children:
            entries.extend(await self._resolve(child, seen))
        return entries

    async def _get_text(self, url: str) -> Optional[str]:
        try:
            async with self.session.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=ClientTimeout(total=self.timeout),
                raise_for_status=False,
            ) as resp:
                if resp.status != 200:
                    self.logger.debug("%s -> HTTP %s", url, resp.status)
                    return None
                return await resp.text()
        except (ClientError, asyncio.TimeoutError, UnicodeDecodeError) as exc:
            self.logger.warning("Error loading %s: %s", url, exc)
            return None
