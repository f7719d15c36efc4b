# seo_scout/crawler/models.py
"""
Data models for the SeoScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

GOOD = "good"
NEEDS_IMPROVEMENT = "needs improvement"


@dataclass(frozen=True, slots=True)
class SitemapHint:
    """Metadata a sitemap declares for one URL."""

    lastmod: Optional[str] = None
    priority: Optional[str] = None
    changefreq: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SitemapEntry:
    """One ``<url>`` of a sitemap."""

    url: str
    lastmod: Optional[str] = None
    priority: Optional[str] = None
    changefreq: Optional[str] = None

    @property
    def hint(self) -> SitemapHint:
        return SitemapHint(self.lastmod, self.priority, self.changefreq)


@dataclass(frozen=True, slots=True)
class CrawlTask:
    """A unit of work in the frontier; consumed exactly once."""

    url: str
    depth: int = 0
    sitemap_hint: Optional[SitemapHint] = None


@dataclass(frozen=True, slots=True)
class Suggestion:
    """Replacement metadata proposed by the suggestion service."""

    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.title or self.description or self.keywords)


class PageResult(BaseModel):
    """Extracted fields, quality scores and enrichment for one processed URL."""

    model_config = ConfigDict(extra="ignore")

    url: str
    title: str = ""
    title_length: int = 0
    title_score: str = NEEDS_IMPROVEMENT
    description: str = ""
    description_length: int = 0
    description_score: str = NEEDS_IMPROVEMENT
    keywords: str = ""
    keywords_count: int = 0
    keywords_score: str = NEEDS_IMPROVEMENT
    h1_count: int = 0
    h1_score: str = NEEDS_IMPROVEMENT
    h1_text: str = ""
    canonical_url: str = ""
    og_title: str = ""
    og_description: str = ""
    og_image: str = ""
    twitter_card: str = ""
    twitter_title: str = ""
    twitter_description: str = ""
    twitter_image: str = ""
    robots: str = ""
    depth: int = 0
    links: List[str] = Field(default_factory=list)
    in_sitemap: bool = False
    lastmod: Optional[str] = None
    priority: Optional[str] = None
    changefreq: Optional[str] = None
    error: Optional[str] = None
    suggested_title: Optional[str] = None
    suggested_description: Optional[str] = None
    suggested_keywords: Optional[str] = None
    # source markup, kept only until the suggestion step has run
    html: Optional[str] = Field(default=None, exclude=True, repr=False)

    @classmethod
    def failed(cls, task: CrawlTask, message: str) -> PageResult:
        """Result for a task whose fetch or parse failed: empty fields plus the error."""
        return cls(url=task.url, depth=task.depth, error=message or "unknown error")

    @property
    def is_enriched(self) -> bool:
        """All three suggestion fields are present."""
        return bool(self.suggested_title and self.suggested_description and self.suggested_keywords)

    @property
    def needs_suggestions(self) -> bool:
        return NEEDS_IMPROVEMENT in (self.title_score, self.description_score, self.keywords_score)

    def with_suggestion(self, suggestion: Suggestion) -> PageResult:
        """Fill suggestion fields that are still empty; existing ones are kept."""
        update = {}
        if suggestion.title and not self.suggested_title:
            update["suggested_title"] = suggestion.title
        if suggestion.description and not self.suggested_description:
            update["suggested_description"] = suggestion.description
        if suggestion.keywords and not self.suggested_keywords:
            update["suggested_keywords"] = suggestion.keywords
        return self.model_copy(update=update) if update else self

    def without_html(self) -> PageResult:
        return self.model_copy(update={"html": None}) if self.html is not None else self
