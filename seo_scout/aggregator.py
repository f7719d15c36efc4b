# File: seo_scout/aggregator.py
"""seo_scout.aggregator: end-of-run summary and report assembly."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Sequence

from seo_scout.crawler.models import NEEDS_IMPROVEMENT, PageResult


def _percent(count: int, total: int) -> int:
    """Share of *total* in whole percent, rounded half up; 0 for an empty crawl."""
    if total <= 0:
        return 0
    return int(math.floor(count * 100 / total + 0.5))


@dataclass(slots=True)
class ReportSummary:
    """Completeness counters over the page collection."""

    total_pages: int = 0
    pages_with_title: int = 0
    pages_with_description: int = 0
    pages_with_keywords: int = 0
    pages_with_h1: int = 0
    pages_with_canonical: int = 0
    pages_with_og_tags: int = 0
    pages_with_twitter_tags: int = 0
    pages_with_title_issues: int = 0
    pages_with_description_issues: int = 0
    pages_with_h1_issues: int = 0
    pages_with_errors: int = 0
    pages_in_sitemap: int = 0
    pages_not_in_sitemap: int = 0
    title_completeness: int = 0
    description_completeness: int = 0
    keywords_completeness: int = 0
    h1_completeness: int = 0
    canonical_completeness: int = 0

    def percent(self, count: int) -> int:
        return _percent(count, self.total_pages)

    def rows(self) -> List[tuple[str, int, int]]:
        """(metric, count, percentage) rows in display order."""
        return [
            ("Total Pages", self.total_pages, 100 if self.total_pages else 0),
            ("Pages with Title", self.pages_with_title, self.title_completeness),
            ("Pages with Description", self.pages_with_description, self.description_completeness),
            ("Pages with Keywords", self.pages_with_keywords, self.keywords_completeness),
            ("Pages with H1", self.pages_with_h1, self.h1_completeness),
            ("Pages with Canonical URL", self.pages_with_canonical, self.canonical_completeness),
            ("Pages with Open Graph Tags", self.pages_with_og_tags, self.percent(self.pages_with_og_tags)),
            ("Pages with Twitter Tags", self.pages_with_twitter_tags, self.percent(self.pages_with_twitter_tags)),
            ("Pages in Sitemap", self.pages_in_sitemap, self.percent(self.pages_in_sitemap)),
            ("Pages not in Sitemap", self.pages_not_in_sitemap, self.percent(self.pages_not_in_sitemap)),
            ("Pages with Title Issues", self.pages_with_title_issues, self.percent(self.pages_with_title_issues)),
            (
                "Pages with Description Issues",
                self.pages_with_description_issues,
                self.percent(self.pages_with_description_issues),
            ),
            ("Pages with H1 Issues", self.pages_with_h1_issues, self.percent(self.pages_with_h1_issues)),
            ("Pages with Errors", self.pages_with_errors, self.percent(self.pages_with_errors)),
        ]

    def recommendations(self) -> List[str]:
        tips: List[str] = []
        if self.pages_with_title_issues:
            tips.append(f"Fix titles on {self.pages_with_title_issues} pages (aim for 50-60 characters)")
        if self.pages_with_description_issues:
            tips.append(
                f"Improve meta descriptions on {self.pages_with_description_issues} pages "
                "(aim for 120-155 characters)"
            )
        if self.pages_with_h1_issues:
            tips.append(
                f"Fix H1 issues on {self.pages_with_h1_issues} pages (each page should have exactly one H1 tag)"
            )
        if self.pages_not_in_sitemap:
            tips.append(f"Add {self.pages_not_in_sitemap} pages to your sitemap for better crawling")
        if self.pages_with_og_tags < self.total_pages:
            tips.append(
                f"Add Open Graph tags to {self.total_pages - self.pages_with_og_tags} pages "
                "for better social sharing"
            )
        return tips


def summarize(pages: Sequence[PageResult]) -> ReportSummary:
    """Recompute the summary from the full page collection."""
    total = len(pages)
    s = ReportSummary(
        total_pages=total,
        pages_with_title=sum(1 for p in pages if p.title),
        pages_with_description=sum(1 for p in pages if p.description),
        pages_with_keywords=sum(1 for p in pages if p.keywords),
        pages_with_h1=sum(1 for p in pages if p.h1_count > 0),
        pages_with_canonical=sum(1 for p in pages if p.canonical_url),
        pages_with_og_tags=sum(1 for p in pages if p.og_title or p.og_description or p.og_image),
        pages_with_twitter_tags=sum(
            1 for p in pages if p.twitter_card or p.twitter_title or p.twitter_description or p.twitter_image
        ),
        pages_with_title_issues=sum(1 for p in pages if p.title_score == NEEDS_IMPROVEMENT),
        pages_with_description_issues=sum(1 for p in pages if p.description_score == NEEDS_IMPROVEMENT),
        pages_with_h1_issues=sum(1 for p in pages if p.h1_score == NEEDS_IMPROVEMENT),
        pages_with_errors=sum(1 for p in pages if p.error),
        pages_in_sitemap=sum(1 for p in pages if p.in_sitemap),
        pages_not_in_sitemap=sum(1 for p in pages if not p.in_sitemap),
    )
    s.title_completeness = _percent(s.pages_with_title, total)
    s.description_completeness = _percent(s.pages_with_description, total)
    s.keywords_completeness = _percent(s.pages_with_keywords, total)
    s.h1_completeness = _percent(s.pages_with_h1, total)
    s.canonical_completeness = _percent(s.pages_with_canonical, total)
    return s


@dataclass(slots=True)
class SeoReport:
    """Everything the renderers need: crawl metadata, summary and pages."""

    crawl_date: datetime
    base_url: str
    options: Dict[str, Any] = field(default_factory=dict)
    pages: List[PageResult] = field(default_factory=list)
    summary: ReportSummary = field(default_factory=ReportSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "crawl_date": self.crawl_date.isoformat(),
            "base_url": self.base_url,
            "options": self.options,
            "summary": asdict(self.summary),
            "recommendations": self.summary.recommendations(),
            "pages": [p.model_dump(mode="json") for p in self.pages],
        }

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation of the report."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def build_report(
    pages: Sequence[PageResult],
    *,
    base_url: str,
    crawl_date: datetime,
    options: Dict[str, Any] | None = None,
) -> SeoReport:
    """Assemble a SeoReport with a freshly computed summary."""
    page_list = list(pages)
    return SeoReport(
        crawl_date=crawl_date,
        base_url=base_url,
        options=dict(options or {}),
        pages=page_list,
        summary=summarize(page_list),
    )
