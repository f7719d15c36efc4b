# === FILE: seo_scout/parser/html_parser.py ===
"""On-page SEO extraction for SeoScout.

:func:`parse_html` turns raw markup into a :class:`ParsedPage` holding the
fields the report grades:

* title, meta description and meta keywords;
* the ``<h1>`` count and the text of the first one;
* canonical link, Open Graph and Twitter card tags, meta robots;
* same-host outbound links (normalized, deduplicated, in document order).

The ``score_*`` helpers grade those fields as ``"good"`` or
``"needs improvement"``.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

from seo_scout.crawler.models import GOOD, NEEDS_IMPROVEMENT
from seo_scout.utils import is_same_domain, resolve_link

__all__: Sequence[str] = (
    "ParsedPage",
    "parse_html",
    "score_title",
    "score_description",
    "score_keywords",
    "score_h1",
    "count_keywords",
)


@dataclass(slots=True)
class ParsedPage:
    """Fields extracted from one HTML document."""

    url: str
    title: str = ""
    description: str = ""
    keywords: str = ""
    h1_count: int = 0
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
    links: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def count_keywords(keywords: str) -> int:
    return len(keywords.split(",")) if keywords else 0


def score_title(title: str) -> str:
    return GOOD if 10 < len(title) < 70 else NEEDS_IMPROVEMENT


def score_description(description: str) -> str:
    return GOOD if 50 < len(description) < 160 else NEEDS_IMPROVEMENT


def score_keywords(keywords: str) -> str:
    return GOOD if 0 < count_keywords(keywords) < 10 else NEEDS_IMPROVEMENT


def score_h1(h1_count: int) -> str:
    return GOOD if h1_count == 1 else NEEDS_IMPROVEMENT


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def _meta(soup: BeautifulSoup, attr: str, value: str) -> str:
    tag = soup.find("meta", attrs={attr: value})
    if isinstance(tag, Tag):
        content = tag.get("content")
        if isinstance(content, str):
            return content
    return ""


def _canonical(soup: BeautifulSoup) -> str:
    for tag in soup.find_all("link", href=True):
        if not isinstance(tag, Tag):
            continue
        rel = tag.get("rel") or []
        rels = rel if isinstance(rel, list) else [rel]
        if "canonical" in (r.lower() for r in rels):
            href = tag.get("href")
            return href if isinstance(href, str) else ""
    return ""


def _same_host_links(soup: BeautifulSoup, page_url: str) -> list[str]:
    hostname = urlparse(page_url).hostname or ""
    seen: set[str] = set()
    links: list[str] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        link = resolve_link(href, page_url)
        if link is None or not is_same_domain(link, hostname):
            continue
        if link not in seen:
            seen.add(link)
            links.append(link)
    return links


def parse_html(html: str, url: str) -> ParsedPage:
    """Parse *html* served at *url*."""
    soup = BeautifulSoup(html, "html.parser")

    title_tag = soup.find("title")
    h1_tags = soup.find_all("h1")

    return ParsedPage(
        url=url,
        title=title_tag.get_text(strip=True) if title_tag else "",
        description=_meta(soup, "name", "description"),
        keywords=_meta(soup, "name", "keywords"),
        h1_count=len(h1_tags),
        h1_text=h1_tags[0].get_text(strip=True) if h1_tags else "",
        canonical_url=_canonical(soup),
        og_title=_meta(soup, "property", "og:title"),
        og_description=_meta(soup, "property", "og:description"),
        og_image=_meta(soup, "property", "og:image"),
        twitter_card=_meta(soup, "name", "twitter:card"),
        twitter_title=_meta(soup, "name", "twitter:title"),
        twitter_description=_meta(soup, "name", "twitter:description"),
        twitter_image=_meta(soup, "name", "twitter:image"),
        robots=_meta(soup, "name", "robots"),
        links=_same_host_links(soup, url),
    )
