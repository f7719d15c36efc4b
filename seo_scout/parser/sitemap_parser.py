# File: seo_scout/parser/sitemap_parser.py
"""seo_scout.parser.sitemap_parser: parsing of sitemap.xml and sitemap index documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from lxml import etree

from seo_scout.crawler.models import SitemapEntry


@dataclass(slots=True)
class ParsedSitemap:
    """Content of one sitemap document.

    A ``<urlset>`` fills :attr:`entries`, a ``<sitemapindex>`` fills
    :attr:`children` (locations of nested sitemaps). Anything else leaves both
    empty.
    """

    entries: List[SitemapEntry] = field(default_factory=list)
    children: List[str] = field(default_factory=list)

    @property
    def is_index(self) -> bool:
        return bool(self.children)


def _child_text(node: etree._Element, name: str) -> Optional[str]:
    child = node.find(f"{{*}}{name}")
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def parse_sitemap(xml_content: str | bytes) -> ParsedSitemap:
    """Parse sitemap XML.

    Args:
        xml_content: sitemap.xml body (text or raw bytes).

    Returns:
        ParsedSitemap with entries (for ``<urlset>``) or children (for
        ``<sitemapindex>``). Unparseable input yields an empty result.

    Example:
    ```python
    from seo_scout.parser.sitemap_parser import parse_sitemap

    with open('sitemap.xml', encoding='utf-8') as f:
        parsed = parse_sitemap(f.read())
    print([e.url for e in parsed.entries])
    ```
    """
    raw = xml_content.encode("utf-8") if isinstance(xml_content, str) else xml_content
    if not raw.strip():
        return ParsedSitemap()

    parser = etree.XMLParser(ns_clean=True, recover=True, resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(raw, parser=parser)
    except etree.XMLSyntaxError:
        return ParsedSitemap()
    if root is None:
        return ParsedSitemap()

    tag = etree.QName(root).localname.lower()
    result = ParsedSitemap()
    if tag == "sitemapindex":
        for node in root.findall("{*}sitemap"):
            loc = _child_text(node, "loc")
            if loc:
                result.children.append(loc)
    elif tag == "urlset":
        for node in root.findall("{*}url"):
            loc = _child_text(node, "loc")
            if not loc:
                continue
            result.entries.append(
                SitemapEntry(
                    url=loc,
                    lastmod=_child_text(node, "lastmod"),
                    priority=_child_text(node, "priority"),
                    changefreq=_child_text(node, "changefreq"),
                )
            )
    return result
