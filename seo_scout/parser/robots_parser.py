# File: seo_scout/parser/robots_parser.py
"""seo_scout.parser.robots_parser: reading ``Sitemap:`` declarations from robots.txt."""

from __future__ import annotations

from typing import List, Optional, Tuple


def _prepare_lines(text: str) -> List[Tuple[str, str]]:
    """Strip comments and split lines into (directive, value)."""
    lines: List[Tuple[str, str]] = []
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        key, val = (part.strip() for part in line.split(":", 1))
        lines.append((key.lower(), val))
    return lines


def sitemap_urls(text: str) -> List[str]:
    """All sitemap locations declared in a robots.txt body, in file order."""
    return [value for directive, value in _prepare_lines(text) if directive == "sitemap" and value]


def first_sitemap_url(text: str) -> Optional[str]:
    """The first declared sitemap, or None."""
    found = sitemap_urls(text)
    return found[0] if found else None
