# File: seo_scout/utils.py
"""seo_scout.utils: URL helpers shared by the crawler, the cache and the parsers."""

from __future__ import annotations

import re
from typing import Optional, Sequence
from urllib.parse import urljoin, urlparse, urlunparse

from seo_scout.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "resolve_link",
    "is_same_domain",
    "cache_key_from_url",
)

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def normalize_url(url: str) -> str:
    """Canonical form used as the visited-set key.

    Lower-cases scheme and host, drops the fragment and the trailing slash
    (the site root collapses to ``scheme://host``); the query string is kept.
    """
    parsed = urlparse(url.strip())
    scheme = parsed.scheme.lower()
    netloc = parsed.netloc.lower()
    path = parsed.path.rstrip("/")
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ""))


def resolve_link(href: str, page_url: str) -> Optional[str]:
    """Resolve *href* against *page_url*; None for non-HTTP targets."""
    raw = href.strip()
    if not raw or raw.startswith(("mailto:", "javascript:", "tel:", "data:")):
        return None
    try:
        absolute = urljoin(page_url, raw)
    except ValueError:
        logger.debug("Unresolvable link %r on %s", raw, page_url)
        return None
    if urlparse(absolute).scheme not in ("http", "https"):
        return None
    return normalize_url(absolute)


def is_same_domain(url: str, hostname: str) -> bool:
    """True if *url* points at *hostname* (port and case ignored)."""
    try:
        return (urlparse(url).hostname or "") == hostname.lower()
    except ValueError:
        return False


def cache_key_from_url(url: str) -> str:
    """File-system safe key for a crawl target: the sanitized hostname."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        hostname = None
    if not hostname:
        return "site-cache"
    return _UNSAFE_KEY_CHARS.sub("_", hostname)

