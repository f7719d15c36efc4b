# File: seo_scout/cache.py
"""seo_scout.cache: resumable on-disk snapshot of a crawl, one JSON file per site."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from seo_scout.crawler.models import PageResult
from seo_scout.logger import logger

__all__ = ["CrawlCache", "CacheStore"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CrawlCache(BaseModel):
    """Snapshot of a crawl: when, what, with which options and the pages so far."""

    model_config = ConfigDict(extra="ignore")

    crawl_date: datetime = Field(default_factory=_utcnow)
    base_url: str
    options: Dict[str, Any] = Field(default_factory=dict)
    pages: List[PageResult] = Field(default_factory=list)

    @field_validator("crawl_date")
    def _aware(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @field_validator("pages")
    def _unique_urls(cls, v: List[PageResult]) -> List[PageResult]:
        # first occurrence wins
        seen: set[str] = set()
        unique: List[PageResult] = []
        for page in v:
            if page.url not in seen:
                seen.add(page.url)
                unique.append(page)
        return unique

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        return ((now or _utcnow()) - self.crawl_date).total_seconds()

    def is_fresh(self, ttl: float, now: Optional[datetime] = None) -> bool:
        return self.age_seconds(now) < ttl

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json"), ensure_ascii=False, indent=2)


class CacheStore:
    """Reads and rewrites cache files under *directory*.

    :meth:`load` never raises: a missing, truncated or otherwise invalid file
    is reported as "no cache". :meth:`save` serializes the whole snapshot
    first and only then replaces the previous file.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[CrawlCache]:
        path = self.path_for(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cache %s unreadable: %s", path, exc)
            return None
        try:
            cache = CrawlCache.model_validate_json(text)
        except ValidationError as exc:
            logger.debug("Cache %s invalid, ignoring: %s", path, exc.errors()[:1])
            return None
        logger.info("Loaded %d pages from cache %s", len(cache.pages), path)
        return cache

    def save(self, key: str, cache: CrawlCache) -> Path:
        path = self.path_for(key)
        payload = cache.to_json()
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Cache saved: %s (%d pages)", path, len(cache.pages))
        return path
