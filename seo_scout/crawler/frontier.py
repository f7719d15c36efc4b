# seo_scout/crawler/frontier.py
"""
Pending-work queue and the visited ledger of a crawl.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, Iterator, List, Set

from seo_scout.crawler.models import CrawlTask
from seo_scout.utils import normalize_url


class VisitedSet:
    """Normalized URLs that have been claimed for processing."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._urls: Set[str] = set()
        for url in urls:
            self.add(url)

    def add(self, url: str) -> bool:
        """Mark *url* visited; False when it already was."""
        key = normalize_url(url)
        if key in self._urls:
            return False
        self._urls.add(key)
        return True

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and normalize_url(url) in self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self._urls)


class Frontier:
    """FIFO queue of crawl tasks.

    Duplicates are allowed here; the authoritative check against the
    :class:`VisitedSet` happens when a batch is claimed.
    """

    def __init__(self) -> None:
        self._queue: Deque[CrawlTask] = deque()

    def push(self, task: CrawlTask) -> None:
        self._queue.append(task)

    def pop_batch(self, size: int) -> List[CrawlTask]:
        """Remove and return up to *size* tasks from the front."""
        batch: List[CrawlTask] = []
        while self._queue and len(batch) < size:
            batch.append(self._queue.popleft())
        return batch

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
